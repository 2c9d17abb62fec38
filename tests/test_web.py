"""Tests for the JSON web API.

The web API exposes one ``FileSystem`` over HTTP.  Tests use
``pytest.importorskip`` so they are skipped gracefully when Flask is
not installed.
"""

from __future__ import annotations

import base64
from typing import Any

import pytest

flask = pytest.importorskip("flask")

from py_memfs.filesystem import FileSystem  # noqa: E402
from py_memfs.web.app import create_app  # noqa: E402

HTTP_OK = 200
HTTP_BAD_REQUEST = 400
HTTP_NOT_FOUND = 404
HTTP_CONFLICT = 409


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _create_client(fs: FileSystem | None = None) -> Any:
    """Create a test client from a fresh app."""
    app = create_app(fs)
    app.config["TESTING"] = True
    return app.test_client()


class TestAppCreation:
    """Verify the app factory."""

    def test_create_app_returns_flask(self) -> None:
        """create_app should return a Flask application."""
        assert isinstance(create_app(), flask.Flask)

    def test_serves_the_given_file_system(self) -> None:
        """The app operates on the FileSystem it was given."""
        fs = FileSystem()
        fs.mkdir("/home")
        response = _create_client(fs).get("/api/ls?path=/")
        assert response.status_code == HTTP_OK
        assert response.get_json()["entries"] == ["home/"]


class TestReadEndpoints:
    """Verify ls, stat, cat, and log."""

    def test_cat_returns_base64(self) -> None:
        """Binary content survives the JSON round trip."""
        fs = FileSystem()
        fs.write_file("/data.bin", bytes([0xDE, 0xAD, 0xBE, 0xEF]))
        response = _create_client(fs).get("/api/cat?path=/data.bin")
        assert response.status_code == HTTP_OK
        assert base64.b64decode(response.get_json()["content"]) == b"\xde\xad\xbe\xef"

    def test_stat(self) -> None:
        """stat reports type and size."""
        fs = FileSystem()
        fs.write_file("/b.txt", b"12345")
        data = _create_client(fs).get("/api/stat?path=/b.txt").get_json()
        expected_size = 5
        assert data["type"] == "file"
        assert data["size"] == expected_size

    def test_log(self) -> None:
        """The audit log is exposed as lines."""
        fs = FileSystem()
        fs.mkdir("/tmp")
        lines = _create_client(fs).get("/api/log").get_json()["lines"]
        assert lines == ["[INFO] fs: mkdir /tmp"]


class TestWriteEndpoints:
    """Verify mutating endpoints."""

    def test_mkdir_write_and_append(self) -> None:
        """Create a directory, write a file, then append to it."""
        fs = FileSystem()
        client = _create_client(fs)
        assert client.post("/api/mkdir", json={"path": "/docs"}).status_code == HTTP_OK
        client.post("/api/write", json={"path": "/docs/a.txt", "content": _b64(b"abc")})
        response = client.post(
            "/api/write",
            json={"path": "/docs/a.txt", "content": _b64(b"def"), "append": True},
        )
        expected_size = 6
        assert response.get_json()["size"] == expected_size
        assert fs.cat("/docs/a.txt") == b"abcdef"

    def test_touch_cp_mv_rm(self) -> None:
        """The structural operations map straight onto FileSystem."""
        fs = FileSystem()
        client = _create_client(fs)
        client.post("/api/touch", json={"path": "/a"})
        client.post("/api/cp", json={"src": "/a", "dest": "/b"})
        client.post("/api/mv", json={"src": "/b", "dest": "/c"})
        assert fs.ls("/") == ["a", "c"]
        client.post("/api/rm", json={"path": "/a"})
        assert fs.ls("/") == ["c"]


class TestErrors:
    """Verify error mapping."""

    def test_not_found_is_404(self) -> None:
        """A missing path maps to 404 with its kind."""
        response = _create_client().get("/api/cat?path=/missing")
        assert response.status_code == HTTP_NOT_FOUND
        assert response.get_json()["kind"] == "not_found"

    def test_conflict_is_409(self) -> None:
        """Refused operations map to 409."""
        fs = FileSystem()
        fs.mkdir("/a/b")
        response = _create_client(fs).post("/api/mv", json={"src": "/a", "dest": "/a/b"})
        assert response.status_code == HTTP_CONFLICT
        assert response.get_json()["kind"] == "cyclic_move"

    def test_invalid_path_is_400(self) -> None:
        """Removing the root is a bad request."""
        response = _create_client().post("/api/rm", json={"path": "/"})
        assert response.status_code == HTTP_BAD_REQUEST

    def test_missing_field_is_400(self) -> None:
        """A body without the required field is rejected."""
        response = _create_client().post("/api/mkdir", json={})
        assert response.status_code == HTTP_BAD_REQUEST
        assert "path" in response.get_json()["error"]

    def test_bad_base64_is_400(self) -> None:
        """Content that is not base64 is rejected."""
        response = _create_client().post("/api/write", json={"path": "/x", "content": "!!"})
        assert response.status_code == HTTP_BAD_REQUEST
