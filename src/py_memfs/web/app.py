"""Flask application factory for the py-memfs web API.

The ``create_app`` function wraps one ``FileSystem`` and returns a
Flask app with JSON endpoints:

- ``GET /api/ls?path=`` — list a directory.
- ``GET /api/stat?path=`` — node type, size, and inode number.
- ``GET /api/cat?path=`` — file content, base64-encoded.
- ``POST /api/write`` — ``{"path", "content", "append"?}`` with base64 content.
- ``POST /api/mkdir`` / ``POST /api/touch`` — ``{"path"}``.
- ``POST /api/cp`` / ``POST /api/mv`` — ``{"src", "dest"}``.
- ``POST /api/rm`` — ``{"path", "recursive"?}``.
- ``GET /api/log`` — the audit log lines.

File system errors come back as ``{"error", "kind"}`` with a status
code chosen by the error's kind.
"""

from __future__ import annotations

import base64
import binascii
from typing import Any

from flask import Flask, Response, jsonify, request

from py_memfs.errors import ErrorKind, FileSystemError
from py_memfs.filesystem import ROOT_PATH, FileSystem

_HTTP_BAD_REQUEST = 400
_HTTP_NOT_FOUND = 404
_HTTP_CONFLICT = 409

_STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.INVALID_PATH: _HTTP_BAD_REQUEST,
    ErrorKind.NOT_FOUND: _HTTP_NOT_FOUND,
    ErrorKind.NOT_A_DIRECTORY: _HTTP_CONFLICT,
    ErrorKind.NOT_A_FILE: _HTTP_CONFLICT,
    ErrorKind.IS_A_DIRECTORY: _HTTP_CONFLICT,
    ErrorKind.ALREADY_EXISTS: _HTTP_CONFLICT,
    ErrorKind.DIRECTORY_NOT_EMPTY: _HTTP_CONFLICT,
    ErrorKind.CYCLIC_MOVE: _HTTP_CONFLICT,
}


class _BadRequestError(Exception):
    """Raise when a request body is missing a field or is malformed."""


def _body() -> dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        msg = "Expected a JSON object body"
        raise _BadRequestError(msg)
    return data  # pyright: ignore[reportUnknownVariableType]


def _field(data: dict[str, Any], name: str) -> str:
    value = data.get(name)
    if not isinstance(value, str):
        msg = f"Missing '{name}' field"
        raise _BadRequestError(msg)
    return value


def create_app(fs: FileSystem | None = None) -> Flask:
    """Create and configure the Flask application.

    Args:
        fs: The file system to serve (a fresh, empty one if omitted).

    Returns:
        A configured Flask application ready to serve.

    """
    fs = fs if fs is not None else FileSystem()
    app = Flask(__name__)

    @app.errorhandler(FileSystemError)
    def handle_fs_error(exc: FileSystemError) -> tuple[Response, int]:  # pyright: ignore[reportUnusedFunction]
        """Map a file system error to a JSON error response."""
        return jsonify({"error": str(exc), "kind": exc.kind.value}), _STATUS_BY_KIND[exc.kind]

    @app.errorhandler(_BadRequestError)
    def handle_bad_request(exc: _BadRequestError) -> tuple[Response, int]:  # pyright: ignore[reportUnusedFunction]
        """Reject malformed request bodies."""
        return jsonify({"error": str(exc)}), _HTTP_BAD_REQUEST

    @app.route("/api/ls")
    def ls() -> Response:  # pyright: ignore[reportUnusedFunction]
        """List the directory named by the ``path`` query parameter."""
        path = request.args.get("path", ROOT_PATH)
        return jsonify({"path": path, "entries": fs.ls(path)})

    @app.route("/api/stat")
    def stat() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Describe the node named by the ``path`` query parameter."""
        path = request.args.get("path", ROOT_PATH)
        info = fs.stat(path)
        return jsonify(
            {
                "path": path,
                "name": info.name,
                "type": info.node_type.value,
                "size": info.size,
                "inode": info.inode_number,
            }
        )

    @app.route("/api/cat")
    def cat() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return a file's bytes as base64."""
        path = request.args.get("path", "")
        content = fs.cat(path)
        return jsonify({"path": path, "content": base64.b64encode(content).decode("ascii")})

    @app.route("/api/write", methods=["POST"])
    def write() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Write (or append) base64 content to a file."""
        data = _body()
        path = _field(data, "path")
        try:
            content = base64.b64decode(_field(data, "content"), validate=True)
        except binascii.Error as exc:
            msg = f"Content is not valid base64: {exc}"
            raise _BadRequestError(msg) from exc
        if data.get("append"):
            fs.append(path, content)
        else:
            fs.write_file(path, content)
        return jsonify({"path": path, "size": fs.size(path)})

    @app.route("/api/mkdir", methods=["POST"])
    def mkdir() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Create a directory and any missing parents."""
        path = _field(_body(), "path")
        fs.mkdir(path)
        return jsonify({"path": path})

    @app.route("/api/touch", methods=["POST"])
    def touch() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Create an empty file if it does not exist."""
        path = _field(_body(), "path")
        fs.touch(path)
        return jsonify({"path": path})

    @app.route("/api/cp", methods=["POST"])
    def cp() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Copy a file or directory tree."""
        data = _body()
        src, dest = _field(data, "src"), _field(data, "dest")
        fs.cp(src, dest)
        return jsonify({"src": src, "dest": dest})

    @app.route("/api/mv", methods=["POST"])
    def mv() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Move or rename a file or directory."""
        data = _body()
        src, dest = _field(data, "src"), _field(data, "dest")
        fs.mv(src, dest)
        return jsonify({"src": src, "dest": dest})

    @app.route("/api/rm", methods=["POST"])
    def rm() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Remove a file or directory."""
        data = _body()
        path = _field(data, "path")
        fs.rm(path, recursive=bool(data.get("recursive", False)))
        return jsonify({"path": path})

    @app.route("/api/log")
    def log() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return the audit log."""
        return jsonify({"lines": fs.dmesg()})

    return app


def main() -> None:
    """Run the web API development server.

    This is the ``py-memfs-web`` console entry point.
    """
    app = create_app()
    app.run(debug=True, port=8080)
