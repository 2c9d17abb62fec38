"""Executors — running a file from the tree as a real process.

The tree lives only in memory, so running one of its files means
handing the bytes to something that can touch the real machine:

**Executor** (Protocol) — the narrow interface ``FileSystem.execute``
    talks to.  ``run(content, name)`` stages the bytes as a runnable
    unit, runs it to completion, and returns its exit code.  Failing
    to stage or start the unit raises ``ExecutionError``.

**SubprocessExecutor** — the default implementation.  It writes the
    bytes into a throwaway temporary directory, marks the file
    executable, runs it with ``subprocess``, and always removes the
    staging directory afterwards.

**ExecutorConfig** — the knobs for ``SubprocessExecutor``.

All platform-specific behaviour (``.exe`` suffix, ``chmod``) lives in
this module; the tree itself never sees it.
"""

from __future__ import annotations

import subprocess  # nosec: B404
import sys
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

IS_WINDOWS = sys.platform == "win32"
WINDOWS_SUFFIX = ".exe"
DEFAULT_MODE = 0o755


class ExecutionError(Exception):
    """Raise when an executor cannot stage or start a program."""


class Executor(Protocol):
    """Interface every executor must satisfy."""

    def run(self, content: bytes, name: str) -> int:
        """Stage *content* as *name*, run it, and return its exit code."""
        ...  # pragma: no cover


@dataclass(frozen=True)
class ExecutorConfig:
    """Settings for ``SubprocessExecutor``.

    Attributes:
        temp_dir: Where staging directories are created (system temp if None).
        timeout: Seconds to wait for the process (``None`` waits forever).
        mode: Permission bits applied to the staged file on POSIX.

    """

    temp_dir: Path | None = None
    timeout: float | None = None
    mode: int = DEFAULT_MODE


class SubprocessExecutor:
    """Run staged files as child processes of the current interpreter."""

    def __init__(self, config: ExecutorConfig | None = None) -> None:
        """Create an executor with *config* (defaults if omitted)."""
        self._config = config if config is not None else ExecutorConfig()

    @property
    def config(self) -> ExecutorConfig:
        """Return the active configuration."""
        return self._config

    @staticmethod
    def staged_name(name: str) -> str:
        """Return the on-disk file name used for *name* on this platform."""
        if IS_WINDOWS and not name.lower().endswith(WINDOWS_SUFFIX):
            return name + WINDOWS_SUFFIX
        return name

    def run(self, content: bytes, name: str) -> int:
        """Write *content* to a temp file named after *name* and run it.

        Raises:
            ExecutionError: If the staging directory cannot be created, the
                file cannot be written or started, or the process outlives
                the configured timeout.

        """
        try:
            staging_dir = tempfile.TemporaryDirectory(
                prefix="py-memfs-",
                dir=self._config.temp_dir,
            )
        except OSError as exc:
            msg = f"Cannot create a staging directory for {name!r}: {exc}"
            raise ExecutionError(msg) from exc

        with staging_dir as staging:
            target = Path(staging) / self.staged_name(name)
            try:
                target.write_bytes(content)
                if not IS_WINDOWS:
                    target.chmod(self._config.mode)
            except OSError as exc:
                msg = f"Cannot stage {name!r} for execution: {exc}"
                raise ExecutionError(msg) from exc

            try:
                completed = subprocess.run(  # nosec B603
                    [str(target)],
                    cwd=staging,
                    check=False,
                    timeout=self._config.timeout,
                )
            except subprocess.TimeoutExpired as exc:
                msg = f"{name!r} did not finish within {self._config.timeout} seconds"
                raise ExecutionError(msg) from exc
            except OSError as exc:
                msg = f"Cannot run {name!r}: {exc}"
                raise ExecutionError(msg) from exc
            return completed.returncode
