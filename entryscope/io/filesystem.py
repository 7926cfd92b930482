"""Filesystem probe predicates over an injectable filesystem capability.

Responsibilities:
- Define the `FileSystem` protocol that production code binds to the real disk
  and tests bind to an in-memory tree.
- Answer the narrow questions the resolver asks: "is this a readable file",
  "is this an executable symlink", "what is the canonical path".
- Separate "not found" (a normal answer) from unexpected I/O failures
  (`ResolutionIOError`), which always propagate.
"""

from __future__ import annotations

import errno
import os
from pathlib import Path
import stat
from typing import Protocol

from ..errors import MissingPathError, ResolutionIOError


_EXECUTE_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH
_NOT_FOUND_ERRNOS = frozenset({errno.ENOENT, errno.ENOTDIR})


class FileSystem(Protocol):
    """Read-only filesystem primitives used by the probe functions."""

    def stat(self, path: Path) -> os.stat_result:
        """Return status of `path`, following symlinks."""

    def lstat(self, path: Path) -> os.stat_result:
        """Return status of `path` itself, without following a final symlink."""

    def access(self, path: Path, mode: int) -> bool:
        """Return whether the current process may access `path` with `mode`."""

    def realpath(self, path: Path) -> Path:
        """Return the canonical path, raising `OSError` when a segment is missing."""

    def read_text(self, path: Path) -> str:
        """Return the UTF-8 text content of `path`."""


class OsFileSystem:
    """`FileSystem` bound to the host operating system."""

    def stat(self, path: Path) -> os.stat_result:
        return os.stat(path)

    def lstat(self, path: Path) -> os.stat_result:
        return os.lstat(path)

    def access(self, path: Path, mode: int) -> bool:
        return os.access(path, mode)

    def realpath(self, path: Path) -> Path:
        return Path(os.path.realpath(path, strict=True))

    def read_text(self, path: Path) -> str:
        return Path(path).read_text(encoding="utf-8")


DEFAULT_FILESYSTEM: FileSystem = OsFileSystem()


def _is_not_found(exc: OSError) -> bool:
    """Return whether an `OSError` only says that a path does not exist."""

    return isinstance(exc, (FileNotFoundError, NotADirectoryError)) or (
        exc.errno in _NOT_FOUND_ERRNOS
    )


def is_readable_file(path: Path, *, fs: FileSystem | None = None) -> bool:
    """Return whether `path` is a regular file readable by this process.

    Never raises: any access error is reported as `False`.
    """

    filesystem = fs or DEFAULT_FILESYSTEM
    try:
        status = filesystem.stat(path)
        if not stat.S_ISREG(status.st_mode):
            return False
        return filesystem.access(path, os.R_OK)
    except OSError:
        return False


def is_executable_symlink(path: Path, *, fs: FileSystem | None = None) -> bool:
    """Return whether `path` is a live symlink carrying an execute bit.

    The execute bit may sit on the link or on its target. A missing path or a
    dangling link is `False`, not an error.

    Raises:
        ResolutionIOError: For failures other than "not found", such as
            permission errors or symlink loops.
    """

    filesystem = fs or DEFAULT_FILESYSTEM
    try:
        link_status = filesystem.lstat(path)
        if not stat.S_ISLNK(link_status.st_mode):
            return False
        target_status = filesystem.stat(path)
    except OSError as exc:
        if _is_not_found(exc):
            return False
        raise ResolutionIOError(
            f"Cannot inspect `{path}`: {exc.strerror or exc}",
            stage="probe",
        ) from exc
    return bool((link_status.st_mode | target_status.st_mode) & _EXECUTE_BITS)


def real_path(path: Path, *, fs: FileSystem | None = None) -> Path:
    """De-reference every symlink along `path` and return the canonical path.

    Raises:
        MissingPathError: If any segment of `path` does not exist.
        ResolutionIOError: For any other filesystem failure.
    """

    filesystem = fs or DEFAULT_FILESYSTEM
    try:
        return filesystem.realpath(path)
    except OSError as exc:
        if _is_not_found(exc):
            raise MissingPathError(f"Path `{path}` does not exist.") from exc
        raise ResolutionIOError(
            f"Cannot canonicalize `{path}`: {exc.strerror or exc}",
            stage="realpath",
        ) from exc


def read_text(path: Path, *, fs: FileSystem | None = None) -> str:
    """Read a UTF-8 text file, mapping every failure to `ResolutionIOError`."""

    filesystem = fs or DEFAULT_FILESYSTEM
    try:
        return filesystem.read_text(path)
    except (OSError, UnicodeDecodeError) as exc:
        raise ResolutionIOError(f"Cannot read `{path}`: {exc}", stage="read") from exc
