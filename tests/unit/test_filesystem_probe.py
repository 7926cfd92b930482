"""Unit tests for filesystem probe predicates."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from entryscope.errors import MissingPathError, ResolutionIOError
from entryscope.io.filesystem import (
    OsFileSystem,
    is_executable_symlink,
    is_readable_file,
    read_text,
    real_path,
)
from tests.memory_fs import MemoryFileSystem


class DeniedFileSystem(OsFileSystem):
    """Host filesystem that refuses every metadata lookup."""

    def stat(self, path: Path) -> os.stat_result:
        raise PermissionError(13, "Permission denied", str(path))

    def lstat(self, path: Path) -> os.stat_result:
        raise PermissionError(13, "Permission denied", str(path))

    def realpath(self, path: Path) -> Path:
        raise PermissionError(13, "Permission denied", str(path))


def test_is_readable_file_accepts_files_only(tmp_path: Path) -> None:
    """Readable regular files are accepted; directories and missing paths are not."""

    file_path = tmp_path / "index.js"
    file_path.write_text("module.exports = 1\n", encoding="utf-8")

    assert is_readable_file(file_path) is True
    assert is_readable_file(tmp_path) is False
    assert is_readable_file(tmp_path / "missing.js") is False


def test_is_readable_file_reports_access_errors_as_false(memory_fs: MemoryFileSystem) -> None:
    """Unreadable files and refused lookups should be `False`, never an exception."""

    memory_fs.add_file("/ws/secret.js", mode=0o000)

    assert is_readable_file(Path("/ws/secret.js"), fs=memory_fs) is False
    assert is_readable_file(Path("/ws/secret.js"), fs=DeniedFileSystem()) is False


def test_is_executable_symlink_requires_live_link(tmp_path: Path) -> None:
    """Only symlinks with an existing target qualify."""

    target = tmp_path / "bin.js"
    target.write_text("#!/usr/bin/env node\n", encoding="utf-8")
    target.chmod(0o755)
    link = tmp_path / "run"
    link.symlink_to(target)
    dangling = tmp_path / "dangling"
    dangling.symlink_to(tmp_path / "gone.js")

    assert is_executable_symlink(link) is True
    assert is_executable_symlink(target) is False
    assert is_executable_symlink(dangling) is False
    assert is_executable_symlink(tmp_path / "missing") is False


def test_is_executable_symlink_propagates_unexpected_errors(memory_fs: MemoryFileSystem) -> None:
    """Permission errors and symlink loops are not "not found"."""

    memory_fs.add_symlink("/ws/a", "/ws/b")
    memory_fs.add_symlink("/ws/b", "/ws/a")

    with pytest.raises(ResolutionIOError):
        is_executable_symlink(Path("/ws/a"), fs=memory_fs)
    with pytest.raises(ResolutionIOError) as exc_info:
        is_executable_symlink(Path("/ws/run"), fs=DeniedFileSystem())
    assert exc_info.value.stage == "probe"


def test_real_path_follows_transitive_links(memory_fs: MemoryFileSystem) -> None:
    """Chains of absolute and relative links should canonicalize to the final file."""

    memory_fs.add_file("/ws/node_modules/runner/bin.js")
    memory_fs.add_symlink("/ws/node_modules/.bin/run", "../runner/cli")
    memory_fs.add_symlink("/ws/node_modules/runner/cli", "/ws/node_modules/runner/bin.js")

    resolved = real_path(Path("/ws/node_modules/.bin/run"), fs=memory_fs)

    assert resolved == Path("/ws/node_modules/runner/bin.js")


def test_real_path_distinguishes_missing_from_io_failures(tmp_path: Path) -> None:
    """Missing segments raise `MissingPathError`; other failures `ResolutionIOError`."""

    with pytest.raises(MissingPathError) as exc_info:
        real_path(tmp_path / "missing" / "index.js")
    assert exc_info.value.stage == "realpath"

    with pytest.raises(ResolutionIOError):
        real_path(tmp_path, fs=DeniedFileSystem())


def test_read_text_maps_failures_to_resolution_io_error(memory_fs: MemoryFileSystem) -> None:
    """Reading a directory should raise `ResolutionIOError`."""

    memory_fs.add_file("/ws/package.json", '{"name": "ws"}')

    assert read_text(Path("/ws/package.json"), fs=memory_fs) == '{"name": "ws"}'
    with pytest.raises(ResolutionIOError):
        read_text(Path("/ws"), fs=memory_fs)
