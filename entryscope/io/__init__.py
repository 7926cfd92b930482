"""Filesystem access for entryscope.

This package holds the injectable filesystem capability and the probe
predicates every resolution step routes its disk access through.
"""

from .filesystem import (
    FileSystem,
    OsFileSystem,
    is_executable_symlink,
    is_readable_file,
    read_text,
    real_path,
)

__all__ = [
    "FileSystem",
    "OsFileSystem",
    "is_executable_symlink",
    "is_readable_file",
    "read_text",
    "real_path",
]
