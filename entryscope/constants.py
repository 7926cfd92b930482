"""Filesystem layout conventions recognized by the resolver."""

from __future__ import annotations


PACKAGE_JSON = "package.json"
NODE_MODULES = "node_modules"
BIN_DIR = ".bin"

# Extension probe order used by `require.resolve`.
DEFAULT_EXTENSIONS: tuple[str, ...] = (".js", ".json", ".node")

LABEL_DELIMITER = ">"
