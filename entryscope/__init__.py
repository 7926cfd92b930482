"""Top-level package for entryscope.

This package resolves where code actually lives before a sandboxing tool runs
or analyzes it: the enclosing workspace, the canonical entrypoint file, bin
scripts linked from `node_modules/.bin`, and whether the result is trusted.
The main entry points are `Resolver` and `resolve_request`.
"""

from .orchestration import resolve_request
from .resolver import Resolver

__all__ = ["Resolver", "resolve_request", "__version__"]

__version__ = "0.1.0"
