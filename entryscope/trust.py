"""Trust classification of resolved entrypoints.

Code installed as a dependency is never trusted, whatever it contains; all
other code is first-party and trusted by default. Downstream policy layers use
the verdict to pick stricter sandbox defaults.
"""

from __future__ import annotations

from pathlib import PurePath

from .constants import NODE_MODULES
from .models.datatypes import TrustClassification


def classify_trust(
    resolved_path: str | PurePath,
    *,
    dependency_dir: str = NODE_MODULES,
) -> TrustClassification:
    """Classify `resolved_path` as untrusted iff a segment equals `dependency_dir`."""

    path = PurePath(resolved_path)
    return TrustClassification(path=path, trusted=dependency_dir not in path.parts)
