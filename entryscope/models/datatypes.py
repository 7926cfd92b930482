"""Core datatypes shared across entryscope modules.

Responsibilities:
- Represent the immutable values exchanged between resolver, classifier and
  orchestration layers.
- Keep canonical filesystem paths (`pathlib.Path`) apart from decorated
  display strings (`DisplayPath`).

Key types:
- `ResolutionRequest`, `ResolutionOutcome`, `TrustClassification`,
  `DiagnosticEvent` and `DisplayPath`.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal, NewType


DisplayPath = NewType("DisplayPath", str)
"""Human-readable, possibly ANSI-decorated rendering of a path or label."""

DiagnosticLevel = Literal["DEBUG", "INFO", "WARNING"]


@dataclass(frozen=True, slots=True)
class ResolutionRequest:
    """Raw user input for one resolution.

    Attributes:
        specifier: Path, bare module name, or bin script name as typed.
        from_directory: Absolute directory the specifier is relative to.
        bin: Whether `specifier` names an executable in `node_modules/.bin`.
    """

    specifier: str
    from_directory: Path
    bin: bool = False


@dataclass(frozen=True, slots=True)
class TrustClassification:
    """Trust verdict for a resolved entrypoint.

    Attributes:
        path: Canonical path the verdict was computed from.
        trusted: `False` when the path lives inside a dependency-install directory.
    """

    path: Path
    trusted: bool


@dataclass(frozen=True, slots=True)
class ResolutionOutcome:
    """Result handed to the execution or policy layer.

    Attributes:
        request: The request that produced this outcome.
        entrypoint: Canonical absolute path of the file that will be loaded.
        trust: Trust verdict for `entrypoint`.
    """

    request: ResolutionRequest
    entrypoint: Path
    trust: TrustClassification

    @property
    def trusted(self) -> bool:
        """Return the trust verdict as a plain boolean."""

        return self.trust.trusted


@dataclass(frozen=True, slots=True)
class DiagnosticEvent:
    """One diagnostic emitted while resolving."""

    level: DiagnosticLevel
    message: str
