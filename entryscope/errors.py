"""Domain exceptions for resolution and CLI diagnostics.

Every resolution failure carries the original (pre-resolution) specifier and
starting directory plus the step that failed, so callers can render an
actionable message without re-deriving context.
"""

from __future__ import annotations

from pathlib import Path


class EntryscopeError(RuntimeError):
    """Raised when a specific step of a command fails."""

    default_stage = "entryscope"

    def __init__(
        self,
        detail: str,
        *,
        stage: str | None = None,
        hint: str | None = None,
    ) -> None:
        """Initialize a step-scoped error."""

        super().__init__(detail)
        self.stage = stage or self.default_stage
        self.detail = detail
        self.hint = hint


class ConfigError(EntryscopeError):
    """Configuration could not be loaded or is invalid."""

    default_stage = "config"


class ResolutionError(EntryscopeError):
    """Raised when a resolution step cannot produce a path."""

    default_stage = "resolve"

    def __init__(
        self,
        detail: str,
        *,
        stage: str | None = None,
        specifier: str | None = None,
        from_directory: str | Path | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(detail, stage=stage, hint=hint)
        self.specifier = specifier
        self.from_directory = from_directory

    def annotate(
        self,
        *,
        specifier: str | None = None,
        from_directory: str | Path | None = None,
    ) -> ResolutionError:
        """Fill in request context that the raising layer did not know about."""

        if self.specifier is None:
            self.specifier = specifier
        if self.from_directory is None:
            self.from_directory = from_directory
        return self


class NoWorkspaceError(ResolutionError):
    """No ancestor directory contains a workspace manifest."""

    default_stage = "workspace"


class NoEntrypointError(ResolutionError):
    """The specifier does not map to any existing file."""

    default_stage = "entrypoint"


class NoBinScriptError(ResolutionError):
    """No workspace, searched outward from the nearest, links the executable."""

    default_stage = "bin"


class MissingPathError(ResolutionError):
    """A path segment vanished while canonicalizing."""

    default_stage = "realpath"


class ResolutionIOError(ResolutionError):
    """Unexpected filesystem failure that is not a plain "not found"."""

    default_stage = "io"
