"""Glue between raw user input and the resolver.

Takes a `ResolutionRequest` as collected by the CLI, resolves it, reports
when the path that will run differs from the one the user typed, and attaches
the trust verdict consumed by the execution and policy layers.
"""

from __future__ import annotations

from pathlib import Path

from .io.filesystem import FileSystem
from .models.datatypes import ResolutionOutcome, ResolutionRequest
from .rendering import strip_decoration
from .resolver import Resolver, default_resolver
from .trust import classify_trust


def resolve_request(
    request: ResolutionRequest,
    *,
    resolver: Resolver | None = None,
    fs: FileSystem | None = None,
) -> ResolutionOutcome:
    """Resolve `request` to a canonical entrypoint plus its trust verdict.

    Raises:
        ResolutionError: Whatever the selected resolution operation raises.
    """

    active = resolver or default_resolver()
    config = active.config

    if request.bin:
        entrypoint = active.resolve_bin_script(
            request.specifier, request.from_directory, fs=fs
        )
        active.log.info(
            f"Resolved executable {active.display_label(request.specifier)} "
            f"→ {active.display_path(entrypoint)}"
        )
    else:
        entrypoint = active.resolve_entrypoint(request.specifier, request.from_directory, fs=fs)
        hr_original = active.display_path(Path(request.from_directory) / request.specifier)
        hr_resolved = active.display_path(entrypoint)
        if strip_decoration(hr_original) != strip_decoration(hr_resolved):
            active.log.warning(f"Resolved {hr_original} → {hr_resolved}")

    trust = classify_trust(entrypoint, dependency_dir=config.dependency_dir)
    if not trust.trusted:
        active.log.info(
            f"Entrypoint is in a {active.display_label(config.dependency_dir)} "
            "directory and is considered untrusted"
        )
    return ResolutionOutcome(request=request, entrypoint=entrypoint, trust=trust)
