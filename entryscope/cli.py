"""Command-line interface for entryscope.

Responsibilities:
- Expose user-facing commands for entrypoint and workspace resolution.
- Convert CLI arguments into `ResolverConfig` and a `ResolutionRequest`.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

from contextlib import suppress
from dataclasses import replace
import os
from pathlib import Path
from typing import Annotated

from loguru import logger
import typer

from .cli_rendering import echo_resolution, echo_workspace, exit_with_command_error
from .config import ConfigLoader, ResolverConfig
from .errors import ConfigError
from .models.datatypes import ResolutionRequest
from .orchestration import resolve_request
from .resolver import Resolver
from .telemetry.logger import DiagnosticLogger

app = typer.Typer(
    name="entryscope",
    no_args_is_help=True,
    help="Resolve where an entrypoint really lives and whether to trust it.",
)

RootOption = Annotated[
    Path | None,
    typer.Option(
        "--root",
        help="Directory to resolve from; defaults to the current directory.",
        file_okay=False,
    ),
]
ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", help="Path to a YAML config file."),
]
VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", help="Write per-directory trace diagnostics."),
]
QuietOption = Annotated[
    bool,
    typer.Option("--quiet", help="Only write errors."),
]
NoColorOption = Annotated[
    bool,
    typer.Option("--no-color", help="Render paths without ANSI decoration."),
]


def _load_yaml_config(config_path: Path | None) -> ResolverConfig | None:
    """Load a YAML config file when requested and map failures to config errors."""

    if config_path is None:
        return None

    try:
        return ConfigLoader.from_yaml(config_path)
    except FileNotFoundError as exc:
        raise ConfigError(
            f"Config file not found: `{config_path}`.",
            hint="Provide an existing path via `--config <path.yaml>`.",
        ) from exc
    except ValueError as exc:
        raise ConfigError(
            f"Invalid config file `{config_path}`: {exc}",
            hint="Fix config schema/values and rerun.",
        ) from exc
    except OSError as exc:
        raise ConfigError(
            f"Failed to load config file `{config_path}`: {exc}",
            hint="Verify file permissions.",
        ) from exc


def _resolve_command_config(
    config_file: Path | None,
    verbose: bool,
    quiet: bool,
    no_color: bool,
) -> ResolverConfig:
    """Resolve effective config from YAML, environment and explicit CLI flags."""

    if verbose and quiet:
        raise ConfigError(
            "`--verbose` and `--quiet` cannot be used together.",
            stage="options",
            hint="Pass at most one of them.",
        )

    base_config = _load_yaml_config(config_file) or ResolverConfig()
    try:
        config = base_config.with_env(os.environ)
    except ValueError as exc:
        raise ConfigError(
            f"Invalid environment configuration: {exc}",
            hint="Fix or unset the offending `ENTRYSCOPE_*` variable.",
        ) from exc

    if verbose:
        config = replace(config, debug=True)
    if no_color:
        config = replace(config, colorize=False)
    return config


def _build_resolver(config: ResolverConfig, quiet: bool) -> Resolver:
    """Create a resolver whose diagnostics honor `--quiet`."""

    level = "ERROR" if quiet else config.log_level
    return Resolver(config=config, log=DiagnosticLogger(level=level))


@app.command("resolve")
def resolve_command(
    specifier: Annotated[
        str,
        typer.Argument(help="Path to the entrypoint, relative to --root, or a bin script name."),
    ],
    bin_script: Annotated[
        bool,
        typer.Option("--bin", help="Treat SPECIFIER as an executable in node_modules/.bin."),
    ] = False,
    root: RootOption = None,
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
    quiet: QuietOption = False,
    no_color: NoColorOption = False,
) -> None:
    """Resolve an entrypoint or bin script and report whether it is trusted."""

    try:
        config = _resolve_command_config(config_file, verbose, quiet, no_color)
        resolver = _build_resolver(config, quiet)
        request = ResolutionRequest(
            specifier=specifier,
            from_directory=Path(os.path.abspath(root)) if root is not None else Path.cwd(),
            bin=bin_script,
        )
        outcome = resolve_request(request, resolver=resolver)
    except Exception as exc:
        exit_with_command_error("resolve", exc)

    echo_resolution(outcome)


@app.command("workspace")
def workspace_command(
    root: RootOption = None,
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
    quiet: QuietOption = False,
    no_color: NoColorOption = False,
) -> None:
    """Print the nearest workspace root."""

    try:
        config = _resolve_command_config(config_file, verbose, quiet, no_color)
        resolver = _build_resolver(config, quiet)
        workspace = resolver.resolve_workspace(root)
    except Exception as exc:
        exit_with_command_error("workspace", exc)

    echo_workspace(workspace)


def main() -> None:
    """CLI entrypoint for console scripts."""

    # loguru preinstalls a stderr handler (id 0) that would duplicate diagnostics
    with suppress(ValueError):
        logger.remove(0)
    app()


if __name__ == "__main__":
    main()
