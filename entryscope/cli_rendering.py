"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics
and resolution results.
"""

from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import typer

from .errors import EntryscopeError
from .models.datatypes import ResolutionOutcome


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, EntryscopeError):
        typer.secho(
            f"{command_name} failed at stage `{exc.stage}`: {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def echo_resolution(outcome: ResolutionOutcome) -> None:
    """Print the canonical entrypoint and its trust verdict."""

    typer.echo(f"Entrypoint: {outcome.entrypoint}")
    typer.echo(f"Trusted: {'yes' if outcome.trusted else 'no'}")


def echo_workspace(workspace: Path) -> None:
    """Print the resolved workspace root."""

    typer.echo(f"Workspace: {workspace}")
