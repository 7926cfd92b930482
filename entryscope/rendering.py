"""Human-readable rendering of paths and labels.

Responsibilities:
- Pick the shorter of the absolute and cwd-relative form of a path for display.
- Decorate path segments and labels per delimiter for terminal output.

Rendered values are `DisplayPath` strings: they may contain ANSI decoration and
must never be fed back into filesystem operations. Use `strip_decoration` to
recover the plain text.
"""

from __future__ import annotations

import os
from pathlib import PurePath

import click
import typer

from .constants import LABEL_DELIMITER
from .models.datatypes import DisplayPath


def strip_decoration(value: str) -> str:
    """Remove ANSI styling added by the renderers."""

    return click.unstyle(value)


def color_split(
    value: str,
    *,
    delimiter: str = LABEL_DELIMITER,
    color: str = typer.colors.BRIGHT_WHITE,
    delimiter_color: str = typer.colors.BRIGHT_BLACK,
) -> str:
    """Style each `delimiter`-separated part of `value` independently.

    Existing decoration is stripped first so values can be re-rendered.
    """

    styled_delimiter = typer.style(delimiter, fg=delimiter_color)
    parts = strip_decoration(value).split(delimiter)
    return styled_delimiter.join(typer.style(part, fg=color) if part else part for part in parts)


def _shortest_form(path: str, cwd: str) -> str:
    """Return the shorter of the absolute and relative form; ties go relative."""

    absolute = os.path.normpath(os.path.join(cwd, path))
    try:
        relative = os.path.relpath(absolute, cwd)
    except ValueError:
        # no relative form across drives
        return absolute

    if len(relative) > len(absolute):
        return absolute
    if relative in (os.curdir, os.pardir) or relative.startswith(os.pardir + os.sep):
        return relative
    return f"{os.curdir}{os.sep}{relative}"


def render_path(
    path: str | PurePath,
    *,
    cwd: str | PurePath | None = None,
    colorize: bool = True,
) -> DisplayPath:
    """Render `path` as relative or absolute, whichever is fewer characters.

    A relative result that does not climb out of `cwd` is prefixed with `./`.
    Re-rendering a stripped result yields the same string.

    Args:
        path: Absolute or relative path; relative paths are taken from `cwd`.
        cwd: Directory to relativize against, defaulting to the process cwd.
        colorize: Whether to decorate segments and separators.
    """

    base = os.path.abspath(cwd) if cwd is not None else os.getcwd()
    display = _shortest_form(strip_decoration(os.fspath(path)), base)
    if not colorize:
        return DisplayPath(display)
    return DisplayPath(
        color_split(
            display,
            delimiter=os.sep,
            color=typer.colors.BRIGHT_GREEN,
            delimiter_color=typer.colors.GREEN,
        )
    )


def render_label(
    name: str,
    *,
    delimiter: str = LABEL_DELIMITER,
    colorize: bool = True,
) -> DisplayPath:
    """Render a package, capability, or bin-script label for display."""

    if not colorize:
        return DisplayPath(strip_decoration(name))
    return DisplayPath(
        color_split(
            name,
            delimiter=delimiter,
            color=typer.colors.BRIGHT_MAGENTA,
            delimiter_color=typer.colors.MAGENTA,
        )
    )
