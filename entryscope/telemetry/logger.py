"""Structured diagnostic logging utilities.

Responsibilities:
- Emit one deterministic line per resolution diagnostic through `loguru`.
- Forward each event as a `DiagnosticEvent` to an optional listener so callers
  can inspect decisions without parsing log text.

loguru exposes a single process-wide logger. Each `DiagnosticLogger` binds its
records to a private id and owns exactly one handler that accepts only those
records. It never removes handlers it did not add.
"""

from __future__ import annotations

from contextlib import suppress
from itertools import count
import sys
from typing import Any, Callable, Protocol, TextIO
import weakref

from loguru import logger as _loguru_logger

from ..models.datatypes import DiagnosticEvent, DiagnosticLevel
from ..rendering import strip_decoration


_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR"})
_EXTRA_KEY = "entryscope_diagnostic_id"
_instance_ids = count(1)


class DiagnosticSink(Protocol):
    """Anything the resolver can report diagnostics to."""

    def debug(self, message: str) -> None:
        """Report a per-step trace message."""

    def info(self, message: str) -> None:
        """Report a notable decision."""

    def warning(self, message: str) -> None:
        """Report a decision the user should double-check."""


def _records_for(diagnostic_id: int) -> Callable[[dict[str, Any]], bool]:
    """Build a loguru filter accepting only records bound to `diagnostic_id`."""

    def _accept(record: dict[str, Any]) -> bool:
        return record["extra"].get(_EXTRA_KEY) == diagnostic_id

    return _accept


def _remove_handler(handler_id: int) -> None:
    """Remove one loguru handler; a host may already have removed it."""

    with suppress(ValueError):
        _loguru_logger.remove(handler_id)


def _is_terminal(sink: TextIO) -> bool:
    isatty = getattr(sink, "isatty", None)
    return bool(isatty is not None and isatty())


class DiagnosticLogger:
    """Emit resolution diagnostics to stderr (or `sink`) via loguru."""

    def __init__(
        self,
        sink: TextIO | None = None,
        level: str = "INFO",
        on_event: Callable[[DiagnosticEvent], None] | None = None,
    ) -> None:
        """Attach a private loguru handler with a plain, uncolored line format.

        Args:
            sink: Text stream receiving log lines; defaults to stderr.
            level: Minimum level written to the sink.
            on_event: Listener receiving every event, regardless of `level`.
        """

        normalized_level = level.strip().upper()
        if normalized_level not in _LOG_LEVELS:
            supported = ", ".join(sorted(_LOG_LEVELS))
            raise ValueError(f"Unsupported log level `{level}`; supported: {supported}.")

        self._sink = sink or sys.stderr
        self._on_event = on_event
        self._plain = not _is_terminal(self._sink)
        self.level = normalized_level

        diagnostic_id = next(_instance_ids)
        self._logger = _loguru_logger.bind(**{_EXTRA_KEY: diagnostic_id})
        self.handler_id = _loguru_logger.add(
            self._sink,
            format="{message}",
            level=normalized_level,
            colorize=False,
            filter=_records_for(diagnostic_id),
        )
        self._finalizer = weakref.finalize(self, _remove_handler, self.handler_id)

    def close(self) -> None:
        """Detach this logger's handler; later events only reach the listener."""

        self._finalizer()

    def _emit(self, level: DiagnosticLevel, message: str) -> None:
        """Emit one diagnostic line and notify the listener."""

        if self._on_event is not None:
            self._on_event(DiagnosticEvent(level=level, message=message))
        line = strip_decoration(message) if self._plain else message
        self._logger.log(level, f"[resolve] level={level} {line}")

    def debug(self, message: str) -> None:
        self._emit("DEBUG", message)

    def info(self, message: str) -> None:
        self._emit("INFO", message)

    def warning(self, message: str) -> None:
        self._emit("WARNING", message)
