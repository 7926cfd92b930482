"""Unit tests for loguru-backed diagnostic logging."""

from __future__ import annotations

import io

from loguru import logger as loguru_logger
import pytest

from entryscope.config import ResolverConfig
from entryscope.models.datatypes import DiagnosticEvent
from entryscope.rendering import render_label
from entryscope.resolver import Resolver
from entryscope.telemetry.logger import DiagnosticLogger
from tests.memory_fs import MemoryFileSystem


def test_logger_writes_one_line_per_event_above_threshold() -> None:
    """Only events at or above the configured level reach the sink."""

    sink = io.StringIO()
    logger = DiagnosticLogger(sink=sink, level="info")

    logger.debug("Searching for workspace in ./pkg")
    logger.info("Resolved executable run")
    logger.warning("Resolved ./app → ./app/index.js")

    lines = sink.getvalue().splitlines()
    assert lines == [
        "[resolve] level=INFO Resolved executable run",
        "[resolve] level=WARNING Resolved ./app → ./app/index.js",
    ]
    assert logger.level == "INFO"


def test_logger_forwards_every_event_to_listener() -> None:
    """The listener sees events regardless of the sink threshold."""

    events: list[DiagnosticEvent] = []
    logger = DiagnosticLogger(sink=io.StringIO(), level="ERROR", on_event=events.append)

    logger.debug("step {one}")
    logger.warning("careful")

    assert events == [
        DiagnosticEvent(level="DEBUG", message="step {one}"),
        DiagnosticEvent(level="WARNING", message="careful"),
    ]


def test_logger_rejects_unknown_levels() -> None:
    """Unsupported levels fail fast with the supported list."""

    with pytest.raises(ValueError, match="Unsupported log level `chatty`"):
        DiagnosticLogger(sink=io.StringIO(), level="chatty")


def test_loggers_keep_their_own_sinks_and_levels(memory_fs: MemoryFileSystem) -> None:
    """A second resolver must not take over the first resolver's sink or level."""

    memory_fs.add_file("/ws/package.json", "{}")
    sink_a = io.StringIO()
    sink_b = io.StringIO()
    resolver_a = Resolver(
        config=ResolverConfig(colorize=False),
        log=DiagnosticLogger(sink=sink_a, level="DEBUG"),
        fs=memory_fs,
    )
    resolver_b = Resolver(
        config=ResolverConfig(colorize=False),
        log=DiagnosticLogger(sink=sink_b, level="INFO"),
        fs=memory_fs,
    )

    resolver_a.resolve_workspace("/ws")

    assert "[resolve] level=DEBUG Found workspace in" in sink_a.getvalue()
    assert sink_b.getvalue() == ""

    resolver_b.log.info("Resolved executable run")

    assert sink_b.getvalue() == "[resolve] level=INFO Resolved executable run\n"
    assert "Resolved executable run" not in sink_a.getvalue()


def test_logger_leaves_host_handlers_in_place() -> None:
    """Handlers installed by the host application keep receiving their records."""

    host_sink = io.StringIO()
    host_handler = loguru_logger.add(host_sink, format="{message}", level="INFO")
    try:
        DiagnosticLogger(sink=io.StringIO(), level="DEBUG")
        loguru_logger.info("host app message")
    finally:
        loguru_logger.remove(host_handler)

    assert "host app message" in host_sink.getvalue()


def test_closed_logger_stops_writing_but_keeps_notifying() -> None:
    """`close` detaches the sink; the listener still sees events."""

    sink = io.StringIO()
    events: list[DiagnosticEvent] = []
    logger = DiagnosticLogger(sink=sink, level="DEBUG", on_event=events.append)

    logger.close()
    logger.info("after close")
    logger.close()

    assert sink.getvalue() == ""
    assert events == [DiagnosticEvent(level="INFO", message="after close")]


def test_logger_strips_decoration_for_non_terminal_sinks() -> None:
    """Styled renders reach a plain stream without escape codes."""

    sink = io.StringIO()
    events: list[DiagnosticEvent] = []
    logger = DiagnosticLogger(sink=sink, level="INFO", on_event=events.append)
    label = render_label("app>run")

    logger.info(f"Resolved executable {label}")

    assert sink.getvalue() == "[resolve] level=INFO Resolved executable app>run\n"
    assert "\x1b[" in events[0].message
