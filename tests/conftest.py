"""Shared pytest fixtures for the full entryscope test suite."""

from __future__ import annotations

import io

import pytest

from entryscope.config import ResolverConfig
from entryscope.models.datatypes import DiagnosticEvent
from entryscope.resolver import Resolver
from entryscope.telemetry.logger import DiagnosticLogger
from tests.memory_fs import MemoryFileSystem


@pytest.fixture
def memory_fs() -> MemoryFileSystem:
    """Provide an empty in-memory filesystem."""

    return MemoryFileSystem()


@pytest.fixture
def diagnostic_events() -> list[DiagnosticEvent]:
    """Collect every diagnostic event emitted by the `resolver` fixture."""

    return []


@pytest.fixture
def log_sink() -> io.StringIO:
    """Capture loguru output written by the `resolver` fixture."""

    return io.StringIO()


@pytest.fixture
def resolver(diagnostic_events: list[DiagnosticEvent], log_sink: io.StringIO) -> Resolver:
    """Provide an undecorated resolver that records DEBUG-level diagnostics."""

    return Resolver(
        config=ResolverConfig(colorize=False, debug=True),
        log=DiagnosticLogger(sink=log_sink, level="DEBUG", on_event=diagnostic_events.append),
    )
