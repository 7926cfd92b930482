"""Diagnostic event logging for resolution decisions."""

from .logger import DiagnosticLogger, DiagnosticSink

__all__ = ["DiagnosticLogger", "DiagnosticSink"]
