"""Shared datatypes for resolution requests and results."""

from .datatypes import (
    DiagnosticEvent,
    DisplayPath,
    ResolutionOutcome,
    ResolutionRequest,
    TrustClassification,
)

__all__ = [
    "DiagnosticEvent",
    "DisplayPath",
    "ResolutionOutcome",
    "ResolutionRequest",
    "TrustClassification",
]
