"""Structured diagnostics utilities."""

from .diagnostics import (
    NULL_DIAGNOSTICS,
    CollectingSink,
    DiagnosticEvent,
    Diagnostics,
    DiagnosticSink,
    JsonlDiagnosticsLogger,
    StreamDiagnosticsWriter,
    utc_timestamp,
)

__all__ = [
    "CollectingSink",
    "DiagnosticEvent",
    "DiagnosticSink",
    "Diagnostics",
    "JsonlDiagnosticsLogger",
    "NULL_DIAGNOSTICS",
    "StreamDiagnosticsWriter",
    "utc_timestamp",
]
