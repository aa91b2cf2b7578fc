"""Structured diagnostic events and their sinks."""

from __future__ import annotations

import json
from collections.abc import Callable, Iterable
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import TextIO

DiagnosticSink = Callable[["DiagnosticEvent"], None]


@dataclass(slots=True, frozen=True)
class DiagnosticEvent:
    """Single progress event emitted by a pipeline stage."""

    timestamp: str
    stage: str
    message: str
    metadata: dict[str, object]


def utc_timestamp() -> str:
    """Return an ISO-8601 UTC timestamp."""
    now = datetime.now(tz=UTC)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class Diagnostics:
    """Fan diagnostic events out to sinks when enabled."""

    def __init__(self, sinks: Iterable[DiagnosticSink] = (), enabled: bool = True) -> None:
        self._sinks = tuple(sinks)
        self._enabled = enabled and bool(self._sinks)

    @property
    def enabled(self) -> bool:
        """Return True when events reach at least one sink."""
        return self._enabled

    def emit(self, stage: str, message: str, **metadata: object) -> None:
        """Build one event and hand it to every sink."""
        if not self._enabled:
            return
        event = DiagnosticEvent(
            timestamp=utc_timestamp(),
            stage=stage,
            message=message,
            metadata={key: metadata[key] for key in sorted(metadata)},
        )
        for sink in self._sinks:
            sink(event)


NULL_DIAGNOSTICS = Diagnostics(enabled=False)


class StreamDiagnosticsWriter:
    """Write human-readable ``[debug]`` lines to a text stream."""

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream

    def __call__(self, event: DiagnosticEvent) -> None:
        self._stream.write(f"[debug] {event.message}\n")
        self._stream.flush()


@dataclass(slots=True)
class CollectingSink:
    """Keep events in memory, in emission order."""

    events: list[DiagnosticEvent] = field(default_factory=list)

    def __call__(self, event: DiagnosticEvent) -> None:
        self.events.append(event)

    def stages(self) -> list[str]:
        """Return stage names of collected events."""
        return [event.stage for event in self.events]


class JsonlDiagnosticsLogger:
    """Append-only JSONL diagnostics log."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("a", encoding="utf-8"):
            pass

    @property
    def path(self) -> Path:
        """Return on-disk JSONL path."""
        return self._path

    def __call__(self, event: DiagnosticEvent) -> None:
        self.append(event)

    def append(self, event: DiagnosticEvent) -> None:
        """Append one event as a JSON object per line."""
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(asdict(event), sort_keys=True))
            handle.write("\n")
