from __future__ import annotations

import io
import json
from pathlib import Path

from dupblocks.logging import (
    NULL_DIAGNOSTICS,
    CollectingSink,
    DiagnosticEvent,
    Diagnostics,
    JsonlDiagnosticsLogger,
    StreamDiagnosticsWriter,
)


def test_jsonl_log_writes_one_event_per_line(tmp_path: Path) -> None:
    log_path = tmp_path / "logs" / "diag.jsonl"
    diagnostics = Diagnostics([JsonlDiagnosticsLogger(log_path)])

    diagnostics.emit("detect.final", "final duplicate blocks: 2", blocks=2, alpha="a")

    lines = log_path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 1
    event = json.loads(lines[0])
    assert set(event.keys()) == {"metadata", "message", "stage", "timestamp"}
    assert event["stage"] == "detect.final"
    assert event["message"] == "final duplicate blocks: 2"
    assert event["metadata"] == {"alpha": "a", "blocks": 2}
    assert event["timestamp"].endswith("Z")


def test_jsonl_log_appends_across_logger_instances(tmp_path: Path) -> None:
    log_path = tmp_path / "diag.jsonl"
    first = JsonlDiagnosticsLogger(log_path)
    first.append(DiagnosticEvent(timestamp="t0", stage="s", message="0", metadata={}))

    second = JsonlDiagnosticsLogger(log_path)
    second(DiagnosticEvent(timestamp="t1", stage="s", message="1", metadata={}))

    lines = log_path.read_text(encoding="utf-8").splitlines()
    assert [json.loads(line)["message"] for line in lines] == ["0", "1"]


def test_jsonl_log_file_is_created_up_front(tmp_path: Path) -> None:
    logger = JsonlDiagnosticsLogger(tmp_path / "nested" / "diag.jsonl")

    assert logger.path.is_file()
    assert logger.path.read_text(encoding="utf-8") == ""


def test_stream_writer_prefixes_debug_marker() -> None:
    stream = io.StringIO()
    diagnostics = Diagnostics([StreamDiagnosticsWriter(stream)])

    diagnostics.emit("config", "min_lines=3")

    assert stream.getvalue() == "[debug] min_lines=3\n"


def test_disabled_diagnostics_drop_events() -> None:
    sink = CollectingSink()

    Diagnostics([sink], enabled=False).emit("config", "ignored")
    NULL_DIAGNOSTICS.emit("config", "ignored")

    assert sink.events == []
    assert NULL_DIAGNOSTICS.enabled is False
    assert Diagnostics([sink]).enabled is True


def test_events_reach_every_sink_in_order() -> None:
    first = CollectingSink()
    second = CollectingSink()
    diagnostics = Diagnostics([first, second])

    diagnostics.emit("a", "one")
    diagnostics.emit("b", "two")

    assert first.stages() == ["a", "b"]
    assert [event.message for event in second.events] == ["one", "two"]
