"""Line loading with CRLF and byte-order-mark normalization."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from dupblocks.files.models import FileRecord
from dupblocks.logging import NULL_DIAGNOSTICS, Diagnostics

UTF8_BOM = "\ufeff"


def split_lines(text: str) -> tuple[str, ...]:
    """Split on ``\\n`` only, dropping one trailing ``\\r`` per line and a leading BOM."""
    if not text:
        return ()
    parts = text.split("\n")
    if parts[-1] == "":
        parts.pop()
    lines = [part[:-1] if part.endswith("\r") else part for part in parts]
    if lines and lines[0].startswith(UTF8_BOM):
        lines[0] = lines[0][len(UTF8_BOM) :]
    return tuple(lines)


def load_lines(path: str | Path, diagnostics: Diagnostics = NULL_DIAGNOSTICS) -> tuple[str, ...]:
    """Read a file into normalized lines; unreadable files yield no lines."""
    display = Path(path).as_posix()
    try:
        data = Path(path).read_bytes()
    except OSError as error:
        diagnostics.emit(
            "load.read_failed",
            f"cannot read {display}: {error.strerror or error}",
            path=display,
        )
        return ()
    lines = split_lines(data.decode("utf-8", errors="replace"))
    diagnostics.emit(
        "load.read", f"read {display} ({len(lines)} lines)", path=display, lines=len(lines)
    )
    return lines


def load_files(
    paths: Iterable[str], diagnostics: Diagnostics = NULL_DIAGNOSTICS
) -> list[FileRecord]:
    """Load every path in the given order."""
    return [FileRecord(path=path, lines=load_lines(path, diagnostics)) for path in paths]
