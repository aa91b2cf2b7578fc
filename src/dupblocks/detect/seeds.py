"""Seed index: fixed-length line windows grouped by content."""

from __future__ import annotations

from collections.abc import Iterator, Sequence

from dupblocks.detect.models import Occurrence
from dupblocks.files.models import FileRecord

INDENT_CHARS = " \t"

SeedIndex = dict[str, list[Occurrence]]


def strip_indent(line: str) -> str:
    """Drop leading spaces and tabs."""
    return line.lstrip(INDENT_CHARS)


def comparable(line: str, ignore_indentation: bool) -> str:
    """Return the form of a line used for equality checks."""
    if ignore_indentation:
        return strip_indent(line)
    return line


def content_key(lines: Sequence[str], ignore_indentation: bool) -> str:
    """Join lines with ``\\n`` after applying the comparison mode."""
    if ignore_indentation:
        return "\n".join(strip_indent(line) for line in lines)
    return "\n".join(lines)


def build_seed_index(
    files: Sequence[FileRecord], min_lines: int, ignore_indentation: bool
) -> SeedIndex:
    """Map every ``min_lines`` window's content key to the places it occurs."""
    if min_lines < 1:
        raise ValueError("min_lines must be >= 1")
    index: SeedIndex = {}
    for file_index, record in enumerate(files):
        lines = record.lines
        if len(lines) < min_lines:
            continue
        keyed = [comparable(line, ignore_indentation) for line in lines]
        for start in range(len(lines) - min_lines + 1):
            key = "\n".join(keyed[start : start + min_lines])
            index.setdefault(key, []).append(Occurrence(file_index=file_index, start=start))
    return index


def candidate_seeds(index: SeedIndex) -> Iterator[list[Occurrence]]:
    """Yield occurrence groups that could be duplicates (two or more members)."""
    for occurrences in index.values():
        if len(occurrences) >= 2:
            yield occurrences
