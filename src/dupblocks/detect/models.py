"""Typed models for duplicate detection results."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class Occurrence:
    """Seed window position: index into the loaded files and 0-based start line."""

    file_index: int
    start: int


@dataclass(slots=True, frozen=True, order=True)
class Hit:
    """One location of a duplicate block, 1-based inclusive."""

    path: str
    start_line: int
    end_line: int


@dataclass(slots=True, frozen=True)
class DuplicateBlock:
    """Maximal repeated line block and every place it occurs."""

    lines: tuple[str, ...]
    hits: tuple[Hit, ...]

    @property
    def line_count(self) -> int:
        return len(self.lines)

    @property
    def occurrences(self) -> int:
        return len(self.hits)

    @property
    def byte_count(self) -> int:
        """UTF-8 size of the block with a newline after every line."""
        return sum(len(line.encode("utf-8")) + 1 for line in self.lines)
