"""Typed models for resolved and loaded files."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path


@dataclass(slots=True, frozen=True)
class FileRecord:
    """A loaded file: its reported path and normalized lines."""

    path: str
    lines: tuple[str, ...]


@dataclass(slots=True, frozen=True)
class CompiledPattern:
    """Glob pattern split into a walk root and a relative-path predicate."""

    pattern: str
    base: Path
    suffix: str
    regex: re.Pattern[str]

    def matches(self, relative_path: str) -> bool:
        """Return True when the whole relative path matches the suffix glob."""
        return self.regex.fullmatch(relative_path) is not None
