"""File resolution and loading package."""

from .loader import load_files, load_lines, split_lines
from .models import CompiledPattern, FileRecord
from .patterns import (
    compile_pattern,
    dedupe_by_canonical_path,
    glob_to_regex,
    match_pattern,
    normalize_pattern,
    resolve_patterns,
    split_base,
)

__all__ = [
    "CompiledPattern",
    "FileRecord",
    "compile_pattern",
    "dedupe_by_canonical_path",
    "glob_to_regex",
    "load_files",
    "load_lines",
    "match_pattern",
    "normalize_pattern",
    "resolve_patterns",
    "split_base",
    "split_lines",
]
