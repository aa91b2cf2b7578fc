"""End-to-end duplicate block detection."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from dupblocks.detect.aggregate import aggregate_blocks
from dupblocks.detect.extension import extend_block
from dupblocks.detect.models import DuplicateBlock
from dupblocks.detect.ordering import sort_blocks
from dupblocks.detect.seeds import build_seed_index, candidate_seeds
from dupblocks.files import FileRecord, load_files, resolve_patterns
from dupblocks.logging import NULL_DIAGNOSTICS, Diagnostics

FileInput = FileRecord | tuple[str, Sequence[str]]


def detect_duplicates(
    resolved_files: Iterable[FileInput],
    min_lines: int,
    ignore_indentation: bool = False,
    diagnostics: Diagnostics = NULL_DIAGNOSTICS,
) -> list[DuplicateBlock]:
    """Find maximal repeated blocks of at least ``min_lines`` lines."""
    _require_positive_min_lines(min_lines)
    files = [_as_record(item) for item in resolved_files]
    diagnostics.emit("detect.loaded", f"total files loaded: {len(files)}", files=len(files))

    index = build_seed_index(files, min_lines, ignore_indentation)
    groups = list(candidate_seeds(index))
    diagnostics.emit(
        "detect.seeds",
        f"seed windows: {len(index)} | candidate seeds (>=2 hits): {len(groups)}",
        seed_windows=len(index),
        candidate_seeds=len(groups),
    )

    candidates = [extend_block(files, group, min_lines, ignore_indentation) for group in groups]
    diagnostics.emit(
        "detect.groups",
        f"maximal groups built: {len(candidates)}",
        groups=len(candidates),
    )

    blocks = sort_blocks(aggregate_blocks(candidates, files, ignore_indentation))
    diagnostics.emit("detect.final", f"final duplicate blocks: {len(blocks)}", blocks=len(blocks))
    return blocks


def find_repeated_blocks(
    patterns: Sequence[str],
    min_lines: int,
    ignore_indentation: bool = False,
    diagnostics: Diagnostics = NULL_DIAGNOSTICS,
) -> list[DuplicateBlock]:
    """Resolve glob patterns, load the matched files, and detect duplicates."""
    _require_positive_min_lines(min_lines)
    if not patterns:
        raise ValueError("At least one pattern is required")
    paths = resolve_patterns(patterns, diagnostics)
    diagnostics.emit("resolve.files", f"files matched: {len(paths)}", files=len(paths))
    for position, path in enumerate(paths[:5]):
        diagnostics.emit("resolve.files", f"  file[{position}]: {path}", path=path)
    files = load_files(paths, diagnostics)
    return detect_duplicates(files, min_lines, ignore_indentation, diagnostics)


def _require_positive_min_lines(min_lines: object) -> None:
    if isinstance(min_lines, bool) or not isinstance(min_lines, int) or min_lines < 1:
        raise ValueError("min_lines must be a positive integer")


def _as_record(item: FileInput) -> FileRecord:
    if isinstance(item, FileRecord):
        return item
    path, lines = item
    return FileRecord(path=str(path), lines=tuple(lines))
