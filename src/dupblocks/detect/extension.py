"""Grow a seed group into the largest block all of its occurrences share."""

from __future__ import annotations

from collections.abc import Sequence

from dupblocks.detect.models import DuplicateBlock, Hit, Occurrence
from dupblocks.detect.seeds import comparable
from dupblocks.files.models import FileRecord


def extend_block(
    files: Sequence[FileRecord],
    occurrences: Sequence[Occurrence],
    seed_len: int,
    ignore_indentation: bool,
) -> DuplicateBlock:
    """Extend backward then forward while every occurrence still agrees.

    Block lines are copied verbatim from the first occurrence; the comparison
    mode only decides when extension stops.
    """
    if not occurrences:
        raise ValueError("occurrences must not be empty")
    starts = [occurrence.start for occurrence in occurrences]
    file_lines = [files[occurrence.file_index].lines for occurrence in occurrences]

    while all(start > 0 for start in starts):
        reference = comparable(file_lines[0][starts[0] - 1], ignore_indentation)
        if any(
            comparable(lines[start - 1], ignore_indentation) != reference
            for lines, start in zip(file_lines[1:], starts[1:], strict=True)
        ):
            break
        starts = [start - 1 for start in starts]

    length = seed_len
    while _forward_line_agrees(file_lines, starts, length, ignore_indentation):
        length += 1

    first_lines = file_lines[0]
    hits = tuple(
        Hit(
            path=files[occurrence.file_index].path,
            start_line=start + 1,
            end_line=start + length,
        )
        for occurrence, start in zip(occurrences, starts, strict=True)
    )
    return DuplicateBlock(lines=tuple(first_lines[starts[0] : starts[0] + length]), hits=hits)


def _forward_line_agrees(
    file_lines: list[tuple[str, ...]],
    starts: list[int],
    length: int,
    ignore_indentation: bool,
) -> bool:
    reference_index = starts[0] + length
    if reference_index >= len(file_lines[0]):
        return False
    reference = comparable(file_lines[0][reference_index], ignore_indentation)
    for lines, start in zip(file_lines[1:], starts[1:], strict=True):
        index = start + length
        if index >= len(lines):
            return False
        if comparable(lines[index], ignore_indentation) != reference:
            return False
    return True
