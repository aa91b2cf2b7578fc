"""Merge candidate blocks that describe the same repeated region."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from dupblocks.detect.models import DuplicateBlock, Hit
from dupblocks.detect.seeds import content_key
from dupblocks.files.models import FileRecord


@dataclass(slots=True)
class _Aggregate:
    """Hit union for one content key."""

    line_count: int
    fallback_lines: tuple[str, ...]
    hits: set[Hit] = field(default_factory=set)


def aggregate_blocks(
    candidates: Iterable[DuplicateBlock],
    files: Sequence[FileRecord],
    ignore_indentation: bool,
) -> list[DuplicateBlock]:
    """Collapse candidates by content, dedupe hits, and drop singletons.

    The lines of each merged block come from its hit with the smallest
    ``(path, start_line)``, so the result never depends on seed order.
    """
    by_content: dict[str, _Aggregate] = {}
    for candidate in candidates:
        key = content_key(candidate.lines, ignore_indentation)
        aggregate = by_content.get(key)
        if aggregate is None:
            aggregate = _Aggregate(line_count=len(candidate.lines), fallback_lines=candidate.lines)
            by_content[key] = aggregate
        aggregate.hits.update(candidate.hits)

    lines_by_path = {record.path: record.lines for record in files}
    output: list[DuplicateBlock] = []
    for aggregate in by_content.values():
        if len(aggregate.hits) < 2:
            continue
        representative = min(aggregate.hits, key=lambda hit: (hit.path, hit.start_line))
        output.append(
            DuplicateBlock(
                lines=_representative_lines(representative, aggregate, lines_by_path),
                hits=tuple(aggregate.hits),
            )
        )
    return output


def _representative_lines(
    hit: Hit, aggregate: _Aggregate, lines_by_path: dict[str, tuple[str, ...]]
) -> tuple[str, ...]:
    source = lines_by_path.get(hit.path)
    if source is None or hit.end_line > len(source):
        return aggregate.fallback_lines
    lines = source[hit.start_line - 1 : hit.end_line]
    if len(lines) != aggregate.line_count:
        return aggregate.fallback_lines
    return tuple(lines)
