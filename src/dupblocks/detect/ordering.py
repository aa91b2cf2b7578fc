"""Deterministic ordering for blocks and hits."""

from __future__ import annotations

from collections.abc import Iterable

from dupblocks.detect.models import DuplicateBlock, Hit


def hit_sort_key(hit: Hit) -> tuple[str, int, int]:
    """Return deterministic sort key for hits."""
    return (hit.path, hit.start_line, hit.end_line)


def block_sort_key(block: DuplicateBlock) -> tuple[int, int, str, tuple[str, ...]]:
    """Longest first, then most frequent, then by content."""
    first_line = block.lines[0] if block.lines else ""
    return (-len(block.lines), -len(block.hits), first_line, block.lines)


def sort_hits(hits: Iterable[Hit]) -> tuple[Hit, ...]:
    return tuple(sorted(hits, key=hit_sort_key))


def sort_blocks(blocks: Iterable[DuplicateBlock]) -> list[DuplicateBlock]:
    """Sort blocks and the hits inside each block."""
    ordered = [DuplicateBlock(lines=block.lines, hits=sort_hits(block.hits)) for block in blocks]
    ordered.sort(key=block_sort_key)
    return ordered
