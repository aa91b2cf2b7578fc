"""Duplicate block detection package."""

from .aggregate import aggregate_blocks
from .engine import detect_duplicates, find_repeated_blocks
from .extension import extend_block
from .models import DuplicateBlock, Hit, Occurrence
from .ordering import block_sort_key, hit_sort_key, sort_blocks, sort_hits
from .seeds import build_seed_index, candidate_seeds, comparable, content_key, strip_indent

__all__ = [
    "DuplicateBlock",
    "Hit",
    "Occurrence",
    "aggregate_blocks",
    "block_sort_key",
    "build_seed_index",
    "candidate_seeds",
    "comparable",
    "content_key",
    "detect_duplicates",
    "extend_block",
    "find_repeated_blocks",
    "hit_sort_key",
    "sort_blocks",
    "sort_hits",
    "strip_indent",
]
