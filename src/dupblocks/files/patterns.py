"""Glob pattern compilation and deterministic file resolution."""

from __future__ import annotations

import os
import re
from collections.abc import Iterable
from pathlib import Path

from dupblocks.files.models import CompiledPattern
from dupblocks.logging import NULL_DIAGNOSTICS, Diagnostics

WILDCARD_CHARS = frozenset("*?")
RECURSIVE_SUFFIX = "**"


def normalize_pattern(pattern: str) -> str:
    """Use forward slashes and drop leading ``./`` segments.

    Backslashes are separators only where the platform says so; on POSIX they
    are ordinary file name characters.
    """
    normalized = pattern.replace(os.sep, "/") if os.sep != "/" else pattern
    while normalized.startswith("./"):
        normalized = normalized[2:].lstrip("/")
    if len(normalized) > 1:
        normalized = normalized.rstrip("/") or "/"
    return normalized


def split_base(normalized: str) -> tuple[str, str]:
    """Split a normalized pattern into its wildcard-free base and glob suffix.

    The base ends right before the segment holding the first wildcard. A
    pattern without wildcards is its own base and has an empty suffix.
    """
    first = next(
        (index for index, char in enumerate(normalized) if char in WILDCARD_CHARS),
        None,
    )
    if first is None:
        return normalized or ".", ""
    slash = normalized.rfind("/", 0, first)
    if slash < 0:
        return ".", normalized
    if slash == 0:
        return "/", normalized[1:]
    return normalized[:slash], normalized[slash + 1 :]


def glob_to_regex(suffix: str) -> str:
    """Translate ``*``, ``?`` and ``**`` into a separator-aware regex body."""
    parts: list[str] = []
    index = 0
    while index < len(suffix):
        char = suffix[index]
        if char == "*":
            end = index
            while end < len(suffix) and suffix[end] == "*":
                end += 1
            parts.append(".*" if end - index >= 2 else "[^/]*")
            index = end
            continue
        if char == "?":
            parts.append("[^/]")
        else:
            parts.append(re.escape(char))
        index += 1
    return "".join(parts)


def compile_pattern(pattern: str) -> CompiledPattern:
    """Compile one glob into a walk root and a full-match predicate."""
    if not pattern.strip():
        raise ValueError("Pattern must be a non-empty string.")
    normalized = normalize_pattern(pattern)
    base, suffix = split_base(normalized)
    if not suffix:
        suffix = RECURSIVE_SUFFIX
    return CompiledPattern(
        pattern=pattern,
        base=Path(base),
        suffix=suffix,
        regex=re.compile(glob_to_regex(suffix), re.DOTALL),
    )


def match_pattern(
    compiled: CompiledPattern, diagnostics: Diagnostics = NULL_DIAGNOSTICS
) -> list[str]:
    """Return reported paths of regular files selected by one compiled pattern."""
    base = compiled.base
    if not base.exists():
        diagnostics.emit(
            "resolve.base_missing",
            "  base does not exist, skipping",
            pattern=compiled.pattern,
            base=base.as_posix(),
        )
        return []
    if base.is_file():
        if compiled.matches(base.name):
            return [base.as_posix()]
        return []
    if not base.is_dir():
        return []

    matched: list[str] = []
    for relative in _walk_relative_files(base, diagnostics):
        if compiled.matches(relative):
            matched.append(_reported_path(base, relative))
    diagnostics.emit(
        "resolve.matched",
        f"  matched files: {len(matched)}",
        pattern=compiled.pattern,
        count=len(matched),
    )
    return matched


def resolve_patterns(
    patterns: Iterable[str], diagnostics: Diagnostics = NULL_DIAGNOSTICS
) -> list[str]:
    """Resolve globs into a sorted file list deduplicated by canonical path."""
    found: set[str] = set()
    for pattern in patterns:
        compiled = compile_pattern(pattern)
        diagnostics.emit(
            "resolve.pattern",
            f"glob pattern: {pattern} | base={compiled.base.as_posix()}",
            pattern=pattern,
            base=compiled.base.as_posix(),
            suffix=compiled.suffix,
        )
        found.update(match_pattern(compiled, diagnostics))
    return dedupe_by_canonical_path(found)


def dedupe_by_canonical_path(paths: Iterable[str]) -> list[str]:
    """Keep the lexicographically first spelling of every real file."""
    seen: set[str] = set()
    output: list[str] = []
    for path in sorted(set(paths)):
        canonical = os.path.realpath(path)
        if canonical in seen:
            continue
        seen.add(canonical)
        output.append(path)
    return output


def _reported_path(base: Path, relative: str) -> str:
    if base == Path("."):
        return relative
    return (base / relative).as_posix()


def _walk_relative_files(root: Path, diagnostics: Diagnostics) -> list[str]:
    """Walk the tree in name order, following directory symlinks without looping."""
    output: list[str] = []
    stack: list[tuple[Path, str, frozenset[str]]] = [(root, "", frozenset())]
    while stack:
        current, prefix, ancestors = stack.pop()
        real = os.path.realpath(current)
        if real in ancestors:
            diagnostics.emit(
                "resolve.symlink_cycle",
                f"  symlink cycle at {current.as_posix()}, skipping",
                path=current.as_posix(),
            )
            continue
        lineage = ancestors | {real}
        try:
            with os.scandir(current) as entries:
                ordered_entries = sorted(entries, key=lambda item: item.name)
        except OSError:
            continue
        for entry in reversed(ordered_entries):
            relative = f"{prefix}{entry.name}"
            if entry.is_dir():
                stack.append((Path(entry.path), f"{relative}/", lineage))
                continue
            if entry.is_file():
                output.append(relative)
    return output
