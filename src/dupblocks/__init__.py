"""Find repeated blocks of lines across files."""

from .detect import DuplicateBlock, Hit, detect_duplicates, find_repeated_blocks
from .files import FileRecord, compile_pattern, load_lines, resolve_patterns

__version__ = "1.0.0"

__all__ = [
    "DuplicateBlock",
    "FileRecord",
    "Hit",
    "__version__",
    "compile_pattern",
    "detect_duplicates",
    "find_repeated_blocks",
    "load_lines",
    "resolve_patterns",
]
