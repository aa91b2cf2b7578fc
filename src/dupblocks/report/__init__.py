"""Report rendering package."""

from .render import (
    RENDERERS,
    ReportDumper,
    block_to_dict,
    blocks_to_payload,
    render_json,
    render_report,
    render_yaml,
)

__all__ = [
    "RENDERERS",
    "ReportDumper",
    "block_to_dict",
    "blocks_to_payload",
    "render_json",
    "render_report",
    "render_yaml",
]
