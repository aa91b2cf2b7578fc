"""YAML and JSON renderers for duplicate block reports."""

from __future__ import annotations

import json
from collections.abc import Sequence

import yaml

from dupblocks.detect.models import DuplicateBlock
from dupblocks.detect.ordering import sort_hits

YAML_STR_TAG = "tag:yaml.org,2002:str"
# Line breaks for the YAML reader but not for the line splitter.
YAML_EXTRA_BREAKS = frozenset("\x85\u2028\u2029")


class ReportDumper(yaml.SafeDumper):
    """Safe dumper that writes multi-line strings as literal blocks."""


def _represent_text(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    if YAML_EXTRA_BREAKS.intersection(data):
        return dumper.represent_scalar(YAML_STR_TAG, data, style='"')
    if "\n" in data:
        return dumper.represent_scalar(YAML_STR_TAG, data, style="|")
    return dumper.represent_scalar(YAML_STR_TAG, data)


ReportDumper.add_representer(str, _represent_text)


def block_to_dict(block: DuplicateBlock, content_as_lines: bool = False) -> dict[str, object]:
    """Serialize one block; hits are emitted in path/line order."""
    content: object
    if content_as_lines:
        content = list(block.lines)
    else:
        content = "".join(f"{line}\n" for line in block.lines)
    return {
        "lines": block.line_count,
        "bytes": block.byte_count,
        "occurrences": block.occurrences,
        "hits": [
            {"file": hit.path, "start_line": hit.start_line, "end_line": hit.end_line}
            for hit in sort_hits(block.hits)
        ],
        "content": content,
    }


def blocks_to_payload(
    blocks: Sequence[DuplicateBlock], content_as_lines: bool = False
) -> dict[str, object]:
    """Build the report payload, keeping the given block order."""
    return {"blocks": [block_to_dict(block, content_as_lines) for block in blocks]}


def render_yaml(blocks: Sequence[DuplicateBlock]) -> str:
    """Render the report as YAML with literal ``content`` blocks."""
    return yaml.dump(
        blocks_to_payload(blocks),
        Dumper=ReportDumper,
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
        width=1_000_000,
    )


def render_json(blocks: Sequence[DuplicateBlock]) -> str:
    """Render the report as JSON with one list entry per content line."""
    payload = blocks_to_payload(blocks, content_as_lines=True)
    return json.dumps(payload, indent=2, sort_keys=True) + "\n"


RENDERERS = {
    "yaml": render_yaml,
    "json": render_json,
}


def render_report(blocks: Sequence[DuplicateBlock], output_format: str) -> str:
    """Render blocks with the named format."""
    renderer = RENDERERS.get(output_format)
    if renderer is None:
        raise ValueError(f"Unknown report format: {output_format}")
    return renderer(blocks)
