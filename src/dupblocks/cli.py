"""Command-line entrypoint for duplicate block detection."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import TextIO

from dupblocks.config import (
    OUTPUT_FORMATS,
    AppConfig,
    CliOverrides,
    ConfigError,
    DiagnosticsConfig,
    load_effective_config,
)
from dupblocks.detect import find_repeated_blocks
from dupblocks.logging import (
    Diagnostics,
    DiagnosticSink,
    JsonlDiagnosticsLogger,
    StreamDiagnosticsWriter,
)
from dupblocks.report import render_report

EXIT_OK = 0
EXIT_USAGE = 2


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for a detection run."""
    parser = argparse.ArgumentParser(
        prog="dupblocks",
        description="Report repeated blocks of lines across files matched by glob patterns.",
        epilog='Example: dupblocks --ignore-indentation --min-lines 9 "./foo/**/*.cpp" "*.c"',
    )
    parser.add_argument("patterns", nargs="*", metavar="PATTERN")
    parser.add_argument("--min-lines", type=int, required=False, default=None)
    parser.add_argument(
        "--ignore-indentation", action="store_true", required=False, default=None
    )
    parser.add_argument("--debug", action="store_true", required=False, default=None)
    parser.add_argument("--format", choices=OUTPUT_FORMATS, required=False, default=None)
    parser.add_argument("--config", required=False, default=None)
    parser.add_argument("--diagnostics-log", required=False, default=None)
    return parser


def build_diagnostics(config: DiagnosticsConfig, stream: TextIO) -> Diagnostics:
    """Wire configured sinks into one diagnostics dispatcher."""
    sinks: list[DiagnosticSink] = []
    if config.enabled:
        sinks.append(StreamDiagnosticsWriter(stream))
    if config.log_path is not None:
        try:
            sinks.append(JsonlDiagnosticsLogger(config.log_path))
        except OSError as error:
            raise ConfigError(
                f"Cannot open diagnostics log '{config.log_path}': {error.strerror or error}"
            ) from error
    return Diagnostics(sinks)


def run(config: AppConfig, out_stream: TextIO, diagnostics: Diagnostics) -> int:
    """Detect duplicates for a validated config and write the report."""
    detect = config.detect
    diagnostics.emit("config", f"min_lines={config.min_lines}", **config.to_public_dict())
    diagnostics.emit(
        "config", f"ignore_indentation={'true' if detect.ignore_indentation else 'false'}"
    )
    diagnostics.emit("config", "patterns: " + " ".join(detect.patterns))

    blocks = find_repeated_blocks(
        detect.patterns,
        min_lines=config.min_lines,
        ignore_indentation=detect.ignore_indentation,
        diagnostics=diagnostics,
    )
    diagnostics.emit("report", f"blocks after sort: {len(blocks)}", blocks=len(blocks))
    out_stream.write(render_report(blocks, config.report.format))
    out_stream.flush()
    return EXIT_OK


def main(
    argv: list[str] | None = None,
    out_stream: TextIO | None = None,
    err_stream: TextIO | None = None,
) -> int:
    """Entrypoint for the dupblocks command."""
    out = out_stream or sys.stdout
    err = err_stream or sys.stderr
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    overrides = CliOverrides(
        min_lines=args.min_lines,
        ignore_indentation=args.ignore_indentation,
        patterns=tuple(args.patterns),
        format=args.format,
        diagnostics_enabled=args.debug,
        diagnostics_log_path=(
            Path(args.diagnostics_log) if args.diagnostics_log is not None else None
        ),
    )
    try:
        config = load_effective_config(
            overrides,
            config_path=Path(args.config) if args.config is not None else None,
        )
        diagnostics = build_diagnostics(config.diagnostics, err)
    except ConfigError as error:
        err.write(parser.format_usage())
        err.write(f"error: {error}\n")
        return EXIT_USAGE
    return run(config, out, diagnostics)


if __name__ == "__main__":
    raise SystemExit(main())
