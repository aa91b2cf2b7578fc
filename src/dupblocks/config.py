"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path

CONFIG_FILE_NAME = "dupblocks.toml"
OUTPUT_FORMATS = ("yaml", "json")
DEFAULT_OUTPUT_FORMAT = "yaml"


class ConfigError(ValueError):
    """Raised for invalid settings, before any file is read."""


@dataclass(slots=True, frozen=True)
class DetectConfig:
    """Detection settings."""

    min_lines: int | None
    ignore_indentation: bool
    patterns: tuple[str, ...]


@dataclass(slots=True, frozen=True)
class ReportConfig:
    """Report rendering settings."""

    format: str


@dataclass(slots=True, frozen=True)
class DiagnosticsConfig:
    """Diagnostics toggles."""

    enabled: bool
    log_path: Path | None


@dataclass(slots=True, frozen=True)
class AppConfig:
    """Fully merged run configuration."""

    detect: DetectConfig
    report: ReportConfig
    diagnostics: DiagnosticsConfig

    @property
    def min_lines(self) -> int:
        """Return the validated minimum block length."""
        if self.detect.min_lines is None:
            raise ConfigError("Config field 'detect.min_lines' is required.")
        return self.detect.min_lines

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable config snapshot for diagnostics."""
        return {
            "detect": {
                "min_lines": self.detect.min_lines,
                "ignore_indentation": self.detect.ignore_indentation,
                "patterns": list(self.detect.patterns),
            },
            "report": {
                "format": self.report.format,
            },
            "diagnostics": {
                "enabled": self.diagnostics.enabled,
                "log_path": (
                    str(self.diagnostics.log_path)
                    if self.diagnostics.log_path is not None
                    else None
                ),
            },
        }


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional command-line values applied at highest precedence."""

    min_lines: int | None = None
    ignore_indentation: bool | None = None
    patterns: tuple[str, ...] = ()
    format: str | None = None
    diagnostics_enabled: bool | None = None
    diagnostics_log_path: Path | None = None


def default_config() -> AppConfig:
    """Build the default configuration."""
    return AppConfig(
        detect=DetectConfig(min_lines=None, ignore_indentation=False, patterns=()),
        report=ReportConfig(format=DEFAULT_OUTPUT_FORMAT),
        diagnostics=DiagnosticsConfig(enabled=False, log_path=None),
    )


def load_config_file(path: Path) -> dict[str, object]:
    """Load a TOML config file into a raw table."""
    try:
        with path.open("rb") as handle:
            payload = tomllib.load(handle)
    except OSError as error:
        raise ConfigError(f"Cannot read config file '{path}': {error.strerror or error}") from error
    except tomllib.TOMLDecodeError as error:
        raise ConfigError(f"Config file '{path}' is not valid TOML: {error}") from error
    return payload


def discover_config_file(working_dir: Path) -> Path | None:
    """Return ``dupblocks.toml`` in the working directory when present."""
    candidate = working_dir / CONFIG_FILE_NAME
    if candidate.is_file():
        return candidate
    return None


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ConfigError(f"Config section '{key}' must be a table.")
    return value


def _tuple_of_strings(value: object, section: str, field: str) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise ConfigError(f"Config field '{section}.{field}' must be a list of strings.")
    output: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ConfigError(f"Config field '{section}.{field}' must contain only strings.")
        output.append(item)
    return tuple(output)


def _optional_bool(value: object, name: str, default: bool) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ConfigError(f"Config field '{name}' must be a boolean.")
    return value


def _optional_positive_int(value: object, name: str, default: int | None) -> int | None:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigError(f"Config field '{name}' must be a positive integer.")
    return value


def _optional_format(value: object, name: str, default: str) -> str:
    if value is None:
        return default
    if not isinstance(value, str) or value not in OUTPUT_FORMATS:
        allowed = ", ".join(OUTPUT_FORMATS)
        raise ConfigError(f"Config field '{name}' must be one of: {allowed}.")
    return value


def merge_config(
    base: AppConfig,
    file_payload: dict[str, object],
    overrides: CliOverrides,
    config_dir: Path | None = None,
) -> AppConfig:
    """Merge defaults, config file, then command-line overrides.

    A relative ``diagnostics.log_path`` from the file is anchored at
    ``config_dir``; command-line paths stay relative to the working directory.
    """
    detect_payload = _get_table(file_payload, "detect")
    report_payload = _get_table(file_payload, "report")
    diagnostics_payload = _get_table(file_payload, "diagnostics")

    patterns = base.detect.patterns
    if "patterns" in detect_payload:
        patterns = _tuple_of_strings(detect_payload["patterns"], "detect", "patterns")

    log_path = base.diagnostics.log_path
    if "log_path" in diagnostics_payload:
        raw_log_path = diagnostics_payload["log_path"]
        if not isinstance(raw_log_path, str) or not raw_log_path:
            raise ConfigError("Config field 'diagnostics.log_path' must be a non-empty string.")
        log_path = Path(raw_log_path)
        if config_dir is not None and not log_path.is_absolute():
            log_path = config_dir / log_path

    merged = AppConfig(
        detect=DetectConfig(
            min_lines=_optional_positive_int(
                detect_payload.get("min_lines"), "detect.min_lines", base.detect.min_lines
            ),
            ignore_indentation=_optional_bool(
                detect_payload.get("ignore_indentation"),
                "detect.ignore_indentation",
                base.detect.ignore_indentation,
            ),
            patterns=patterns,
        ),
        report=ReportConfig(
            format=_optional_format(
                report_payload.get("format"), "report.format", base.report.format
            )
        ),
        diagnostics=DiagnosticsConfig(
            enabled=_optional_bool(
                diagnostics_payload.get("enabled"),
                "diagnostics.enabled",
                base.diagnostics.enabled,
            ),
            log_path=log_path,
        ),
    )
    return apply_cli_overrides(merged, overrides)


def apply_cli_overrides(config: AppConfig, overrides: CliOverrides) -> AppConfig:
    """Apply command-line overrides at highest precedence."""
    return AppConfig(
        detect=DetectConfig(
            min_lines=_optional_positive_int(
                overrides.min_lines, "overrides.min_lines", config.detect.min_lines
            ),
            ignore_indentation=(
                overrides.ignore_indentation
                if overrides.ignore_indentation is not None
                else config.detect.ignore_indentation
            ),
            patterns=overrides.patterns or config.detect.patterns,
        ),
        report=ReportConfig(
            format=_optional_format(overrides.format, "overrides.format", config.report.format)
        ),
        diagnostics=DiagnosticsConfig(
            enabled=(
                overrides.diagnostics_enabled
                if overrides.diagnostics_enabled is not None
                else config.diagnostics.enabled
            ),
            log_path=overrides.diagnostics_log_path or config.diagnostics.log_path,
        ),
    )


def validate_config(config: AppConfig) -> AppConfig:
    """Reject configurations that cannot start a run."""
    if config.detect.min_lines is None:
        raise ConfigError("Config field 'detect.min_lines' is required.")
    if not config.detect.patterns:
        raise ConfigError("At least one file pattern is required.")
    if any(not pattern.strip() for pattern in config.detect.patterns):
        raise ConfigError("File patterns must be non-empty strings.")
    return config


def load_effective_config(
    overrides: CliOverrides | None = None,
    config_path: Path | None = None,
    working_dir: Path | None = None,
) -> AppConfig:
    """Load effective config using merge order defaults -> config file -> overrides."""
    source = config_path or discover_config_file(working_dir or Path.cwd())
    payload = load_config_file(source) if source is not None else {}
    merged = merge_config(
        default_config(),
        payload,
        overrides or CliOverrides(),
        config_dir=source.parent if source is not None else None,
    )
    return validate_config(merged)
