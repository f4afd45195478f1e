"""Pipeline configuration and environment setup."""

import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path

import yaml

type ConfigDict = dict[str, str | int | bool | list[str]]

THREE_MONTH_MODES = ("fixed_days", "calendar_months")
OUTPUT_FORMATS = ("csv", "json", "parquet", "excel")


@dataclass(frozen=True)
class AnalysisConfig:
    summary_months: int = 6
    rolling_months: int = 6
    weekly_trend_weeks: int = 12
    # "fixed_days" keeps the 3 x 30-day approximation, "calendar_months"
    # subtracts three calendar months like the 1- and 6-month windows.
    three_month_window: str = "fixed_days"
    three_month_days: int = 90
    create_column: str = "CreateDate"
    resolve_column: str = "ResolvedDate"
    output_format: str = "csv"
    log_level: str = "INFO"

    @property
    def date_columns(self) -> tuple[str, str]:
        return self.create_column, self.resolve_column


def load_analysis_config(profile: str = "default") -> AnalysisConfig:
    match profile:
        case "default":
            return AnalysisConfig()
        case "calendar":
            return AnalysisConfig(three_month_window="calendar_months")
        case "verbose":
            return AnalysisConfig(log_level="DEBUG")
        case other:
            raise ValueError(f"Unknown profile: {other}")


def apply_overrides(config: AnalysisConfig, overrides: ConfigDict) -> AnalysisConfig:
    """Return a copy of ``config`` with the given keys replaced.

    Unknown keys and unsupported enum-like values are rejected so a typo in a
    config file fails loudly instead of silently running with defaults.
    """
    known = {f.name for f in fields(AnalysisConfig)}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise ValueError(f"Unknown config keys: {', '.join(unknown)}")

    updated = replace(config, **overrides)

    if updated.three_month_window not in THREE_MONTH_MODES:
        raise ValueError(f"Unsupported three_month_window: {updated.three_month_window}")
    if updated.output_format not in OUTPUT_FORMATS:
        raise ValueError(f"Unsupported output format: {updated.output_format}")
    if updated.summary_months < 1 or updated.rolling_months < 1:
        raise ValueError("Month windows must be at least 1")
    return updated


def load_config_file(path: str | Path, profile: str = "default") -> AnalysisConfig:
    """Load overrides from a YAML or TOML file on top of a profile."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    match path.suffix:
        case ".yaml" | ".yml":
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        case ".toml":
            with open(path, "rb") as f:
                data = tomllib.load(f)
            data = data.get("tool", {}).get("ticket_pipeline", data)
        case ext:
            raise ValueError(f"Unsupported config format: {ext}")

    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")
    return apply_overrides(load_analysis_config(profile), data)


def get_env_config() -> ConfigDict:
    """Read pipeline config from pyproject.toml."""
    pyproject = Path(__file__).parent.parent / "pyproject.toml"
    if not pyproject.exists():
        return {}
    with open(pyproject, "rb") as f:
        data = tomllib.load(f)
    return data.get("tool", {}).get("ticket_pipeline", {})
