"""Suitetree configuration management.

Handles:
- Label names that define the grouping levels of the tree
- Placeholder used for records missing a label
- Report file names
- Precedence: CLI > config file (YAML) > environment variables > defaults
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Mapping

import yaml

from suitetree.errors import ConfigError, ErrorCode

DEFAULT_LABELS = ("parentSuite", "suite", "subSuite")

# Keys whose YAML values must be plain strings.
STRING_FIELDS = ("placeholder", "tree_name", "data_dir", "widgets_dir", "json_file", "csv_file")


@dataclass
class Config:
    """Suitetree runtime configuration."""

    labels: list[str] = field(default_factory=lambda: list(DEFAULT_LABELS))
    placeholder: str = "unknown"
    tree_name: str = "suites"
    data_dir: str = "data"
    widgets_dir: str = "widgets"
    json_file: str = "suites.json"
    csv_file: str = "suites.csv"
    config_file_path: Path | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Config:
        """Create Config from a dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)} - {"config_file_path"}
        values = {k: v for k, v in data.items() if k in known}
        if "labels" in values:
            values["labels"] = _parse_labels(values["labels"])
        for key in STRING_FIELDS:
            if key in values and not isinstance(values[key], str):
                raise ConfigError(
                    ErrorCode.E002,
                    f"{key} must be a string, got {type(values[key]).__name__}",
                )
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        return {
            "labels": list(self.labels),
            "placeholder": self.placeholder,
            "tree_name": self.tree_name,
            "data_dir": self.data_dir,
            "widgets_dir": self.widgets_dir,
            "json_file": self.json_file,
            "csv_file": self.csv_file,
        }


def _parse_labels(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [v.strip() for v in value.split(",") if v.strip()]
    if isinstance(value, (list, tuple)):
        return [str(v).strip() for v in value if str(v).strip()]
    raise ConfigError(ErrorCode.E002, f"labels must be a list or comma separated string, got {type(value).__name__}")


def load_config_file(path: Path) -> dict[str, Any]:
    """Read a YAML config file into a dictionary."""
    if not path.exists():
        raise ConfigError(ErrorCode.E001, str(path))
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(ErrorCode.E002, f"{path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(ErrorCode.E002, f"{path}: top level must be a mapping")
    return data


def load_config(
    config_file: str | Path | None = None,
    env: Mapping[str, str] | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> Config:
    """Load configuration with precedence: CLI > config file > env vars.

    Args:
        config_file: Path to a YAML config file
        env: Environment mapping (defaults to os.environ)
        cli_overrides: Values given on the command line; None entries are ignored

    Returns:
        Loaded Config instance
    """
    env = os.environ if env is None else env
    merged: dict[str, Any] = {}

    # Step 1: environment variables
    if "SUITETREE_LABELS" in env:
        merged["labels"] = env["SUITETREE_LABELS"]
    if env.get("SUITETREE_PLACEHOLDER"):
        merged["placeholder"] = env["SUITETREE_PLACEHOLDER"]

    # Step 2: config file
    config_file_path: Path | None = None
    if config_file:
        config_file_path = Path(config_file)
        merged.update(load_config_file(config_file_path))

    # Step 3: CLI
    for key, value in (cli_overrides or {}).items():
        if value is not None:
            merged[key] = value

    config = Config.from_dict(merged)
    config.config_file_path = config_file_path
    return config


# Global config instance (set by CLI)
_config: Config | None = None


def get_config() -> Config:
    """Get the current configuration, loading defaults on first use."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def set_config(config: Config | None) -> None:
    """Set the global configuration."""
    global _config
    _config = config
