#!/usr/bin/env python3
"""Run configuration for the Bible fixer.

Settings come from an optional YAML file and are overridden by CLI flags.
Example ``fixer.yaml``::

    input_dir: ../Converted
    output_dir: ../Fixed
    logs_dir: logs
    output_prefix: fixed_
    extensions: [.json, .fsb]
    pretty_print: false
    write_log: true
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields, replace

import yaml


DEFAULT_EXTENSIONS = [".json", ".fsb"]


class ConfigError(Exception):
    pass


@dataclass
class FixConfig:
    input_dir: str = "../Converted"
    output_dir: str = "../Fixed"
    logs_dir: str = "logs"
    extensions: list[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    output_prefix: str = "fixed_"
    dry_run: bool = False         # Analyze only, write no output documents
    pretty_print: bool = False    # Indented instead of compact JSON output
    write_log: bool = False       # Persist report lines to a timestamped log file

    def with_overrides(self, **overrides) -> "FixConfig":
        """Copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


_FIELD_TYPES = {
    "input_dir": str,
    "output_dir": str,
    "logs_dir": str,
    "extensions": list,
    "output_prefix": str,
    "dry_run": bool,
    "pretty_print": bool,
    "write_log": bool,
}


def config_from_mapping(data: dict) -> FixConfig:
    known = {f.name for f in fields(FixConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown config key(s): {', '.join(unknown)}")

    for key, value in data.items():
        expected = _FIELD_TYPES[key]
        if not isinstance(value, expected):
            raise ConfigError(f"Config key '{key}' must be {expected.__name__}, got {type(value).__name__}")

    exts = data.get("extensions")
    if exts is not None:
        if not all(isinstance(e, str) and e for e in exts):
            raise ConfigError("Config key 'extensions' must be a list of non-empty strings")
        data = {**data, "extensions": [e if e.startswith(".") else f".{e}" for e in exts]}

    return FixConfig(**data)


def load_config(path: str | os.PathLike) -> FixConfig:
    """Load a YAML config file. An empty file yields the defaults."""
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return FixConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must be a mapping, got {type(data).__name__}")
    return config_from_mapping(data)
