from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

"""Config loader.

Responsibilities:
- Load the YAML config file (every key optional)
- Validate it against the packaged JSON schema (no unknown keys)
- Apply defaults
- Apply environment overrides (SHEET2WORD_OUTPUT_DIR)
"""

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/sheet2word.yml")
OUTPUT_DIR_ENV = "SHEET2WORD_OUTPUT_DIR"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class ConverterConfig:
    output_directory: str = "./output"
    title: str | None = None  # None -> each document is titled by its file name
    transpose: bool = True
    split_columns: bool = False
    archive_name: str = "converted_files.zip"
    archive_folder: str = "converted_files"
    default_name: str = "converted"
    delivery_delay_seconds: float = 0.3


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing / broken, or data violates it
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _apply_env(cfg: ConverterConfig) -> ConverterConfig:
    out_dir = os.getenv(OUTPUT_DIR_ENV)
    if out_dir:
        cfg = replace(cfg, output_directory=out_dir)
    return cfg


def load_config(path: Path | None = None, *, required: bool = False) -> ConverterConfig:
    """Load configuration.

    Args:
        path: YAML file; defaults to ``config/sheet2word.yml``
        required: raise ConfigError when the file does not exist
            (otherwise defaults are used)
    """
    path = path if path is not None else DEFAULT_CONFIG_PATH
    if not path.exists():
        if required:
            raise ConfigError(f"config file not found: {path}")
        return _apply_env(ConverterConfig())
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")

    _validate_config_schema(data)

    defaults = ConverterConfig()
    cfg = ConverterConfig(
        output_directory=data.get("output_directory", defaults.output_directory),
        title=data.get("title", defaults.title),
        transpose=data.get("transpose", defaults.transpose),
        split_columns=data.get("split_columns", defaults.split_columns),
        archive_name=data.get("archive_name", defaults.archive_name),
        archive_folder=data.get("archive_folder", defaults.archive_folder),
        default_name=data.get("default_name", defaults.default_name),
        delivery_delay_seconds=float(
            data.get("delivery_delay_seconds", defaults.delivery_delay_seconds)
        ),
    )
    return _apply_env(cfg)
