from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from fcrgen.models.config_models import (
    DEFAULT_DELIMITERS,
    DEFAULT_MATERIAL_DESCRIPTIONS,
    AppConfig,
    DatabaseConfig,
    FcrSettings,
    MaterialType,
    PoSettings,
    TemplateVariant,
)

"""Config loader.

Responsibilities:
- Load YAML config (default config/fcr.yml)
- Validate against the bundled JSON schema (config_schema.json)
- Apply defaults for every missing key (template variant, material
  descriptions, delimiter candidates, output directory)

Escaped tab in YAML ("\\t") is accepted as the tab delimiter.
"""

__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "load_config",
    "default_config",
]

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/fcr.yml")


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing or not JSON, or the config violates it
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


def _delimiters(raw: list[str] | None) -> tuple[str, ...]:
    if not raw:
        return DEFAULT_DELIMITERS
    return tuple("\t" if d == "\\t" else d for d in raw)


def default_config() -> AppConfig:
    """Configuration used when no config file is present."""
    return AppConfig()


def load_config(path: Path) -> AppConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)

    fcr_raw = data.get("fcr") or {}
    po_raw = data.get("po") or {}
    db_raw = data.get("database") or {}

    descriptions = dict(DEFAULT_MATERIAL_DESCRIPTIONS)
    for key, text in (po_raw.get("material_descriptions") or {}).items():
        descriptions[MaterialType(key)] = text

    return AppConfig(
        fcr=FcrSettings(
            template_variant=TemplateVariant(fcr_raw.get("template_variant", "porcelain")),
        ),
        po=PoSettings(material_descriptions=descriptions),
        delimiters=_delimiters(data.get("delimiters")),
        output_directory=data.get("output_directory", "./output"),
        database=DatabaseConfig(
            host=db_raw.get("host"),
            port=db_raw.get("port"),
            user=db_raw.get("user"),
            password=db_raw.get("password"),
            database=db_raw.get("database"),
            dsn=db_raw.get("dsn"),
        ),
    )
