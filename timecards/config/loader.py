from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

"""Config loader.

Responsibilities:
- Load YAML config (default: config/timecards.yml)
- Validate against config_schema.json (unknown keys rejected)
- Apply defaults for every key left out
- A missing *default* config file is not an error; ``load_config`` only fails
  for a path that was asked for explicitly
"""

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/timecards.yml")


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class ConvertConfig:
    output: str = "output.xlsx"  # used when no OUTPUT argument is given
    header_sheet: str = "Timecard_Header"
    detail_sheet: str = "Timecard_Detail"
    category: str = "2"  # Timecard_Detail CATEGORY (E)
    earnings_code: str = "HRLY"  # Timecard_Detail EARNDED (F)
    define_names: bool = True  # bless both sheets as named ranges


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against JSON schema.

    Raises:
        ConfigError: schema file missing / invalid, or data fails validation
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


def load_config(path: Path | None = None) -> ConvertConfig:
    """Load the converter config.

    ``path=None`` means the default location; if nothing is there the
    built-in defaults are returned.
    """
    if path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            return ConvertConfig()
        path = DEFAULT_CONFIG_PATH
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")

    _validate_config_schema(data)

    defaults = ConvertConfig()
    return ConvertConfig(
        output=data.get("output", defaults.output),
        header_sheet=data.get("header_sheet", defaults.header_sheet),
        detail_sheet=data.get("detail_sheet", defaults.detail_sheet),
        category=data.get("category", defaults.category),
        earnings_code=data.get("earnings_code", defaults.earnings_code),
        define_names=data.get("define_names", defaults.define_names),
    )
