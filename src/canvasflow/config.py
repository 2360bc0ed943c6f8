"""
Render configuration.

Settings can come from a YAML or JSON file, from environment variables and
from command-line flags. Precedence, lowest to highest:
defaults < config file < environment < command line.
"""

import json
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .errors import ConfigError
from .validator import validate_custom_colors, validate_direction

DEFAULT_DIRECTION = "TB"
ALLOWED_CONFIG_KEYS = {"direction", "colors", "log_level"}

DIRECTION_ENV_VAR = "CANVASFLOW_DIRECTION"


@dataclass(frozen=True)
class RenderConfig:
    direction: str = DEFAULT_DIRECTION
    colors: Dict[str, str] = field(default_factory=dict)
    log_level: Optional[str] = None

    def merged(
        self,
        direction: Optional[str] = None,
        colors: Optional[Mapping[Any, str]] = None,
        log_level: Optional[str] = None,
    ) -> "RenderConfig":
        """
        Return a copy with the given values layered on top.

        Color overrides merge per palette index; the result is re-validated.
        """
        merged_colors = dict(self.colors)
        if colors:
            merged_colors.update(validate_custom_colors(colors))
        return replace(
            self,
            direction=validate_direction(direction or self.direction),
            colors=validate_custom_colors(merged_colors),
            log_level=log_level or self.log_level,
        )


def _parse_config_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    text = path.read_text(encoding="utf-8")
    suffix = path.suffix.lower()
    try:
        if suffix in {".yaml", ".yml"}:
            data = yaml.safe_load(text) or {}
        elif suffix == ".json":
            data = json.loads(text)
        else:
            raise ConfigError(
                f"Unsupported config file type {suffix!r}: use .yaml, .yml or .json"
            )
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigError(f"Failed to parse config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("Top-level config must be an object")
    return data


def _normalize_config(data: Dict[str, Any]) -> Dict[str, Any]:
    unknown = sorted(set(data.keys()) - ALLOWED_CONFIG_KEYS)
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")

    normalized: Dict[str, Any] = {}
    if data.get("direction") is not None:
        normalized["direction"] = validate_direction(data["direction"])
    if data.get("colors") is not None:
        normalized["colors"] = validate_custom_colors(data["colors"])
    if data.get("log_level") is not None:
        if not isinstance(data["log_level"], str):
            raise ConfigError("Config field 'log_level' must be a string")
        normalized["log_level"] = data["log_level"]
    return normalized


def _env_str(name: str) -> Optional[str]:
    raw = os.getenv(name)
    if raw is None:
        return None
    raw = raw.strip()
    return raw or None


def load_render_config(path: Optional[Path] = None) -> RenderConfig:
    """
    Build a RenderConfig from an optional config file and the environment.

    Example YAML file::

        direction: LR
        colors:
          "1": "#ff0000"
        log_level: DEBUG

    Raises:
        ConfigError: If the file is missing, unparsable or has invalid values.
    """
    config = RenderConfig()
    if path is not None:
        config = replace(config, **_normalize_config(_parse_config_file(path)))

    env_direction = _env_str(DIRECTION_ENV_VAR)
    if env_direction:
        config = config.merged(direction=env_direction)
    return config
