"""YAML config loader with environment overrides and dotted-key lookup."""

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from glasscast.config.schema import GlasscastConfig

logger = logging.getLogger(__name__)

# env var -> (section, field)
ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "OPENWEATHER_API_KEY": ("weather", "api_key"),
    "SUPABASE_URL": ("auth", "url"),
    "SUPABASE_ANON_KEY": ("auth", "anon_key"),
}


def load_config(path: str | Path, env: dict[str, str] | None = None) -> GlasscastConfig:
    """Load and validate config from a YAML file.

    A missing or empty file yields the defaults. Secrets are taken from the
    environment and win over anything in the YAML.
    """
    path = Path(path)
    raw: dict[str, Any] = {}
    if path.exists():
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
    else:
        logger.info("Config file %s not found, using defaults", path)

    if env is None:
        env = dict(os.environ)
    for var, (section, field) in ENV_OVERRIDES.items():
        value = env.get(var)
        if value:
            # An empty YAML section loads as None.
            section_data = raw.get(section) or {}
            section_data[field] = value
            raw[section] = section_data

    return GlasscastConfig(**raw)


def get_config_value(config: GlasscastConfig, dotted_key: str) -> Any:
    """Get a config value by dotted key path. E.g. 'search.debounce_ms'."""
    obj: Any = config
    for part in dotted_key.split("."):
        if isinstance(obj, dict):
            obj = obj[part]
        elif hasattr(obj, part):
            obj = getattr(obj, part)
        else:
            raise KeyError(f"Config key not found: {dotted_key}")
    return obj
