"""Centralized configuration loading for twelvefactor.

Settings are read from config.json, with environment variable fallbacks and
default values. A missing or unreadable config.json behaves like an empty one.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config.json"


def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> Dict[str, Any]:
    """Load configuration from JSON file.

    Args:
        config_path: Path to config.json file (default: "config.json")

    Returns:
        Configuration dictionary, or empty dict if file not found/invalid
    """
    path = Path(config_path)

    if not path.exists():
        return {}

    try:
        with open(path, "r") as f:
            data = json.load(f)
    except (json.JSONDecodeError, IOError) as e:
        logger.warning(f"Ignoring unreadable config file {path}: {e}")
        return {}

    if not isinstance(data, dict):
        logger.warning(f"Ignoring config file {path}: top level is not an object")
        return {}
    return data


def get_config_value(
    keys: List[str], default: Any = None, config: Optional[Dict[str, Any]] = None
) -> Any:
    """Get nested configuration value with fallback to environment variable.

    Keys like ["ecs", "cluster"] are looked up in config.json first, then in
    the environment as ECS_CLUSTER.

    Args:
        keys: List of keys to traverse (e.g., ["ecs", "cluster"])
        default: Default value if key not found
        config: Optional config dict (uses load_config() if not provided)

    Returns:
        Configuration value, or default if not found
    """
    if config is None:
        config = load_config()

    value: Any = config
    for key in keys:
        if isinstance(value, dict):
            value = value.get(key)
            if value is None:
                break
        else:
            value = None
            break

    if value is not None:
        return value

    env_key = "_".join(k.upper() for k in keys)
    env_value = os.environ.get(env_key)
    if env_value is not None:
        return env_value

    return default


def get_int_config_value(
    keys: List[str], default: int, config: Optional[Dict[str, Any]] = None
) -> int:
    """Like get_config_value, but coerces the result to int.

    Environment variables always arrive as strings, so numeric settings go
    through here.

    Raises:
        ValueError: If the configured value is not an integer
    """
    value = get_config_value(keys, default=default, config=config)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(
            f"Configuration value {'.'.join(keys)} must be an integer, got {value!r}"
        )
