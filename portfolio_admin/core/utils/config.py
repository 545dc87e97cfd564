"""
Configuration Loading Utilities.
"""

from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

DEFAULT_CONFIG_PATH = "configs/default_config.yaml"

REQUIRED_SECTIONS = ("api", "auth", "store", "reorder")

# Environment variable → (section, key, converter)
ENV_OVERRIDES: dict[str, tuple[str, str, type]] = {
    "PORTFOLIO_API_URL": ("api", "base_url", str),
    "PORTFOLIO_API_TIMEOUT": ("api", "timeout", float),
    "PORTFOLIO_TOKEN_FILE": ("auth", "token_file", str),
    "PORTFOLIO_SNAPSHOT_FILE": ("store", "snapshot_file", str),
}


def get_default_config() -> dict[str, Any]:
    """
    Get default configuration dictionary.

    Returns:
        Default configuration
    """
    return {
        "api": {
            "base_url": "http://localhost:5000",
            "timeout": 10.0,
        },
        "auth": {
            "token_file": "~/.portfolio_admin/token",
        },
        "store": {
            "snapshot_file": "~/.portfolio_admin/projects.json",
        },
        "reorder": {
            "send_full_record": False,
        },
    }


def _apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    for var, (section, key, convert) in ENV_OVERRIDES.items():
        value = os.getenv(var)
        if value:
            try:
                config.setdefault(section, {})[key] = convert(value)
            except ValueError as exc:
                raise ValueError(f"Invalid value for {var}: {value!r}") from exc
    return config


def load_config(config_path: str | None = None) -> dict[str, Any]:
    """
    Load configuration from YAML file, then apply environment overrides.

    Without a path the built-in defaults are used. A ``.env`` file in the
    working directory is read first.

    Args:
        config_path: Path to configuration file

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If config file is invalid
    """
    load_dotenv()

    if config_path is None:
        config = get_default_config()
    else:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}

    # Missing sections fall back to the defaults for that section
    defaults = get_default_config()
    for section in REQUIRED_SECTIONS:
        if not isinstance(config.get(section), dict):
            config[section] = copy.deepcopy(defaults[section])

    return _apply_env_overrides(config)


def save_config(config: dict[str, Any], config_path: str) -> None:
    """
    Save configuration to YAML file.

    Args:
        config: Configuration dictionary
        config_path: Output path
    """
    config_path = Path(config_path)
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(config, f, default_flow_style=False, sort_keys=False)
