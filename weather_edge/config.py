"""
Configuration loading for the weather edge service.

Static settings come from config/api.yaml, environment variables (optionally
loaded from a .env file) override them.
"""
import copy
import os
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(__file__), "../config/api.yaml")

INDEX_POLICIES = ("exact", "nearest_hour")
KV_BACKENDS = ("memory", "database")

DEFAULTS: Dict[str, Any] = {
    "api": {
        "title": "Fukuoka Weather Edge",
        "version": "1.0.0",
        "description": "Read-through cached current weather for Fukuoka",
    },
    "upstream": {
        "base_url": "https://api.open-meteo.com/v1/forecast",
        "timeout": 30,
        "latitude": 33.5902,
        "longitude": 130.4017,
        "index_policy": "exact",
    },
    "cache": {
        "backend": "memory",
        "key": "weather_fukuoka",
        "ttl_seconds": 4 * 60 * 60,
    },
    "scheduler": {
        "enabled": True,
        "interval_seconds": 4 * 60 * 60,
        "run_on_startup": False,
    },
    "logging": {
        "level": "INFO",
        "file": None,
        "console": True,
    },
}


class ConfigError(Exception):
    """Raised when the service configuration is invalid."""


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _env_flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_yaml(file_path: str) -> Dict[str, Any]:
    """
    Load YAML configuration file.

    Args:
        file_path: Path to YAML file

    Returns:
        Dictionary with configuration (empty if the file is blank)
    """
    with open(file_path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def load_config(config_path: Optional[str] = None, env: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """
    Build the effective service configuration.

    Args:
        config_path: YAML file to read, defaults to config/api.yaml
        env: Environment mapping, defaults to os.environ after loading .env

    Returns:
        dict: Merged configuration

    Raises:
        ConfigError: If a setting has an unsupported value
    """
    if env is None:
        load_dotenv()
        env = dict(os.environ)

    path = config_path or DEFAULT_CONFIG_PATH
    file_config: Dict[str, Any] = {}
    if os.path.exists(path):
        try:
            file_config = load_yaml(path)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid configuration file {path}: {e}") from e

    config = _merge(DEFAULTS, file_config)

    if env.get("API_URL"):
        config["upstream"]["base_url"] = env["API_URL"]
    if env.get("KV_BACKEND"):
        config["cache"]["backend"] = env["KV_BACKEND"]
    if env.get("WEATHER_INDEX_POLICY"):
        config["upstream"]["index_policy"] = env["WEATHER_INDEX_POLICY"]
    if env.get("SCHEDULER_ENABLED"):
        config["scheduler"]["enabled"] = _env_flag(env["SCHEDULER_ENABLED"])
    if env.get("LOG_LEVEL"):
        config["logging"]["level"] = env["LOG_LEVEL"]

    if config["upstream"]["index_policy"] not in INDEX_POLICIES:
        raise ConfigError(
            f"Unknown index policy '{config['upstream']['index_policy']}', "
            f"expected one of {', '.join(INDEX_POLICIES)}"
        )
    if config["cache"]["backend"] not in KV_BACKENDS:
        raise ConfigError(
            f"Unknown KV backend '{config['cache']['backend']}', "
            f"expected one of {', '.join(KV_BACKENDS)}"
        )
    if not config["upstream"].get("base_url"):
        raise ConfigError("API_URL is not configured")

    return config
