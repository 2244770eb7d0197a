"""
Dependency injection for FastAPI.
Builds the configuration and the injected worker environment once per process.
"""
from functools import lru_cache
from typing import Any, Dict

from weather_edge.config import load_config
from weather_edge.context import WorkerEnv


@lru_cache()
def get_config() -> Dict[str, Any]:
    """
    Load configuration once and cache it in memory.

    Raises:
        ConfigError: If the configuration is invalid
    """
    return load_config()


@lru_cache()
def get_env() -> WorkerEnv:
    """
    Build the worker environment shared by the HTTP route and the scheduler.

    The KV store lives as long as the process so the memory backend keeps
    its contents between requests.
    """
    return WorkerEnv.from_config(get_config())
