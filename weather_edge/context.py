"""
Injected bindings shared by the request and timer entry points.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from weather_edge.services.kv_store import KVStore, create_kv_store

CACHE_KEY = "weather_fukuoka"
CACHE_TTL = 4 * 60 * 60  # 4 hours in seconds


@dataclass
class WorkerEnv:
    """
    Everything an entry point needs from the outside world.

    Attributes:
        api_url: Base URL of the upstream forecast endpoint
        cache: Key-value store holding the cached record
        http_client: Shared client for upstream calls; one is opened per call when None
        timeout: Upstream request timeout in seconds
        latitude: Latitude of the served location
        longitude: Longitude of the served location
        index_policy: 'exact' or 'nearest_hour'
        cache_key: Key the record is stored under
        cache_ttl: Expiration in seconds applied on every write
    """

    api_url: str
    cache: KVStore
    http_client: Optional[httpx.AsyncClient] = None
    timeout: float = 30
    latitude: float = 33.5902
    longitude: float = 130.4017
    index_policy: str = "exact"
    cache_key: str = CACHE_KEY
    cache_ttl: int = CACHE_TTL

    @classmethod
    def from_config(cls, config: Dict[str, Any], cache: Optional[KVStore] = None) -> "WorkerEnv":
        """Build the environment from a loaded configuration dict."""
        upstream = config["upstream"]
        cache_config = config["cache"]
        return cls(
            api_url=upstream["base_url"],
            cache=cache if cache is not None else create_kv_store(cache_config["backend"]),
            timeout=upstream.get("timeout", 30),
            latitude=upstream.get("latitude", 33.5902),
            longitude=upstream.get("longitude", 130.4017),
            index_policy=upstream.get("index_policy", "exact"),
            cache_key=cache_config.get("key", CACHE_KEY),
            cache_ttl=cache_config.get("ttl_seconds", CACHE_TTL),
        )
