"""
Shared test fixtures for the weather edge test suite.

Provides:
- a dict-backed FakeKVStore that records every put
- a scripted upstream built on httpx.MockTransport
- a WorkerEnv wired to both, and an async client bound to the FastAPI app
"""

import os
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

# Ensure test env vars before any app imports
os.environ.setdefault("API_URL", "https://api.open-meteo.com/v1/forecast")
os.environ.setdefault("KV_BACKEND", "memory")
os.environ.setdefault("SCHEDULER_ENABLED", "false")

from weather_edge.context import WorkerEnv  # noqa: E402
from weather_edge.services.kv_store import KVStore  # noqa: E402

API_URL = "https://api.open-meteo.com/v1/forecast"


# ---------------------------------------------------------------------------
# FakeKVStore: dict-backed, records writes
# ---------------------------------------------------------------------------

class FakeKVStore(KVStore):
    """
    Minimal KV fake. Set fail_get / fail_put to simulate store outages.
    """

    def __init__(self) -> None:
        self.store: Dict[str, str] = {}
        self.gets: List[str] = []
        self.puts: List[Tuple[str, str, Optional[int]]] = []
        self.fail_get = False
        self.fail_put = False

    async def get(self, key: str) -> Optional[str]:
        self.gets.append(key)
        if self.fail_get:
            raise RuntimeError("KV read failed")
        return self.store.get(key)

    async def put(self, key: str, value: str, expiration_ttl: Optional[int] = None) -> None:
        self.puts.append((key, value, expiration_ttl))
        if self.fail_put:
            raise RuntimeError("KV write failed")
        self.store[key] = value


# ---------------------------------------------------------------------------
# Scripted upstream
# ---------------------------------------------------------------------------

class FakeUpstream:
    """
    Serves one canned response per call and remembers the requests it saw.
    """

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.status_code = 200
        self.payload: Any = None
        self.error: Optional[Exception] = None
        self.raw_body: Optional[bytes] = None

    def respond(self, payload: Any = None, status_code: int = 200) -> None:
        self.payload = payload
        self.status_code = status_code

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.raw_body is not None:
            return httpx.Response(self.status_code, content=self.raw_body)
        return httpx.Response(self.status_code, json=self.payload)

    @property
    def calls(self) -> int:
        return len(self.requests)


def make_forecast(
    temperature: float = 23.1,
    current_time: str = "2025-06-26T12:00",
    times: Optional[List[str]] = None,
    precipitation: Optional[List[Any]] = None,
    cloudcover: Optional[List[Any]] = None,
) -> Dict[str, Any]:
    """Factory for Open-Meteo forecast payloads."""
    return {
        "latitude": 33.6,
        "longitude": 130.4,
        "current_weather": {
            "temperature": temperature,
            "time": current_time,
        },
        "hourly": {
            "time": times if times is not None else ["2025-06-26T12:00", "2025-06-26T13:00"],
            "precipitation": precipitation if precipitation is not None else [0.1, 0.2],
            "cloudcover": cloudcover if cloudcover is not None else [25, 35],
        },
    }


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def kv() -> FakeKVStore:
    return FakeKVStore()


@pytest.fixture
def upstream() -> FakeUpstream:
    fake = FakeUpstream()
    fake.respond(make_forecast())
    return fake


@pytest.fixture
async def http_client(upstream):
    async with httpx.AsyncClient(transport=httpx.MockTransport(upstream.handler)) as client:
        yield client


@pytest.fixture
def make_env(kv, http_client) -> Callable[..., WorkerEnv]:
    def _make(**overrides: Any) -> WorkerEnv:
        params: Dict[str, Any] = {
            "api_url": API_URL,
            "cache": kv,
            "http_client": http_client,
        }
        params.update(overrides)
        return WorkerEnv(**params)

    return _make


@pytest.fixture
def env(make_env) -> WorkerEnv:
    return make_env()


@pytest.fixture
def app(env):
    """The FastAPI app with the injected env installed on app.state."""
    from weather_edge.main import app as _app

    _app.state.env = env
    yield _app
    del _app.state.env


@pytest.fixture
async def client(app):
    """Async HTTP client bound to the test app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://localhost") as ac:
        yield ac
