"""
Read-through cache accessor for the single weather record.
"""
import logging
from typing import Optional

from weather_edge.context import WorkerEnv
from weather_edge.models.weather import WeatherRecord

logger = logging.getLogger(__name__)


async def get_cached_weather_data(env: WorkerEnv) -> Optional[WeatherRecord]:
    """
    Read the cached record.

    Absence, expiry and an unreadable payload all come back as None so the
    caller simply re-fetches.
    """
    try:
        cached = await env.cache.get(env.cache_key)
        if not cached:
            return None

        return WeatherRecord.model_validate_json(cached)

    except Exception as e:
        logger.error(f"Error reading from cache: {e}")
        return None


async def set_cached_weather_data(env: WorkerEnv, record: WeatherRecord) -> None:
    """Store the record with the configured TTL; failures are logged and swallowed."""
    try:
        await env.cache.put(
            env.cache_key,
            record.model_dump_json(by_alias=True),
            expiration_ttl=env.cache_ttl,
        )
    except Exception as e:
        logger.error(f"Error writing to cache: {e}")
