"""
Async weather service for fetching the current weather from the upstream API.
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional

import httpx
from pydantic import ValidationError

from weather_edge.context import WorkerEnv
from weather_edge.models.weather import ForecastResponse, WeatherRecord

logger = logging.getLogger(__name__)

HOURLY_PARAMS = ["precipitation", "cloudcover"]


def utc_now_iso() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class WeatherService:
    """
    Fetches the current weather for one location and reduces it to a WeatherRecord.

    fetch_weather_data() never raises: every failure is logged and reported
    as None so callers only deal with "record" or "unavailable".
    """

    def __init__(
        self,
        base_url: str,
        latitude: float = 33.5902,
        longitude: float = 130.4017,
        timeout: float = 30,
        index_policy: str = "exact",
        client: Optional[httpx.AsyncClient] = None
    ):
        """
        Initialize weather service.

        Args:
            base_url: Upstream forecast endpoint
            latitude: Latitude coordinate
            longitude: Longitude coordinate
            timeout: Request timeout in seconds
            index_policy: 'exact' or 'nearest_hour'
            client: Shared httpx client; a short-lived one is used when None
        """
        self.base_url = base_url
        self.latitude = latitude
        self.longitude = longitude
        self.timeout = timeout
        self.index_policy = index_policy
        self.client = client

    @classmethod
    def from_env(cls, env: WorkerEnv) -> "WeatherService":
        return cls(
            base_url=env.api_url,
            latitude=env.latitude,
            longitude=env.longitude,
            timeout=env.timeout,
            index_policy=env.index_policy,
            client=env.http_client,
        )

    async def fetch_weather_data(self) -> Optional[WeatherRecord]:
        """
        Fetch the upstream forecast and build a record for the current hour.

        Returns:
            WeatherRecord, or None if the upstream is unavailable or its data incomplete
        """
        try:
            response = await self._fetch_forecast()

            if not response.is_success:
                logger.error(
                    f"Error fetching weather: {response.status_code} {response.reason_phrase}"
                )
                return None

            data = ForecastResponse.model_validate(response.json())
            return self._build_record(data)

        except httpx.HTTPError as e:
            logger.error(f"Error fetching weather: {e}")
            return None
        except (ValueError, ValidationError) as e:
            logger.error(f"Weather response could not be parsed: {e}")
            return None
        except Exception as e:
            logger.exception(f"Unexpected error fetching weather: {e}")
            return None

    async def _fetch_forecast(self) -> httpx.Response:
        """
        Issue the single upstream GET.

        Returns:
            Raw httpx response
        """
        params = {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "current_weather": "true",
            "hourly": ",".join(HOURLY_PARAMS),
        }

        if self.client is not None:
            return await self.client.get(self.base_url, params=params, timeout=self.timeout)

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.get(self.base_url, params=params)

    def _build_record(self, data: ForecastResponse) -> Optional[WeatherRecord]:
        current = data.current_weather
        hourly = data.hourly

        if (
            current is None
            or current.temperature is None
            or current.time is None
            or hourly is None
            or hourly.time is None
            or hourly.precipitation is None
            or hourly.cloudcover is None
        ):
            logger.error("Weather data is incomplete")
            logger.debug(data.model_dump_json(indent=2))
            return None

        index = self._select_index(current.time, hourly.time)
        if index is None:
            logger.error(
                f"No hourly entry matches current time {current.time}, "
                f"available: {hourly.time[:3]}"
            )
            return None

        precipitation = _value_at(hourly.precipitation, index)
        cloudcover = _value_at(hourly.cloudcover, index)

        if precipitation is None or cloudcover is None:
            logger.error("Weather data for current time is incomplete")
            return None

        return WeatherRecord(
            temperature=current.temperature,
            precipitation=precipitation,
            cloudcover=cloudcover,
            timestamp=current.time,
            last_updated=utc_now_iso(),
        )

    def _select_index(self, current_time: str, hourly_times: List[str]) -> Optional[int]:
        """
        Find the hourly index for the current reading.

        'exact' only accepts an identical time label. 'nearest_hour' then tries
        the same hour on the same date and finally the first available hour.
        """
        if current_time in hourly_times:
            return hourly_times.index(current_time)

        if self.index_policy != "nearest_hour":
            return None

        target = _truncate_to_hour(current_time)
        if target is not None and target in hourly_times:
            return hourly_times.index(target)

        if hourly_times:
            logger.info(
                f"No exact time match found. Using first available hour. "
                f"Current: {current_time}, Available: {hourly_times[:3]}"
            )
            return 0

        return None


def _value_at(values: List[Optional[float]], index: int) -> Optional[float]:
    if 0 <= index < len(values):
        return values[index]
    return None


def _truncate_to_hour(time_label: str) -> Optional[str]:
    """'2025-06-26T12:30' -> '2025-06-26T12:00' (UTC when the label carries an offset)."""
    try:
        moment = datetime.fromisoformat(time_label.replace("Z", "+00:00"))
    except ValueError:
        return None

    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)

    return moment.strftime("%Y-%m-%dT%H:00")
