"""
Pydantic models for weather data.
"""
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

Number = Union[int, float]


class WeatherRecord(BaseModel):
    """Current weather for the configured location, as cached and served."""

    temperature: Number = Field(..., description="Instantaneous air temperature (°C)")
    precipitation: Number = Field(..., description="Precipitation for the current hour (mm)")
    cloudcover: Number = Field(..., description="Cloud cover for the current hour (%)")
    timestamp: str = Field(..., description="Upstream time label the hourly values belong to")
    last_updated: str = Field(..., alias="lastUpdated", description="ISO-8601 time the record was built")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "temperature": 23.1,
                    "precipitation": 0.1,
                    "cloudcover": 25,
                    "timestamp": "2025-06-26T12:00",
                    "lastUpdated": "2025-06-26T12:03:41.512Z"
                }
            ]
        }
    )

    def to_payload(self) -> dict:
        """Serialize with the public field names."""
        return self.model_dump(by_alias=True)


class CurrentWeather(BaseModel):
    """The current_weather block of an Open-Meteo forecast response."""

    temperature: Optional[Number] = None
    time: Optional[str] = None


class HourlySeries(BaseModel):
    """The hourly block; arrays are index-aligned by time."""

    time: Optional[List[str]] = None
    precipitation: Optional[List[Optional[Number]]] = None
    cloudcover: Optional[List[Optional[Number]]] = None


class ForecastResponse(BaseModel):
    """Subset of the upstream forecast response used by the fetcher."""

    current_weather: Optional[CurrentWeather] = None
    hourly: Optional[HourlySeries] = None
