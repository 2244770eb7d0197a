"""
Catch-all HTTP entry point serving the cached weather record.
"""
import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from weather_edge.context import WorkerEnv
from weather_edge.dependencies import get_env
from weather_edge.services.weather_cache import get_cached_weather_data, set_cached_weather_data
from weather_edge.services.weather_service import WeatherService

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,HEAD,POST,OPTIONS",
    "Access-Control-Max-Age": "86400",
}

UNAVAILABLE_MESSAGE = "Unable to fetch weather data"


async def handle_request(request: Request, env: WorkerEnv) -> Response:
    """
    Serve the weather record for any inbound request.

    Args:
        request: Inbound request
        env: Injected bindings (upstream URL, KV store, HTTP client)

    Returns:
        Response: 200 JSON record, 503 when the upstream is unavailable,
        500 on any unexpected error; every response carries the CORS headers
    """
    if request.method == "OPTIONS":
        return Response(
            status_code=status.HTTP_200_OK,
            headers={
                **CORS_HEADERS,
                "Access-Control-Allow-Headers": request.headers.get("Access-Control-Request-Headers", ""),
            }
        )

    try:
        # Try to get cached data first
        record = await get_cached_weather_data(env)

        if record is None:
            logger.info("No cached data found, fetching fresh weather data")
            record = await WeatherService.from_env(env).fetch_weather_data()

            if record is None:
                return PlainTextResponse(
                    UNAVAILABLE_MESSAGE,
                    status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                    headers=CORS_HEADERS
                )

            await set_cached_weather_data(env, record)

        return JSONResponse(content=record.to_payload(), headers=CORS_HEADERS)

    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        return PlainTextResponse(
            f"Unexpected error: {e}",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            headers=CORS_HEADERS
        )


async def worker(request: Request) -> Response:
    """
    Catch-all endpoint, mounted without a method list so every method on
    every path runs the same handler.

    The environment comes from app.state when one was installed there,
    otherwise from the process-wide dependency.
    """
    env = getattr(request.app.state, "env", None) or get_env()
    return await handle_request(request, env)
