"""
Weather refresh scheduler.
Unconditionally re-fetches the weather and overwrites the cache every 4 hours.
"""
import asyncio
import logging
from typing import Optional

from weather_edge.context import WorkerEnv
from weather_edge.services.weather_cache import set_cached_weather_data
from weather_edge.services.weather_service import WeatherService

logger = logging.getLogger(__name__)


async def handle_scheduled(env: WorkerEnv) -> None:
    """
    Timer entry point: fetch fresh data and overwrite the cache.

    The existing cache entry is never consulted. Failures are logged and
    absorbed; the next tick is the retry.

    Args:
        env: Injected bindings (upstream URL, KV store, HTTP client)
    """
    logger.info("Scheduled weather data fetch triggered")

    try:
        record = await WeatherService.from_env(env).fetch_weather_data()

        if record is not None:
            await set_cached_weather_data(env, record)
            logger.info(f"Weather data successfully cached at: {record.last_updated}")
        else:
            logger.error("Failed to fetch weather data during scheduled run")

    except Exception as e:
        logger.error(f"Error in scheduled weather fetch: {e}")


class WeatherScheduler:
    """
    In-process timer that invokes handle_scheduled on a fixed interval.
    """

    def __init__(
        self,
        env: WorkerEnv,
        interval_seconds: int = 14400,  # 4 hours
        run_on_startup: bool = False
    ):
        """
        Initialize weather scheduler.

        Args:
            env: Bindings passed to every scheduled run
            interval_seconds: Interval between runs in seconds (default: 14400 = 4 hours)
            run_on_startup: Run once immediately instead of waiting a full interval first
        """
        self.env = env
        self.interval_seconds = interval_seconds
        self.run_on_startup = run_on_startup
        self.running = False
        self.task: Optional[asyncio.Task] = None

    async def _scheduler_loop(self):
        """
        Main scheduler loop that runs until stopped.
        """
        logger.info(f"Weather scheduler started (interval: {self.interval_seconds}s)")

        if self.run_on_startup:
            await handle_scheduled(self.env)

        while self.running:
            try:
                await asyncio.sleep(self.interval_seconds)
                await handle_scheduled(self.env)

            except asyncio.CancelledError:
                logger.info("Weather scheduler cancelled")
                break

    async def start(self):
        """
        Start the weather scheduler.
        """
        if self.running:
            logger.warning("Weather scheduler is already running")
            return

        self.running = True
        self.task = asyncio.create_task(self._scheduler_loop())

    async def stop(self):
        """
        Stop the weather scheduler.
        """
        if not self.running:
            logger.warning("Weather scheduler is not running")
            return

        self.running = False
        if self.task:
            self.task.cancel()
            try:
                await self.task
            except asyncio.CancelledError:
                pass
        self.task = None
        logger.info("Weather scheduler stopped")


async def run_once() -> None:
    """Run a single scheduled refresh, for an external cron."""
    from tortoise import Tortoise

    from weather_edge.database import TORTOISE_ORM
    from weather_edge.dependencies import get_config, get_env
    from weather_edge.utils.logger import setup_logging

    config = get_config()
    setup_logging(config["logging"])

    use_database = config["cache"]["backend"] == "database"
    if use_database:
        await Tortoise.init(config=TORTOISE_ORM)
        await Tortoise.generate_schemas(safe=True)
    else:
        logger.warning("Memory backend: the refreshed record is discarded when this process exits")

    try:
        await handle_scheduled(get_env())
    finally:
        if use_database:
            await Tortoise.close_connections()


def main():
    asyncio.run(run_once())


if __name__ == "__main__":
    main()
