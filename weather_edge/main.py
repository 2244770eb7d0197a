"""
FastAPI main application for the Fukuoka weather edge service.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from tortoise.contrib.fastapi import register_tortoise

from weather_edge.database import TORTOISE_ORM
from weather_edge.dependencies import get_config, get_env
from weather_edge.routes import worker
from weather_edge.services.weather_scheduler import WeatherScheduler
from weather_edge.utils.logger import setup_logging

config = get_config()
setup_logging(config["logging"])

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI.
    Starts and stops the refresh scheduler.
    """
    logger.info("Starting up weather edge...")
    scheduler_config = config["scheduler"]

    env = getattr(app.state, "env", None) or get_env()
    app.state.env = env

    weather_scheduler = WeatherScheduler(
        env,
        interval_seconds=scheduler_config["interval_seconds"],
        run_on_startup=scheduler_config.get("run_on_startup", False),
    )
    app.state.weather_scheduler = weather_scheduler

    if scheduler_config["enabled"]:
        await weather_scheduler.start()
    else:
        logger.info("Weather scheduler disabled")

    yield

    if weather_scheduler.running:
        await weather_scheduler.stop()

    logger.info("Shutting down weather edge...")


# Every path belongs to the catch-all handler, so the docs routes are off
app = FastAPI(
    title=config["api"]["title"],
    version=config["api"]["version"],
    description=config["api"]["description"],
    lifespan=lifespan,
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
)

if config["cache"]["backend"] == "database":
    register_tortoise(
        app,
        config=TORTOISE_ORM,
        generate_schemas=True,
        add_exception_handlers=False,
    )

# No method list: any method on any path reaches the handler
app.add_route("/{path:path}", worker.worker, include_in_schema=False)
