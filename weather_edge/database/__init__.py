"""
Tortoise ORM configuration for the durable key-value backend.
"""
import os
from dotenv import load_dotenv

load_dotenv()

# Database configuration
DB_HOST = os.getenv("DB_HOST", "localhost")
DB_PORT = os.getenv("DB_PORT", "5432")
DB_NAME = os.getenv("DB_NAME", "weather_edge")
DB_USER = os.getenv("DB_USER", "weather_edge")
DB_PASSWORD = os.getenv("DB_PASSWORD", "")

# Tortoise ORM configuration; only the kv_entries table (KVEntry) lives here,
# used when KV_BACKEND=database
TORTOISE_ORM = {
    "connections": {
        "default": {
            "engine": "tortoise.backends.asyncpg",
            "credentials": {
                "host": DB_HOST,
                "port": DB_PORT,
                "user": DB_USER,
                "password": DB_PASSWORD,
                "database": DB_NAME,
                "min_size": 1,
                "max_size": 5,
            }
        }
    },
    "apps": {
        "models": {
            "models": ["weather_edge.database.models"],
            "default_connection": "default",
        }
    },
    "use_tz": True,
    "timezone": "UTC",
}
