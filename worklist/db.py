"""MongoDB connection bootstrap."""

from __future__ import annotations

import logging
from typing import Any, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import monitoring
from pymongo.errors import PyMongoError

from .settings import Settings

logger = logging.getLogger(__name__)

_client: Optional[AsyncIOMotorClient] = None
_database: Optional[AsyncIOMotorDatabase] = None


class ConnectionErrorLogger(monitoring.ServerHeartbeatListener):
    """Logs connection-level failures reported by the driver after startup."""

    def started(self, event: monitoring.ServerHeartbeatStartedEvent) -> None:
        pass

    def succeeded(self, event: monitoring.ServerHeartbeatSucceededEvent) -> None:
        pass

    def failed(self, event: monitoring.ServerHeartbeatFailedEvent) -> None:
        logger.error("MongoDB connection error on %s: %s", event.connection_id, event.reply)


def is_enabled() -> bool:
    return _database is not None


def get_database() -> AsyncIOMotorDatabase:
    if _database is None:
        raise RuntimeError("MongoDB connection is not initialized")
    return _database


def get_collection(name: str) -> Any:
    return get_database()[name]


async def init_db(settings: Settings) -> AsyncIOMotorDatabase:
    global _client, _database

    if _database is not None:
        return _database

    _client = AsyncIOMotorClient(
        settings.mongo_uri,
        tz_aware=True,
        event_listeners=[ConnectionErrorLogger()],
    )
    _database = _client[settings.mongo_db_name]
    try:
        await _client.admin.command("ping")
    except PyMongoError as exc:
        logger.error("MongoDB connection failed for database %s: %s", settings.mongo_db_name, exc)
    else:
        logger.info("MongoDB connection established for database %s", settings.mongo_db_name)
    return _database


async def close_db() -> None:
    global _client, _database

    if _client is None:
        return

    _client.close()
    _client = None
    _database = None
    logger.info("MongoDB client closed")
