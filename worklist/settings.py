"""Runtime configuration read from the environment."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import os

STORAGE_MONGO = "mongo"
STORAGE_MEMORY = "memory"


@dataclass(frozen=True)
class Settings:
    mongo_uri: str
    mongo_db_name: str
    mongo_collection: str
    storage: str
    host: str
    port: int
    log_level: str


@lru_cache
def get_settings() -> Settings:
    storage = os.getenv("WORKLIST_STORAGE", STORAGE_MONGO).lower()
    if storage not in (STORAGE_MONGO, STORAGE_MEMORY):
        raise RuntimeError(
            f"WORKLIST_STORAGE must be '{STORAGE_MONGO}' or '{STORAGE_MEMORY}', got '{storage}'"
        )
    return Settings(
        mongo_uri=os.getenv("MONGO_URI", "mongodb://localhost:27017"),
        mongo_db_name=os.getenv("MONGO_DB_NAME", "WorkListDB"),
        mongo_collection=os.getenv("MONGO_COLLECTION", "todos"),
        storage=storage,
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8080")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
