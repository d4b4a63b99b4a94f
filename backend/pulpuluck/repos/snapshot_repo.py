"""
Stores for the last successfully fetched fountain set.

The snapshot is a single slot: written wholesale after every successful
fetch and read back only when a fetch fails. It never expires.
"""
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import ValidationError
from pymongo.errors import PyMongoError

from pulpuluck.core.config import settings
from pulpuluck.core.db_connection import db_connection
from pulpuluck.core.logger import logs
from pulpuluck.models.fountain_model import Fountain


def _dump(fountains: List[Fountain]) -> list[dict]:
    return [f.model_dump(mode="json") for f in fountains]


def _load(data: list) -> List[Fountain]:
    return [Fountain.model_validate(item) for item in data]


class LocalSnapshotStore:
    """Keeps the snapshot as a JSON file under ``<data dir>/cache``."""

    def __init__(self, base_dir: Path | str | None = None, cache_key: str | None = None):
        self.cache_dir = Path(base_dir or settings.DATA_DIR) / "cache"
        self.cache_key = cache_key or settings.FOUNTAIN_CACHE_KEY
        self.cache_dir.mkdir(parents=True, exist_ok=True)

    def _get_cache_file(self) -> Path:
        # Sanitize cache key for filename
        safe_key = self.cache_key.replace(":", "_").replace("/", "_")
        return self.cache_dir / f"{safe_key}.json"

    async def read(self) -> Optional[List[Fountain]]:
        cache_file = self._get_cache_file()
        if not cache_file.exists():
            return None

        try:
            with open(cache_file, "r", encoding="utf-8") as f:
                cached = json.load(f)
            return _load(cached["data"])
        except (OSError, ValueError, KeyError, TypeError, ValidationError) as e:
            logs.log(logging.ERROR, f"Failed to read fountain snapshot: {str(e)}")
            return None

    async def write(self, fountains: List[Fountain]) -> bool:
        cached = {
            "data": _dump(fountains),
            "cached_at": datetime.now().isoformat()
        }
        try:
            with open(self._get_cache_file(), "w", encoding="utf-8") as f:
                json.dump(cached, f, indent=2, ensure_ascii=False)
            return True
        except OSError as e:
            logs.log(logging.ERROR, f"Failed to write fountain snapshot: {str(e)}")
            return False


class MongoSnapshotStore:
    """Keeps the snapshot as one upserted document in ``fountain_cache``."""

    def __init__(self, db: AsyncIOMotorDatabase, cache_key: str | None = None):
        self.collection = db["fountain_cache"]
        self.cache_key = cache_key or settings.FOUNTAIN_CACHE_KEY

    async def read(self) -> Optional[List[Fountain]]:
        try:
            doc = await self.collection.find_one({"key": self.cache_key})
            if not doc:
                return None
            return _load(doc["fountains"])
        except (PyMongoError, KeyError, TypeError, ValidationError) as e:
            logs.log(logging.ERROR, f"Failed to read fountain snapshot: {str(e)}")
            return None

    async def write(self, fountains: List[Fountain]) -> bool:
        try:
            await self.collection.update_one(
                {"key": self.cache_key},
                {"$set": {"fountains": _dump(fountains), "timestamp": datetime.utcnow()}},
                upsert=True
            )
        except PyMongoError as e:
            logs.log(logging.ERROR, f"Failed to write fountain snapshot: {str(e)}")
            return False
        return True


def get_snapshot_store(db: AsyncIOMotorDatabase | None = None):
    """Pick the snapshot store for the configured storage mode."""
    if settings.STORAGE_MODE == "mongodb":
        return MongoSnapshotStore(db if db is not None else db_connection.get_database())
    return LocalSnapshotStore()
