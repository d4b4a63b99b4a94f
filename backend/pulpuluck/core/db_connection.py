from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pulpuluck.core.config import settings
from pulpuluck.core.logger import logs
import logging

class AsyncDBConnection:
    """
    Lazily opens the MongoDB client used by the snapshot and feedback stores.
    Only used when STORAGE_MODE=mongodb.
    """
    _client: AsyncIOMotorClient | None = None

    def get_database(self) -> AsyncIOMotorDatabase:
        if settings.STORAGE_MODE != "mongodb":
            raise RuntimeError("MongoDB not available - STORAGE_MODE is set to 'local'")

        if AsyncDBConnection._client is None:
            # Motor client is non-blocking
            AsyncDBConnection._client = AsyncIOMotorClient(settings.MONGO_URI)
            logs.log(logging.INFO, "MongoDB connection initialized")

        return AsyncDBConnection._client[settings.MONGO_DB_NAME]

db_connection = AsyncDBConnection()
