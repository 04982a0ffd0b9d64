from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError

from app.core.config import Settings
from app.core.exceptions import ConfigurationError, StoreConnectionError
from app.core.logger import logger


class Database:
    """
    Owns the MongoDB connection for the lifetime of the process.

    Created once at startup and handed to whatever needs the bookings
    collection. Nothing looks it up globally.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self._client = None
        self._db = None

    async def connect(self):
        if not self.settings.MONGO_URI:
            logger.critical("❌ MONGO_URI is missing! Set it in the environment or in the .env file.")
            raise ConfigurationError("MONGO_URI is not configured")

        try:
            self._client = AsyncMongoClient(self.settings.MONGO_URI)
            await self._client.admin.command("ping")
        except PyMongoError as e:
            logger.critical(f"❌ MongoDB connection error: {e}")
            await self.close()
            raise StoreConnectionError(f"Could not connect to MongoDB: {e}") from e

        self._db = self._client[self.settings.MONGO_DB_NAME]
        logger.info(f"✅ MongoDB connected successfully (database '{self.settings.MONGO_DB_NAME}')")

    async def close(self):
        if self._client is not None:
            await self._client.close()
            logger.info("MongoDB connection closed")
        self._client = None
        self._db = None

    @property
    def bookings(self):
        if self._db is None:
            raise RuntimeError("Database.connect() must be awaited before using the bookings collection")
        return self._db[self.settings.BOOKINGS_COLLECTION]
