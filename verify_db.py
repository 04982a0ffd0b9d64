import asyncio
import sys

from app.core.config import settings
from app.core.exceptions import ConfigurationError, StoreConnectionError
from app.core.logger import setup_logging
from app.services.db_service import Database

setup_logging(error_log="")


async def verify():
    print(f"Checking MongoDB database '{settings.MONGO_DB_NAME}'...")
    db = Database(settings)
    try:
        await db.connect()
    except (ConfigurationError, StoreConnectionError) as e:
        print(f"❌ {e}")
        return False

    try:
        count = await db.bookings.count_documents({})
        print(f"✅ Connected. Collection '{settings.BOOKINGS_COLLECTION}' holds {count} booking(s).")
    finally:
        await db.close()
    return True


if __name__ == "__main__":
    sys.exit(0 if asyncio.run(verify()) else 1)
