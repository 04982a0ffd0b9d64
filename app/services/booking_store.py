from typing import Any, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument

from app.core.logger import logger
from app.models.booking import BOOKING_FIELDS, Booking, BookingInput, booking_from_document

BOOKING_PROJECTION = {field: 1 for field in BOOKING_FIELDS}


def to_object_id(booking_id: Any) -> Optional[ObjectId]:
    """Returns None for ids the store could never have issued."""
    try:
        return ObjectId(booking_id)
    except (InvalidId, TypeError):
        return None


class BookingStore:
    """
    Persistence adapter over the single bookings collection.
    The collection handle is injected, so any object with the async
    pymongo collection interface will do.
    """

    def __init__(self, collection):
        self.collection = collection

    async def find_all(self) -> List[Booking]:
        """Snapshot of every booking, in natural store order."""
        cursor = self.collection.find({}, BOOKING_PROJECTION)
        return [booking_from_document(document) async for document in cursor]

    async def insert(self, record: BookingInput) -> Booking:
        document = record.to_document()
        result = await self.collection.insert_one(document)
        logger.info(f"🆕 Booking {result.inserted_id} created for {record.name}")
        return booking_from_document({**document, "_id": result.inserted_id})

    async def update_by_id(self, booking_id: str, record: BookingInput) -> Optional[Booking]:
        """Full replace. Returns None when no booking has that id."""
        object_id = to_object_id(booking_id)
        if object_id is None:
            logger.warning(f"⚠️ Update skipped, '{booking_id}' is not a valid booking id")
            return None

        document = await self.collection.find_one_and_replace(
            {"_id": object_id},
            record.to_document(),
            projection=BOOKING_PROJECTION,
            return_document=ReturnDocument.AFTER,
        )
        if document is None:
            logger.info(f"Booking {booking_id} not found, nothing updated")
            return None

        logger.info(f"✏️ Booking {booking_id} updated")
        return booking_from_document(document)

    async def delete_by_id(self, booking_id: str) -> bool:
        """Idempotent. Returns whether a booking was actually removed."""
        object_id = to_object_id(booking_id)
        if object_id is None:
            return False

        result = await self.collection.delete_one({"_id": object_id})
        if result.deleted_count:
            logger.info(f"🗑️ Booking {booking_id} deleted")
        return result.deleted_count > 0
