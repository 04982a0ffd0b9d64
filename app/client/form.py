from datetime import date, time
from typing import Any, Dict, List, Optional

from app.client.api_client import BookingsCache
from app.core.exceptions import BookingApiError, IncompleteBookingError
from app.core.logger import logger
from app.models.booking import BOOKING_FIELDS, Booking, BookingInput

GENDERS = ("Male", "Female")
INCOMPLETE_WARNING = "Please fill in all fields before submitting."


def default_draft() -> Dict[str, Any]:
    return {
        "name": "",
        "email": "",
        "from": "",
        "to": "",
        "travelDate": "",
        "time": "",
        "gender": "",
        "numberOfPeople": 1,
    }


def _parse_people(value: Any) -> Optional[int]:
    # Anything that is not a whole number counts as empty
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class BookingForm:
    """Draft booking behind the create/edit form."""

    def __init__(self):
        self.draft: Dict[str, Any] = default_draft()
        self.editing_id: Optional[str] = None

    @property
    def is_editing(self) -> bool:
        return self.editing_id is not None

    def set_field(self, name: str, value: Any):
        if name not in BOOKING_FIELDS:
            raise KeyError(name)

        if name == "numberOfPeople":
            value = _parse_people(value)
        elif isinstance(value, date):
            value = value.isoformat()
        elif isinstance(value, time):
            value = value.strftime("%H:%M")
        elif value is None:
            value = ""
        self.draft[name] = value

    def missing_fields(self) -> List[str]:
        return [field for field in BOOKING_FIELDS if not self.draft.get(field)]

    def start_edit(self, booking: Booking):
        self.draft = booking.model_dump(by_alias=True)
        self.editing_id = booking.id

    def reset(self):
        self.draft = default_draft()
        self.editing_id = None

    def submit(self, cache: BookingsCache) -> Optional[Booking]:
        """
        Creates or updates depending on edit mode. Nothing is sent when a
        required field is empty. The draft is kept if the call fails.
        """
        missing = self.missing_fields()
        if missing:
            logger.warning(f"⚠️ Booking not submitted, missing: {', '.join(missing)}")
            raise IncompleteBookingError(missing)

        booking = BookingInput.model_validate({field: self.draft[field] for field in BOOKING_FIELDS})
        try:
            if self.editing_id:
                result = cache.update(self.editing_id, booking)
                self.editing_id = None
            else:
                result = cache.create(booking)
        except BookingApiError as e:
            logger.error(f"❌ Error saving booking: {e}")
            raise

        self.reset()
        return result

    def delete(self, cache: BookingsCache, booking_id: str) -> str:
        # No confirmation step
        try:
            return cache.delete(booking_id)
        except BookingApiError as e:
            logger.error(f"❌ Error deleting booking: {e}")
            raise
