from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr

# Wire names of every booking field, in form order. `id` is not one of them.
BOOKING_FIELDS = ("name", "email", "from", "to", "travelDate", "time", "gender", "numberOfPeople")


class BookingInput(BaseModel):
    """
    A booking as submitted by a client: every Booking field except `id`.
    Types are strict, so `numberOfPeople: "3"` or `name: 5` is rejected.
    Emptiness and value ranges are left to the client form.
    """
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    name: StrictStr
    email: StrictStr
    from_: StrictStr = Field(..., alias="from")
    to: StrictStr
    travelDate: StrictStr
    time: StrictStr
    gender: StrictStr
    numberOfPeople: StrictInt

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude={"id"})


class Booking(BookingInput):
    # Assigned by the store on insert, never changes afterwards
    id: StrictStr


def booking_from_document(document: Dict[str, Any]) -> Booking:
    """Maps a stored document (with its `_id`) onto a Booking."""
    data = {key: value for key, value in document.items() if key != "_id"}
    data["id"] = str(document["_id"])
    return Booking.model_validate(data)


__all__ = ["BOOKING_FIELDS", "Booking", "BookingInput", "booking_from_document"]
