"""
Query/mutation contract shared by the server and the client.

Both sides import operation names, argument shapes and result shapes from
here, so there is a single definition of what travels over the wire.
Bump CONTRACT_VERSION whenever a shape changes.
"""
import json
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictStr, TypeAdapter, ValidationError

from app.models.booking import Booking, BookingInput

CONTRACT_VERSION = "1"
CONTRACT_VERSION_HEADER = "X-Contract-Version"


class Operation(str, Enum):
    GET_BOOKINGS = "getBookings"
    CREATE_BOOKING = "createBooking"
    UPDATE_BOOKING = "updateBooking"
    DELETE_BOOKING = "deleteBooking"


# --- Incoming Request Models ---

class _Strict(BaseModel):
    model_config = ConfigDict(extra="forbid")


class CreateBookingVariables(_Strict):
    input: BookingInput


class UpdateBookingVariables(_Strict):
    id: StrictStr
    input: BookingInput


class DeleteBookingVariables(_Strict):
    id: StrictStr


class GetBookingsRequest(_Strict):
    operation: Literal["getBookings"] = "getBookings"
    variables: Optional[Dict[str, Any]] = None


class CreateBookingRequest(_Strict):
    operation: Literal["createBooking"] = "createBooking"
    variables: CreateBookingVariables


class UpdateBookingRequest(_Strict):
    operation: Literal["updateBooking"] = "updateBooking"
    variables: UpdateBookingVariables


class DeleteBookingRequest(_Strict):
    operation: Literal["deleteBooking"] = "deleteBooking"
    variables: DeleteBookingVariables


ContractRequest = Annotated[
    Union[GetBookingsRequest, CreateBookingRequest, UpdateBookingRequest, DeleteBookingRequest],
    Field(discriminator="operation"),
]

_request_adapter = TypeAdapter(ContractRequest)


def parse_request(payload: Any) -> ContractRequest:
    """Validates a raw request body. Raises pydantic.ValidationError."""
    return _request_adapter.validate_python(payload)


def validation_detail(error: ValidationError) -> List[Dict[str, Any]]:
    # Round-trip through JSON so every ctx value is serializable
    return json.loads(error.json(include_url=False))


# --- Outgoing Response Models ---

RESULT_ADAPTERS: Dict[Operation, TypeAdapter] = {
    Operation.GET_BOOKINGS: TypeAdapter(List[Booking]),
    Operation.CREATE_BOOKING: TypeAdapter(Booking),
    Operation.UPDATE_BOOKING: TypeAdapter(Optional[Booking]),
    Operation.DELETE_BOOKING: TypeAdapter(StrictStr),
}


def serialize_result(operation: Operation, result: Any) -> Any:
    return RESULT_ADAPTERS[operation].dump_python(result, by_alias=True, mode="json")


def parse_result(operation: Operation, payload: Any) -> Any:
    return RESULT_ADAPTERS[operation].validate_python(payload)


class ContractError(BaseModel):
    message: str
    type: str
    operation: Optional[str] = None
    detail: Optional[Any] = None


class ContractResponse(BaseModel):
    data: Optional[Dict[str, Any]] = None
    errors: Optional[List[ContractError]] = None


__all__ = [
    "CONTRACT_VERSION",
    "CONTRACT_VERSION_HEADER",
    "ContractError",
    "ContractRequest",
    "ContractResponse",
    "CreateBookingRequest",
    "CreateBookingVariables",
    "DeleteBookingRequest",
    "DeleteBookingVariables",
    "GetBookingsRequest",
    "Operation",
    "UpdateBookingRequest",
    "UpdateBookingVariables",
    "parse_request",
    "parse_result",
    "serialize_result",
    "validation_detail",
]
