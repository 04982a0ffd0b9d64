from enum import Enum
from typing import Any, List, Optional

import requests
from pydantic import BaseModel, ValidationError

from app.core.config import settings
from app.core.exceptions import BookingApiError
from app.core.logger import logger
from app.models.booking import Booking, BookingInput
from app.models.contract import (
    CONTRACT_VERSION,
    CONTRACT_VERSION_HEADER,
    CreateBookingRequest,
    CreateBookingVariables,
    DeleteBookingRequest,
    DeleteBookingVariables,
    GetBookingsRequest,
    Operation,
    UpdateBookingRequest,
    UpdateBookingVariables,
    parse_result,
)


class BookingApiClient:
    """
    Issues contract operations against one fixed endpoint URL.
    No retries and no timeout: a hung server means a hung call.
    """

    def __init__(self, endpoint_url: Optional[str] = None, session: Optional[requests.Session] = None):
        self.endpoint_url = endpoint_url or settings.BOOKING_API_URL
        self.session = session or requests.Session()

    def _malformed(self, operation: Operation, reason: str, status_code: int) -> BookingApiError:
        logger.error(f"❌ {operation.value} returned a malformed response: {reason}")
        return BookingApiError(f"{operation.value} returned a malformed response: {reason}", status_code=status_code)

    def execute(self, request: BaseModel) -> Any:
        operation = Operation(request.operation)
        try:
            response = self.session.post(
                self.endpoint_url,
                json=request.model_dump(by_alias=True, mode="json", exclude_none=True),
                headers={CONTRACT_VERSION_HEADER: CONTRACT_VERSION},
            )
        except requests.RequestException as e:
            logger.error(f"❌ {operation.value} request to {self.endpoint_url} failed: {e}")
            raise BookingApiError(f"Could not reach {self.endpoint_url}: {e}") from e

        status_code = response.status_code
        try:
            body = response.json()
        except ValueError:
            raise BookingApiError(
                f"{operation.value} returned a non-JSON response (HTTP {status_code})",
                status_code=status_code,
            )

        if not isinstance(body, dict):
            raise self._malformed(operation, f"expected a JSON object, got {type(body).__name__}", status_code)

        errors = body.get("errors")
        if errors or status_code >= 400:
            if errors and not (isinstance(errors, list) and all(isinstance(err, dict) for err in errors)):
                raise self._malformed(operation, "errors is not a list of objects", status_code)
            message = errors[0].get("message", "Unknown error") if errors else f"HTTP {status_code}"
            logger.error(f"❌ {operation.value} failed: {message}")
            raise BookingApiError(message, errors=errors, status_code=status_code)

        data = body.get("data")
        if not isinstance(data, dict) or operation.value not in data:
            raise self._malformed(operation, f"data.{operation.value} is missing", status_code)

        try:
            return parse_result(operation, data[operation.value])
        except ValidationError as e:
            raise self._malformed(operation, f"{e.error_count()} invalid value(s) in data.{operation.value}", status_code) from e

    def get_bookings(self) -> List[Booking]:
        return self.execute(GetBookingsRequest())

    def create_booking(self, booking: BookingInput) -> Booking:
        return self.execute(CreateBookingRequest(variables=CreateBookingVariables(input=booking)))

    def update_booking(self, booking_id: str, booking: BookingInput) -> Optional[Booking]:
        return self.execute(UpdateBookingRequest(variables=UpdateBookingVariables(id=booking_id, input=booking)))

    def delete_booking(self, booking_id: str) -> str:
        return self.execute(DeleteBookingRequest(variables=DeleteBookingVariables(id=booking_id)))


class CacheStatus(str, Enum):
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


class BookingsCache:
    """
    Last known `getBookings` result for the UI.

    Every successful mutation is followed by a full re-fetch that replaces
    the list; the cache is never patched in place.
    """

    def __init__(self, client: BookingApiClient):
        self.client = client
        self.status = CacheStatus.LOADING
        self.bookings: List[Booking] = []
        self.error: Optional[BookingApiError] = None

    def refresh(self) -> List[Booking]:
        self.status = CacheStatus.LOADING
        try:
            bookings = self.client.get_bookings()
        except BookingApiError as e:
            logger.error(f"❌ Error fetching bookings: {e}")
            self.bookings = []
            self.error = e
            self.status = CacheStatus.ERROR
            return []

        self.bookings = bookings
        self.error = None
        self.status = CacheStatus.READY
        return bookings

    def create(self, booking: BookingInput) -> Booking:
        created = self.client.create_booking(booking)
        self.refresh()
        return created

    def update(self, booking_id: str, booking: BookingInput) -> Optional[Booking]:
        updated = self.client.update_booking(booking_id, booking)
        self.refresh()
        return updated

    def delete(self, booking_id: str) -> str:
        deleted_id = self.client.delete_booking(booking_id)
        self.refresh()
        return deleted_id
