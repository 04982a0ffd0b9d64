from typing import Any, Awaitable, Callable, Dict, List, Optional

from app.core.logger import logger
from app.models.booking import Booking
from app.models.contract import (
    ContractRequest,
    CreateBookingRequest,
    DeleteBookingRequest,
    GetBookingsRequest,
    Operation,
    UpdateBookingRequest,
)
from app.services.booking_store import BookingStore


class BookingResolvers:
    """
    One handler per contract operation. Each handler makes exactly one
    store call and keeps no state between requests.
    """

    def __init__(self, store: BookingStore):
        self.store = store
        self.handlers: Dict[Operation, Callable[[Any], Awaitable[Any]]] = {
            Operation.GET_BOOKINGS: self.get_bookings,
            Operation.CREATE_BOOKING: self.create_booking,
            Operation.UPDATE_BOOKING: self.update_booking,
            Operation.DELETE_BOOKING: self.delete_booking,
        }

    async def get_bookings(self, request: GetBookingsRequest) -> List[Booking]:
        return await self.store.find_all()

    async def create_booking(self, request: CreateBookingRequest) -> Booking:
        return await self.store.insert(request.variables.input)

    async def update_booking(self, request: UpdateBookingRequest) -> Optional[Booking]:
        return await self.store.update_by_id(request.variables.id, request.variables.input)

    async def delete_booking(self, request: DeleteBookingRequest) -> str:
        # The id is echoed back whether or not anything was removed
        await self.store.delete_by_id(request.variables.id)
        return request.variables.id

    async def resolve(self, request: ContractRequest) -> Any:
        operation = Operation(request.operation)
        logger.info(f"🔔 Operation: {operation.value}")
        return await self.handlers[operation](request)
