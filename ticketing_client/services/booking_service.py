"""
Booking history and cancellation.
"""

import logging
from typing import List, Optional

from ..api import TicketingApi
from ..cache import BookingSeatCodeCache, KeyValueStore
from ..schemas.booking import BookingListResponse, CancelBookingResponse
from ..utils.logging_config import log_business_event

logger = logging.getLogger(__name__)


class BookingHistoryService:
    """The signed-in user's bookings."""

    def __init__(self, api: TicketingApi, store: Optional[KeyValueStore] = None):
        self.api = api
        self.seat_codes_cache = BookingSeatCodeCache(store or api.client.store)

    async def list_bookings(
        self,
        status: Optional[str] = None,
        page: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> BookingListResponse:
        """
        List bookings, filling in seat codes remembered at booking time when
        the backend returned none.
        """
        response = await self.api.bookings.get_my_bookings(status=status, page=page, limit=limit)
        for booking in response.bookings:
            if booking.seat_codes:
                continue
            remembered = await self.seat_codes_cache.recall(booking.booking_number)
            if remembered:
                booking.seat_codes = remembered
                booking.seat_code = ", ".join(remembered)
        return response

    async def confirmation_codes(self, booking_number: str) -> List[str]:
        """Seat codes remembered for a booking confirmation, or an empty list."""
        return await self.seat_codes_cache.recall(booking_number)

    async def cancel_booking(self, booking_id: int, reason: Optional[str] = None) -> CancelBookingResponse:
        """
        Cancel a booking.

        Raises:
            NotFoundError: If the booking does not exist
            ApiRequestError: If the backend refuses the cancellation
        """
        response = await self.api.bookings.cancel_booking(booking_id, reason=reason)
        logger.info("Booking %s cancelled", booking_id)
        log_business_event(
            "booking_cancelled",
            {
                "booking_id": booking_id,
                "reason": reason,
                "refund_amount": str(response.refund_amount) if response.refund_amount is not None else None,
            },
        )
        return response
