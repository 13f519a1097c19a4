"""
Booking endpoints.
"""

from typing import Optional

from ..schemas.booking import (
    BookingListResponse, CancelBookingRequest, CancelBookingResponse,
    CreateBookingRequest, CreateBookingResponse,
)
from ..schemas.common import unwrap_data
from .client import ApiClient


class BookingApi:
    """Create, list and cancel bookings."""

    def __init__(self, client: ApiClient):
        self.client = client

    async def create_booking(self, request: CreateBookingRequest) -> CreateBookingResponse:
        """Submit one booking; never retried."""
        payload = await self.client.post("/v1/bookings", request.to_wire())
        return CreateBookingResponse.model_validate(unwrap_data(payload))

    async def get_my_bookings(
        self,
        status: Optional[str] = None,
        page: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> BookingListResponse:
        payload = await self.client.get(
            "/v1/bookings/me",
            params={"status": status, "page": page, "limit": limit},
        )
        return BookingListResponse.model_validate(unwrap_data(payload) or {})

    async def cancel_booking(self, booking_id: int, reason: Optional[str] = None) -> CancelBookingResponse:
        request = CancelBookingRequest(reason=reason)
        payload = await self.client.patch(f"/v1/bookings/{booking_id}/cancel", request.to_wire())
        return CancelBookingResponse.model_validate(unwrap_data(payload))
