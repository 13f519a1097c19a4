"""
Pydantic schemas for booking requests and responses.
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import Field, model_validator

from .common import CamelModel


class BookingSeatLine(CamelModel):
    """One seat of a booking request."""
    grade: str = Field(..., min_length=1)
    zone: Optional[str] = None
    row_label: str = Field(..., min_length=1)
    col_num: int


class CreateBookingRequest(CamelModel):
    """Schema for creating a new booking."""
    schedule_id: int
    seats: List[BookingSeatLine] = Field(..., min_length=1)
    queue_token: Optional[str] = None

    def to_wire(self) -> Dict[str, Any]:
        body = super().to_wire()
        if body.get("queueToken") is None:
            body.pop("queueToken", None)
        return body


class CreateBookingResponse(CamelModel):
    """Response for a successful booking creation."""
    booking_id: Optional[int] = None
    booking_number: str
    schedule_id: Optional[int] = None
    seat_count: Optional[int] = None
    total_amount: Optional[Decimal] = None
    status: Optional[str] = None
    expires_at: Optional[str] = None
    booked_at: Optional[str] = None


class BookedSeat(CamelModel):
    """Seat information attached to an existing booking."""
    seat_id: Optional[int] = None
    grade: Optional[str] = None
    zone: Optional[str] = None
    row_label: Optional[str] = None
    col_num: Optional[int] = None
    seat_price: Optional[Decimal] = None


class BookingSummary(CamelModel):
    """Schema for a booking in the user's booking list."""
    booking_id: int
    booking_number: str
    schedule_id: Optional[int] = None
    seat_count: int = 0
    total_amount: Optional[Decimal] = None
    status: str
    booked_at: Optional[str] = None
    cancelled_at: Optional[str] = None
    seats: List[BookedSeat] = Field(default_factory=list)
    seat_codes: List[str] = Field(default_factory=list)
    seat_code: Optional[str] = None
    seat_zone: Optional[str] = None

    @model_validator(mode="after")
    def normalize_seat_codes(self) -> "BookingSummary":
        """Derive one consistent seat-code view from whichever fields the backend sent."""
        from_seats = [
            f"{seat.row_label or ''}{seat.col_num if seat.col_num is not None else ''}".strip()
            for seat in self.seats
        ]
        from_seats = [code for code in from_seats if code]

        if from_seats:
            codes = from_seats
        elif self.seat_codes:
            codes = list(self.seat_codes)
        elif self.seat_code:
            codes = [part.strip() for part in self.seat_code.split(",") if part.strip()]
        else:
            codes = []

        self.seat_codes = codes
        self.seat_code = ", ".join(codes) if codes else (self.seat_code or "")
        if self.seat_count <= 0:
            self.seat_count = len(self.seats)
        return self


class BookingListResponse(CamelModel):
    """Schema for booking list responses."""
    bookings: List[BookingSummary] = Field(default_factory=list)
    total: int = 0
    page: int = 1


class CancelBookingRequest(CamelModel):
    """Schema for cancelling a booking."""
    reason: Optional[str] = Field(None, max_length=500)


class CancelBookingResponse(CamelModel):
    """Response for a successful booking cancellation."""
    message: Optional[str] = None
    booking_id: int
    status: str
    cancelled_at: Optional[str] = None
    refund_amount: Optional[Decimal] = None
