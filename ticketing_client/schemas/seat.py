"""
Pydantic schemas for schedule seat inventory.
"""

from decimal import Decimal
from typing import List, Optional

from pydantic import Field, field_validator

from .common import CamelModel

AVAILABLE_STATUS = "AVAILABLE"


class SeatDto(CamelModel):
    """One seat of a schedule as reported by the backend."""
    seat_id: int
    schedule_id: Optional[int] = None
    venue_seat_id: Optional[int] = None
    seat_row: str
    seat_number: str
    seat_zone: Optional[str] = None
    seat_grade: Optional[str] = None
    price: Decimal = Field(Decimal("0"), ge=0)
    status: str = AVAILABLE_STATUS

    @field_validator("seat_row", "seat_number", mode="before")
    @classmethod
    def coerce_to_string(cls, v):
        return v if v is None else str(v)

    @property
    def is_available(self) -> bool:
        return self.status.strip().upper() == AVAILABLE_STATUS


class SeatAvailabilityResponse(CamelModel):
    """Seat inventory for one schedule."""
    schedule_id: Optional[int] = None
    total_seats: Optional[int] = None
    available_seats: Optional[int] = None
    seats: List[SeatDto] = Field(default_factory=list)


class SeatLockRequest(CamelModel):
    """Request to hold seats for the current user."""
    seat_ids: List[int] = Field(..., min_length=1)
    user_id: Optional[int] = None
    session_id: Optional[str] = None


class SeatReleaseRequest(SeatLockRequest):
    """Request to release previously held seats."""
    pass


class SeatLockResponse(CamelModel):
    """Result of a seat hold."""
    success: bool
    message: Optional[str] = None
    expires_at: Optional[str] = None
