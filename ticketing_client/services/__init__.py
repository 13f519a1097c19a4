"""Services that drive the seat selection and booking flow."""

from .seat_map_loader import RequestTicket, SeatMapLoader
from .seat_selection_service import BookingOutcome, SeatSelectionService
from .booking_service import BookingHistoryService

__all__ = [
    "RequestTicket",
    "SeatMapLoader",
    "BookingOutcome",
    "SeatSelectionService",
    "BookingHistoryService",
]
