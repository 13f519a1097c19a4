"""
In-memory state of the mock ticketing backend.

Seat lists are generated from the venue seat map the way the production
backend stores them: rows are numbered ("1", "2", ...) in seat-map order and
each seat carries its section's zone, grade and price.
"""

import json
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Iterator, List, Optional, Tuple

from ..schemas.booking import CreateBookingRequest
from ..schemas.seat_map import SeatMap, Section
from ..seatmap.layout import section_row_labels, section_seat_numbers
from ..seatmap.seat_codes import normalize_zone
from ..seatmap.selection import MAX_SELECTED_SEATS
from ..utils.exceptions import (
    BusinessLogicError,
    NotFoundError,
    SeatNotAvailableError,
    SelectionLimitError,
    ValidationError,
)

logger = logging.getLogger(__name__)

AVAILABLE = "AVAILABLE"
BOOKED = "BOOKED"

DEMO_SEAT_MAP: Dict[str, Any] = {
    "meta": {"alphabet": "ABCDEFGHJKLMNPQRSTUVWXYZ"},
    "pricing": {"VIP": 150000, "R": 110000, "S": 80000},
    "sections": [
        {"zone": "A", "name": "Floor left", "rows": 3, "cols": 6, "rowLabelFrom": "A", "seatStart": 1, "grade": "VIP"},
        {"zone": "B", "name": "Floor right", "rows": 3, "cols": 6, "rowLabelFrom": "A", "seatStart": 7, "grade": "VIP"},
        {"zone": "C", "name": "Balcony", "rows": 4, "cols": 12, "rowLabelFrom": "D", "seatStart": 1, "grade": "R"},
        {"name": "Gallery", "rows": 2, "cols": 10, "rowLabelFrom": "H", "seatStart": 1, "grade": "S"},
    ],
}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _numbered_rows(seat_map: SeatMap) -> Iterator[Tuple[Section, str, str]]:
    """Every generated row with its backend row number, counted across sections."""
    position = 0
    for section in seat_map.sections:
        for label in section_row_labels(section, seat_map.alphabet):
            position += 1
            yield section, label, str(position)



class MockBackend:
    """Venues, performances, schedule seat lists, holds and bookings."""

    def __init__(self):
        self.venues: Dict[int, Dict[str, Any]] = {}
        self.performances: Dict[int, Dict[str, Any]] = {}
        self.schedules: Dict[int, Dict[str, Any]] = {}
        self.seats: Dict[int, List[Dict[str, Any]]] = {}
        self.holds: Dict[int, Optional[int]] = {}
        self.bookings: Dict[int, Dict[str, Any]] = {}
        self._next_seat_id = 1
        self._next_booking_id = 1

    @classmethod
    def demo(cls) -> "MockBackend":
        """One venue, one performance, two schedules."""
        backend = cls()
        backend.add_venue(1, DEMO_SEAT_MAP)
        backend.add_performance(1, "The Seat Map Musical", venue_id=1, venue="Grand Hall")
        backend.add_schedule(1, performance_id=1, show_datetime="2026-12-24T19:00:00")
        backend.add_schedule(2, performance_id=1, show_datetime="2026-12-25T15:00:00")
        return backend

    def add_venue(self, venue_id: int, seat_map: Dict[str, Any]) -> None:
        SeatMap.model_validate(seat_map)
        self.venues[venue_id] = seat_map

    def add_performance(
        self,
        performance_id: int,
        title: str,
        venue_id: Optional[int] = None,
        venue: Optional[str] = None,
        price: Optional[int] = None,
    ) -> None:
        self.performances[performance_id] = {
            "performanceId": performance_id,
            "title": title,
            "venue": venue,
            "venueId": venue_id,
            "price": price,
            "status": "ON_SALE",
        }

    def add_schedule(
        self,
        schedule_id: int,
        performance_id: int,
        show_datetime: Optional[str] = None,
        venue_id: Optional[int] = None,
    ) -> None:
        """Register a show time and generate its seat list from the venue map."""
        performance = self._performance(performance_id)
        venue_id = venue_id if venue_id is not None else performance["venueId"]
        if venue_id not in self.venues:
            raise NotFoundError(f"Venue {venue_id} not found", resource_type="venue", resource_id=str(venue_id))

        self.schedules[schedule_id] = {
            "scheduleId": schedule_id,
            "performanceId": performance_id,
            "showDatetime": show_datetime,
            "status": "AVAILABLE",
            "venueId": venue_id,
        }
        self.seats[schedule_id] = self._generate_seats(schedule_id, SeatMap.model_validate(self.venues[venue_id]))

    def _generate_seats(self, schedule_id: int, seat_map: SeatMap) -> List[Dict[str, Any]]:
        seats = []
        for section, _, row_token in _numbered_rows(seat_map):
            price = seat_map.pricing.get(section.grade, Decimal("0")) if section.grade else Decimal("0")
            for number in section_seat_numbers(section):
                seats.append({
                    "seatId": self._next_seat_id,
                    "scheduleId": schedule_id,
                    "seatRow": row_token,
                    "seatNumber": str(number),
                    "seatZone": section.zone_key,
                    "seatGrade": section.grade,
                    "price": float(price),
                    "status": AVAILABLE,
                })
                self._next_seat_id += 1
        return seats

    def _performance(self, performance_id: int) -> Dict[str, Any]:
        performance = self.performances.get(performance_id)
        if performance is None:
            raise NotFoundError(
                f"Performance {performance_id} not found",
                resource_type="performance", resource_id=str(performance_id),
            )
        return performance

    def _schedule_seats(self, schedule_id: int) -> List[Dict[str, Any]]:
        if schedule_id not in self.seats:
            raise NotFoundError(
                f"Schedule {schedule_id} not found", resource_type="schedule", resource_id=str(schedule_id)
            )
        return self.seats[schedule_id]

    def get_seat_map(self, venue_id: int) -> Dict[str, Any]:
        if venue_id not in self.venues:
            raise NotFoundError(f"Venue {venue_id} not found", resource_type="venue", resource_id=str(venue_id))
        return {"venueId": venue_id, "seatMapJson": json.dumps(self.venues[venue_id])}

    def get_performance(self, performance_id: int) -> Dict[str, Any]:
        performance = dict(self._performance(performance_id))
        performance["schedules"] = self.get_schedules(performance_id)["schedules"]
        return performance

    def get_schedules(self, performance_id: int) -> Dict[str, Any]:
        self._performance(performance_id)
        schedules = []
        for schedule in self.schedules.values():
            if schedule["performanceId"] != performance_id:
                continue
            seats = self.seats[schedule["scheduleId"]]
            schedules.append({
                **schedule,
                "totalSeats": len(seats),
                "availableSeats": sum(1 for seat in seats if seat["status"] == AVAILABLE),
            })
        return {"schedules": schedules}

    def get_schedule_seats(self, schedule_id: int) -> Dict[str, Any]:
        seats = self._schedule_seats(schedule_id)
        return {
            "scheduleId": schedule_id,
            "totalSeats": len(seats),
            "availableSeats": sum(1 for seat in seats if seat["status"] == AVAILABLE),
            "seats": [dict(seat) for seat in seats],
        }

    def mark_booked(self, schedule_id: int, seat_ids: List[int]) -> None:
        """Simulate another customer taking seats."""
        for seat in self._schedule_seats(schedule_id):
            if seat["seatId"] in seat_ids:
                seat["status"] = BOOKED

    def _seats_by_id(self, schedule_id: int, seat_ids: List[int]) -> List[Dict[str, Any]]:
        by_id = {seat["seatId"]: seat for seat in self._schedule_seats(schedule_id)}
        missing = [seat_id for seat_id in seat_ids if seat_id not in by_id]
        if missing:
            raise ValidationError(f"Unknown seat ids: {missing}", field_errors={"seatIds": [str(missing)]})
        return [by_id[seat_id] for seat_id in seat_ids]

    def lock_seats(self, schedule_id: int, seat_ids: List[int], user_id: Optional[int] = None) -> Dict[str, Any]:
        if len(seat_ids) > MAX_SELECTED_SEATS:
            raise SelectionLimitError(MAX_SELECTED_SEATS)
        seats = self._seats_by_id(schedule_id, seat_ids)
        for seat in seats:
            held_by = self.holds.get(seat["seatId"], user_id)
            if seat["status"] != AVAILABLE or held_by != user_id:
                raise SeatNotAvailableError(str(seat["seatId"]), seat["status"] if held_by == user_id else "HELD")
        for seat in seats:
            self.holds[seat["seatId"]] = user_id
        return {"success": True, "message": f"{len(seats)} seat(s) held"}

    def release_seats(self, schedule_id: int, seat_ids: List[int], user_id: Optional[int] = None) -> bool:
        for seat in self._seats_by_id(schedule_id, seat_ids):
            if self.holds.get(seat["seatId"], user_id) == user_id:
                self.holds.pop(seat["seatId"], None)
        return True

    def _find_seat(self, schedule_id: int, zone: Optional[str], row_label: str, col_num: int) -> Dict[str, Any]:
        venue_id = self.schedules[schedule_id]["venueId"]
        seat_map = SeatMap.model_validate(self.venues[venue_id])
        row_label = row_label.strip().upper()
        zone = normalize_zone(zone)
        row_tokens = {
            token for section, label, token in _numbered_rows(seat_map)
            if label == row_label and (zone is None or section.zone_key == zone)
        }
        if not row_tokens:
            raise ValidationError(f"Unknown row {row_label}", field_errors={"rowLabel": [row_label]})

        for seat in self.seats[schedule_id]:
            if (
                seat["seatRow"] in row_tokens
                and seat["seatNumber"] == str(col_num)
                and (zone is None or seat["seatZone"] == zone)
            ):
                return seat
        raise ValidationError(f"No seat {row_label}-{col_num} in zone {zone}", field_errors={"seats": [row_label]})

    def create_booking(self, request: CreateBookingRequest) -> Dict[str, Any]:
        self._schedule_seats(request.schedule_id)
        if len(request.seats) > MAX_SELECTED_SEATS:
            raise SelectionLimitError(MAX_SELECTED_SEATS)

        seats = [
            self._find_seat(request.schedule_id, line.zone, line.row_label, line.col_num)
            for line in request.seats
        ]
        if len({seat["seatId"] for seat in seats}) != len(seats):
            raise ValidationError("The same seat appears more than once", field_errors={"seats": ["duplicate"]})
        for seat, line in zip(seats, request.seats):
            if seat["status"] != AVAILABLE:
                raise SeatNotAvailableError(f"{line.row_label}-{line.col_num}", seat["status"])

        booking_id = self._next_booking_id
        self._next_booking_id += 1
        total = sum((Decimal(str(seat["price"])) for seat in seats), Decimal("0"))
        for seat in seats:
            seat["status"] = BOOKED
            self.holds.pop(seat["seatId"], None)

        booking = {
            "bookingId": booking_id,
            "bookingNumber": f"BK{booking_id:06d}",
            "scheduleId": request.schedule_id,
            "seatCount": len(seats),
            "totalAmount": float(total),
            "status": "CONFIRMED",
            "bookedAt": _now(),
            "seats": [
                {
                    "seatId": seat["seatId"],
                    "grade": seat["seatGrade"],
                    "zone": seat["seatZone"],
                    "rowLabel": line.row_label,
                    "colNum": line.col_num,
                    "seatPrice": seat["price"],
                }
                for seat, line in zip(seats, request.seats)
            ],
        }
        self.bookings[booking_id] = booking
        logger.info("Mock booking %s created for schedule %s", booking["bookingNumber"], request.schedule_id)
        return {key: booking[key] for key in (
            "bookingId", "bookingNumber", "scheduleId", "seatCount", "totalAmount", "status", "bookedAt",
        )}

    def list_bookings(self, status: Optional[str] = None, page: int = 1, limit: int = 20) -> Dict[str, Any]:
        bookings = [b for b in self.bookings.values() if status is None or b["status"] == status.upper()]
        start = (page - 1) * limit
        return {"bookings": bookings[start:start + limit], "total": len(bookings), "page": page}

    def cancel_booking(self, booking_id: int, reason: Optional[str] = None) -> Dict[str, Any]:
        booking = self.bookings.get(booking_id)
        if booking is None:
            raise NotFoundError(f"Booking {booking_id} not found", resource_type="booking", resource_id=str(booking_id))
        if booking["status"] == "CANCELLED":
            raise BusinessLogicError(f"Booking {booking_id} is already cancelled")

        seat_ids = {seat["seatId"] for seat in booking["seats"]}
        for seat in self.seats[booking["scheduleId"]]:
            if seat["seatId"] in seat_ids:
                seat["status"] = AVAILABLE
        booking["status"] = "CANCELLED"
        booking["cancelledAt"] = _now()
        logger.info("Mock booking %s cancelled: %s", booking["bookingNumber"], reason)
        return {
            "message": "Booking cancelled",
            "bookingId": booking_id,
            "status": booking["status"],
            "cancelledAt": booking["cancelledAt"],
            "refundAmount": booking["totalAmount"],
        }
