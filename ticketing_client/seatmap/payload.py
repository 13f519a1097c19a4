"""
Booking payload assembly.
"""

import logging
from typing import Callable, Iterable, List, Mapping, Optional, Sequence

from ..schemas.booking import BookingSeatLine, CreateBookingRequest
from ..schemas.seat import SeatDto
from ..schemas.seat_map import SeatMap
from ..utils.exceptions import BookingPayloadError, InvalidSeatCodeError
from .grades import SeatGradeResolver
from .seat_codes import normalize_zone, parse_seat_code
from .selection import MAX_SELECTED_SEATS

logger = logging.getLogger(__name__)


def assemble_booking_request(
    schedule_id: int,
    selected_codes: Sequence[str],
    seat_map: SeatMap,
    seats_by_code: Mapping[str, SeatDto],
    resolver: Optional[SeatGradeResolver] = None,
    occupied_codes: Iterable[str] = (),
    raw_seat_ids: Sequence[int] = (),
    seats_by_id: Optional[Mapping[int, SeatDto]] = None,
    row_code_of: Optional[Callable[[SeatDto], str]] = None,
    queue_token: Optional[str] = None,
) -> CreateBookingRequest:
    """
    Build the booking request for the final selection.

    Selected codes are preferred; when none are given the raw seat ids are
    translated through ``seats_by_id`` and ``row_code_of``. Grade and zone
    come from the backend seat record when it has them, otherwise from the
    seat map and the parsed code. The request is all-or-nothing: any seat
    that cannot be resolved rejects the whole request.

    Raises:
        BookingPayloadError: If the seat map is not loaded, the selection is
            empty, or any selected seat is invalid, occupied or ungraded
    """
    if not seat_map.sections:
        raise BookingPayloadError("Seat map is not available; booking is disabled until it loads")

    codes = list(dict.fromkeys(selected_codes))
    if not codes and raw_seat_ids:
        if seats_by_id is None or row_code_of is None:
            raise BookingPayloadError("Seat ids were given without a seat table to translate them")
        missing = [seat_id for seat_id in raw_seat_ids if seat_id not in seats_by_id]
        if missing:
            raise BookingPayloadError(f"Unknown seat ids: {missing}")
        codes = list(dict.fromkeys(row_code_of(seats_by_id[seat_id]) for seat_id in raw_seat_ids))

    if not codes:
        raise BookingPayloadError("No seats selected")
    if len(codes) > MAX_SELECTED_SEATS:
        raise BookingPayloadError(f"At most {MAX_SELECTED_SEATS} seats can be booked at once", seat_codes=codes)

    resolver = resolver or SeatGradeResolver(seat_map)
    occupied = set(occupied_codes)
    lines: List[BookingSeatLine] = []
    for code in codes:
        try:
            address = parse_seat_code(code)
        except InvalidSeatCodeError as e:
            raise BookingPayloadError(e.message, seat_codes=[code])

        canonical = address.code
        if canonical in occupied:
            raise BookingPayloadError(f"Seat {canonical} is no longer available", seat_codes=[canonical])

        column = address.column_number
        if column is None:
            raise BookingPayloadError(f"Seat {canonical} has a non-numeric seat number", seat_codes=[canonical])

        seat = seats_by_code.get(canonical)
        grade = (seat.seat_grade if seat is not None else None) or resolver.resolve(canonical)
        if not grade:
            raise BookingPayloadError(f"Seat {canonical} has no known grade", seat_codes=[canonical])
        zone = normalize_zone(seat.seat_zone if seat is not None else None) or address.zone

        lines.append(BookingSeatLine(grade=grade, zone=zone, row_label=address.row_label, col_num=column))

    request = CreateBookingRequest(schedule_id=schedule_id, seats=lines, queue_token=queue_token or None)
    logger.debug("Assembled booking request for schedule %s with %s seats", schedule_id, len(lines))
    return request
