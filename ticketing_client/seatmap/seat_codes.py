"""
Canonical seat codes.

A seat code is the single string identity of a physical seat:
``[{ZONE}::]{ROW}-{NUMBER}``. Two seats are the same seat exactly when their
codes are equal.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional, Union

from ..utils.exceptions import InvalidSeatCodeError

logger = logging.getLogger(__name__)

ZONE_SEPARATOR = "::"
NUMBER_SEPARATOR = "-"

_DIGITS = re.compile(r"^\d+$")


def normalize_zone(zone: Optional[str]) -> Optional[str]:
    """Trim and upper-case a zone; empty means no zone."""
    if zone is None:
        return None
    normalized = str(zone).strip().upper()
    return normalized or None


@dataclass(frozen=True)
class SeatAddress:
    """Parsed form of a seat code."""
    row_label: str
    seat_number: str
    zone: Optional[str] = None

    @property
    def code(self) -> str:
        return build_seat_code(self.row_label, self.seat_number, self.zone)

    @property
    def column_number(self) -> Optional[int]:
        """Seat number as an integer, or None when it is not purely numeric."""
        if _DIGITS.match(self.seat_number):
            return int(self.seat_number)
        return None


def build_seat_code(row_label: str, seat_number: Union[str, int], zone: Optional[str] = None) -> str:
    """
    Build the canonical code for a seat.

    Raises:
        InvalidSeatCodeError: If a part is empty or contains a separator
    """
    zone = normalize_zone(zone)
    row = str(row_label if row_label is not None else "").strip()
    number = str(seat_number if seat_number is not None else "").strip()
    raw = f"{zone or ''}{ZONE_SEPARATOR if zone else ''}{row}{NUMBER_SEPARATOR}{number}"

    if zone and ":" in zone:
        raise InvalidSeatCodeError(raw, "zone must not contain ':'")
    if not row:
        raise InvalidSeatCodeError(raw, "row label is empty")
    if ZONE_SEPARATOR in row:
        raise InvalidSeatCodeError(raw, f"row label must not contain {ZONE_SEPARATOR!r}")
    if not number:
        raise InvalidSeatCodeError(raw, "seat number is empty")
    if NUMBER_SEPARATOR in number:
        raise InvalidSeatCodeError(raw, f"seat number must not contain {NUMBER_SEPARATOR!r}")

    return f"{zone}{ZONE_SEPARATOR}{row}{NUMBER_SEPARATOR}{number}" if zone else f"{row}{NUMBER_SEPARATOR}{number}"


def parse_seat_code(code: str) -> SeatAddress:
    """
    Parse a seat code back into its parts; the zone segment is optional.

    Raises:
        InvalidSeatCodeError: If the code is not in canonical form
    """
    if not isinstance(code, str):
        raise InvalidSeatCodeError(str(code), "seat code must be a string")

    zone: Optional[str] = None
    rest = code.strip()
    if ZONE_SEPARATOR in rest:
        zone_part, rest = rest.split(ZONE_SEPARATOR, 1)
        zone = normalize_zone(zone_part)
        if zone is None:
            raise InvalidSeatCodeError(code, "zone segment is empty")

    if NUMBER_SEPARATOR not in rest:
        raise InvalidSeatCodeError(code, f"missing {NUMBER_SEPARATOR!r} between row and seat number")
    row, number = rest.rsplit(NUMBER_SEPARATOR, 1)
    row, number = row.strip(), number.strip()
    if not row:
        raise InvalidSeatCodeError(code, "row label is empty")
    if ZONE_SEPARATOR in row:
        raise InvalidSeatCodeError(code, f"row label must not contain {ZONE_SEPARATOR!r}")
    if not number:
        raise InvalidSeatCodeError(code, "seat number is empty")

    return SeatAddress(row_label=row, seat_number=number, zone=zone)


def try_parse_seat_code(code: str) -> Optional[SeatAddress]:
    """Parse a seat code, logging and returning None when it is malformed."""
    try:
        return parse_seat_code(code)
    except InvalidSeatCodeError as e:
        logger.warning("Ignoring malformed seat code: %s", e.message)
        return None
