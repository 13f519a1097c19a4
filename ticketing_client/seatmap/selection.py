"""
Occupancy and selection tracking for one schedule's seat inventory.
"""

import logging
from decimal import Decimal
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple

from ..schemas.seat import SeatDto
from ..schemas.seat_map import SeatMap
from ..utils.exceptions import InvalidSeatCodeError
from .grades import SeatGradeResolver
from .row_remap import build_row_remap, seat_code_for
from .section_index import SectionIndexCache
from .seat_codes import try_parse_seat_code

logger = logging.getLogger(__name__)

# Business rule: one booking holds at most four seats
MAX_SELECTED_SEATS = 4


class SeatState(str, Enum):
    """Display state of a seat."""
    AVAILABLE = "available"
    SELECTED = "selected"
    OCCUPIED = "occupied"
    HOVERED = "hovered"


class SelectionResult(str, Enum):
    """Outcome of a click on a seat."""
    SELECTED = "selected"
    DESELECTED = "deselected"
    OCCUPIED = "occupied"
    LIMIT_REACHED = "limit_reached"
    UNKNOWN_GRADE = "unknown_grade"
    INVALID_CODE = "invalid_code"

    @property
    def accepted(self) -> bool:
        return self in (SelectionResult.SELECTED, SelectionResult.DESELECTED)


class SeatSelection:
    """
    Tracks occupied and selected seat codes for the loaded schedule.

    The backend seat list is replaced wholesale by ``set_seats``; occupancy,
    the code-to-seat table and the row remap are rebuilt from it. Derived
    values (``total_price``, ``selected_seat_ids``) are recomputed after every
    change to the selection or its inputs.
    """

    def __init__(
        self,
        seat_map: Optional[SeatMap] = None,
        seats: Sequence[SeatDto] = (),
        cache: Optional[SectionIndexCache] = None,
    ):
        self.resolver = SeatGradeResolver(seat_map, cache)
        self.seats: Tuple[SeatDto, ...] = ()
        self.row_remap: Dict[str, str] = {}
        self.occupied_codes: FrozenSet[str] = frozenset()
        self.seats_by_code: Dict[str, SeatDto] = {}
        self.seats_by_id: Dict[int, SeatDto] = {}
        self._selected: Dict[str, None] = {}
        self.total_price = Decimal("0")
        self.selected_seat_ids: List[int] = []
        self.set_seats(seats)

    @property
    def seat_map(self) -> SeatMap:
        return self.resolver.seat_map

    @property
    def selected_codes(self) -> Tuple[str, ...]:
        """Selected codes in the order they were picked."""
        return tuple(self._selected)

    def set_seat_map(self, seat_map: Optional[SeatMap]) -> None:
        """Swap in new geometry; the row remap depends on it."""
        self.resolver.seat_map = seat_map or SeatMap.empty()
        self._rebuild_seat_tables()
        self._recompute()

    def set_seats(self, seats: Sequence[SeatDto]) -> None:
        """Replace the backend seat list for the current schedule."""
        self.seats = tuple(seats or ())
        self._rebuild_seat_tables()
        self._recompute()

    def _rebuild_seat_tables(self) -> None:
        seat_map = self.seat_map
        self.row_remap = build_row_remap(seat_map.sections, self.seats, seat_map.alphabet)

        by_code: Dict[str, SeatDto] = {}
        occupied = set()
        for seat in self.seats:
            try:
                code = self.resolver.canonical_code(seat_code_for(seat, self.row_remap))
            except InvalidSeatCodeError as e:
                logger.warning("Skipping backend seat %s: %s", seat.seat_id, e.message)
                continue
            if code in by_code:
                logger.warning("Backend seats %s and %s share seat code %s", by_code[code].seat_id, seat.seat_id, code)
            else:
                by_code[code] = seat
            if not seat.is_available:
                occupied.add(code)

        self.seats_by_code = by_code
        self.seats_by_id = {seat.seat_id: seat for seat in self.seats}
        self.occupied_codes = frozenset(occupied)

        lost = [code for code in self._selected if code in self.occupied_codes]
        for code in lost:
            del self._selected[code]
        if lost:
            logger.info("Dropped selected seats that are now occupied: %s", lost)

    def state_of(self, code: str) -> SeatState:
        if code in self.occupied_codes:
            return SeatState.OCCUPIED
        if code in self._selected:
            return SeatState.SELECTED
        return SeatState.AVAILABLE

    def is_selected(self, code: str) -> bool:
        return code in self._selected

    def toggle(self, code: str) -> SelectionResult:
        """
        Flip a seat between available and selected.

        Occupied seats, a full selection and seats whose grade cannot be
        resolved reject the click and leave the selection unchanged.
        """
        address = try_parse_seat_code(code)
        if address is None:
            return SelectionResult.INVALID_CODE
        code = self.resolver.canonical_code(address.code)

        if code in self.occupied_codes:
            logger.info("Seat %s is occupied", code)
            return SelectionResult.OCCUPIED

        if code in self._selected:
            del self._selected[code]
            self._recompute()
            return SelectionResult.DESELECTED

        if len(self._selected) >= MAX_SELECTED_SEATS:
            logger.warning("Selection limit of %s seats reached, ignoring %s", MAX_SELECTED_SEATS, code)
            return SelectionResult.LIMIT_REACHED

        if self.grade_for(code) is None:
            logger.warning("Seat %s has no resolvable grade, refusing selection", code)
            return SelectionResult.UNKNOWN_GRADE

        self._selected[code] = None
        self._recompute()
        return SelectionResult.SELECTED

    def clear(self) -> None:
        """Drop every selected seat."""
        self._selected.clear()
        self._recompute()

    def grade_for(self, code: str) -> Optional[str]:
        """Backend grade when the seat is known, else the seat map's."""
        seat = self.seats_by_code.get(code)
        if seat is not None and seat.seat_grade:
            return seat.seat_grade
        return self.resolver.resolve(code)

    def price_for(self, code: str) -> Decimal:
        """Grade price from the seat map, else the backend seat price, else zero."""
        price = self.resolver.price_for(code)
        if price is not None:
            return price
        seat = self.seats_by_code.get(code)
        if seat is not None:
            return seat.price
        return Decimal("0")

    def _recompute(self) -> None:
        self.total_price = sum((self.price_for(code) for code in self._selected), Decimal("0"))
        self.selected_seat_ids = [
            self.seats_by_code[code].seat_id for code in self._selected if code in self.seats_by_code
        ]
