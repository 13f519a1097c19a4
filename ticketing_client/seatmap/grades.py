"""
Seat grade resolution.
"""

import logging
from decimal import Decimal
from typing import Optional

from ..schemas.seat_map import SeatMap
from .section_index import SectionEntry, SectionIndex, SectionIndexCache, normalize_row_label
from .seat_codes import SeatAddress, build_seat_code, try_parse_seat_code

logger = logging.getLogger(__name__)


class SeatGradeResolver:
    """
    Resolves seat codes to the section, grade and price that own them.

    An unresolved grade is an expected transient state while the seat map is
    still loading; callers treat ``None`` as "unknown".
    """

    def __init__(self, seat_map: Optional[SeatMap] = None, cache: Optional[SectionIndexCache] = None):
        self.cache = cache or SectionIndexCache()
        self.seat_map = seat_map or SeatMap.empty()

    @property
    def index(self) -> SectionIndex:
        return self.cache.get(self.seat_map.sections, self.seat_map.alphabet)

    def section_for(self, code: str, use_index: bool = True) -> Optional[SectionEntry]:
        address = try_parse_seat_code(code)
        if address is None or not self.seat_map.sections:
            return None
        return self.section_for_address(address, use_index=use_index)

    def section_for_address(self, address: SeatAddress, use_index: bool = True) -> Optional[SectionEntry]:
        index = self.index
        find = index.lookup if use_index else index.scan
        column = address.column_number

        entry = find(address.zone, address.row_label, column)
        if entry is None and address.zone is not None and not index.has_zone(address.zone):
            # The backend named a zone the seat map does not declare
            entry = find(None, address.row_label, column)
        return entry

    def canonical_code(self, code: str) -> str:
        """
        Re-address a code with the zone of the section that owns it.

        Backend seats may omit the zone the seat map declares, or name a zone
        the seat map does not use; both are mapped onto the seat map's own
        addressing so that rendered cells and backend seats share one code.
        """
        address = try_parse_seat_code(code)
        if address is None:
            return code
        entry = self.section_for_address(address) if self.seat_map.sections else None
        if entry is None:
            return address.code
        return build_seat_code(normalize_row_label(address.row_label), address.seat_number, entry.section.zone_key)

    def resolve(self, code: str) -> Optional[str]:
        """Grade of the section that owns ``code``, or None."""
        entry = self.section_for(code)
        return entry.grade if entry is not None else None

    def price_for(self, code: str) -> Optional[Decimal]:
        """Price of the seat's grade from the seat map's pricing table, or None."""
        grade = self.resolve(code)
        if grade is None:
            return None
        return self.seat_map.pricing.get(grade)


def resolve_grade(code: str, seat_map: SeatMap) -> Optional[str]:
    """One-off grade lookup; long-lived callers should keep a ``SeatGradeResolver``."""
    return SeatGradeResolver(seat_map).resolve(code)
