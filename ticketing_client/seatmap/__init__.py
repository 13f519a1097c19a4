"""Seat-map addressing, lookup and selection logic."""

from .row_labels import label_for, label_to_index, index_to_label
from .seat_codes import SeatAddress, build_seat_code, parse_seat_code
from .section_index import SectionIndex, SectionIndexCache
from .row_remap import build_row_remap, extract_row_label, seat_code_for
from .grades import SeatGradeResolver, resolve_grade
from .selection import MAX_SELECTED_SEATS, SeatSelection, SeatState, SelectionResult
from .payload import assemble_booking_request
from .renderer import render_seat_map, format_seat_map

__all__ = [
    "label_for", "label_to_index", "index_to_label",
    "SeatAddress", "build_seat_code", "parse_seat_code",
    "SectionIndex", "SectionIndexCache",
    "build_row_remap", "extract_row_label", "seat_code_for",
    "SeatGradeResolver", "resolve_grade",
    "MAX_SELECTED_SEATS", "SeatSelection", "SeatState", "SelectionResult",
    "assemble_booking_request",
    "render_seat_map", "format_seat_map",
]
