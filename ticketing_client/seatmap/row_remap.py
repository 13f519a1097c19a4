"""
Row remapping between backend seat rows and seat-map row labels.

Some backends number rows ("1", "2", ...) while the seat map labels them
alphabetically. When every backend row is numeric the n-th smallest number is
paired with the n-th generated label. Otherwise no table is built and row
labels are extracted from the raw backend value.
"""

import logging
import re
from typing import Dict, Mapping, Optional, Sequence

from ..schemas.seat import SeatDto
from ..schemas.seat_map import DEFAULT_ALPHABET, Section
from ..utils.exceptions import TicketingError
from .layout import generated_row_labels
from .seat_codes import build_seat_code

logger = logging.getLogger(__name__)

_NUMERIC = re.compile(r"^\d+$")
_LETTER_RUN = re.compile(r"[A-Z]+")
_DIGIT_RUN = re.compile(r"\d+")


def normalize_row_token(raw: Optional[str]) -> str:
    return str(raw if raw is not None else "").strip().upper()


def build_row_remap(
    sections: Sequence[Section],
    seats: Sequence[SeatDto],
    alphabet: str = DEFAULT_ALPHABET,
) -> Dict[str, str]:
    """
    Build the numeric-row to row-label table for one seat map and seat list.

    Returns an empty table when either input is missing, when any backend row
    is non-numeric, or when the inputs cannot be processed.
    """
    if not sections or not seats:
        return {}

    try:
        tokens = {normalize_row_token(seat.seat_row) for seat in seats}
        tokens.discard("")
        if not tokens or not all(_NUMERIC.match(token) for token in tokens):
            return {}

        labels = generated_row_labels(sections, alphabet)
        ordered = sorted(tokens, key=lambda token: (int(token), token))
        return dict(zip(ordered, labels))
    except (TicketingError, ValueError, TypeError, AttributeError) as e:
        logger.warning("Could not build row remap, falling back to raw row labels: %s", e)
        return {}


def extract_row_label(raw: Optional[str]) -> str:
    """
    Heuristic row label for a raw backend row.

    The last run of letters wins ("ROW B" -> "B", "B12" -> "B"), then the
    last run of digits ("#12" -> "12"), then the trimmed value itself.
    """
    token = normalize_row_token(raw)
    letters = _LETTER_RUN.findall(token)
    if letters:
        return letters[-1]
    digits = _DIGIT_RUN.findall(token)
    if digits:
        return digits[-1]
    return token


def row_label_for(raw_row: Optional[str], remap: Mapping[str, str]) -> str:
    """Row label for a backend row: the remap table first, then the heuristic."""
    token = normalize_row_token(raw_row)
    mapped = remap.get(token)
    if mapped is not None:
        return mapped
    return extract_row_label(raw_row)


def seat_code_for(seat: SeatDto, remap: Mapping[str, str]) -> str:
    """Canonical seat code for a backend seat."""
    return build_seat_code(row_label_for(seat.seat_row, remap), seat.seat_number, seat.seat_zone)
