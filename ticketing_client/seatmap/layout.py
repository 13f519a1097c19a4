"""
Layout generation: the rows and seats a seat-map section describes.
"""

from typing import Iterator, List, Sequence

from ..schemas.seat_map import DEFAULT_ALPHABET, Section
from .row_labels import label_to_index, index_to_label
from .seat_codes import SeatAddress


def section_row_labels(section: Section, alphabet: str = DEFAULT_ALPHABET) -> List[str]:
    """Row labels of a section, top to bottom, seeded at ``row_label_from``."""
    if section.rows <= 0:
        return []
    start = label_to_index(section.row_label_from, alphabet)
    return [index_to_label(start + r, alphabet) for r in range(section.rows)]


def section_seat_numbers(section: Section) -> List[int]:
    return list(range(section.seat_start, section.seat_start + max(section.cols, 0)))


def iter_section_seats(section: Section, alphabet: str = DEFAULT_ALPHABET) -> Iterator[SeatAddress]:
    """Every seat of a section, row by row."""
    numbers = section_seat_numbers(section)
    for row_label in section_row_labels(section, alphabet):
        for number in numbers:
            yield SeatAddress(row_label=row_label, seat_number=str(number), zone=section.zone_key)


def generated_row_labels(sections: Sequence[Section], alphabet: str = DEFAULT_ALPHABET) -> List[str]:
    """
    All row labels of a seat map in declaration order, section by section.

    A label shared by several sections (left and right blocks of one row)
    appears once per section, so position i is the i-th generated row.
    """
    labels = []
    for section in sections:
        labels.extend(section_row_labels(section, alphabet))
    return labels

