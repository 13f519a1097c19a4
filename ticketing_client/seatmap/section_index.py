"""
Section index: row and zone lookup tables derived once per seat map.

Resolving a seat to its section by scanning every section for every seat is
O(sections x rows) per lookup. The index is built once per ``sections`` list
and answers the common case with one dictionary hit; the linear scan remains
as the fallback and defines the expected answer.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Sequence

from ..schemas.seat_map import DEFAULT_ALPHABET, Section
from ..utils.exceptions import InvalidAlphabetError, InvalidRowLabelError
from .layout import section_row_labels
from .seat_codes import normalize_zone

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SectionEntry:
    """A section together with its position and derived row labels."""
    section: Section
    index: int
    grade: Optional[str]
    row_labels: FrozenSet[str] = frozenset()

    @property
    def key(self) -> str:
        return self.section.identity(self.index)

    def matches(self, zone: Optional[str], row_label: str, column: Optional[int]) -> bool:
        """
        Whether a seat belongs to this section.

        A zoned seat only matches sections of the same zone; a seat without a
        zone matches any section. Non-numeric seat numbers skip the column
        range check.
        """
        if zone is not None and self.section.zone_key != zone:
            return False
        if row_label not in self.row_labels:
            return False
        if column is not None and not (self.section.seat_start <= column <= self.section.seat_end):
            return False
        return True


def row_key(row_label: str, zone: Optional[str] = None) -> str:
    return f"{zone}:{row_label}" if zone else row_label


def normalize_row_label(row_label: str) -> str:
    return (row_label or "").strip().upper()


def scan_sections(
    entries: Sequence[SectionEntry],
    zone: Optional[str],
    row_label: str,
    column: Optional[int],
) -> Optional[SectionEntry]:
    """First section, in declaration order, that contains the seat."""
    zone = normalize_zone(zone)
    row_label = normalize_row_label(row_label)
    for entry in entries:
        if entry.matches(zone, row_label, column):
            return entry
    return None


@dataclass
class SectionIndex:
    """Lookup tables over one seat map's sections."""
    entries: List[SectionEntry]
    row_to_section: Dict[str, SectionEntry]
    zone_to_sections: Dict[str, List[SectionEntry]]
    collisions: Dict[str, List[int]] = field(default_factory=dict)

    @classmethod
    def build(cls, sections: Sequence[Section], alphabet: str = DEFAULT_ALPHABET) -> "SectionIndex":
        """
        Build the index for a list of sections.

        Row keys are ``"ZONE:ROW"`` for zoned sections plus a plain ``"ROW"``
        key for every section. When two sections claim the same key the first
        one in declaration order keeps it.
        """
        entries: List[SectionEntry] = []
        row_to_section: Dict[str, SectionEntry] = {}
        zone_to_sections: Dict[str, List[SectionEntry]] = {}
        collisions: Dict[str, List[int]] = {}

        for index, section in enumerate(sections):
            try:
                labels = frozenset(section_row_labels(section, alphabet))
            except (InvalidRowLabelError, InvalidAlphabetError) as e:
                logger.warning("Section %s has unusable row labels, skipping rows: %s", index + 1, e.message)
                labels = frozenset()

            entry = SectionEntry(section=section, index=index, grade=section.grade, row_labels=labels)
            entries.append(entry)
            zone_to_sections.setdefault(entry.key, []).append(entry)

            zone = section.zone_key
            for label in labels:
                keys = [row_key(label, zone), label] if zone else [label]
                for key in keys:
                    existing = row_to_section.get(key)
                    if existing is None:
                        row_to_section[key] = entry
                    elif existing.index != index:
                        collisions.setdefault(key, [existing.index]).append(index)

        ambiguous = [
            key for key, owners in collisions.items()
            if ":" not in key and _ranges_overlap([entries[i].section for i in owners])
        ]
        if ambiguous:
            logger.warning(
                "Seat map has row labels shared by overlapping sections without a zone; "
                "first section wins for rows %s", sorted(ambiguous)
            )

        return cls(
            entries=entries,
            row_to_section=row_to_section,
            zone_to_sections=zone_to_sections,
            collisions=collisions,
        )

    def has_zone(self, zone: Optional[str]) -> bool:
        zone = normalize_zone(zone)
        return zone is not None and any(entry.section.zone_key == zone for entry in self.entries)

    def lookup(self, zone: Optional[str], row_label: str, column: Optional[int]) -> Optional[SectionEntry]:
        """Cached lookup with a linear-scan fallback; both agree for every input."""
        zone = normalize_zone(zone)
        row_label = normalize_row_label(row_label)
        cached = self.row_to_section.get(row_key(row_label, zone))
        if cached is not None and cached.matches(zone, row_label, column):
            return cached
        return scan_sections(self.entries, zone, row_label, column)

    def scan(self, zone: Optional[str], row_label: str, column: Optional[int]) -> Optional[SectionEntry]:
        return scan_sections(self.entries, zone, row_label, column)


def _ranges_overlap(sections: Sequence[Section]) -> bool:
    spans = sorted((s.seat_start, s.seat_end) for s in sections if s.cols > 0)
    return any(later[0] <= earlier[1] for earlier, later in zip(spans, spans[1:]))


class SectionIndexCache:
    """Holds the index for the most recent sections list, rebuilt only when that list changes."""

    def __init__(self):
        self._sections: Optional[Sequence[Section]] = None
        self._alphabet: Optional[str] = None
        self._index: Optional[SectionIndex] = None
        self.builds = 0

    def get(self, sections: Sequence[Section], alphabet: str = DEFAULT_ALPHABET) -> SectionIndex:
        if self._index is None or sections is not self._sections or alphabet != self._alphabet:
            self._index = SectionIndex.build(sections, alphabet)
            self._sections = sections
            self._alphabet = alphabet
            self.builds += 1
        return self._index
