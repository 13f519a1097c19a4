"""
Seat map rendering.

Turns the seat map and the current selection into a view model of sections,
rows and cells, and formats that view as a plain-text grid. Nothing here
holds state between calls.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from ..schemas.seat_map import SeatMap
from ..utils.exceptions import InvalidAlphabetError, InvalidRowLabelError
from .layout import section_row_labels, section_seat_numbers
from .seat_codes import build_seat_code
from .selection import SeatSelection, SeatState

UNAVAILABLE_MESSAGE = "Seat map unavailable"

_STATE_GLYPHS = {
    SeatState.AVAILABLE: "o",
    SeatState.SELECTED: "*",
    SeatState.OCCUPIED: "x",
    SeatState.HOVERED: "?",
}


@dataclass(frozen=True)
class SeatCell:
    code: str
    seat_number: int
    state: SeatState
    grade: Optional[str] = None
    price: Optional[Decimal] = None

    @property
    def title(self) -> str:
        price = f"{self.price:,.0f}" if self.price is not None else "-"
        return f"{self.code} - {self.grade or 'Standard'} - {price}"


@dataclass
class RowView:
    label: str
    cells: List[SeatCell] = field(default_factory=list)


@dataclass
class SectionView:
    key: str
    grade: Optional[str]
    rows: List[RowView] = field(default_factory=list)


@dataclass
class SeatMapView:
    sections: List[SectionView] = field(default_factory=list)
    selected_count: int = 0
    total_price: Decimal = Decimal("0")
    message: Optional[str] = None

    @property
    def available(self) -> bool:
        return bool(self.sections)


def render_seat_map(
    seat_map: SeatMap,
    selection: Optional[SeatSelection] = None,
    hovered: Optional[str] = None,
) -> SeatMapView:
    """Build the view model; occupied wins over selected, selected over hovered."""
    if not seat_map.sections:
        return SeatMapView(message=UNAVAILABLE_MESSAGE)

    view = SeatMapView()
    for index, section in enumerate(seat_map.sections):
        grade = section.grade
        price = seat_map.pricing.get(grade) if grade else None
        section_view = SectionView(key=section.identity(index), grade=grade)
        try:
            labels = section_row_labels(section, seat_map.alphabet)
        except (InvalidRowLabelError, InvalidAlphabetError):
            labels = []

        for label in labels:
            row = RowView(label=label)
            for number in section_seat_numbers(section):
                code = build_seat_code(label, number, section.zone_key)
                state = selection.state_of(code) if selection is not None else SeatState.AVAILABLE
                if state is SeatState.AVAILABLE and code == hovered:
                    state = SeatState.HOVERED
                row.cells.append(SeatCell(code=code, seat_number=number, state=state, grade=grade, price=price))
            section_view.rows.append(row)
        view.sections.append(section_view)

    if selection is not None:
        view.selected_count = len(selection.selected_codes)
        view.total_price = selection.total_price
    return view


def format_seat_map(view: SeatMapView) -> str:
    """Plain-text grid with a stage banner and legend."""
    if not view.available:
        return view.message or UNAVAILABLE_MESSAGE

    lines = ["[ STAGE ]", ""]
    for section in view.sections:
        header = section.key if not section.grade else f"{section.key} ({section.grade})"
        lines.append(header)
        for row in section.rows:
            glyphs = " ".join(_STATE_GLYPHS[cell.state] for cell in row.cells)
            lines.append(f"{row.label:>3} {glyphs}")
        lines.append("")

    lines.append("o available  * selected  x occupied  ? hovered")
    if view.selected_count:
        lines.append(f"Selected {view.selected_count} seat(s), total {view.total_price:,.0f}")
    return "\n".join(lines)
