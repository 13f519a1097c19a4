"""
Pydantic schemas for venue seat-map geometry.
"""

import json
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import Field, field_validator

from .common import CamelModel
from ..utils.exceptions import ValidationError

DEFAULT_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"


class SeatMapMeta(CamelModel):
    """Optional seat-map metadata."""
    alphabet: Optional[str] = Field(None, description="Row label alphabet override")


class Section(CamelModel):
    """A rectangular block of seats sharing one price grade."""
    rows: int = Field(..., ge=0, description="Number of rows in the block")
    cols: int = Field(..., ge=0, description="Number of seats per row")
    row_label_from: str = Field(..., min_length=1, description="Label of the first row")
    seat_start: int = Field(1, description="Seat number of the first column")
    zone: Optional[str] = None
    name: Optional[str] = None
    grade: Optional[str] = None

    @field_validator("row_label_from", mode="before")
    @classmethod
    def coerce_row_label(cls, v):
        return str(v).strip() if v is not None else v

    @field_validator("seat_start", mode="before")
    @classmethod
    def default_seat_start(cls, v):
        return 1 if v is None else v

    @property
    def zone_key(self) -> Optional[str]:
        """Zone normalized the way seat codes normalize it."""
        if self.zone is None:
            return None
        zone = self.zone.strip().upper()
        return zone or None

    @property
    def seat_end(self) -> int:
        """Seat number of the last column (inclusive)."""
        return self.seat_start + self.cols - 1

    def identity(self, index: int) -> str:
        """Lookup identity: zone, else name, else a positional id."""
        if self.zone_key:
            return self.zone_key
        if self.name and self.name.strip():
            return self.name.strip()
        return f"SECTION-{index + 1}"


class SeatMap(CamelModel):
    """Venue seat-map description as delivered by the backend."""
    meta: Optional[SeatMapMeta] = None
    pricing: Dict[str, Decimal] = Field(default_factory=dict)
    sections: List[Section] = Field(default_factory=list)

    @field_validator("sections", "pricing", mode="before")
    @classmethod
    def none_to_empty(cls, v, info):
        if v is None:
            return [] if info.field_name == "sections" else {}
        return v

    @property
    def alphabet(self) -> str:
        if self.meta and self.meta.alphabet:
            return self.meta.alphabet
        return DEFAULT_ALPHABET

    @property
    def is_available(self) -> bool:
        return len(self.sections) > 0

    @classmethod
    def empty(cls) -> "SeatMap":
        return cls(sections=[])


class SeatMapEnvelope(str, Enum):
    """Known response shapes of the seat-map endpoint."""
    BARE = "bare"
    SEAT_MAP_JSON = "seat_map_json"
    DATA_WRAPPED = "data_wrapped"


def _decode(value: Any) -> Any:
    # seatMapJson is sometimes stored as a JSON string column
    if isinstance(value, (str, bytes)):
        try:
            return json.loads(value)
        except ValueError as e:
            raise ValidationError(f"seatMapJson is not valid JSON: {e}")
    return value


def classify_seat_map_payload(payload: Any) -> Tuple[SeatMapEnvelope, Dict[str, Any]]:
    """
    Identify which envelope a seat-map response uses and return the bare map.

    Raises:
        ValidationError: If the payload matches none of the known shapes
    """
    payload = _decode(payload)
    if not isinstance(payload, dict):
        raise ValidationError(f"Unrecognized seat map payload type: {type(payload).__name__}")

    if "sections" in payload:
        return SeatMapEnvelope.BARE, payload
    if "seatMapJson" in payload:
        inner = _decode(payload["seatMapJson"])
        if isinstance(inner, dict):
            return SeatMapEnvelope.SEAT_MAP_JSON, inner
    data = payload.get("data")
    if isinstance(data, dict):
        if "seatMapJson" in data:
            inner = _decode(data["seatMapJson"])
            if isinstance(inner, dict):
                return SeatMapEnvelope.DATA_WRAPPED, inner
        if "sections" in data:
            return SeatMapEnvelope.DATA_WRAPPED, data

    raise ValidationError(
        "Unrecognized seat map payload",
        field_errors={"payload": [f"keys: {sorted(payload.keys())}"]}
    )


def normalize_seat_map_payload(payload: Any) -> SeatMap:
    """Resolve any known seat-map envelope into a ``SeatMap``."""
    _, bare = classify_seat_map_payload(payload)
    return SeatMap.model_validate(bare)
