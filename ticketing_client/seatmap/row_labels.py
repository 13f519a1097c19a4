"""
Row label codec.

Row labels are bijective base-N numerals over a configurable alphabet, the
way spreadsheet columns are numbered: with the default alphabet ``A`` is row
0, ``Z`` is row 25 and ``AA`` is row 26. Venues that skip visually ambiguous
letters (``I``, ``O``) pass their own alphabet.
"""

from functools import lru_cache
from typing import Dict

from ..schemas.seat_map import DEFAULT_ALPHABET
from ..utils.exceptions import InvalidAlphabetError, InvalidRowLabelError


def normalize_alphabet(alphabet: str) -> str:
    return (alphabet or "").strip().upper()


@lru_cache(maxsize=32)
def _positions(alphabet: str) -> Dict[str, int]:
    alphabet = normalize_alphabet(alphabet)
    if not alphabet:
        raise InvalidAlphabetError(alphabet, "alphabet is empty")
    positions: Dict[str, int] = {}
    for i, ch in enumerate(alphabet):
        if ch in ":-" or ch.isspace():
            raise InvalidAlphabetError(alphabet, f"character {ch!r} is reserved in seat codes")
        if ch in positions:
            raise InvalidAlphabetError(alphabet, f"character {ch!r} appears more than once")
        positions[ch] = i
    return positions


def label_to_index(label: str, alphabet: str = DEFAULT_ALPHABET) -> int:
    """
    Convert a row label to its zero-based row index.

    Raises:
        InvalidRowLabelError: If the label is empty or uses a character outside the alphabet
    """
    positions = _positions(normalize_alphabet(alphabet))
    base = len(positions)
    normalized = (label or "").strip().upper()
    if not normalized:
        raise InvalidRowLabelError(label, "label is empty")

    value = 0
    for ch in normalized:
        pos = positions.get(ch)
        if pos is None:
            raise InvalidRowLabelError(label, f"character {ch!r} is not in the row alphabet")
        value = value * base + pos + 1
    return value - 1


def index_to_label(index: int, alphabet: str = DEFAULT_ALPHABET) -> str:
    """
    Convert a zero-based row index to its label.

    Raises:
        InvalidRowLabelError: If the index is negative
    """
    alphabet = normalize_alphabet(alphabet)
    base = len(_positions(alphabet))
    if index < 0:
        raise InvalidRowLabelError(str(index), "row index is negative")

    chars = []
    n = index + 1
    while n > 0:
        n, rem = divmod(n - 1, base)
        chars.append(alphabet[rem])
    return "".join(reversed(chars))


def label_for(start_label: str, offset: int, alphabet: str = DEFAULT_ALPHABET) -> str:
    """Label of the row ``offset`` rows after ``start_label``."""
    return index_to_label(label_to_index(start_label, alphabet) + offset, alphabet)
