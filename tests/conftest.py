"""
Shared fixtures for the seat booking client tests.
"""

from typing import Any, Dict, List

import httpx
import pytest

from ticketing_client.api import ApiClient, TicketingApi
from ticketing_client.cache import MemoryStore
from ticketing_client.mock_server import DEMO_SEAT_MAP, MockBackend, create_app
from ticketing_client.schemas.seat import SeatDto
from ticketing_client.schemas.seat_map import SeatMap
from ticketing_client.utils.retry import RetryConfig

NO_RETRY = RetryConfig(max_attempts=1, base_delay=0, jitter=False)


def make_seat_map(sections: List[Dict[str, Any]], pricing: Dict[str, int] = None, alphabet: str = None) -> SeatMap:
    payload: Dict[str, Any] = {"sections": sections, "pricing": pricing or {}}
    if alphabet:
        payload["meta"] = {"alphabet": alphabet}
    return SeatMap.model_validate(payload)


def make_seat(seat_id: int, row: str, number, zone: str = None, grade: str = None,
              price: int = 0, status: str = "AVAILABLE") -> SeatDto:
    return SeatDto.model_validate({
        "seatId": seat_id,
        "seatRow": row,
        "seatNumber": number,
        "seatZone": zone,
        "seatGrade": grade,
        "price": price,
        "status": status,
    })


@pytest.fixture
def single_section_map() -> SeatMap:
    """Two rows of three R-grade seats."""
    return make_seat_map(
        [{"rows": 2, "cols": 3, "rowLabelFrom": "A", "seatStart": 1, "grade": "R"}],
        pricing={"R": 50000},
    )


@pytest.fixture
def zoned_map() -> SeatMap:
    """Two zones sharing row labels plus a zoneless balcony."""
    return make_seat_map(
        [
            {"zone": "A", "rows": 3, "cols": 6, "rowLabelFrom": "A", "seatStart": 1, "grade": "VIP"},
            {"zone": "B", "rows": 3, "cols": 6, "rowLabelFrom": "A", "seatStart": 7, "grade": "R"},
            {"rows": 2, "cols": 10, "rowLabelFrom": "D", "seatStart": 1, "grade": "S"},
        ],
        pricing={"VIP": 150000, "R": 100000, "S": 70000},
    )


@pytest.fixture
def demo_seat_map() -> SeatMap:
    return SeatMap.model_validate(DEMO_SEAT_MAP)


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def backend() -> MockBackend:
    return MockBackend.demo()


@pytest.fixture
async def api(backend, store):
    """Client wired to the in-process mock backend."""
    transport = httpx.ASGITransport(app=create_app(backend))
    client = ApiClient(store=store, base_url="http://mock", transport=transport, retry_config=NO_RETRY)
    ticketing_api = TicketingApi(client)
    yield ticketing_api
    await ticketing_api.close()
