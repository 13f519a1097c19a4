"""HTTP endpoints of the ticketing backend."""

from typing import Optional

from ..cache import KeyValueStore
from .client import ApiClient
from .venues import VenueApi
from .seats import SeatApi
from .bookings import BookingApi
from .performances import PerformanceApi


class TicketingApi:
    """All endpoint groups sharing one ``ApiClient``."""

    def __init__(self, client: ApiClient):
        self.client = client
        self.venues = VenueApi(client)
        self.seats = SeatApi(client)
        self.bookings = BookingApi(client)
        self.performances = PerformanceApi(client)

    @classmethod
    def create(cls, store: Optional[KeyValueStore] = None, **client_kwargs) -> "TicketingApi":
        return cls(ApiClient(store=store, **client_kwargs))

    async def close(self) -> None:
        await self.client.close()


__all__ = ["ApiClient", "TicketingApi", "VenueApi", "SeatApi", "BookingApi", "PerformanceApi"]
