"""
Venue seat-map endpoints.
"""

import logging
from typing import Any

from ..schemas.seat_map import SeatMap, normalize_seat_map_payload
from .client import ApiClient

logger = logging.getLogger(__name__)


class VenueApi:
    """Venue geometry from the backend."""

    def __init__(self, client: ApiClient):
        self.client = client

    async def get_seat_map_payload(self, venue_id: int) -> Any:
        """Raw seat-map response in whichever envelope the backend uses."""
        return await self.client.get(f"/api/venues/{venue_id}/seatmap")

    async def get_seat_map(self, venue_id: int) -> SeatMap:
        """
        Fetch and normalize a venue's seat map.

        Raises:
            ValidationError: If the response matches no known envelope
            ApiRequestError: If the request fails
        """
        payload = await self.get_seat_map_payload(venue_id)
        seat_map = normalize_seat_map_payload(payload)
        logger.debug("Loaded seat map for venue %s with %s sections", venue_id, len(seat_map.sections))
        return seat_map
