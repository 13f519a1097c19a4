"""
Seat map loading with stale-result protection.
"""

import logging
from typing import Optional

from pydantic import ValidationError as SchemaValidationError

from ..api.venues import VenueApi
from ..schemas.seat_map import SeatMap
from ..utils.exceptions import SeatMapUnavailableError, TicketingError

logger = logging.getLogger(__name__)


class RequestTicket:
    """
    Generation counter for async fetches.

    Each fetch takes a ticket before awaiting; when it completes, its result
    is applied only if no newer ticket was issued (or the counter was
    invalidated) in the meantime.
    """

    def __init__(self):
        self._generation = 0

    @property
    def current(self) -> int:
        return self._generation

    def issue(self) -> int:
        self._generation += 1
        return self._generation

    def is_current(self, ticket: int) -> bool:
        return ticket == self._generation

    def invalidate(self) -> None:
        self._generation += 1


class SeatMapLoader:
    """Fetches a venue's seat map and keeps the most recent one."""

    def __init__(self, venues: VenueApi):
        self.venues = venues
        self.ticket = RequestTicket()
        self.venue_id: Optional[int] = None
        self.seat_map = SeatMap.empty()
        self.error: Optional[SeatMapUnavailableError] = None

    async def load(self, venue_id: Optional[int]) -> SeatMap:
        """
        Load the seat map of ``venue_id``.

        Never raises: without a venue id, or when the fetch or the payload
        fails, the result is an empty map and ``error`` records why. A
        completion overtaken by a newer ``load`` call is discarded and the
        current map is returned unchanged.
        """
        ticket = self.ticket.issue()
        if venue_id is None:
            self._apply(None, SeatMap.empty(), None)
            return self.seat_map

        error: Optional[SeatMapUnavailableError] = None
        try:
            seat_map = await self.venues.get_seat_map(venue_id)
        except (TicketingError, SchemaValidationError) as e:
            message = e.message if isinstance(e, TicketingError) else str(e)
            logger.warning("Seat map for venue %s unavailable: %s", venue_id, message)
            seat_map = SeatMap.empty()
            error = SeatMapUnavailableError(venue_id, message)

        if not self.ticket.is_current(ticket):
            logger.debug("Discarding stale seat map for venue %s", venue_id)
            return self.seat_map

        self._apply(venue_id, seat_map, error)
        return self.seat_map

    def invalidate(self) -> None:
        """Make any in-flight load stale."""
        self.ticket.invalidate()

    def _apply(self, venue_id: Optional[int], seat_map: SeatMap, error: Optional[SeatMapUnavailableError]) -> None:
        self.venue_id = venue_id
        self.seat_map = seat_map
        self.error = error
        if seat_map.sections:
            logger.info("Seat map for venue %s ready: %s sections", venue_id, len(seat_map.sections))
