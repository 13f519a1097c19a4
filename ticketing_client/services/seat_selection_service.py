"""
Seat selection and booking flow for one performance.

Wires the loaders, the selection tracker and the booking endpoint together:
the performance names the venue, the venue's seat map is loaded, the chosen
schedule's seat list is loaded on top of it, the user's clicks drive the
bounded selection, and ``book`` submits the result.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from pydantic import ValidationError as SchemaValidationError

from ..api import TicketingApi
from ..cache import BookingSeatCodeCache, KeyValueStore, StorageKeys
from ..schemas.booking import CreateBookingResponse
from ..schemas.performance import PerformanceResponse, ScheduleResponse, resolve_venue_id
from ..schemas.seat_map import SeatMap
from ..seatmap.payload import assemble_booking_request
from ..seatmap.renderer import SeatMapView, render_seat_map
from ..seatmap.section_index import SectionIndexCache
from ..seatmap.selection import SeatSelection, SelectionResult
from ..utils.exceptions import (
    BookingPayloadError,
    ConcurrencyError,
    ErrorCode,
    TicketingError,
)
from ..utils.logging_config import log_business_event
from .seat_map_loader import RequestTicket, SeatMapLoader

logger = logging.getLogger(__name__)


@dataclass
class BookingOutcome:
    """Result of a booking attempt; failures carry the reason instead of raising."""
    success: bool
    seat_codes: List[str] = field(default_factory=list)
    booking: Optional[CreateBookingResponse] = None
    error: Optional[str] = None
    error_code: Optional[ErrorCode] = None

    @property
    def booking_number(self) -> Optional[str]:
        return self.booking.booking_number if self.booking is not None else None


def _describe(error: Exception) -> str:
    return error.message if isinstance(error, TicketingError) else str(error)


class SeatSelectionService:
    """Stateful seat booking session for one user."""

    def __init__(
        self,
        api: TicketingApi,
        store: Optional[KeyValueStore] = None,
        cache: Optional[SectionIndexCache] = None,
    ):
        self.api = api
        self.store = store or api.client.store
        self.loader = SeatMapLoader(api.venues)
        self.selection = SeatSelection(cache=cache)
        self.seat_codes_cache = BookingSeatCodeCache(self.store)
        self.seats_ticket = RequestTicket()

        self.performance: Optional[PerformanceResponse] = None
        self.schedules: List[ScheduleResponse] = []
        self.schedule_id: Optional[int] = None
        self.seats_error: Optional[str] = None
        self.hovered: Optional[str] = None

        self.held_schedule_id: Optional[int] = None
        self.held_seat_ids: List[int] = []

    @property
    def seat_map(self) -> SeatMap:
        return self.selection.seat_map

    @property
    def booking_enabled(self) -> bool:
        """Booking needs a schedule, a loaded seat map and at least one seat."""
        return (
            self.schedule_id is not None
            and self.seat_map.is_available
            and bool(self.selection.selected_codes)
        )

    async def open_performance(self, performance_id: int) -> PerformanceResponse:
        """
        Load a performance, its schedules and its venue's seat map.

        Raises:
            NotFoundError: If the performance does not exist
            ApiRequestError: If the performance cannot be fetched
        """
        await self.reset()
        performance = await self.api.performances.get_performance(performance_id)

        schedules = list(performance.schedules)
        if not schedules:
            try:
                schedules = (await self.api.performances.get_schedules(performance_id)).schedules
            except (TicketingError, SchemaValidationError) as e:
                logger.warning("Schedules of performance %s unavailable: %s", performance_id, _describe(e))

        self.performance = performance
        self.schedules = schedules
        await self.load_venue(resolve_venue_id(performance, schedules))
        return performance

    async def load_venue(self, venue_id: Optional[int]) -> SeatMap:
        """Load a venue's seat map; any seat list is re-derived against it."""
        seat_map = await self.loader.load(venue_id)
        self.selection.set_seat_map(seat_map)
        return seat_map

    async def select_schedule(self, schedule_id: int) -> bool:
        """Switch to ``schedule_id``; the selection starts empty and held seats are released."""
        await self.release_holds()
        self.schedule_id = schedule_id
        self.selection.clear()
        self.selection.set_seats(())
        return await self.reload_seats()

    async def reload_seats(self) -> bool:
        """
        Replace the seat list of the current schedule.

        Returns False when there is no schedule, the fetch failed (the seat
        list is then empty and ``seats_error`` set) or the result was
        overtaken by a newer request.
        """
        schedule_id = self.schedule_id
        if schedule_id is None:
            return False

        ticket = self.seats_ticket.issue()
        try:
            response = await self.api.seats.get_schedule_seats(schedule_id)
            seats, error = response.seats, None
        except (TicketingError, SchemaValidationError) as e:
            logger.warning("Seat list of schedule %s unavailable: %s", schedule_id, _describe(e))
            seats, error = [], _describe(e)

        if not self.seats_ticket.is_current(ticket) or schedule_id != self.schedule_id:
            logger.debug("Discarding stale seat list for schedule %s", schedule_id)
            return False

        self.seats_error = error
        self.selection.set_seats(seats)
        return error is None

    def toggle_seat(self, code: str) -> SelectionResult:
        return self.selection.toggle(code)

    def hover(self, code: Optional[str]) -> None:
        self.hovered = code

    def render(self) -> SeatMapView:
        return render_seat_map(self.seat_map, self.selection, self.hovered)

    async def hold_selection(self) -> bool:
        """
        Ask the backend to hold the selected seats.

        A conflict means someone else got there first; the seat list is
        reloaded so the taken seats show as occupied.
        """
        seat_ids = list(self.selection.selected_seat_ids)
        if self.schedule_id is None or not seat_ids:
            return False

        await self.release_holds()
        try:
            response = await self.api.seats.lock_seats(
                self.schedule_id, seat_ids, user_id=await self._current_user_id()
            )
        except ConcurrencyError as e:
            logger.info("Seat hold conflict on schedule %s: %s", self.schedule_id, e.message)
            await self.reload_seats()
            return False
        except (TicketingError, SchemaValidationError) as e:
            logger.warning("Seat hold failed on schedule %s: %s", self.schedule_id, _describe(e))
            return False

        if response.success:
            self.held_schedule_id = self.schedule_id
            self.held_seat_ids = seat_ids
        return response.success

    async def release_holds(self) -> None:
        """Release seats held for this session; failures are logged only."""
        if self.held_schedule_id is None or not self.held_seat_ids:
            return
        schedule_id, seat_ids = self.held_schedule_id, self.held_seat_ids
        self.held_schedule_id, self.held_seat_ids = None, []
        try:
            await self.api.seats.release_seats(schedule_id, seat_ids, user_id=await self._current_user_id())
        except TicketingError as e:
            logger.warning("Failed to release held seats %s on schedule %s: %s", seat_ids, schedule_id, e.message)

    async def reset(self) -> None:
        """Abandon the flow: in-flight loads become stale and holds are released."""
        self.loader.invalidate()
        self.seats_ticket.invalidate()
        await self.release_holds()
        self.schedule_id = None
        self.seats_error = None
        self.hovered = None
        self.selection.clear()
        self.selection.set_seats(())

    async def book(self) -> BookingOutcome:
        """
        Submit the current selection as one booking.

        Never raises for expected failures. A request that cannot be
        assembled is rejected before anything is sent. A failed submission
        clears the selection and reloads the seat list so the user chooses
        again against fresh availability.
        """
        codes = list(self.selection.selected_codes)
        if self.schedule_id is None:
            return BookingOutcome(
                success=False, seat_codes=codes,
                error="No schedule selected", error_code=ErrorCode.VALIDATION_ERROR,
            )

        queue_token = await self.store.get(StorageKeys.QUEUE_TOKEN)
        try:
            request = assemble_booking_request(
                self.schedule_id,
                codes,
                self.seat_map,
                self.selection.seats_by_code,
                resolver=self.selection.resolver,
                occupied_codes=self.selection.occupied_codes,
                queue_token=queue_token,
            )
        except BookingPayloadError as e:
            logger.warning("Booking request rejected: %s", e.message)
            return BookingOutcome(success=False, seat_codes=codes, error=e.message, error_code=e.error_code)

        try:
            booking = await self.api.bookings.create_booking(request)
        except (TicketingError, SchemaValidationError) as e:
            logger.warning("Booking failed for schedule %s seats %s: %s", self.schedule_id, codes, _describe(e))
            self.selection.clear()
            await self.release_holds()
            await self.reload_seats()
            error_code = e.error_code if isinstance(e, TicketingError) else ErrorCode.INTERNAL_ERROR
            return BookingOutcome(success=False, seat_codes=codes, error=_describe(e), error_code=error_code)

        # The hold is consumed by the booking
        self.held_schedule_id, self.held_seat_ids = None, []
        self.selection.clear()
        await self.seat_codes_cache.remember(booking.booking_number, codes)
        user_id = await self._current_user_id()
        log_business_event(
            "booking_created",
            {
                "booking_number": booking.booking_number,
                "schedule_id": self.schedule_id,
                "seat_codes": codes,
                "total_amount": str(booking.total_amount) if booking.total_amount is not None else None,
            },
            user_id=str(user_id) if user_id is not None else None,
        )
        await self.reload_seats()
        return BookingOutcome(success=True, seat_codes=codes, booking=booking)

    async def _current_user_id(self) -> Optional[int]:
        raw = await self.store.get(StorageKeys.CURRENT_USER)
        if not raw:
            return None
        try:
            user = json.loads(raw)
        except ValueError:
            return None
        if not isinstance(user, dict):
            return None
        user_id = user.get("userId", user.get("id"))
        return user_id if isinstance(user_id, int) else None
