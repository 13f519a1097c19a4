"""
End-to-end tests of the seat selection flow against the in-process mock backend.
"""

import asyncio
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from ticketing_client.api import ApiClient, TicketingApi
from ticketing_client.cache import BookingSeatCodeCache, MemoryStore, StorageKeys
from ticketing_client.mock_server import create_app
from ticketing_client.schemas.seat import SeatAvailabilityResponse
from ticketing_client.seatmap.selection import SeatState, SelectionResult
from ticketing_client.services import SeatSelectionService
from ticketing_client.utils.exceptions import ApiRequestError, AuthenticationError, ErrorCode

from .conftest import NO_RETRY, make_seat


class _HtmlBookingTransport(httpx.AsyncBaseTransport):
    """Serves everything from ``inner`` except booking creation, which gets an HTML page."""

    def __init__(self, inner: httpx.AsyncBaseTransport):
        self.inner = inner

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        if request.method == "POST" and request.url.path == "/v1/bookings":
            return httpx.Response(200, text="<html>gateway</html>", headers={"Content-Type": "text/html"})
        return await self.inner.handle_async_request(request)


@pytest.fixture
async def service(api, store):
    service = SeatSelectionService(api, store)
    await service.open_performance(1)
    await service.select_schedule(1)
    return service


class TestOpenPerformance:

    async def test_loads_schedules_and_seat_map(self, service):
        assert [s.schedule_id for s in service.schedules] == [1, 2]
        assert service.loader.venue_id == 1
        assert len(service.seat_map.sections) == 4
        assert len(service.selection.seats) == 104
        assert service.selection.row_remap["4"] == "A"
        assert service.selection.row_remap["12"] == "J"

    async def test_backend_seats_line_up_with_rendered_cells(self, service):
        view = service.render()

        rendered = {cell.code for section in view.sections for row in section.rows for cell in row.cells}
        assert rendered == set(service.selection.seats_by_code)

    async def test_auth_required(self, backend, store):
        transport = httpx.ASGITransport(app=create_app(backend, require_auth=True))
        api = TicketingApi(ApiClient(store=store, base_url="http://mock", transport=transport, retry_config=NO_RETRY))
        try:
            with pytest.raises(AuthenticationError):
                await SeatSelectionService(api).open_performance(1)

            await store.set(StorageKeys.AUTH_TOKEN, "token")
            performance = await SeatSelectionService(api).open_performance(1)
            assert performance.title == "The Seat Map Musical"
        finally:
            await api.close()


class TestBooking:

    async def test_successful_booking(self, service, backend, store):
        assert service.toggle_seat("A::A-1") is SelectionResult.SELECTED
        assert service.toggle_seat("A::A-2") is SelectionResult.SELECTED
        assert service.selection.selected_seat_ids == [1, 2]
        assert service.selection.total_price == Decimal("300000")

        outcome = await service.book()

        assert outcome.success
        assert outcome.booking_number == "BK000001"
        assert outcome.booking.total_amount == Decimal("300000")
        assert service.selection.selected_codes == ()
        assert service.selection.state_of("A::A-1") is SeatState.OCCUPIED
        assert await BookingSeatCodeCache(store).recall("BK000001") == ["A::A-1", "A::A-2"]
        assert len(backend.bookings) == 1

    async def test_queue_token_is_sent(self, service, store):
        await store.set(StorageKeys.QUEUE_TOKEN, "queue-42")
        create_booking = AsyncMock(wraps=service.api.bookings.create_booking)
        service.api.bookings.create_booking = create_booking
        service.toggle_seat("H-3")

        outcome = await service.book()

        assert outcome.success
        request = create_booking.await_args.args[0]
        assert request.queue_token == "queue-42"
        assert request.seats[0].grade == "S"

    async def test_conflict_clears_selection_and_reloads(self, service, backend):
        """
        Given: two seats are selected
        When: another customer books one of them before submission
        Then: the booking fails, the selection is cleared and the taken seat shows as occupied
        """
        service.toggle_seat("A::A-1")
        service.toggle_seat("A::A-2")
        backend.mark_booked(1, [2])

        outcome = await service.book()

        assert not outcome.success
        assert outcome.error_code is ErrorCode.SEAT_ALREADY_BOOKED
        assert outcome.seat_codes == ["A::A-1", "A::A-2"]
        assert service.selection.selected_codes == ()
        assert "A::A-2" in service.selection.occupied_codes
        assert service.selection.state_of("A::A-1") is SeatState.AVAILABLE
        assert backend.bookings == {}

    async def test_unavailable_seat_map_blocks_booking(self, service, backend):
        """
        Given: the seat map can no longer be fetched
        When: the user tries to book
        Then: no request is sent and the failure is reported
        """
        del backend.venues[1]
        await service.load_venue(1)

        assert service.seat_map.sections == []
        assert service.loader.error is not None
        assert service.toggle_seat("A::A-1") is SelectionResult.UNKNOWN_GRADE

        outcome = await service.book()

        assert not outcome.success
        assert outcome.error_code is ErrorCode.INVALID_BOOKING_REQUEST
        assert backend.bookings == {}

    async def test_unreadable_booking_response_clears_and_reloads(self, backend, store):
        """
        Given: a proxy answers the booking POST with an HTML page
        When: the user books
        Then: the failure is reported, the selection is cleared and seats are reloaded
        """
        transport = _HtmlBookingTransport(httpx.ASGITransport(app=create_app(backend)))
        api = TicketingApi(ApiClient(store=store, base_url="http://mock", transport=transport, retry_config=NO_RETRY))
        try:
            service = SeatSelectionService(api, store)
            await service.open_performance(1)
            await service.select_schedule(1)
            get_schedule_seats = AsyncMock(wraps=api.seats.get_schedule_seats)
            api.seats.get_schedule_seats = get_schedule_seats
            service.toggle_seat("A::A-1")

            outcome = await service.book()
        finally:
            await api.close()

        assert not outcome.success
        assert outcome.error_code is ErrorCode.EXTERNAL_SERVICE_ERROR
        assert service.selection.selected_codes == ()
        get_schedule_seats.assert_awaited_once_with(1)
        assert backend.bookings == {}

    async def test_book_without_schedule(self, api, store):
        outcome = await SeatSelectionService(api, store).book()

        assert not outcome.success
        assert outcome.error_code is ErrorCode.VALIDATION_ERROR

    async def test_booking_enabled_needs_a_selection(self, service):
        assert not service.booking_enabled

        service.toggle_seat("A::A-3")
        assert service.booking_enabled

        service.toggle_seat("A::A-3")
        assert not service.booking_enabled

    async def test_hovered_seat_is_rendered(self, service):
        service.hover("C::D-2")
        cells = {cell.code: cell for section in service.render().sections for row in section.rows for cell in row.cells}

        assert cells["C::D-2"].state is SeatState.HOVERED
        assert cells["C::D-3"].state is SeatState.AVAILABLE

    async def test_schedule_change_clears_selection(self, service):
        service.toggle_seat("C::D-1")

        await service.select_schedule(2)

        assert service.schedule_id == 2
        assert service.selection.selected_codes == ()
        assert service.selection.seats[0].schedule_id == 2


class TestHolds:

    async def test_hold_and_release_on_reset(self, service, backend):
        service.toggle_seat("B::A-7")

        assert await service.hold_selection()
        assert service.held_seat_ids == [19]
        assert 19 in backend.holds

        await service.reset()

        assert backend.holds == {}
        assert service.selection.selected_codes == ()
        assert service.schedule_id is None

    async def test_hold_conflict_reloads(self, service, backend):
        service.toggle_seat("B::A-7")
        backend.holds[19] = 999

        assert not await service.hold_selection()
        assert service.held_seat_ids == []

    async def test_reselecting_same_schedule_releases_holds(self, service, backend):
        service.toggle_seat("B::A-7")
        assert await service.hold_selection()

        await service.select_schedule(1)

        assert backend.holds == {}
        assert service.held_seat_ids == []
        assert service.selection.selected_codes == ()

    async def test_failed_booking_releases_holds(self, service, backend):
        service.toggle_seat("A::A-1")
        service.toggle_seat("A::A-2")
        assert await service.hold_selection()
        backend.mark_booked(1, [2])

        outcome = await service.book()

        assert not outcome.success
        assert 1 not in backend.holds
        assert service.held_seat_ids == []

    async def test_nothing_to_hold(self, service):
        assert not await service.hold_selection()


class TestStaleSeatLists:

    @pytest.fixture
    def fake_api(self):
        api = MagicMock()
        api.client.store = MemoryStore()
        return api

    async def test_late_seat_list_for_previous_schedule_is_dropped(self, fake_api):
        release_first = asyncio.Event()
        first_seats = SeatAvailabilityResponse(seats=[make_seat(1, "A", 1, status="BOOKED")])
        second_seats = SeatAvailabilityResponse(seats=[make_seat(2, "A", 1)])

        async def get_schedule_seats(schedule_id):
            if schedule_id == 1:
                await release_first.wait()
                return first_seats
            return second_seats

        fake_api.seats.get_schedule_seats = AsyncMock(side_effect=get_schedule_seats)
        service = SeatSelectionService(fake_api)

        first = asyncio.create_task(service.select_schedule(1))
        await asyncio.sleep(0)
        assert await service.select_schedule(2)
        release_first.set()

        assert not await first
        assert service.schedule_id == 2
        assert [seat.seat_id for seat in service.selection.seats] == [2]

    async def test_reset_drops_in_flight_seat_list(self, fake_api):
        release = asyncio.Event()

        async def get_schedule_seats(schedule_id):
            await release.wait()
            return SeatAvailabilityResponse(seats=[make_seat(1, "A", 1)])

        fake_api.seats.get_schedule_seats = AsyncMock(side_effect=get_schedule_seats)
        service = SeatSelectionService(fake_api)

        task = asyncio.create_task(service.select_schedule(1))
        await asyncio.sleep(0)
        await service.reset()
        release.set()

        assert not await task
        assert service.selection.seats == ()

    async def test_failed_seat_list_is_reported(self, fake_api):
        fake_api.seats.get_schedule_seats = AsyncMock(side_effect=ApiRequestError("boom", status_code=500))
        service = SeatSelectionService(fake_api)

        assert not await service.select_schedule(1)
        assert service.seats_error is not None
        assert service.selection.seats == ()
