"""
Tests for booking request assembly.
"""

import pytest

from ticketing_client.schemas.seat_map import SeatMap
from ticketing_client.seatmap.payload import assemble_booking_request
from ticketing_client.seatmap.row_remap import seat_code_for
from ticketing_client.seatmap.selection import SeatSelection
from ticketing_client.utils.exceptions import BookingPayloadError, ErrorCode

from .conftest import make_seat


class TestAssembleBookingRequest:

    def test_lines_from_seat_map(self, zoned_map):
        request = assemble_booking_request(7, ["A::A-1", "D-4"], zoned_map, {})

        assert request.schedule_id == 7
        assert [line.model_dump() for line in request.seats] == [
            {"grade": "VIP", "zone": "A", "row_label": "A", "col_num": 1},
            {"grade": "S", "zone": None, "row_label": "D", "col_num": 4},
        ]

    def test_backend_grade_and_zone_are_preferred(self, zoned_map):
        seat = make_seat(1, "D", 4, zone="balcony", grade="PREMIUM")

        request = assemble_booking_request(7, ["D-4"], zoned_map, {"D-4": seat})

        line = request.seats[0]
        assert line.grade == "PREMIUM"
        assert line.zone == "BALCONY"

    def test_wire_format(self, zoned_map):
        request = assemble_booking_request(7, ["B::A-9"], zoned_map, {}, queue_token="q-123")

        assert request.to_wire() == {
            "scheduleId": 7,
            "seats": [{"grade": "R", "zone": "B", "rowLabel": "A", "colNum": 9}],
            "queueToken": "q-123",
        }

    def test_queue_token_omitted_when_absent(self, zoned_map):
        request = assemble_booking_request(7, ["B::A-9"], zoned_map, {})

        assert "queueToken" not in request.to_wire()

    def test_duplicate_codes_collapse(self, zoned_map):
        request = assemble_booking_request(7, ["D-1", "D-1"], zoned_map, {})

        assert len(request.seats) == 1

    def test_falls_back_to_raw_seat_ids(self, zoned_map):
        seats = {10: make_seat(10, "D", 2, grade="S"), 11: make_seat(11, "E", 3, grade="S")}

        request = assemble_booking_request(
            7, [], zoned_map, {},
            raw_seat_ids=[10, 11], seats_by_id=seats,
            row_code_of=lambda seat: seat_code_for(seat, {}),
        )

        assert [(line.row_label, line.col_num) for line in request.seats] == [("D", 2), ("E", 3)]


class TestRejections:

    def test_empty_seat_map(self):
        """
        Given: the seat map failed to load
        When: a booking request is assembled
        Then: it is rejected before anything is sent
        """
        with pytest.raises(BookingPayloadError) as exc_info:
            assemble_booking_request(7, ["A-1"], SeatMap.empty(), {})

        assert exc_info.value.error_code is ErrorCode.INVALID_BOOKING_REQUEST

    def test_empty_selection(self, zoned_map):
        with pytest.raises(BookingPayloadError):
            assemble_booking_request(7, [], zoned_map, {})

    def test_more_than_four_seats(self, zoned_map):
        codes = [f"D-{n}" for n in range(1, 6)]

        with pytest.raises(BookingPayloadError):
            assemble_booking_request(7, codes, zoned_map, {})

    def test_occupied_seat(self, zoned_map):
        with pytest.raises(BookingPayloadError) as exc_info:
            assemble_booking_request(7, ["D-1", "D-2"], zoned_map, {}, occupied_codes={"D-2"})

        assert exc_info.value.details == {"seat_codes": ["D-2"]}

    def test_unknown_grade(self, zoned_map):
        with pytest.raises(BookingPayloadError):
            assemble_booking_request(7, ["Q-1"], zoned_map, {})

    def test_non_numeric_seat_number(self, zoned_map):
        with pytest.raises(BookingPayloadError):
            assemble_booking_request(7, ["D-1A"], zoned_map, {})

    def test_malformed_code(self, zoned_map):
        with pytest.raises(BookingPayloadError):
            assemble_booking_request(7, ["D1"], zoned_map, {})

    def test_unknown_raw_seat_id(self, zoned_map):
        with pytest.raises(BookingPayloadError):
            assemble_booking_request(
                7, [], zoned_map, {}, raw_seat_ids=[99], seats_by_id={}, row_code_of=str,
            )


class TestWithSelection:

    def test_selection_feeds_the_assembler(self, zoned_map):
        seats = [make_seat(1, "1", 1, zone="A", grade="VIP"), make_seat(2, "2", 1, zone="A", grade="VIP")]
        selection = SeatSelection(zoned_map, seats)
        selection.toggle("A::A-1")
        selection.toggle("A::B-1")

        request = assemble_booking_request(
            3,
            selection.selected_codes,
            selection.seat_map,
            selection.seats_by_code,
            resolver=selection.resolver,
            occupied_codes=selection.occupied_codes,
        )

        assert [(line.zone, line.row_label, line.col_num) for line in request.seats] == [
            ("A", "A", 1), ("A", "B", 1),
        ]
