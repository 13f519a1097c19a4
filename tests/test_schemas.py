"""
Tests for backend DTO parsing and seat-map envelope normalization.
"""

import json
from decimal import Decimal

import pytest

from ticketing_client.schemas.booking import BookingSummary
from ticketing_client.schemas.common import unwrap_data
from ticketing_client.schemas.performance import (
    PerformanceResponse, ScheduleResponse, resolve_venue_id,
)
from ticketing_client.schemas.seat import SeatAvailabilityResponse
from ticketing_client.schemas.seat_map import (
    DEFAULT_ALPHABET, SeatMap, SeatMapEnvelope, classify_seat_map_payload, normalize_seat_map_payload,
)
from ticketing_client.utils.exceptions import ValidationError

BARE = {
    "meta": {"alphabet": "ABCDEFGHJK"},
    "pricing": {"R": 50000},
    "sections": [{"zone": "a", "rows": 2, "cols": 3, "rowLabelFrom": "a", "grade": "R"}],
}


class TestSeatMapEnvelopes:

    @pytest.mark.parametrize("payload,envelope", [
        (BARE, SeatMapEnvelope.BARE),
        ({"seatMapJson": BARE}, SeatMapEnvelope.SEAT_MAP_JSON),
        ({"seatMapJson": json.dumps(BARE)}, SeatMapEnvelope.SEAT_MAP_JSON),
        ({"data": {"seatMapJson": json.dumps(BARE)}}, SeatMapEnvelope.DATA_WRAPPED),
        ({"data": BARE}, SeatMapEnvelope.DATA_WRAPPED),
        (json.dumps(BARE), SeatMapEnvelope.BARE),
    ])
    def test_every_envelope_normalizes_to_the_same_map(self, payload, envelope):
        kind, bare = classify_seat_map_payload(payload)
        seat_map = normalize_seat_map_payload(payload)

        assert kind is envelope
        assert bare["sections"] == BARE["sections"]
        assert seat_map.alphabet == "ABCDEFGHJK"
        assert seat_map.pricing == {"R": Decimal("50000")}
        assert seat_map.sections[0].zone_key == "A"
        assert seat_map.sections[0].row_label_from == "a"

    @pytest.mark.parametrize("payload", [
        None, [], {"venueId": 1}, {"seatMapJson": "{not json"}, {"data": {"venueId": 1}},
    ])
    def test_unrecognized_payloads(self, payload):
        with pytest.raises(ValidationError):
            normalize_seat_map_payload(payload)

    def test_null_sections_become_empty(self):
        seat_map = SeatMap.model_validate({"sections": None, "pricing": None})

        assert seat_map.sections == []
        assert seat_map.pricing == {}
        assert not seat_map.is_available
        assert seat_map.alphabet == DEFAULT_ALPHABET

    def test_section_defaults(self):
        section = SeatMap.model_validate(
            {"sections": [{"rows": 1, "cols": 4, "rowLabelFrom": "C", "seatStart": None, "zone": " "}]}
        ).sections[0]

        assert section.seat_start == 1
        assert section.seat_end == 4
        assert section.zone_key is None
        assert section.identity(0) == "SECTION-1"


class TestSeatDtos:

    def test_seat_list_in_both_shapes(self):
        seats = [{"seatId": 1, "seatRow": 1, "seatNumber": 5, "price": 1000, "status": "available"}]

        for payload in ({"seats": seats}, {"success": True, "data": {"seats": seats}}):
            response = SeatAvailabilityResponse.model_validate(unwrap_data(payload))
            seat = response.seats[0]
            assert seat.seat_row == "1"
            assert seat.seat_number == "5"
            assert seat.is_available

    def test_non_available_status(self):
        response = SeatAvailabilityResponse.model_validate(
            {"seats": [{"seatId": 1, "seatRow": "A", "seatNumber": "1", "status": "BOOKED"}]}
        )

        assert not response.seats[0].is_available


class TestBookingSummary:

    def test_seat_codes_from_seat_lines(self):
        summary = BookingSummary.model_validate({
            "bookingId": 1, "bookingNumber": "BK1", "status": "CONFIRMED",
            "seats": [{"rowLabel": "A", "colNum": 1}, {"rowLabel": "A", "colNum": 2}],
        })

        assert summary.seat_codes == ["A1", "A2"]
        assert summary.seat_code == "A1, A2"
        assert summary.seat_count == 2

    def test_seat_codes_list_kept(self):
        summary = BookingSummary.model_validate({
            "bookingId": 1, "bookingNumber": "BK1", "status": "CONFIRMED", "seatCodes": ["B3"],
        })

        assert summary.seat_codes == ["B3"]

    def test_comma_separated_seat_code(self):
        summary = BookingSummary.model_validate({
            "bookingId": 1, "bookingNumber": "BK1", "status": "CONFIRMED", "seatCode": "C1, C2,",
        })

        assert summary.seat_codes == ["C1", "C2"]


class TestVenueResolution:

    def test_performance_venue_wins(self):
        performance = PerformanceResponse(performance_id=1, title="T", venue_id=3)

        assert resolve_venue_id(performance, [ScheduleResponse(schedule_id=1, venue_id=9)]) == 3

    def test_first_schedule_with_venue(self):
        performance = PerformanceResponse(performance_id=1, title="T")
        schedules = [ScheduleResponse(schedule_id=1), ScheduleResponse(schedule_id=2, venue_id=9)]

        assert resolve_venue_id(performance, schedules) == 9

    def test_unresolved(self):
        assert resolve_venue_id(None) is None
