"""
Tests for aligning backend row tokens with seat-map row labels.
"""

from ticketing_client.seatmap.row_remap import (
    build_row_remap, extract_row_label, row_label_for, seat_code_for,
)

from .conftest import make_seat, make_seat_map


class TestBuildRowRemap:

    def test_numeric_rows_map_onto_generated_labels(self, single_section_map):
        """
        Given: a seat map generating rows A and B, and backend rows "1" and "2"
        When: the remap is built
        Then: "1" maps to A, "2" maps to B, and seat 1/5 becomes A-5
        """
        seats = [make_seat(1, "1", 5), make_seat(2, "2", 1)]

        remap = build_row_remap(single_section_map.sections, seats)

        assert remap == {"1": "A", "2": "B"}
        assert seat_code_for(seats[0], remap) == "A-5"

    def test_tokens_sorted_numerically_not_lexically(self):
        seat_map = make_seat_map([{"rows": 12, "cols": 1, "rowLabelFrom": "A"}])
        seats = [make_seat(i, str(row), 1) for i, row in enumerate([10, 2, 1, 11, 3])]

        remap = build_row_remap(seat_map.sections, seats)

        assert remap == {"1": "A", "2": "B", "3": "C", "10": "D", "11": "E"}

    def test_lengths_need_not_match(self, single_section_map):
        seats = [make_seat(i, str(row), 1) for i, row in enumerate([1, 2, 3])]

        remap = build_row_remap(single_section_map.sections, seats)

        assert remap == {"1": "A", "2": "B"}

    def test_labels_shared_by_sections_keep_their_positions(self, zoned_map):
        """
        Given: zones A and B both generating rows A-C, then a zoneless D-E block
        When: backend rows 1-8 are remapped
        Then: each backend row lands on the label generated at its position
        """
        seats = [make_seat(i, str(row), 1) for i, row in enumerate(range(1, 9))]

        remap = build_row_remap(zoned_map.sections, seats)

        assert remap == {"1": "A", "2": "B", "3": "C", "4": "A", "5": "B", "6": "C", "7": "D", "8": "E"}

    def test_second_block_rows_resolve_to_its_labels(self):
        seat_map = make_seat_map([
            {"zone": "L", "rows": 2, "cols": 4, "rowLabelFrom": "A"},
            {"zone": "R", "rows": 2, "cols": 4, "rowLabelFrom": "A"},
        ])
        seats = [make_seat(i, str(row), 1, zone="R" if row > 2 else "L") for i, row in enumerate(range(1, 5))]

        remap = build_row_remap(seat_map.sections, seats)

        assert remap == {"1": "A", "2": "B", "3": "A", "4": "B"}
        assert [seat_code_for(seat, remap) for seat in seats] == ["L::A-1", "L::B-1", "R::A-1", "R::B-1"]

    def test_any_non_numeric_row_disables_remap(self, single_section_map):
        seats = [make_seat(1, "1", 1), make_seat(2, "B", 1)]

        assert build_row_remap(single_section_map.sections, seats) == {}

    def test_missing_inputs_give_empty_remap(self, single_section_map):
        assert build_row_remap([], [make_seat(1, "1", 1)]) == {}
        assert build_row_remap(single_section_map.sections, []) == {}

    def test_blank_rows_are_ignored(self, single_section_map):
        seats = [make_seat(1, " 1 ", 1), make_seat(2, "  ", 1)]

        assert build_row_remap(single_section_map.sections, seats) == {"1": "A"}

    def test_unusable_seat_map_falls_back_to_empty(self):
        seat_map = make_seat_map([{"rows": 2, "cols": 1, "rowLabelFrom": "A"}], alphabet="AAB")

        remap = build_row_remap(seat_map.sections, [make_seat(1, "1", 1)], seat_map.alphabet)

        assert remap == {}


class TestExtractRowLabel:

    def test_last_letter_run(self):
        assert extract_row_label("ROW B") == "B"
        assert extract_row_label("b12") == "B"

    def test_digit_run_when_no_letters(self):
        assert extract_row_label("#12") == "12"

    def test_trimmed_raw_value_otherwise(self):
        assert extract_row_label("  ") == ""
        assert extract_row_label(None) == ""

    def test_remap_wins_over_heuristic(self):
        assert row_label_for("3", {"3": "C"}) == "C"
        assert row_label_for("3", {}) == "3"

    def test_seat_code_keeps_backend_zone(self):
        seat = make_seat(1, "Row C", "7", zone="vip")

        assert seat_code_for(seat, {}) == "VIP::C-7"
