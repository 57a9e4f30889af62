"""
Tests for the extract transformation and date normalization.
"""

from datetime import datetime, timedelta, timezone

import pytest

from order_card_engine.fields import FieldKind
from order_card_engine.sentinels import INVALID_DATE, INVALID_REGEX, NO_MATCH
from order_card_engine.transforms import REGEX_PRESETS, apply_transformation, normalize_date, to_iso_instant

DATE_PATTERN = r"\d{2}/\d{2}/\d{4}"
TIMESLOT_PATTERN = r"\d{2}:\d{2}-\d{2}:\d{2}"


class TestExtract:
    def test_whole_match(self, field_factory):
        f = field_factory(pattern=TIMESLOT_PATTERN)
        assert apply_transformation("25/12/2024, 09:00-11:00, VIP", f) == "09:00-11:00"

    def test_first_capture_group(self, field_factory):
        f = field_factory(pattern=r"slot:(\d{2}:\d{2})")
        assert apply_transformation("SLOT:09:30", f) == "09:30"

    def test_case_insensitive(self, field_factory):
        f = field_factory(pattern=r"vip")
        assert apply_transformation("Customer is VIP", f) == "VIP"

    def test_optional_group_unmatched_falls_back_to_whole_match(self, field_factory):
        f = field_factory(pattern=r"rush(-now)?")
        assert apply_transformation("RUSH order", f) == "RUSH"

    def test_no_match(self, field_factory):
        f = field_factory(pattern=TIMESLOT_PATTERN)
        assert apply_transformation("no timeslot here", f) == NO_MATCH

    @pytest.mark.parametrize("text", ["", "anything", "[", "25/12/2024"])
    def test_invalid_regex(self, field_factory, text):
        f = field_factory(pattern="[")
        assert apply_transformation(text, f) == INVALID_REGEX

    def test_no_transformation_returns_none(self, field_factory):
        assert apply_transformation("09:00-11:00", field_factory()) is None

    @pytest.mark.parametrize("raw", [None, 42, ["09:00-11:00"]])
    def test_non_string_input_returns_none(self, field_factory, raw):
        assert apply_transformation(raw, field_factory(pattern=TIMESLOT_PATTERN)) is None

    def test_idempotent_on_own_output(self, field_factory):
        f = field_factory(pattern=TIMESLOT_PATTERN)
        once = apply_transformation("Deliver 09:00-11:00 please", f)
        assert apply_transformation(once, f) == once


class TestDates:
    def test_day_first_date(self, field_factory):
        f = field_factory(pattern=DATE_PATTERN, kind=FieldKind.DATE)
        assert apply_transformation("25/12/2024", f) == "2024-12-25T00:00:00.000Z"

    def test_day_first_date_inside_tags(self, field_factory):
        f = field_factory(pattern=DATE_PATTERN, kind=FieldKind.DATE)
        assert apply_transformation("VIP, 03/04/2024, Express", f) == "2024-04-03T00:00:00.000Z"

    def test_impossible_day_first_date(self, field_factory):
        f = field_factory(pattern=DATE_PATTERN, kind=FieldKind.DATE)
        assert apply_transformation("31/02/2024", f) == INVALID_DATE

    def test_text_field_keeps_date_string(self, field_factory):
        f = field_factory(pattern=DATE_PATTERN)
        assert apply_transformation("25/12/2024", f) == "25/12/2024"

    def test_iso_candidate(self):
        assert normalize_date("2024-12-25") == "2024-12-25T00:00:00.000Z"

    def test_unparseable_candidate(self):
        assert normalize_date("not a date") == INVALID_DATE

    def test_date_preset_extracts_whole_date(self, field_factory):
        f = field_factory(pattern=REGEX_PRESETS["date"]["pattern"], kind=FieldKind.DATE)
        assert apply_transformation("tags: 25/12/2024", f) == "2024-12-25T00:00:00.000Z"


class TestIsoInstant:
    def test_naive_is_utc(self):
        assert to_iso_instant(datetime(2024, 1, 2, 3, 4, 5, 678000)) == "2024-01-02T03:04:05.678Z"

    def test_aware_converted_to_utc(self):
        tz = timezone(timedelta(hours=2))
        assert to_iso_instant(datetime(2024, 1, 2, 3, 0, tzinfo=tz)) == "2024-01-02T01:00:00.000Z"


class TestPresets:
    @pytest.mark.parametrize("name", sorted(REGEX_PRESETS))
    def test_preset_matches_its_example(self, field_factory, name):
        preset = REGEX_PRESETS[name]
        f = field_factory(pattern=preset["pattern"])
        assert apply_transformation(preset["example"], f) == preset["example"]
