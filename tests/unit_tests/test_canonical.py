"""Tests for the shared canonicalization helpers."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from courtwatch.services.canonical import (
    OperatingHours,
    date_window,
    make_slot,
    minutes_to_time,
    normalize_time,
    validate_slots,
    within_operating_hours,
)
from tests.mocks.models import BETTER_LOCATION, TODAY, day
from tests.mocks.models import make_slot as slot_factory


class TestNormalizeTime:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("14:00", "14:00:00"),
            ("7:30", "07:30:00"),
            ("09:15:30", "09:15:30"),
            (" 18:00 ", "18:00:00"),
            ("00:00", "00:00:00"),
            ("23:59:59", "23:59:59"),
        ],
    )
    def test_valid(self, raw, expected):
        assert normalize_time(raw) == expected

    @pytest.mark.parametrize("raw", ["", None, "24:00", "12:60", "7pm", "12", "1:2", "10:00:61"])
    def test_invalid(self, raw):
        assert normalize_time(raw) is None

    def test_minutes_to_time(self):
        assert minutes_to_time(0) == "00:00:00"
        assert minutes_to_time(420) == "07:00:00"
        assert minutes_to_time(1230) == "20:30:00"


class TestOperatingHours:
    def test_inclusive_bounds(self):
        hours = OperatingHours(start="07:00", end="22:00")
        assert hours.contains("07:00:00")
        assert hours.contains("22:00:00")
        assert hours.contains("13:30")

    def test_outside(self):
        hours = OperatingHours(start="07:00", end="22:00")
        assert not hours.contains("06:59:00")
        assert not hours.contains("22:30:00")
        assert not hours.contains("garbage")

    def test_within_operating_hours_filters(self):
        hours = OperatingHours(start="08:00", end="21:00")
        slots = [
            slot_factory(time="06:00:00"),
            slot_factory(time="08:00:00"),
            slot_factory(time="21:00:00"),
            slot_factory(time="22:00:00"),
        ]
        kept = within_operating_hours(slots, hours, BETTER_LOCATION)
        assert [s.time for s in kept] == ["08:00:00", "21:00:00"]

    def test_no_hours_keeps_everything(self):
        slots = [slot_factory(time="03:00:00")]
        assert within_operating_hours(slots, None, "anywhere") == slots


class TestDateWindow:
    def test_consecutive_dates(self):
        start = date(2024, 6, 1)
        assert date_window(3, start=start) == [
            date(2024, 6, 1),
            date(2024, 6, 2),
            date(2024, 6, 3),
        ]

    def test_starts_today_in_venue_timezone(self):
        window = date_window(7, "Europe/London")
        assert len(window) == 7
        assert abs((window[0] - date.today()).days) <= 1
        assert window[-1] - window[0] == timedelta(days=6)


class TestMakeSlot:
    def test_valid_record(self):
        slot = make_slot("2024-06-01", "18:00:00", "venueA/tennis", 2)
        assert slot is not None
        assert slot.key == ("2024-06-01", "18:00:00", "venueA/tennis")
        assert slot.spaces == 2

    @pytest.mark.parametrize(
        ("date_str", "time_str", "location", "spaces"),
        [
            ("2024-02-30", "18:00:00", "venueA/tennis", 1),  # not a calendar date
            ("01/06/2024", "18:00:00", "venueA/tennis", 1),
            ("2024-06-01", "18:00", "venueA/tennis", 1),  # not HH:MM:SS
            ("2024-06-01", "25:00:00", "venueA/tennis", 1),
            ("2024-06-01", "18:00:00", "", 1),
            ("2024-06-01", "18:00:00", "   ", 1),
            ("2024-06-01", "18:00:00", "venueA/tennis", -1),
        ],
    )
    def test_invalid_record_returns_none(self, date_str, time_str, location, spaces):
        assert make_slot(date_str, time_str, location, spaces) is None


class TestValidateSlots:
    def test_drops_stale_dates(self):
        slots = [
            slot_factory(date=(TODAY - timedelta(days=2)).isoformat()),
            slot_factory(date=(TODAY - timedelta(days=1)).isoformat()),
            slot_factory(date=TODAY.isoformat()),
        ]
        kept = validate_slots(slots, today=TODAY)
        assert [s.date for s in kept] == [
            (TODAY - timedelta(days=1)).isoformat(),
            TODAY.isoformat(),
        ]

    def test_default_today_is_london_date(self, monkeypatch):
        monkeypatch.setattr("courtwatch.services.canonical.today_in", lambda: date(2030, 6, 2))
        slots = [slot_factory(date="2030-05-31"), slot_factory(date="2030-06-01")]

        assert [s.date for s in validate_slots(slots)] == ["2030-06-01"]

    def test_dedup_keeps_first(self):
        first = slot_factory(spaces=3)
        second = slot_factory(spaces=0)
        kept = validate_slots([first, second], today=TODAY)
        assert kept == [first]

    def test_same_time_different_location_kept(self):
        a = slot_factory(location="venue-a")
        b = slot_factory(location="venue-b")
        assert len(validate_slots([a, b], today=TODAY)) == 2

    def test_idempotent(self):
        slots = [
            slot_factory(date=day(1), time="09:00:00"),
            slot_factory(date=day(1), time="09:00:00", spaces=5),
            slot_factory(date=day(2), time="10:00:00"),
            slot_factory(date=(TODAY - timedelta(days=5)).isoformat()),
        ]
        once = validate_slots(slots, today=TODAY)
        twice = validate_slots(once, today=TODAY)
        assert once == twice
        assert len(once) == 2
