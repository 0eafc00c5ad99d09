"""Tests for screentally.events: conversions, day windows, sanitizing."""

from datetime import date, datetime

import pytest

from screentally.events import (
    AppUsageRecord, EventType, ScreenEvent,
    day_window, hour_of, sanitize_events, to_ms,
)

ON = EventType.INTERACTIVE
OFF = EventType.NON_INTERACTIVE


class TestConversions:
    def test_to_ms(self):
        assert to_ms(1.5) == 1500
        assert to_ms(1_700_000_000.0) == 1_700_000_000_000

    def test_hour_of_local_time(self):
        ts = to_ms(datetime(2026, 3, 2, 14, 59, 59).timestamp())
        assert hour_of(ts) == 14

    def test_event_is_immutable(self):
        ev = ScreenEvent(ON, 0)
        with pytest.raises(AttributeError):
            ev.timestamp = 5

    def test_event_type_values(self):
        assert EventType("interactive") is ON
        assert EventType("non_interactive") is OFF

    def test_record_equality(self):
        assert AppUsageRecord("a", 1) == AppUsageRecord("a", 1)


class TestDayWindow:
    def test_today_ends_now(self):
        now = datetime(2026, 3, 2, 15, 30)
        start, end = day_window(now=now)
        assert start == to_ms(datetime(2026, 3, 2).timestamp())
        assert end == to_ms(now.timestamp())

    def test_past_day_is_full_day(self):
        now = datetime(2026, 3, 2, 15, 30)
        start, end = day_window(date(2026, 2, 27), now=now)
        assert start == to_ms(datetime(2026, 2, 27).timestamp())
        assert end == to_ms(datetime(2026, 2, 28).timestamp())

    def test_explicit_today(self):
        now = datetime(2026, 3, 2, 0, 0, 5)
        start, end = day_window(date(2026, 3, 2), now=now)
        assert end - start == 5_000


class TestSanitizeEvents:
    def test_sorts_by_timestamp(self):
        events = [ScreenEvent(OFF, 10), ScreenEvent(ON, 5)]
        assert sanitize_events(events) == [ScreenEvent(ON, 5), ScreenEvent(OFF, 10)]

    def test_collapses_repeats(self):
        events = [
            ScreenEvent(ON, 1), ScreenEvent(ON, 2),
            ScreenEvent(OFF, 3), ScreenEvent(OFF, 4),
            ScreenEvent(ON, 5),
        ]
        assert sanitize_events(events) == [
            ScreenEvent(ON, 1), ScreenEvent(OFF, 3), ScreenEvent(ON, 5),
        ]

    def test_does_not_mutate_input(self):
        events = [ScreenEvent(OFF, 10), ScreenEvent(ON, 5)]
        sanitize_events(events)
        assert events[0].timestamp == 10

    def test_empty(self):
        assert sanitize_events([]) == []
