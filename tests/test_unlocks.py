"""Tests for the unlock counter: verifies debounce of jittery interactive events."""

import pytest

import screentally.config as cfg
from screentally.events import EventType, ScreenEvent
from screentally.reducers.unlocks import UnlockReducer


def _on(*timestamps):
    return [ScreenEvent(EventType.INTERACTIVE, ts) for ts in timestamps]


class TestUnlockReducer:
    def test_burst_counts_once(self):
        assert UnlockReducer().run(_on(0, 500, 1_000, 2_999)) == 1

    def test_example_from_jitter_and_gap(self):
        """0 and 5000 count; 1000 is within 3 s of the unlock at 0."""
        assert UnlockReducer().run(_on(0, 1_000, 5_000)) == 2

    def test_spaced_events_each_count(self):
        assert UnlockReducer().run(_on(0, 3_001, 6_002, 9_003)) == 4

    def test_exactly_threshold_is_duplicate(self):
        assert UnlockReducer().run(_on(10_000, 13_000)) == 1

    def test_window_measured_from_last_counted_unlock(self):
        """Dropped events do not extend the window."""
        assert UnlockReducer().run(_on(0, 2_000, 3_500)) == 2

    def test_first_event_always_counts(self):
        assert UnlockReducer().run(_on(1_700_000_000_000)) == 1

    def test_non_interactive_ignored(self):
        events = [
            ScreenEvent(EventType.NON_INTERACTIVE, 0),
            ScreenEvent(EventType.NON_INTERACTIVE, 10_000),
        ]
        assert UnlockReducer().run(events) == 0

    def test_empty(self):
        assert UnlockReducer().run([]) == 0

    def test_custom_debounce(self):
        assert UnlockReducer(debounce_ms=500).run(_on(0, 1_000, 1_200)) == 2

    def test_default_debounce_from_config(self, monkeypatch):
        monkeypatch.setattr(cfg, "UNLOCK_DEBOUNCE_MS", 100)
        assert UnlockReducer().debounce_ms == 100

    @pytest.mark.parametrize("gap,expected", [(1, 1), (3_000, 1), (3_001, 2)])
    def test_boundary(self, gap, expected):
        assert UnlockReducer().run(_on(50_000, 50_000 + gap)) == expected
