"""Screen-state events, per-app usage records, and day-window helpers.

Event sequences handed to the reducers are assumed to be ordered by
timestamp. Nothing here re-sorts them implicitly; `sanitize_events` is an
opt-in cleanup for callers that cannot vouch for their source.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Iterable


class EventType(enum.Enum):
    INTERACTIVE = "interactive"
    NON_INTERACTIVE = "non_interactive"


@dataclass(frozen=True)
class ScreenEvent:
    """A screen turning interactive or non-interactive."""
    event_type: EventType
    timestamp: int  # ms since epoch


@dataclass(frozen=True)
class AppUsageRecord:
    """Total foreground time for one application over the day."""
    package_name: str
    foreground_duration_ms: int


def to_ms(ts: float) -> int:
    """Convert a float epoch-seconds timestamp to integer milliseconds."""
    return int(round(ts * 1000))


def hour_of(timestamp_ms: int) -> int:
    """Local wall-clock hour (0-23) of a millisecond timestamp."""
    return datetime.fromtimestamp(timestamp_ms / 1000).hour


def day_window(day: date | None = None, now: datetime | None = None) -> tuple[int, int]:
    """Return ``(start_ms, end_ms)`` for a local calendar day.

    Today's window ends at ``now``; a past day's window ends at the
    following midnight.
    """
    now = now or datetime.now()
    target = day or now.date()
    start = datetime.combine(target, time.min)
    if target == now.date():
        end = now
    else:
        end = start + timedelta(days=1)
    return to_ms(start.timestamp()), to_ms(end.timestamp())


def sanitize_events(events: Iterable[ScreenEvent]) -> list[ScreenEvent]:
    """Sort by timestamp and collapse repeated transitions of the same type.

    Only the first of a run of identical transitions is kept. This changes
    report values on malformed input, so callers opt in explicitly.
    """
    cleaned: list[ScreenEvent] = []
    for ev in sorted(events, key=lambda e: e.timestamp):
        if cleaned and cleaned[-1].event_type is ev.event_type:
            continue
        cleaned.append(ev)
    return cleaned
