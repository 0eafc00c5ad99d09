"""Hour of day with the most interactive screen time.

Elapsed time is credited to the hour the session started in, even when the
session runs past the hour boundary. A non-interactive event does not close
the hour it credits, so a second one in a row is measured from the same
interactive timestamp again.
"""

from screentally.events import EventType, ScreenEvent, hour_of
from screentally.reducers.base import BaseReducer

NO_PEAK = "N/A"


def hour_label(hour: int) -> str:
    """Half-open label for an hour bucket, e.g. ``14:00 - 15:00``."""
    return f"{hour}:00 - {hour + 1}:00"


class PeakHourReducer(BaseReducer):
    name = "peak_hour"

    def reset(self) -> None:
        self._usage_by_hour: dict[int, int] = {}
        self._last_timestamp = 0
        self._last_hour = -1

    def feed(self, event: ScreenEvent) -> None:
        if event.event_type is EventType.INTERACTIVE:
            self._last_timestamp = event.timestamp
            self._last_hour = hour_of(event.timestamp)
        elif event.event_type is EventType.NON_INTERACTIVE and self._last_hour >= 0:
            elapsed = event.timestamp - self._last_timestamp
            self._usage_by_hour[self._last_hour] = self._usage_by_hour.get(self._last_hour, 0) + elapsed

    def peak_hour(self) -> int | None:
        """Busiest hour, ties going to the earliest hour; None if no hour was credited."""
        peak = None
        for hour in sorted(self._usage_by_hour):
            if peak is None or self._usage_by_hour[hour] > self._usage_by_hour[peak]:
                peak = hour
        return peak

    def result(self) -> str:
        peak = self.peak_hour()
        if peak is None:
            return NO_PEAK
        return hour_label(peak)
