"""Most-used applications by foreground time."""

import screentally.config as config
from screentally.events import AppUsageRecord
from screentally.reducers.base import BaseReducer


class TopAppsReducer(BaseReducer):
    name = "top_apps"

    def __init__(self, limit: int | None = None):
        self.limit = config.TOP_APPS_LIMIT if limit is None else limit
        super().__init__()

    def reset(self) -> None:
        self._used: list[AppUsageRecord] = []

    def feed(self, record: AppUsageRecord) -> None:
        if record.foreground_duration_ms > 0:
            self._used.append(record)

    def result(self) -> tuple[str, ...]:
        """Package names, most used first. Equal durations keep input order."""
        ranked = sorted(self._used, key=lambda r: r.foreground_duration_ms, reverse=True)
        return tuple(r.package_name for r in ranked[: self.limit])
