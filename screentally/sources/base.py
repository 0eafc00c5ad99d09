"""Usage source ABC: where the aggregator gets its day of data from."""

from __future__ import annotations

import abc
from typing import Iterable

from screentally.events import AppUsageRecord, ScreenEvent


class UsageSource(abc.ABC):
    """Something that can report screen events and per-app usage.

    ``check_usage_permission()`` must be called, and must return True,
    before either query method is used.
    """

    @abc.abstractmethod
    def check_usage_permission(self) -> bool:
        """Whether usage data may be read."""

    @abc.abstractmethod
    def query_events(self, start_ms: int, end_ms: int) -> list[ScreenEvent]:
        """Screen events with start_ms <= timestamp < end_ms, oldest first."""

    @abc.abstractmethod
    def query_usage(self, start_ms: int, end_ms: int) -> list[AppUsageRecord]:
        """One foreground-time record per app used in the range."""


class StaticUsageSource(UsageSource):
    """In-memory source over pre-built events and records."""

    def __init__(
        self,
        events: Iterable[ScreenEvent] = (),
        records: Iterable[AppUsageRecord] = (),
        granted: bool = True,
    ):
        self.events = list(events)
        self.records = list(records)
        self.granted = granted

    def check_usage_permission(self) -> bool:
        return self.granted

    def query_events(self, start_ms: int, end_ms: int) -> list[ScreenEvent]:
        return [e for e in self.events if start_ms <= e.timestamp < end_ms]

    def query_usage(self, start_ms: int, end_ms: int) -> list[AppUsageRecord]:
        return list(self.records)
