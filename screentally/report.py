"""Daily usage report: either denied or a full set of statistics."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class UsageDenied:
    """Usage data could not be read; no statistics exist."""

    has_permission = False

    def to_dict(self) -> dict[str, Any]:
        return {"hasPermission": False}


@dataclass(frozen=True)
class UsageAvailable:
    screen_time_seconds: int
    unlock_count: int
    longest_session_seconds: int
    top_apps: tuple[str, ...]
    peak_usage_hour_label: str

    has_permission = True

    def to_dict(self) -> dict[str, Any]:
        """Flat mapping for handing the report to another layer."""
        return {
            "hasPermission": True,
            "screenTimeSeconds": self.screen_time_seconds,
            "unlockCount": self.unlock_count,
            "longestSessionSeconds": self.longest_session_seconds,
            "topApps": [{"packageName": name} for name in self.top_apps],
            "peakUsageHourLabel": self.peak_usage_hour_label,
        }


DailyUsageReport = Union[UsageDenied, UsageAvailable]


def fmt_duration(seconds: float) -> str:
    h, rem = divmod(int(seconds), 3600)
    m, s = divmod(rem, 60)
    if h:
        return f"{h}h {m:02d}m"
    return f"{m}m {s:02d}s"


def format_report(report: DailyUsageReport, label: str) -> str:
    """Render a report as the text block printed by ``screentally report``."""
    lines = [
        "",
        "=" * 60,
        f"  Screen Time: {label}",
        "=" * 60,
        "",
    ]
    if not report.has_permission:
        lines.append("  Usage data is not accessible.")
        lines.append("  Start `screentally run` and let it collect for a while.")
        lines.append("")
        return "\n".join(lines)

    lines.append(f"  Screen time       {fmt_duration(report.screen_time_seconds)}")
    lines.append(f"  Unlocks           {report.unlock_count}")
    lines.append(f"  Longest session   {fmt_duration(report.longest_session_seconds)}")
    lines.append(f"  Peak hour         {report.peak_usage_hour_label}")
    lines.append(f"  {'─' * 56}")
    if report.top_apps:
        lines.append("  Top apps")
        for rank, name in enumerate(report.top_apps, 1):
            lines.append(f"    {rank}. {name}")
    else:
        lines.append("  No app usage recorded.")
    lines.append("")
    return "\n".join(lines)
