"""Tests for screentally.report: report variants and rendering."""

import json

import pytest

from screentally.report import UsageAvailable, UsageDenied, fmt_duration, format_report


@pytest.fixture
def available():
    return UsageAvailable(
        screen_time_seconds=5_400,
        unlock_count=12,
        longest_session_seconds=1_800,
        top_apps=("com.apple.Safari", "com.microsoft.VSCode"),
        peak_usage_hour_label="14:00 - 15:00",
    )


class TestUsageDenied:
    def test_only_permission_field(self):
        assert UsageDenied().to_dict() == {"hasPermission": False}

    def test_has_permission_false(self):
        assert UsageDenied().has_permission is False

    def test_equal_instances(self):
        assert UsageDenied() == UsageDenied()


class TestUsageAvailable:
    def test_to_dict(self, available):
        assert available.to_dict() == {
            "hasPermission": True,
            "screenTimeSeconds": 5_400,
            "unlockCount": 12,
            "longestSessionSeconds": 1_800,
            "topApps": [
                {"packageName": "com.apple.Safari"},
                {"packageName": "com.microsoft.VSCode"},
            ],
            "peakUsageHourLabel": "14:00 - 15:00",
        }

    def test_to_dict_is_json_serializable(self, available):
        assert json.loads(json.dumps(available.to_dict())) == available.to_dict()

    def test_frozen(self, available):
        with pytest.raises(AttributeError):
            available.unlock_count = 0


class TestFormatting:
    @pytest.mark.parametrize("seconds,expected", [
        (0, "0m 00s"), (59, "0m 59s"), (61, "1m 01s"), (3_600, "1h 00m"), (5_460, "1h 31m"),
    ])
    def test_fmt_duration(self, seconds, expected):
        assert fmt_duration(seconds) == expected

    def test_available_text(self, available):
        text = format_report(available, "Monday, March 02 2026")
        assert "Monday, March 02 2026" in text
        assert "1h 30m" in text
        assert "Unlocks           12" in text
        assert "14:00 - 15:00" in text
        assert "1. com.apple.Safari" in text
        assert "2. com.microsoft.VSCode" in text

    def test_denied_text(self):
        text = format_report(UsageDenied(), "today")
        assert "not accessible" in text
        assert "Unlocks" not in text

    def test_no_apps(self, available):
        empty = UsageAvailable(0, 0, 0, (), "N/A")
        assert "No app usage recorded." in format_report(empty, "today")
