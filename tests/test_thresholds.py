"""
Unit tests for usage thresholds and formatting.
"""

import pytest

from claude_token_monitor.ccusage.models import DailyEntry
from claude_token_monitor.core.aggregator import UsagePeriod
from claude_token_monitor.core.thresholds import (
    BASE_THRESHOLDS,
    Thresholds,
    UsagePattern,
    WarningLevel,
    adaptive_thresholds,
    advanced_warning_message,
    analyze_usage_pattern,
    format_burn_rate,
    format_cost,
    format_tokens,
    should_show_urgent_warning,
    smart_warning_message,
    time_to_limit,
    token_limit,
    usage_percentage,
    warning_level,
    warning_message,
)


class TestLimits:
    """Test nominal period limits."""

    def test_limits_per_period(self):
        assert token_limit(UsagePeriod.DAY) == 1_000_000
        assert token_limit("week") == 7_000_000
        assert token_limit("month") == 30_000_000

    def test_unknown_period_uses_day_limit(self):
        assert token_limit("year") == 1_000_000

    def test_usage_percentage(self):
        assert usage_percentage(250_000, "day") == 25.0
        assert usage_percentage(3_500_000, UsagePeriod.WEEK) == 50.0


class TestWarningLevel:
    """Test warning level thresholds."""

    @pytest.mark.parametrize("percentage,level", [
        (0.0, WarningLevel.SAFE),
        (69.9, WarningLevel.SAFE),
        (70.0, WarningLevel.WARNING),
        (85.0, WarningLevel.CRITICAL),
        (94.9, WarningLevel.CRITICAL),
        (95.0, WarningLevel.DANGER),
        (150.0, WarningLevel.DANGER),
    ])
    def test_levels(self, percentage, level):
        assert warning_level(percentage) == level


class TestTimeToLimit:
    """Test time-to-limit estimates."""

    def test_no_burn_rate(self):
        assert time_to_limit(100, 1000, None) is None
        assert time_to_limit(100, 1000, 0) is None
        assert time_to_limit(100, 1000, -5) is None

    def test_limit_reached(self):
        assert time_to_limit(1000, 1000, 10) == "Limit reached"

    def test_under_a_minute(self):
        assert time_to_limit(990, 1000, 20) == "< 1 min"

    def test_minutes(self):
        assert time_to_limit(0, 1000, 25) == "40 min"

    def test_hours(self):
        assert time_to_limit(0, 1000, 5) == "3h"

    def test_days(self):
        assert time_to_limit(0, 1_000_000, 100) == "7d"


class TestFormatting:
    """Test display formatting."""

    def test_format_tokens(self):
        assert format_tokens(1234567) == "1,234,567"

    def test_format_cost(self):
        assert format_cost(3.0) == "$3.000"
        assert format_cost(0.12345) == "$0.123"

    def test_format_burn_rate(self):
        assert format_burn_rate(None) == "No data"
        assert format_burn_rate(0) == "No data"
        assert format_burn_rate(42.0) == "42.0/min"
        assert format_burn_rate(1500.0) == "1.5K/min"


def _days(*tokens):
    return [DailyEntry(date=f"2024-03-0{i + 1}", total_tokens=t, total_cost=0.0) for i, t in enumerate(tokens)]


class TestWarningMessages:
    """Test warning messages and urgency."""

    def test_level_messages(self):
        assert warning_message(WarningLevel.SAFE, 10.0) is None
        assert warning_message(WarningLevel.WARNING, 72.0) == "Moderate usage: 72.0%. Keep an eye on usage."
        assert warning_message(WarningLevel.CRITICAL, 88.0).startswith("High usage: 88.0%")
        assert "Consider upgrading your plan" in warning_message(WarningLevel.DANGER, 97.0)

    def test_critical_with_time_left(self):
        assert advanced_warning_message(96.0, "30 min", None) == (
            "Critical: 96.0% used. Approx. 30 min remaining at current rate."
        )

    def test_critical_when_limit_reached(self):
        assert advanced_warning_message(100.0, "Limit reached", 50.0) == (
            "Critical: 100.0% used. Limit almost reached!"
        )

    def test_high_usage_without_time_left(self):
        assert advanced_warning_message(90.0, None, None) == (
            "High usage: 90.0% used. Monitor consumption closely."
        )

    def test_moderate_usage_reports_burn_rate(self):
        assert advanced_warning_message(72.0, None, 12.34) == (
            "Moderate usage: 72.0% used. Current rate: 12.3/min."
        )
        assert advanced_warning_message(72.0, None, 0) == (
            "Moderate usage: 72.0% used. Track your consumption."
        )

    def test_no_message_below_warning(self):
        assert advanced_warning_message(69.9, "1h", 10.0) is None

    @pytest.mark.parametrize("percentage,time_left,urgent", [
        (95.0, None, True),
        (10.0, "< 1 min", True),
        (10.0, "Limit reached", True),
        (94.0, "5 min", False),
        (50.0, None, False),
    ])
    def test_urgency(self, percentage, time_left, urgent):
        assert should_show_urgent_warning(percentage, time_left) is urgent


class TestAnalyzeUsagePattern:
    """Test usage pattern analysis."""

    def test_no_data(self):
        assert analyze_usage_pattern([]) == UsagePattern()

    def test_steady_usage_is_fully_consistent(self):
        pattern = analyze_usage_pattern(_days(100, 100, 100))
        assert pattern.average_daily_usage == 100
        assert pattern.max_daily_usage == 100
        assert pattern.consistency_score == 1.0
        assert pattern.typical_burn_rate == pytest.approx(100 / 480)
        assert pattern.peak_usage_hours == (9, 10, 11, 14, 15, 16)

    def test_all_zero_days_have_zero_consistency(self):
        pattern = analyze_usage_pattern(_days(0, 0))
        assert pattern.average_daily_usage == 0
        assert pattern.consistency_score == 0.0

    def test_consistency_is_floored_at_zero(self):
        assert analyze_usage_pattern(_days(0, 0, 300)).consistency_score == 0.0

    def test_partial_consistency(self):
        # mean 150, standard deviation 50
        assert analyze_usage_pattern(_days(100, 200)).consistency_score == pytest.approx(2 / 3)


class TestAdaptiveThresholds:
    """Test threshold adjustment and clamping."""

    def test_no_usage_keeps_base_thresholds(self):
        assert adaptive_thresholds(UsagePattern()) == BASE_THRESHOLDS

    def test_consistent_light_user_is_warned_later(self):
        pattern = UsagePattern(average_daily_usage=10_000, typical_burn_rate=20.0, consistency_score=0.9)
        assert adaptive_thresholds(pattern) == Thresholds(warning=75.0, critical=90.0, danger=98.0)

    def test_heavy_fast_user_is_clamped(self):
        pattern = UsagePattern(average_daily_usage=600_000, typical_burn_rate=1250.0, consistency_score=0.1)
        assert adaptive_thresholds(pattern) == Thresholds(warning=55.0, critical=70.0, danger=85.0)

    def test_moderate_user(self):
        pattern = UsagePattern(average_daily_usage=300_000, typical_burn_rate=625.0, consistency_score=0.5)
        assert adaptive_thresholds(pattern) == Thresholds(warning=60.0, critical=75.0, danger=85.0)

    def test_warning_level_with_custom_thresholds(self):
        thresholds = Thresholds(warning=60.0, critical=75.0, danger=85.0)
        assert warning_level(76.0, thresholds) == WarningLevel.CRITICAL
        assert warning_level(59.0, thresholds) == WarningLevel.SAFE
        assert warning_level(76.0) == WarningLevel.WARNING


class TestSmartWarningMessage:
    """Test adaptive warning messages."""

    heavy = UsagePattern(average_daily_usage=600_000, typical_burn_rate=1250.0, consistency_score=0.1)

    def test_nothing_below_fifty_percent(self):
        assert smart_warning_message(49.0, self.heavy, None) is None

    def test_safe_under_base_thresholds(self):
        assert smart_warning_message(60.0, UsagePattern(), None) is None

    def test_adaptive_level_without_base_message(self):
        assert smart_warning_message(60.0, self.heavy, None) is None

    def test_consistent_user_insight(self):
        pattern = UsagePattern(average_daily_usage=100_000, typical_burn_rate=208.0, consistency_score=0.9)
        assert smart_warning_message(90.0, pattern, "2h") == (
            "High usage: 90.0% used. Approx. 2h remaining."
            " You're usually more consistent - consider reviewing today's usage."
        )

    def test_below_typical_usage_insight(self):
        pattern = UsagePattern(average_daily_usage=900_000, typical_burn_rate=1875.0, consistency_score=0.1)
        assert smart_warning_message(75.0, pattern, None) == (
            "Moderate usage: 75.0% used. Current rate: 1875.0/min."
            " You're below your typical usage today."
        )

    def test_heavy_usage_ahead_insight(self):
        pattern = UsagePattern(average_daily_usage=850_000, typical_burn_rate=850_000 / 480, consistency_score=0.1)
        assert smart_warning_message(90.0, pattern, None) == (
            "High usage: 90.0% used. Monitor consumption closely."
            " Your current rate suggests heavy usage ahead."
        )

    def test_insight_can_be_disabled(self):
        pattern = UsagePattern(average_daily_usage=900_000, typical_burn_rate=1875.0, consistency_score=0.1)
        assert smart_warning_message(75.0, pattern, None, adaptive=False) == (
            "Moderate usage: 75.0% used. Current rate: 1875.0/min."
        )
