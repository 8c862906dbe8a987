"""
Usage thresholds and display formatting.

Nominal per-period token limits, warning levels and time-to-limit
estimates derived from the burn rate. Warning thresholds can adapt to
the usage pattern of recent days.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Optional, Tuple

from .aggregator import UsagePeriod
from ..ccusage.models import DailyEntry


PERIOD_TOKEN_LIMITS: Dict[UsagePeriod, int] = {
    UsagePeriod.DAY: 1_000_000,
    UsagePeriod.WEEK: 7_000_000,
    UsagePeriod.MONTH: 30_000_000,
}


class WarningLevel(Enum):
    """Warning levels in order of severity."""
    SAFE = "safe"
    WARNING = "warning"
    CRITICAL = "critical"
    DANGER = "danger"


WARNING_THRESHOLD = 70.0
CRITICAL_THRESHOLD = 85.0
DANGER_THRESHOLD = 95.0


@dataclass(frozen=True)
class Thresholds:
    """Percentages at which each warning level starts."""
    warning: float = WARNING_THRESHOLD
    critical: float = CRITICAL_THRESHOLD
    danger: float = DANGER_THRESHOLD


BASE_THRESHOLDS = Thresholds()

LIMIT_REACHED = "Limit reached"
UNDER_A_MINUTE = "< 1 min"


def token_limit(period) -> int:
    if not isinstance(period, UsagePeriod):
        period = UsagePeriod.from_token(period)
    return PERIOD_TOKEN_LIMITS[period]


def usage_percentage(tokens: int, period) -> float:
    """Percentage of the period's nominal token limit used."""
    return tokens / token_limit(period) * 100


def warning_level(percentage: float, thresholds: Thresholds = BASE_THRESHOLDS) -> WarningLevel:
    if percentage >= thresholds.danger:
        return WarningLevel.DANGER
    if percentage >= thresholds.critical:
        return WarningLevel.CRITICAL
    if percentage >= thresholds.warning:
        return WarningLevel.WARNING
    return WarningLevel.SAFE


def time_to_limit(current_tokens: int, max_tokens: int, burn_rate: Optional[float]) -> Optional[str]:
    """Estimate the time left before `max_tokens` at the current burn rate.

    Args:
        current_tokens: Tokens used so far
        max_tokens: Limit to reach
        burn_rate: Tokens per minute, None or <= 0 when unknown

    Returns:
        "Limit reached", "< 1 min", "N min", "Nh", "Nd", or None without a rate
    """
    if not burn_rate or burn_rate <= 0:
        return None

    remaining = max_tokens - current_tokens
    if remaining <= 0:
        return LIMIT_REACHED

    minutes = remaining / burn_rate
    if minutes < 1:
        return UNDER_A_MINUTE
    if minutes < 60:
        return f"{round(minutes)} min"
    if minutes < 1440:
        return f"{round(minutes / 60)}h"
    return f"{round(minutes / 1440)}d"


def format_tokens(tokens: int) -> str:
    return f"{tokens:,}"


def format_cost(cost: float) -> str:
    return f"${cost:.3f}"


def format_burn_rate(burn_rate: Optional[float]) -> str:
    if not burn_rate:
        return "No data"
    if burn_rate >= 1000:
        return f"{burn_rate / 1000:.1f}K/min"
    return f"{burn_rate:.1f}/min"


def warning_message(level: WarningLevel, percentage: float) -> Optional[str]:
    """Short message for a warning level, None when safe."""
    if level == WarningLevel.DANGER:
        return f"Critical: {percentage:.1f}% usage! Consider upgrading your plan."
    if level == WarningLevel.CRITICAL:
        return f"High usage: {percentage:.1f}%. Monitor your token consumption."
    if level == WarningLevel.WARNING:
        return f"Moderate usage: {percentage:.1f}%. Keep an eye on usage."
    return None


def advanced_warning_message(
    percentage: float,
    time_left: Optional[str],
    burn_rate: Optional[float]
) -> Optional[str]:
    """Warning message that adds the time left or the burn rate when known.

    Always uses the base thresholds; returns None below the warning level.
    """
    if percentage >= DANGER_THRESHOLD:
        if time_left and time_left != LIMIT_REACHED:
            return f"Critical: {percentage:.1f}% used. Approx. {time_left} remaining at current rate."
        return f"Critical: {percentage:.1f}% used. Limit almost reached!"

    if percentage >= CRITICAL_THRESHOLD:
        if time_left:
            return f"High usage: {percentage:.1f}% used. Approx. {time_left} remaining."
        return f"High usage: {percentage:.1f}% used. Monitor consumption closely."

    if percentage >= WARNING_THRESHOLD:
        if burn_rate and burn_rate > 0:
            return f"Moderate usage: {percentage:.1f}% used. Current rate: {burn_rate:.1f}/min."
        return f"Moderate usage: {percentage:.1f}% used. Track your consumption."

    return None


def should_show_urgent_warning(percentage: float, time_left: Optional[str]) -> bool:
    if percentage >= DANGER_THRESHOLD:
        return True
    return time_left in (UNDER_A_MINUTE, LIMIT_REACHED)


# Assumed length of a working day when deriving a typical burn rate
WORKDAY_MINUTES = 8 * 60
DEFAULT_PEAK_HOURS = (9, 10, 11, 14, 15, 16)

HEAVY_DAILY_USAGE = 500_000
MODERATE_DAILY_USAGE = 200_000
HIGH_BURN_RATE = 100.0
CONSISTENT_SCORE = 0.8


@dataclass(frozen=True)
class UsagePattern:
    """Summary of recent daily usage used to adapt warnings."""
    average_daily_usage: float = 0.0
    max_daily_usage: int = 0
    typical_burn_rate: float = 0.0
    consistency_score: float = 0.0
    peak_usage_hours: Tuple[int, ...] = ()


def analyze_usage_pattern(daily: Iterable[DailyEntry]) -> UsagePattern:
    """Derive a usage pattern from daily entries, usually the last week.

    The consistency score is 1 minus the coefficient of variation, floored
    at 0. A zero average yields a score of 0.

    Args:
        daily: Daily entries to analyze (only reported days count)

    Returns:
        UsagePattern, all zeros for no entries
    """
    usages = [entry.total_tokens for entry in daily]
    if not usages:
        return UsagePattern()

    average = sum(usages) / len(usages)
    variance = sum((usage - average) ** 2 for usage in usages) / len(usages)
    if average > 0:
        consistency = max(0.0, 1 - math.sqrt(variance) / average)
    else:
        consistency = 0.0

    return UsagePattern(
        average_daily_usage=average,
        max_daily_usage=max(usages),
        typical_burn_rate=average / WORKDAY_MINUTES,
        consistency_score=consistency,
        peak_usage_hours=DEFAULT_PEAK_HOURS
    )


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def adaptive_thresholds(pattern: UsagePattern) -> Thresholds:
    """Shift the base thresholds for the user's habits.

    Heavy users and fast burners are warned earlier; consistent users
    slightly later. Each threshold stays within fixed bounds.
    """
    if pattern.average_daily_usage == 0:
        return BASE_THRESHOLDS

    adjustment = 0.0
    if pattern.average_daily_usage > HEAVY_DAILY_USAGE:
        adjustment = -10.0
    elif pattern.average_daily_usage > MODERATE_DAILY_USAGE:
        adjustment = -5.0

    if pattern.consistency_score > CONSISTENT_SCORE:
        adjustment += 5.0

    if pattern.typical_burn_rate > HIGH_BURN_RATE:
        adjustment -= 5.0

    return Thresholds(
        warning=_clamp(WARNING_THRESHOLD + adjustment, 50.0, 80.0),
        critical=_clamp(CRITICAL_THRESHOLD + adjustment, 70.0, 90.0),
        danger=_clamp(DANGER_THRESHOLD + adjustment, 85.0, 98.0)
    )


def smart_warning_message(
    percentage: float,
    pattern: UsagePattern,
    time_left: Optional[str],
    adaptive: bool = True
) -> Optional[str]:
    """Warning message under adaptive thresholds, with a personal insight.

    Args:
        percentage: Share of the daily limit used
        pattern: Recent usage pattern
        time_left: Output of time_to_limit
        adaptive: Append the insight to the base message

    Returns:
        Message, or None below 50% or below the adaptive warning level
    """
    if percentage < 50:
        return None

    thresholds = adaptive_thresholds(pattern)
    if warning_level(percentage, thresholds) == WarningLevel.SAFE:
        return None

    message = advanced_warning_message(percentage, time_left, pattern.typical_burn_rate)
    if not adaptive or not message:
        return message

    insight = ""
    typical_percentage = pattern.average_daily_usage / PERIOD_TOKEN_LIMITS[UsagePeriod.DAY] * 100
    if pattern.consistency_score > CONSISTENT_SCORE and percentage > thresholds.critical:
        insight = " You're usually more consistent - consider reviewing today's usage."
    elif pattern.average_daily_usage > 0 and percentage < typical_percentage:
        insight = " You're below your typical usage today."
    elif percentage > CRITICAL_THRESHOLD and pattern.typical_burn_rate > 0:
        if pattern.typical_burn_rate * WORKDAY_MINUTES > 800_000:
            insight = " Your current rate suggests heavy usage ahead."

    return message + insight
