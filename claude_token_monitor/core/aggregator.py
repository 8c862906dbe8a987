"""
Usage aggregation over ccusage reports.

Derives the current-session snapshot and day/week/month summaries.
Windows are inclusive and anchored on the caller's local date.
"""

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Iterable, List, Optional, Sequence

from .errors import InvalidDate
from ..ccusage.models import DATE_FORMAT, DailyEntry, UsageBlock

logger = logging.getLogger(__name__)

UNKNOWN_MODEL = "Unknown"
DEFAULT_MODEL = "Claude"


class UsagePeriod(str, Enum):
    """Aggregation window granularity."""
    DAY = "day"
    WEEK = "week"
    MONTH = "month"

    @classmethod
    def from_token(cls, token: Optional[str]) -> "UsagePeriod":
        """Map a free-form token onto a period; unknown tokens mean DAY."""
        try:
            return cls(token)
        except ValueError:
            return cls.DAY


@dataclass(frozen=True)
class UsageStats:
    """Point-in-time usage snapshot."""
    active_session: bool
    current_tokens: int
    daily_tokens: int
    cost: float
    model: str
    session_cost: float
    burn_rate: Optional[float] = None


@dataclass(frozen=True)
class PeriodWindow:
    """Inclusive calendar window."""
    start: date
    end: date
    days: int

    def __post_init__(self):
        """Validate window is logical."""
        if self.start > self.end:
            raise ValueError("start must not be after end")

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass(frozen=True)
class UsagePeriodSummary:
    """Totals and daily averages over a period window."""
    period: UsagePeriod
    start_date: str
    end_date: str
    days: int
    total_tokens: int
    total_cost: float
    avg_tokens_per_day: float
    avg_cost_per_day: float


def find_active_block(blocks: Iterable[UsageBlock]) -> Optional[UsageBlock]:
    """Return the first block marked active, in the order ccusage reported."""
    for block in blocks:
        if block.is_active:
            return block
    return None


def find_daily_entry(daily: Iterable[DailyEntry], day: date) -> Optional[DailyEntry]:
    for entry in daily:
        if entry.parsed_date == day:
            return entry
    return None


def build_usage_stats(
    blocks: Sequence[UsageBlock],
    daily: Sequence[DailyEntry],
    today: Optional[date] = None
) -> UsageStats:
    """Build the current usage snapshot.

    Session figures come from the active block, if any. Without one the
    model is taken from the first reported block, whose position as "most
    recent" depends on ccusage's output order.

    Args:
        blocks: Parsed `blocks` report
        daily: Parsed `daily` report
        today: Caller's local date (defaults to date.today())

    Returns:
        UsageStats for today
    """
    today = today or date.today()
    active = find_active_block(blocks)

    if active is not None:
        current_tokens = active.total_tokens
        session_cost = active.cost
        burn_rate = (
            active.burn_rate.tokens_per_minute_for_indicator
            if active.burn_rate is not None else None
        )
        model = active.primary_model or UNKNOWN_MODEL
    else:
        current_tokens = 0
        session_cost = 0.0
        burn_rate = None
        model = (blocks[0].primary_model if blocks else None) or DEFAULT_MODEL

    entry = find_daily_entry(daily, today)
    daily_tokens = entry.total_tokens if entry else 0
    daily_cost = entry.total_cost if entry else 0.0

    return UsageStats(
        active_session=active is not None,
        current_tokens=current_tokens,
        daily_tokens=daily_tokens,
        cost=daily_cost,
        model=model,
        session_cost=session_cost,
        burn_rate=burn_rate
    )


def period_window(period, today: Optional[date] = None) -> PeriodWindow:
    """Compute the inclusive window for a period.

    day is today only, week is the trailing seven days including today,
    month runs from the first of today's month.

    Raises:
        InvalidDate: If the calendar computation fails
    """
    today = today or date.today()
    if not isinstance(period, UsagePeriod):
        period = UsagePeriod.from_token(period)

    try:
        if period == UsagePeriod.WEEK:
            return PeriodWindow(start=today - timedelta(days=6), end=today, days=7)
        if period == UsagePeriod.MONTH:
            start = today.replace(day=1)
            return PeriodWindow(start=start, end=today, days=(today - start).days + 1)
    except (ValueError, OverflowError) as e:
        raise InvalidDate(f"Could not compute {period.value} window for {today}: {e}") from e

    return PeriodWindow(start=today, end=today, days=1)


def entries_in_period(
    period,
    daily: Iterable[DailyEntry],
    today: Optional[date] = None
) -> List[DailyEntry]:
    """Daily entries falling inside the period window, in report order.

    Entries whose date does not parse are skipped.
    """
    window = period_window(period, today)
    selected = []
    for entry in daily:
        entry_date = entry.parsed_date
        if entry_date is None:
            logger.debug("Skipping daily entry with unparseable date: %r", entry.date)
            continue
        if window.contains(entry_date):
            selected.append(entry)
    return selected


def summarize_period(
    period,
    daily: Iterable[DailyEntry],
    today: Optional[date] = None
) -> UsagePeriodSummary:
    """Sum daily entries falling inside the period window.

    Entries whose date does not parse are skipped.

    Args:
        period: UsagePeriod or free-form token
        daily: Parsed `daily` report
        today: Caller's local date (defaults to date.today())

    Returns:
        UsagePeriodSummary with totals and per-day averages
    """
    period = period if isinstance(period, UsagePeriod) else UsagePeriod.from_token(period)
    window = period_window(period, today)

    total_tokens = 0
    total_cost = 0.0
    for entry in entries_in_period(period, daily, today):
        total_tokens += entry.total_tokens
        total_cost += entry.total_cost

    days = window.days
    return UsagePeriodSummary(
        period=period,
        start_date=window.start.strftime(DATE_FORMAT),
        end_date=window.end.strftime(DATE_FORMAT),
        days=days,
        total_tokens=total_tokens,
        total_cost=total_cost,
        avg_tokens_per_day=total_tokens / days if days > 0 else 0.0,
        avg_cost_per_day=total_cost / days if days > 0 else 0.0
    )
