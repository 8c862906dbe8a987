"""
Usage monitor entry points.

The operations a UI or command layer depends on.
"""

from datetime import date
from typing import Callable, Optional

from ..ccusage.repository import CcusageRepository, get_repository
from ..core.aggregator import (
    UsagePeriod,
    UsagePeriodSummary,
    UsageStats,
    build_usage_stats,
    entries_in_period,
    summarize_period,
)
from ..core.thresholds import UsagePattern, analyze_usage_pattern


class UsageMonitor:
    """Reads ccusage and derives usage views.

    Each call re-runs ccusage; failures raise UsageError subclasses and
    never yield a partially populated result.
    """

    def __init__(
        self,
        repository: Optional[CcusageRepository] = None,
        clock: Callable[[], date] = date.today
    ):
        """Initialize the monitor.

        Args:
            repository: Data source (defaults to the process-wide repository)
            clock: Returns the caller's local date
        """
        self._repository = repository
        self.clock = clock

    @property
    def repository(self) -> CcusageRepository:
        if self._repository is None:
            self._repository = get_repository()
        return self._repository

    def get_current_usage(self) -> UsageStats:
        """Current session and today's totals.

        Runs `ccusage blocks --json` then `ccusage daily --json`.
        """
        blocks = self.repository.fetch_blocks()
        daily = self.repository.fetch_daily()
        return build_usage_stats(blocks, daily, today=self.clock())

    def get_usage_summary(self, period: str) -> UsagePeriodSummary:
        """Totals and averages for `day`, `week` or `month`.

        Unrecognized periods are treated as `day`.
        """
        daily = self.repository.fetch_daily()
        return summarize_period(period, daily, today=self.clock())

    def get_usage_pattern(self) -> UsagePattern:
        """Usage pattern of the last seven days, for adaptive warnings."""
        daily = self.repository.fetch_daily()
        return analyze_usage_pattern(
            entries_in_period(UsagePeriod.WEEK, daily, today=self.clock())
        )


def get_current_usage() -> UsageStats:
    return UsageMonitor().get_current_usage()


def get_usage_summary(period: str) -> UsagePeriodSummary:
    return UsageMonitor().get_usage_summary(period)


def get_usage_pattern() -> UsagePattern:
    return UsageMonitor().get_usage_pattern()
