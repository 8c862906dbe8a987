"""Claude Token Monitor: usage acquisition and aggregation for ccusage."""

from .core.aggregator import UsagePeriod, UsagePeriodSummary, UsageStats
from .core.errors import UsageError
from .core.thresholds import UsagePattern
from .sdk.monitor import UsageMonitor, get_current_usage, get_usage_pattern, get_usage_summary

__version__ = "0.1.0"

__all__ = [
    "UsageError",
    "UsageMonitor",
    "UsagePeriod",
    "UsagePattern",
    "UsagePeriodSummary",
    "UsageStats",
    "get_current_usage",
    "get_usage_pattern",
    "get_usage_summary",
]
