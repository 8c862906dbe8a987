"""
Data models for ccusage reports.

Immutable records built from one invocation's output; never persisted.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Tuple

DATE_FORMAT = "%Y-%m-%d"


@dataclass(frozen=True)
class TokenCounts:
    input_tokens: int
    output_tokens: int
    cache_creation_input_tokens: int
    cache_read_input_tokens: int


@dataclass(frozen=True)
class BurnRate:
    """Consumption rate of an active block."""
    tokens_per_minute: float
    tokens_per_minute_for_indicator: float
    cost_per_hour: float


@dataclass(frozen=True)
class Projection:
    total_tokens: int
    total_cost: float
    remaining_minutes: int


@dataclass(frozen=True)
class UsageBlock:
    """A session-like reporting interval, optionally marked active."""
    id: str
    start_time: str
    end_time: str
    is_active: bool
    is_gap: bool
    entries: int
    token_counts: TokenCounts
    total_tokens: int
    cost: float
    models: Tuple[str, ...]
    actual_end_time: Optional[str] = None
    burn_rate: Optional[BurnRate] = None
    projection: Optional[Projection] = None

    @property
    def primary_model(self) -> Optional[str]:
        """First listed model, or None when the block has none."""
        return self.models[0] if self.models else None


@dataclass(frozen=True)
class DailyEntry:
    """One calendar day's aggregated usage."""
    date: str
    total_tokens: int
    total_cost: float
    models_used: Tuple[str, ...] = ()

    @property
    def parsed_date(self) -> Optional[date]:
        """Calendar date of the entry, None if `date` is not YYYY-MM-DD."""
        try:
            return datetime.strptime(self.date, DATE_FORMAT).date()
        except ValueError:
            return None
