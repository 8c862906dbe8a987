"""Wire schema of ccusage `blocks --json` and `daily --json`."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class WireModel(BaseModel):
    """camelCase JSON keys mapped onto snake_case fields; extras ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class TokenCountsWire(WireModel):
    input_tokens: int = Field(..., ge=0, alias="inputTokens")
    output_tokens: int = Field(..., ge=0, alias="outputTokens")
    cache_creation_input_tokens: int = Field(..., ge=0, alias="cacheCreationInputTokens")
    cache_read_input_tokens: int = Field(..., ge=0, alias="cacheReadInputTokens")


class BurnRateWire(WireModel):
    tokens_per_minute: float = Field(..., alias="tokensPerMinute")
    tokens_per_minute_for_indicator: float = Field(..., alias="tokensPerMinuteForIndicator")
    cost_per_hour: float = Field(..., alias="costPerHour")


class ProjectionWire(WireModel):
    total_tokens: int = Field(..., ge=0, alias="totalTokens")
    total_cost: float = Field(..., alias="totalCost")
    remaining_minutes: int = Field(..., ge=0, alias="remainingMinutes")


class BlockWire(WireModel):
    id: str
    start_time: str = Field(..., alias="startTime")
    end_time: str = Field(..., alias="endTime")
    actual_end_time: Optional[str] = Field(None, alias="actualEndTime")
    is_active: bool = Field(..., alias="isActive")
    is_gap: bool = Field(..., alias="isGap")
    entries: int = Field(..., ge=0)
    token_counts: TokenCountsWire = Field(..., alias="tokenCounts")
    total_tokens: int = Field(..., ge=0, alias="totalTokens")
    cost_usd: float = Field(..., alias="costUSD")
    models: List[str]
    burn_rate: Optional[BurnRateWire] = Field(None, alias="burnRate")
    projection: Optional[ProjectionWire] = None


class BlocksResponse(WireModel):
    blocks: List[BlockWire]


class DailyEntryWire(WireModel):
    date: str
    total_tokens: int = Field(..., ge=0, alias="totalTokens")
    total_cost: float = Field(..., alias="totalCost")
    models_used: List[str] = Field(..., alias="modelsUsed")


class DailyResponse(WireModel):
    daily: List[DailyEntryWire]
