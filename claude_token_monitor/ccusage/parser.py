"""
Decoding of ccusage JSON output into internal records.

Unknown fields are ignored; a missing required field or invalid JSON raises
MalformedResponse with the validator's own diagnostic.
"""

from typing import List, Union

from pydantic import ValidationError

from ..core.errors import MalformedResponse
from .models import BurnRate, DailyEntry, Projection, TokenCounts, UsageBlock
from .schema import BlockWire, BlocksResponse, DailyResponse

JsonInput = Union[bytes, str]


def parse_blocks(data: JsonInput) -> List[UsageBlock]:
    """Parse `ccusage blocks --json` output.

    Args:
        data: Raw stdout of the command

    Returns:
        Blocks in the order ccusage reported them

    Raises:
        MalformedResponse: If the output is not the expected JSON shape
    """
    try:
        response = BlocksResponse.model_validate_json(data)
    except ValidationError as e:
        raise MalformedResponse(
            f"Failed to parse ccusage blocks output: {e}",
            command="blocks",
            detail=str(e)
        ) from e

    return [_to_block(block) for block in response.blocks]


def parse_daily(data: JsonInput) -> List[DailyEntry]:
    """Parse `ccusage daily --json` output.

    Raises:
        MalformedResponse: If the output is not the expected JSON shape
    """
    try:
        response = DailyResponse.model_validate_json(data)
    except ValidationError as e:
        raise MalformedResponse(
            f"Failed to parse ccusage daily output: {e}",
            command="daily",
            detail=str(e)
        ) from e

    return [
        DailyEntry(
            date=entry.date,
            total_tokens=entry.total_tokens,
            total_cost=entry.total_cost,
            models_used=tuple(entry.models_used)
        )
        for entry in response.daily
    ]


def _to_block(block: BlockWire) -> UsageBlock:
    burn_rate = None
    if block.burn_rate is not None:
        burn_rate = BurnRate(
            tokens_per_minute=block.burn_rate.tokens_per_minute,
            tokens_per_minute_for_indicator=block.burn_rate.tokens_per_minute_for_indicator,
            cost_per_hour=block.burn_rate.cost_per_hour
        )

    projection = None
    if block.projection is not None:
        projection = Projection(
            total_tokens=block.projection.total_tokens,
            total_cost=block.projection.total_cost,
            remaining_minutes=block.projection.remaining_minutes
        )

    return UsageBlock(
        id=block.id,
        start_time=block.start_time,
        end_time=block.end_time,
        actual_end_time=block.actual_end_time,
        is_active=block.is_active,
        is_gap=block.is_gap,
        entries=block.entries,
        token_counts=TokenCounts(
            input_tokens=block.token_counts.input_tokens,
            output_tokens=block.token_counts.output_tokens,
            cache_creation_input_tokens=block.token_counts.cache_creation_input_tokens,
            cache_read_input_tokens=block.token_counts.cache_read_input_tokens
        ),
        total_tokens=block.total_tokens,
        cost=block.cost_usd,
        models=tuple(block.models),
        burn_rate=burn_rate,
        projection=projection
    )
