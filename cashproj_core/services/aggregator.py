from __future__ import annotations

import logging
from decimal import Decimal
from typing import Dict, Iterable, List

import pandas as pd

from cashproj_core.domain.errors import InvariantViolation
from cashproj_core.domain.models import Contribution, Horizon, ProjectionRow

logger = logging.getLogger(__name__)


def bucket_by_month(contributions: Iterable[Contribution], horizon: Horizon) -> Dict[pd.Period, Decimal]:
    # every horizon month gets a bucket, even with no contributions
    buckets: Dict[pd.Period, Decimal] = {month: Decimal("0") for month in horizon.months()}
    for item in contributions:
        if item.month not in buckets:
            raise InvariantViolation(
                f"Contribution for {item.month} falls outside horizon {horizon.start}..{horizon.end}"
            )
        buckets[item.month] += item.amount
    return buckets


def aggregate(contributions: Iterable[Contribution], horizon: Horizon) -> List[ProjectionRow]:
    """
    Sum contributions per month and carry a running balance across the horizon.
    Returns exactly horizon.month_count rows in chronological order.
    """
    buckets = bucket_by_month(contributions, horizon)

    rows: List[ProjectionRow] = []
    running = Decimal("0")
    for month in sorted(buckets):
        monthly = buckets[month]
        running += monthly
        rows.append(ProjectionRow(month=month, monthly_total=monthly, cumulative_total=running))
    logger.debug("Aggregated %d months, closing balance %s", len(rows), running)
    return rows
