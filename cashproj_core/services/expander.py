from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable, List

from cashproj_core.domain.models import CashEvent, Contribution, Horizon

logger = logging.getLogger(__name__)


def expand_event(event: CashEvent, horizon: Horizon, tax_rate: Decimal = Decimal("0")) -> List[Contribution]:
    amount = event.net_amount(tax_rate)

    if not event.recurrence.is_recurring:
        if horizon.contains(event.start_month):
            return [Contribution(month=event.start_month, amount=amount)]
        return []

    monthly = event.recurrence.monthly_equivalent(amount)
    return [
        Contribution(month=month, amount=monthly)
        for month in horizon.months()
        if event.start_month is None or month >= event.start_month
    ]


def expand_events(
    events: Iterable[CashEvent],
    horizon: Horizon,
    tax_rate: Decimal = Decimal("0"),
) -> List[Contribution]:
    """
    Expand declared events into concrete (month, amount) contributions clipped to the horizon:
    - One-off events land once, in their start month, if it is inside the horizon.
    - Recurring events land in every horizon month from their start onward, at their
      monthly-equivalent amount.
    Output is not sorted; the aggregator orders by month.
    """
    contributions: List[Contribution] = []
    for event in events:
        produced = expand_event(event, horizon, tax_rate)
        if not produced:
            logger.debug("Event %r contributes nothing to %s..%s", event.label, horizon.start, horizon.end)
        contributions.extend(produced)
    return contributions
