import logging
from decimal import Decimal

import pandas as pd
import pytest

from cashproj_core.domain.errors import InvariantViolation
from cashproj_core.domain.models import Contribution, Horizon
from cashproj_core.services.aggregator import aggregate


def _m(text: str) -> pd.Period:
    return pd.Period(text, freq="M")


def test_empty_contributions_still_fill_horizon():
    horizon = Horizon(start=_m("2024-11"), month_count=4)
    rows = aggregate([], horizon)
    assert [r.month for r in rows] == [_m("2024-11"), _m("2024-12"), _m("2025-01"), _m("2025-02")]
    assert all(r.monthly_total == 0 and r.cumulative_total == 0 for r in rows)


def test_gap_month_carries_previous_balance():
    horizon = Horizon(start=_m("2024-01"), month_count=3)
    contributions = [
        Contribution(_m("2024-03"), Decimal("5.00")),
        Contribution(_m("2024-01"), Decimal("10.00")),
    ]
    rows = aggregate(contributions, horizon)
    assert [r.monthly_total for r in rows] == [Decimal("10.00"), Decimal("0"), Decimal("5.00")]
    assert [r.cumulative_total for r in rows] == [Decimal("10.00"), Decimal("10.00"), Decimal("15.00")]


def test_cumulative_is_consistent_with_monthly():
    horizon = Horizon(start=_m("2023-01"), month_count=24)
    contributions = [Contribution(m, Decimal("0.10")) for m in horizon.months()]
    contributions += [Contribution(_m("2023-06"), Decimal("-3.35"))]
    rows = aggregate(contributions, horizon)

    assert len(rows) == 24
    assert rows[0].cumulative_total == rows[0].monthly_total
    for prev, cur in zip(rows, rows[1:]):
        assert cur.month == prev.month + 1
        assert cur.cumulative_total == prev.cumulative_total + cur.monthly_total
    # no float drift after many small additions
    assert rows[-1].cumulative_total == Decimal("-0.95")


def test_aggregate_is_idempotent():
    horizon = Horizon(start=_m("2024-01"), month_count=5)
    contributions = [Contribution(_m("2024-02"), Decimal("1.5")), Contribution(_m("2024-05"), Decimal("-0.5"))]
    assert aggregate(contributions, horizon) == aggregate(contributions, horizon)


def test_contribution_outside_horizon_fails_loudly():
    horizon = Horizon(start=_m("2024-01"), month_count=2)
    with pytest.raises(InvariantViolation):
        aggregate([Contribution(_m("2024-03"), Decimal("1"))], horizon)
    with pytest.raises(AssertionError):
        aggregate([Contribution(_m("2023-12"), Decimal("1"))], horizon)


def test_aggregate_logs_closing_balance(caplog):
    horizon = Horizon(start=_m("2024-01"), month_count=2)
    with caplog.at_level(logging.DEBUG, logger="cashproj_core.services.aggregator"):
        aggregate([Contribution(_m("2024-02"), Decimal("12.50"))], horizon)
    assert "closing balance 12.50" in caplog.text
