from __future__ import annotations

import logging
from typing import Iterable

from cashproj_core.domain.models import CashEvent, ProjectionConfig, ProjectionResult
from cashproj_core.services import aggregator, expander

logger = logging.getLogger(__name__)


def project_cash(events: Iterable[CashEvent], config: ProjectionConfig) -> ProjectionResult:
    horizon = config.horizon()
    events = list(events)
    contributions = expander.expand_events(events, horizon, config.tax_rate)
    rows = aggregator.aggregate(contributions, horizon)
    logger.debug(
        "Projected %d events into %d contributions over %d months starting %s",
        len(events),
        len(contributions),
        len(rows),
        horizon.start,
    )
    return ProjectionResult(config=config, horizon=horizon, rows=rows)
