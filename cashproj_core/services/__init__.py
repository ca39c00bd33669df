from cashproj_core.services.aggregator import aggregate  # noqa: F401
from cashproj_core.services.expander import expand_events  # noqa: F401
from cashproj_core.services.pipeline import project_cash  # noqa: F401

__all__ = [
    "aggregate",
    "expand_events",
    "project_cash",
]
