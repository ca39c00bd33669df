from cashproj_core.domain.errors import (  # noqa: F401
    CashProjError,
    ConfigurationError,
    InputError,
    InvariantViolation,
)
from cashproj_core.domain.models import (  # noqa: F401
    CashEvent,
    Contribution,
    EventKind,
    Horizon,
    ProjectionConfig,
    ProjectionResult,
    ProjectionRow,
    Recurrence,
    current_month,
    parse_month,
)

__all__ = [
    "CashEvent",
    "CashProjError",
    "ConfigurationError",
    "Contribution",
    "EventKind",
    "Horizon",
    "InputError",
    "InvariantViolation",
    "ProjectionConfig",
    "ProjectionResult",
    "ProjectionRow",
    "Recurrence",
    "current_month",
    "parse_month",
]
