from __future__ import annotations


class CashProjError(Exception):
    """Base class for projection errors."""


class ConfigurationError(CashProjError, ValueError):
    """Horizon or run configuration that the projection refuses to guess around."""


class InputError(CashProjError, ValueError):
    """A cash event record that cannot be turned into a CashEvent."""


class InvariantViolation(CashProjError, AssertionError):
    """Internal defect, never a user error."""
