"""Exception hierarchy shared across PROSPECT."""
from __future__ import annotations


class ProspectError(Exception):
    """Base class for errors raised by the scoring engine."""


class ConfigValidationError(ProspectError, ValueError):
    """Raised when a scoring profile cannot be accepted."""


class DataUnavailableError(ProspectError, RuntimeError):
    """Raised when the provider store cannot be read."""


__all__ = ["ConfigValidationError", "DataUnavailableError", "ProspectError"]
