"""
Exceptions raised by the HRBAC engine.

Errors raised by caller-supplied ``when``/``filter``/``project`` functions are
not represented here: they reach the caller of ``HRBAC.can`` unchanged.
"""

from typing import Optional


class HRBACError(Exception):
    """Base exception for rail-hrbac errors."""


class ConfigError(HRBACError, TypeError):
    """Raised when a role configuration or an engine option is unusable."""

    def __init__(
        self,
        message: str,
        role: Optional[str] = None,
        option: Optional[str] = None,
    ):
        self.role = role
        self.option = option
        super().__init__(message)


class ResolutionError(HRBACError, RuntimeError):
    """Raised when a matched operation has no retrievable permission entry."""

    def __init__(self, message: str, role: Optional[str] = None, operation: Optional[str] = None):
        self.role = role
        self.operation = operation
        super().__init__(message)


__all__ = ["HRBACError", "ConfigError", "ResolutionError"]
