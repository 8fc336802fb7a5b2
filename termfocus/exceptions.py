"""Domain exception hierarchy for termfocus."""

from __future__ import annotations


class TermFocusError(RuntimeError):
    """Base class for all domain-level errors."""


class InvalidArgumentError(TermFocusError, ValueError):
    """Raised when a bus or focus operation is called with malformed arguments."""


class ConfigValidationError(TermFocusError):
    """Raised when configuration cannot be validated safely."""
