"""
Custom exceptions for the engine.

Malformed input (bad ranges, incomplete recurrence configs) fails fast with one of
these typed errors. Budget overage is reported as a value, never raised.
"""

from typing import Any, Optional


class PhasePlanError(Exception):
    """Base exception for phaseplan."""

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class NotFoundError(PhasePlanError):
    """Resource not found."""

    pass


class ValidationError(PhasePlanError):
    """Validation error."""

    pass


class InvalidRangeError(ValidationError):
    """Date range whose start falls after its end."""

    def __init__(self, start: Any, end: Any, message: Optional[str] = None):
        super().__init__(
            message or f"Range start {start} is after end {end}",
            details={"start": str(start), "end": str(end)},
        )
        self.start = start
        self.end = end


class InvalidRecurrenceConfigError(ValidationError):
    """Recurrence config missing a field its pattern requires."""

    def __init__(self, message: str, errors: Optional[list[str]] = None):
        super().__init__(message, details={"errors": errors or [message]})
        self.errors = errors or [message]


class OverlapViolationError(PhasePlanError):
    """Phase boundaries overlap or a phase is shorter than one day."""

    pass


class BusinessLogicError(PhasePlanError):
    """Business logic constraint violation."""

    pass
