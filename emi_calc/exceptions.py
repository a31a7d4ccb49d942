"""Custom exceptions for the EMI calculator."""

from typing import Optional

from .data_models import ValidationResult


class EMICalculationError(ValueError):
    """Base exception for all EMI calculator errors."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        return self.message


class LoanValidationError(EMICalculationError):
    """Raised when loan parameters fail validation.

    The message joins every individual error; the full
    :class:`ValidationResult` is kept on ``result`` for callers that want to
    present errors and warnings separately.
    """

    def __init__(self, errors, result: Optional[ValidationResult] = None):
        self.errors = list(errors)
        self.result = result or ValidationResult(is_valid=False, errors=tuple(self.errors))
        message = f"Invalid loan parameters: {', '.join(self.errors)}"
        super().__init__(message, {"errors": self.errors})


class PrepaymentError(EMICalculationError):
    """Raised when a prepayment cannot be applied to a schedule."""

    def __init__(self, message: str, prepayment_month: int = None, schedule_length: int = None):
        details = {}
        if prepayment_month is not None:
            details["prepayment_month"] = prepayment_month
        if schedule_length is not None:
            details["schedule_length"] = schedule_length
        super().__init__(message, details)
