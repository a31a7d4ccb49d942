"""Validation of loan parameters against business rules.

The validator never raises for bad input; it reports every blocking problem in
``errors`` and every advisory in ``warnings`` so the caller can present them
together. :func:`emi_calc.engine.calculate_emi` runs it before generating a
schedule and refuses to continue when the result is not valid.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import List, Optional

from .config import DEFAULT_LIMITS, LoanLimits
from .data_models import LoanParameters, ValidationResult
from .formatter import format_currency
from .utils import to_decimal

logger = logging.getLogger(__name__)


def _optional_decimal(value) -> Optional[Decimal]:
    """Coerce a parameter, treating NaN and infinities as missing."""
    if value is None:
        return None
    number = to_decimal(value)
    if not number.is_finite():
        return None
    return number


def _trial_total_interest(principal: Decimal, annual_rate: Decimal, tenure_months: int) -> Decimal:
    monthly_rate = annual_rate / Decimal(1200)
    factor = (1 + monthly_rate) ** tenure_months
    if factor == 1:
        return Decimal("0")
    emi = principal * monthly_rate * factor / (factor - 1)
    return emi * tenure_months - principal


def validate_loan_parameters(params: LoanParameters, limits: LoanLimits = DEFAULT_LIMITS) -> ValidationResult:
    """Validate loan parameters.

    Parameters
    ----------
    params: LoanParameters
        The values to check. Missing values (``None``) are reported as errors.
    limits: LoanLimits
        Bounds to enforce; defaults to :data:`emi_calc.config.DEFAULT_LIMITS`.

    Returns
    -------
    ValidationResult
        ``is_valid`` is True when ``errors`` is empty. Warnings never affect
        validity.
    """
    errors: List[str] = []
    warnings: List[str] = []

    principal = _optional_decimal(params.principal)
    rate = _optional_decimal(params.annual_interest_rate)
    tenure = _optional_decimal(params.tenure_months)

    if principal is None or principal <= 0:
        errors.append("Principal amount must be greater than zero")
    elif principal < limits.min_principal:
        errors.append(f"Principal amount must be at least {format_currency(limits.min_principal)}")
    elif principal > limits.max_principal:
        errors.append(f"Principal amount cannot exceed {format_currency(limits.max_principal)}")

    if rate is None or rate < 0:
        errors.append("Interest rate must be non-negative")
    elif 0 < rate < limits.min_interest_rate:
        warnings.append(f"Interest rate is very low ({rate}%). Please verify.")
    elif rate > limits.max_interest_rate:
        errors.append(f"Interest rate cannot exceed {limits.max_interest_rate}% (regulatory limit)")

    whole_tenure = tenure is not None and tenure == tenure.to_integral_value()
    if tenure is None or tenure <= 0:
        errors.append("Tenure must be greater than zero")
    elif not whole_tenure:
        errors.append("Tenure must be a whole number of months")
    elif tenure < limits.min_tenure:
        unit = "month" if limits.min_tenure == 1 else "months"
        errors.append(f"Minimum tenure is {limits.min_tenure} {unit}")
    elif tenure > limits.max_tenure:
        errors.append(f"Maximum tenure is {limits.max_tenure} months ({limits.max_tenure // 12} years)")

    if whole_tenure and principal and rate and principal > 0 and rate > 0 and tenure > 0:
        total_interest = _trial_total_interest(principal, rate, int(tenure))
        if total_interest / principal > 1:
            warnings.append("Total interest exceeds principal amount. Consider reducing tenure or rate.")

    if errors:
        logger.info("Loan parameters rejected: %s", "; ".join(errors))
    for warning in warnings:
        logger.info("Loan parameter warning: %s", warning)

    return ValidationResult(is_valid=not errors, errors=tuple(errors), warnings=tuple(warnings))
