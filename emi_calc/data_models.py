"""Data models for the EMI calculator.

This module defines dataclasses representing the values exchanged with the
engine: the loan parameters supplied by the origination workflow, individual
installments of the repayment schedule, the loan summary and the results of
validation and calculation. All of them are frozen; operations that change a
schedule build new objects instead of mutating existing ones.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional, Tuple


@dataclass(frozen=True)
class LoanParameters:
    """Inputs of an EMI calculation.

    Attributes
    ----------
    principal: Decimal
        The amount lent to the borrower.
    annual_interest_rate: Decimal
        Nominal annual rate in percent (``12`` means 12 %). Zero is accepted
        and describes an interest-free loan.
    tenure_months: int
        Number of monthly installments.

    Fields are ``Optional`` so that incomplete form input can still be handed
    to the validator, which reports the missing values.
    """

    principal: Optional[Decimal]
    annual_interest_rate: Optional[Decimal]
    tenure_months: Optional[int]


@dataclass(frozen=True)
class EMIScheduleItem:
    """One installment of the repayment schedule.

    ``outstanding_principal`` is the balance left *after* this installment has
    been paid; it is exactly zero on the final row.
    """

    emi_number: int
    due_date: date
    emi_amount: Decimal
    principal_component: Decimal
    interest_component: Decimal
    outstanding_principal: Decimal


@dataclass(frozen=True)
class LoanSummary:
    principal: Decimal
    total_interest: Decimal
    total_amount: Decimal
    monthly_emi: Decimal
    effective_interest_rate: Decimal  # annualized, in percent
    tenure_months: int


@dataclass(frozen=True)
class EMICalculationResult:
    """Full output of :func:`emi_calc.engine.calculate_emi`.

    ``total_amount`` and ``total_interest`` are summed from ``schedule`` so
    they always reconcile with the installments shown to the borrower.
    ``warnings`` repeats the advisories raised while validating the input.
    """

    emi_amount: Decimal
    total_amount: Decimal
    total_interest: Decimal
    schedule: Tuple[EMIScheduleItem, ...]
    summary: LoanSummary
    warnings: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of parameter validation.

    ``errors`` block the calculation; ``warnings`` are advisory only.
    """

    is_valid: bool
    errors: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()

    def __bool__(self) -> bool:
        return self.is_valid
