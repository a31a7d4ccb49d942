"""Core calculation engine for the EMI calculator.

This module implements the financial logic behind loan origination: the
equated monthly installment (EMI) of a reducing-balance loan, its month by
month repayment schedule, the effective annual rate, affordability sizing,
prepayment recomputation and simple (actual/365) periodic and penalty interest.

Every monetary value returned is a ``Decimal`` rounded to two places. Schedule
arithmetic runs at full precision and only the stored figures are rounded; the
final installment absorbs the remaining balance so that the loan always closes
at zero.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from decimal import Decimal, getcontext
from typing import List, Optional, Sequence

from .config import DEFAULT_FOIR, DEFAULT_LIMITS, LoanLimits
from .data_models import EMICalculationResult, EMIScheduleItem, LoanParameters, LoanSummary
from .exceptions import LoanValidationError, PrepaymentError
from .utils import Number, add_months, round2, to_decimal
from .validation import validate_loan_parameters

getcontext().prec = 28  # increase precision for financial calculations

logger = logging.getLogger(__name__)


def _monthly_rate(annual_rate: Decimal) -> Decimal:
    """Convert an annual percentage rate into a monthly decimal rate."""
    return annual_rate / Decimal(1200)


def _calculate_annuity_payment(principal: Decimal, rate_per_month: Decimal, term: int) -> Decimal:
    """Return the annuity (equal installment) monthly payment for a loan.

    The formula is:

        payment = P * (i * (1 + i)^n) / ((1 + i)^n - 1)

    where ``P`` is the principal, ``i`` is the monthly interest rate and
    ``n`` is the number of payments. When the interest rate is zero, the
    payment simplifies to ``P / n``.
    """
    if term <= 0:
        raise ValueError("Term must be positive")
    if rate_per_month == 0:
        return principal / Decimal(term)
    factor = (1 + rate_per_month) ** term
    if factor == 1:
        # rate too small to register at the working precision
        return principal / Decimal(term)
    return principal * (rate_per_month * factor) / (factor - 1)


def calculate_emi(
    params: LoanParameters,
    start_date: Optional[date] = None,
    limits: LoanLimits = DEFAULT_LIMITS,
) -> EMICalculationResult:
    """Calculate the EMI and the complete repayment schedule of a loan.

    Parameters
    ----------
    params: LoanParameters
        Principal, annual rate (percent) and tenure (months).
    start_date: date, optional
        Origination date; installment ``i`` falls due ``i`` months later.
        Defaults to today.
    limits: LoanLimits
        Bounds passed to the validator.

    Returns
    -------
    EMICalculationResult

    Raises
    ------
    LoanValidationError
        If the parameters do not pass :func:`validate_loan_parameters`. The
        message lists every validation error.
    """
    validation = validate_loan_parameters(params, limits)
    if not validation.is_valid:
        raise LoanValidationError(validation.errors, validation)

    if start_date is None:
        start_date = date.today()

    principal = round2(params.principal)
    tenure_months = int(params.tenure_months)
    monthly_rate = _monthly_rate(to_decimal(params.annual_interest_rate))

    emi_amount = round2(_calculate_annuity_payment(principal, monthly_rate, tenure_months))

    schedule = generate_schedule(principal, emi_amount, monthly_rate, tenure_months, start_date)

    # Totals come from the schedule so they reconcile with what is shown
    total_amount = sum((item.emi_amount for item in schedule), Decimal("0"))
    total_interest = total_amount - principal

    summary = LoanSummary(
        principal=principal,
        total_interest=total_interest,
        total_amount=total_amount,
        monthly_emi=emi_amount,
        effective_interest_rate=calculate_effective_rate(principal, total_interest, tenure_months),
        tenure_months=tenure_months,
    )
    logger.debug(
        "EMI %s for principal %s at %s%% over %d months (total interest %s)",
        emi_amount,
        principal,
        params.annual_interest_rate,
        tenure_months,
        total_interest,
    )

    return EMICalculationResult(
        emi_amount=emi_amount,
        total_amount=total_amount,
        total_interest=total_interest,
        schedule=tuple(schedule),
        summary=summary,
        warnings=validation.warnings,
    )


def generate_schedule(
    principal: Decimal,
    emi_amount: Decimal,
    monthly_rate: Decimal,
    tenure_months: int,
    start_date: date,
) -> List[EMIScheduleItem]:
    """Build the installment-by-installment repayment schedule.

    Interest for each month is charged on the balance outstanding before the
    payment. The running balance is carried at full precision; only the
    figures stored on each row are rounded to two places. The last installment
    pays off whatever principal remains, so its amount may differ by a few
    paise from ``emi_amount``.
    """
    schedule: List[EMIScheduleItem] = []
    outstanding = to_decimal(principal)

    for emi_number in range(1, tenure_months + 1):
        interest_component = outstanding * monthly_rate
        due_date = add_months(start_date, emi_number)

        if emi_number == tenure_months:
            schedule.append(
                EMIScheduleItem(
                    emi_number=emi_number,
                    due_date=due_date,
                    emi_amount=round2(outstanding + interest_component),
                    principal_component=round2(outstanding),
                    interest_component=round2(interest_component),
                    outstanding_principal=Decimal("0.00"),
                )
            )
            break

        principal_component = emi_amount - interest_component
        outstanding -= principal_component
        schedule.append(
            EMIScheduleItem(
                emi_number=emi_number,
                due_date=due_date,
                emi_amount=emi_amount,
                principal_component=round2(principal_component),
                interest_component=round2(interest_component),
                outstanding_principal=round2(outstanding),
            )
        )

    return schedule


def calculate_effective_rate(principal: Number, total_interest: Number, tenure_months: int) -> Decimal:
    """Annualized rate implied by the total interest paid, in percent.

    ``((P + I) / P) ** (1 / years) - 1``, expressed as a percentage and
    rounded to two places.
    """
    principal = to_decimal(principal)
    if tenure_months <= 0:
        raise ValueError("Tenure must be positive to compute an effective rate")
    if principal <= 0:
        raise ValueError("Principal must be positive to compute an effective rate")
    total_amount = principal + to_decimal(total_interest)
    # 1 / tenure in years
    exponent = Decimal(12) / Decimal(tenure_months)
    growth = (total_amount / principal) ** exponent
    return round2((growth - 1) * 100)


def calculate_affordability(
    monthly_income: Number,
    existing_emis: Number = 0,
    foir: Number = DEFAULT_FOIR,
) -> Decimal:
    """Largest new EMI a borrower can service.

    ``foir`` (Fixed Obligation to Income Ratio) is the share of income that
    may go to loan repayments, existing EMIs included. Never negative.
    """
    available = to_decimal(monthly_income) * to_decimal(foir) - to_decimal(existing_emis)
    return max(Decimal("0.00"), round2(available))


def calculate_max_loan_amount(affordable_emi: Number, annual_rate: Number, tenure_months: int) -> Decimal:
    """Largest principal whose EMI does not exceed ``affordable_emi``.

    This is the inverse of the annuity formula used by :func:`calculate_emi`.
    """
    affordable_emi = to_decimal(affordable_emi)
    annual_rate = to_decimal(annual_rate)
    errors = []
    if affordable_emi < 0:
        errors.append("Affordable EMI must be non-negative")
    if annual_rate < 0:
        errors.append("Interest rate must be non-negative")
    if tenure_months is None or tenure_months < 1:
        errors.append("Tenure must be greater than zero")
    if errors:
        raise LoanValidationError(errors)

    monthly_rate = _monthly_rate(annual_rate)
    if monthly_rate == 0:
        return round2(affordable_emi * tenure_months)

    factor = (1 + monthly_rate) ** tenure_months
    return round2(affordable_emi * (factor - 1) / (monthly_rate * factor))


def calculate_prepayment(
    schedule: Sequence[EMIScheduleItem],
    prepayment_amount: Number,
    prepayment_month: int,
) -> List[EMIScheduleItem]:
    """Apply a lump-sum prepayment to an existing schedule.

    Walking the installments from ``prepayment_month`` onward, whatever is
    left of the prepayment is set against each outstanding principal. Once it
    covers an installment's balance the loan closes early and the schedule is
    cut at that installment. Otherwise the balance is reduced and nothing of
    the prepayment is left for later installments; a settled final installment
    (balance 0) is therefore still cut. Installment amounts and splits are
    never recomputed.

    A new list is returned; ``schedule`` itself is not modified.

    Raises
    ------
    PrepaymentError
        If ``prepayment_month`` is outside ``1..len(schedule)`` or the amount
        is negative.
    """
    if prepayment_month <= 0 or prepayment_month > len(schedule):
        raise PrepaymentError(
            "Invalid prepayment month",
            prepayment_month=prepayment_month,
            schedule_length=len(schedule),
        )
    reduction = to_decimal(prepayment_amount)
    if reduction < 0:
        raise PrepaymentError("Prepayment amount must be non-negative", prepayment_month=prepayment_month)

    new_schedule = list(schedule)
    for index in range(prepayment_month - 1, len(new_schedule)):
        item = new_schedule[index]
        if reduction >= item.outstanding_principal:
            reduction -= item.outstanding_principal
            logger.debug("Prepayment closes the loan at installment %d (%s left over)", item.emi_number, reduction)
            del new_schedule[index:]
            break
        new_schedule[index] = replace(
            item,
            outstanding_principal=round2(item.outstanding_principal - reduction),
        )
        reduction = Decimal("0")
    return new_schedule


def calculate_periodic_interest(principal: Number, annual_rate: Number, days: int) -> Decimal:
    """Simple interest for ``days`` days on an actual/365 basis."""
    daily_rate = to_decimal(annual_rate) / Decimal(36500)
    return round2(to_decimal(principal) * daily_rate * days)


def calculate_penalty_interest(overdue_amount: Number, penalty_rate: Number, overdue_days: int) -> Decimal:
    """Penalty interest on an overdue amount; same basis as periodic interest."""
    return calculate_periodic_interest(overdue_amount, penalty_rate, overdue_days)
