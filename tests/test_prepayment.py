"""
Tests for prepayment recomputation.

A prepayment lowers the outstanding principal of the installment it is made
with, or closes the loan at the first installment whose balance it covers.
Installment amounts are not re-amortized.
"""

from datetime import date
from decimal import Decimal

import pytest

from emi_calc.data_models import LoanParameters
from emi_calc.engine import calculate_emi, calculate_prepayment
from emi_calc.exceptions import PrepaymentError


@pytest.fixture
def schedule():
    params = LoanParameters(Decimal("100000"), Decimal("12"), 12)
    return calculate_emi(params, date(2024, 1, 15)).schedule


def test_partial_prepayment_reduces_one_balance(schedule):
    updated = calculate_prepayment(schedule, Decimal("10000"), 3)

    assert len(updated) == len(schedule) - 1
    assert updated[2].outstanding_principal == schedule[2].outstanding_principal - Decimal("10000")
    assert updated[2].emi_amount == schedule[2].emi_amount
    assert updated[2].principal_component == schedule[2].principal_component
    assert updated[2].interest_component == schedule[2].interest_component
    assert updated[:2] == list(schedule[:2])
    assert updated[3:] == list(schedule[3:-1])


def test_settled_final_installment_is_dropped(schedule):
    updated = calculate_prepayment(schedule, Decimal("10000"), 3)

    assert len(updated) == 11
    assert updated[-1].emi_number == 11
    assert updated[-1].outstanding_principal == schedule[10].outstanding_principal


def test_input_schedule_is_left_untouched(schedule):
    before = [item.outstanding_principal for item in schedule]
    calculate_prepayment(schedule, Decimal("10000"), 3)
    assert [item.outstanding_principal for item in schedule] == before


def test_full_prepayment_closes_loan_early(schedule):
    balance = schedule[5].outstanding_principal
    updated = calculate_prepayment(schedule, balance + 1, 6)

    assert len(updated) == 5
    assert updated == list(schedule[:5])


def test_prepayment_equal_to_balance_closes_loan(schedule):
    updated = calculate_prepayment(schedule, schedule[7].outstanding_principal, 8)
    assert len(updated) == 7


def test_prepayment_in_final_month_drops_settled_row(schedule):
    updated = calculate_prepayment(schedule, Decimal("1"), 12)
    assert len(updated) == 11


def test_zero_prepayment_only_drops_settled_row(schedule):
    assert calculate_prepayment(schedule, 0, 4) == list(schedule[:-1])


def test_balance_is_rounded(schedule):
    updated = calculate_prepayment(schedule, Decimal("0.333"), 1)
    assert len(updated) == 11
    assert updated[0].outstanding_principal == (schedule[0].outstanding_principal - Decimal("0.33"))


@pytest.mark.parametrize("month", [0, -1, 13])
def test_month_out_of_range(schedule, month):
    with pytest.raises(PrepaymentError) as excinfo:
        calculate_prepayment(schedule, Decimal("1000"), month)
    assert "Invalid prepayment month" in str(excinfo.value)
    assert excinfo.value.details == {"prepayment_month": month, "schedule_length": 12}


def test_negative_amount(schedule):
    with pytest.raises(PrepaymentError):
        calculate_prepayment(schedule, Decimal("-5"), 2)
