"""Output helpers for the EMI calculator.

This module renders amounts, dates and percentages the way lenders read them
(Indian digit grouping, rupee symbol) and prints schedules and summaries in a
tabular text format. We rely only on built‑in printing and string formatting.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable

from .data_models import EMIScheduleItem, LoanSummary
from .utils import Number, round2, to_decimal

RUPEE = "₹"


def _group_indian(digits: str) -> str:
    """Group an integer digit string as 1,00,00,000 (thousands, then pairs)."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_currency(amount: Number, symbol: str = RUPEE) -> str:
    """Format an amount with Indian grouping and up to two decimals.

    Trailing zero decimals are dropped, so ``100000`` renders as
    ``₹1,00,000`` and ``8884.80`` as ``₹8,884.8``.
    """
    value = round2(amount)
    sign = "-" if value < 0 else ""
    whole, _, fraction = f"{abs(value):.2f}".partition(".")
    fraction = fraction.rstrip("0")
    text = _group_indian(whole)
    if fraction:
        text = f"{text}.{fraction}"
    return f"{sign}{symbol}{text}"


def format_percentage(value: Number, decimals: int = 1) -> str:
    return f"{to_decimal(value):.{decimals}f}%"


def format_date(value: date, style: str = "medium") -> str:
    """Format a date as ``short`` (15/01/2024), ``medium`` (15 Jan 2024) or
    ``long`` (Monday, 15 January 2024)."""
    if style == "short":
        return value.strftime("%d/%m/%Y")
    if style == "medium":
        return value.strftime("%d %b %Y")
    if style == "long":
        return value.strftime("%A, %d %B %Y")
    raise ValueError(f"Unknown date style: {style}")


def calculate_days_between(start: date, end: date) -> int:
    """Absolute number of days between two dates (e.g. days overdue)."""
    return abs((end - start).days)


def print_summary(summary: LoanSummary) -> None:
    """Print a summary of loan metrics in a human‑readable format."""
    print("Summary")
    print("-" * 72)
    print(f"Principal          : {format_currency(summary.principal)}")
    print(f"Monthly EMI        : {format_currency(summary.monthly_emi)}")
    print(f"Tenure             : {summary.tenure_months} months")
    print(f"Total interest     : {format_currency(summary.total_interest)}")
    print(f"Total amount       : {format_currency(summary.total_amount)}")
    print(f"Effective rate     : {format_percentage(summary.effective_interest_rate, 2)}")
    print("-" * 72)


def print_schedule(schedule: Iterable[EMIScheduleItem]) -> None:
    """Print the repayment schedule as a simple table."""
    headers = [
        "EMI",
        "Due date",
        "Amount",
        "Principal",
        "Interest",
        "Outstanding",
    ]
    print("\t".join(headers))
    for item in schedule:
        row = [
            str(item.emi_number),
            format_date(item.due_date),
            f"{item.emi_amount:.2f}",
            f"{item.principal_component:.2f}",
            f"{item.interest_component:.2f}",
            f"{item.outstanding_principal:.2f}",
        ]
        print("\t".join(row))


def print_messages(title: str, messages: Iterable[str]) -> None:
    messages = list(messages)
    if not messages:
        return
    print(title)
    for message in messages:
        print(f"  - {message}")

