"""Utility functions for the EMI calculator.

This module provides helpers for turning user input into ``Decimal`` amounts
and ``date`` objects, for rounding money to two decimal places and for month
arithmetic. It uses Python's ``datetime`` and ``calendar`` modules to calculate
month offsets.
"""

from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal, getcontext
import calendar
from typing import Union

getcontext().prec = 28  # increase decimal precision to avoid rounding errors

TWO_PLACES = Decimal("0.01")

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number) -> Decimal:
    """Coerce ``value`` to ``Decimal``.

    Floats go through ``str`` so that ``0.1`` becomes ``Decimal("0.1")`` rather
    than its binary expansion.
    """
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except Exception as exc:
        raise ValueError(f"Invalid numeric value: {value}") from exc


def round2(value: Number) -> Decimal:
    """Round a monetary value to two decimal places (half away from zero)."""
    return to_decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def parse_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` string into a ``date``.

    A bare ``YYYY-MM`` is accepted as well and resolves to the first day of
    that month.

    Raises
    ------
    ValueError
        If the string is not a valid date.
    """
    try:
        parts = value.strip().split("-")
        if len(parts) not in (2, 3):
            raise ValueError
        year = int(parts[0])
        month = int(parts[1])
        day = int(parts[2]) if len(parts) == 3 else 1
        return date(year, month, day)
    except Exception as exc:
        raise ValueError(f"Invalid date string: {value}") from exc


def add_months(dt: date, months: int) -> date:
    """Return a new date a number of months after ``dt``.

    The day of the month is clamped to the last valid day if needed (e.g.,
    adding one month to Jan 31 yields Feb 28 or 29).
    """
    year = dt.year + (dt.month - 1 + months) // 12
    month = (dt.month - 1 + months) % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def decimal_from_str(value: str) -> Decimal:
    """Convert a numeric string into a ``Decimal``.

    The function strips any commas and handles both integer and float-like
    strings. It raises ``ValueError`` if conversion fails or the value is not
    a finite number ("nan", "inf").
    """
    try:
        cleaned = value.replace(",", "").strip()
        number = Decimal(cleaned)
    except Exception as exc:
        raise ValueError(f"Invalid numeric value: {value}") from exc
    if not number.is_finite():
        raise ValueError(f"Invalid numeric value: {value}")
    return number
