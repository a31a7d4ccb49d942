"""Loan number generation.

Loan numbers look like ``ML-26-10-00421`` or, with a branch code,
``ML-26-10-BLR-00421``: lender code, two-digit year, month and a random
five-digit suffix. They are not checked for uniqueness; the store that
persists loans must enforce that.
"""

from __future__ import annotations

import logging
import random
from datetime import date
from typing import Optional

from .config import DEFAULT_LENDER_CODE

logger = logging.getLogger(__name__)

SUFFIX_MAX = 99999


def generate_loan_number(
    lender_code: str = DEFAULT_LENDER_CODE,
    branch_code: Optional[str] = None,
    today: Optional[date] = None,
    rng: Optional[random.Random] = None,
) -> str:
    """Return a new loan number.

    Parameters
    ----------
    lender_code: str
        Prefix identifying the lender.
    branch_code: str, optional
        Inserted between the month and the suffix when given.
    today: date, optional
        Date used for the year/month parts; defaults to the current date.
    rng: random.Random, optional
        Source of the suffix. Pass a seeded instance for reproducible numbers.
    """
    if today is None:
        today = date.today()
    if rng is None:
        rng = random.Random()

    parts = [lender_code, f"{today.year % 100:02d}", f"{today.month:02d}"]
    if branch_code:
        parts.append(branch_code)
    parts.append(f"{rng.randint(0, SUFFIX_MAX):05d}")

    loan_number = "-".join(parts)
    logger.debug("Generated loan number %s", loan_number)
    return loan_number
