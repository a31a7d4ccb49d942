"""Configuration for the EMI calculator.

Business bounds for loan parameters, calculation defaults and the logging
setup shared by the library and the command-line interface.
"""

from __future__ import annotations

import logging
import logging.config
import os
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Union


@dataclass(frozen=True)
class LoanLimits:
    """Bounds enforced by the parameter validator.

    ``min_interest_rate`` is a soft bound: positive rates below it produce a
    warning, and a rate of exactly zero (interest-free loan) is accepted.
    """

    min_principal: Decimal = Decimal("1000")
    max_principal: Decimal = Decimal("10000000")  # 1 crore
    min_interest_rate: Decimal = Decimal("0.1")
    max_interest_rate: Decimal = Decimal("36")  # regulatory ceiling
    min_tenure: int = 1
    max_tenure: int = 360  # 30 years


DEFAULT_LIMITS = LoanLimits()

# Fixed Obligation to Income Ratio used for affordability sizing
DEFAULT_FOIR = Decimal("0.4")

DEFAULT_LENDER_CODE = "ML"

# --- Logging Configuration ---
LOG_LEVEL_ENV = "EMI_CALC_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(module)s.%(funcName)s:%(lineno)d - %(message)s"

LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": LOG_FORMAT,
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
            "stream": "ext://sys.stderr",
        },
    },
    "loggers": {
        "emi_calc": {
            "handlers": ["console"],
            "level": DEFAULT_LOG_LEVEL,
            "propagate": False,
        },
    },
}


def resolve_log_level(level: Optional[Union[str, int]] = None) -> Union[str, int]:
    """Pick the log level from the argument, the environment or the default."""
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL)
    if isinstance(level, str):
        level = level.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {level}")
    return level


def configure_logging(level: Optional[Union[str, int]] = None) -> None:
    """Install ``LOGGING_CONFIG`` with the resolved level for ``emi_calc``."""
    config = {
        **LOGGING_CONFIG,
        "loggers": {
            "emi_calc": {**LOGGING_CONFIG["loggers"]["emi_calc"], "level": resolve_log_level(level)},
        },
    }
    logging.config.dictConfig(config)
