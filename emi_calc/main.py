"""Command‑line interface for the EMI calculator.

This module uses the ``click`` library to implement a multi‑command interface
over the calculation engine. Loan officers can compute repayment schedules,
check parameters before origination, size a loan from the borrower's income,
try out prepayments, work out penalty interest and issue loan numbers. Results
can be printed to the terminal or exported to JSON/CSV files.
"""

from __future__ import annotations

import csv
import json
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

import click

from .config import DEFAULT_FOIR, DEFAULT_LENDER_CODE, configure_logging
from .data_models import EMICalculationResult, EMIScheduleItem, LoanParameters
from .engine import (
    calculate_affordability,
    calculate_emi,
    calculate_max_loan_amount,
    calculate_penalty_interest,
    calculate_periodic_interest,
    calculate_prepayment,
)
from .exceptions import EMICalculationError
from .formatter import (
    format_currency,
    print_messages,
    print_schedule,
    print_summary,
)
from .numbering import generate_loan_number
from .utils import decimal_from_str, parse_date
from .validation import validate_loan_parameters

MAX_SCREEN_ROWS = 120

AMOUNT_SUFFIXES = {
    "k": Decimal("1000"),
    "l": Decimal("100000"),
    "lakh": Decimal("100000"),
    "m": Decimal("1000000"),
    "cr": Decimal("10000000"),
}


def parse_amount(value: str) -> Decimal:
    """Parse a numeric string with optional suffixes.

    Accepts plain numbers ("500000", "5,00,000") and shorthand with ``k``,
    ``l``/``lakh``, ``m`` and ``cr`` suffixes (e.g. "5l" meaning 500 000).
    """
    value = value.strip().lower().replace(",", "")
    factor = Decimal("1")
    for suffix, multiplier in AMOUNT_SUFFIXES.items():
        if value.endswith(suffix):
            factor = multiplier
            value = value[: -len(suffix)]
            break
    try:
        return decimal_from_str(value) * factor
    except ValueError:
        raise click.BadParameter(f"Invalid amount: {value}")


def parse_rate(value: str) -> Decimal:
    """Parse an annual rate in percent ("12" or "12%")."""
    value = value.strip()
    if value.endswith("%"):
        value = value[:-1]
    try:
        return decimal_from_str(value)
    except ValueError:
        raise click.BadParameter(f"Invalid interest rate: {value}")


def parse_start_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return parse_date(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc))


def build_params_from_options(principal: str, rate: str, term: int) -> LoanParameters:
    return LoanParameters(
        principal=parse_amount(principal),
        annual_interest_rate=parse_rate(rate),
        tenure_months=term,
    )


def run_calculation(principal: str, rate: str, term: int, start_date: Optional[str]) -> EMICalculationResult:
    """Build parameters from CLI options and run the engine, reporting errors to click."""
    params = build_params_from_options(principal, rate, term)
    start = parse_start_date(start_date)
    try:
        result = calculate_emi(params, start)
    except EMICalculationError as exc:
        raise click.ClickException(str(exc))
    for warning in result.warnings:
        click.echo(f"Warning: {warning}", err=True)
    return result


def schedule_to_dicts(schedule: Sequence[EMIScheduleItem]) -> List[Dict[str, Any]]:
    return [
        {
            "emi_number": item.emi_number,
            "due_date": item.due_date.isoformat(),
            "emi_amount": float(item.emi_amount),
            "principal_component": float(item.principal_component),
            "interest_component": float(item.interest_component),
            "outstanding_principal": float(item.outstanding_principal),
        }
        for item in schedule
    ]


def summary_to_dict(result: EMICalculationResult) -> Dict[str, Any]:
    summary = result.summary
    return {
        "principal": float(summary.principal),
        "monthly_emi": float(summary.monthly_emi),
        "total_interest": float(summary.total_interest),
        "total_amount": float(summary.total_amount),
        "effective_interest_rate": float(summary.effective_interest_rate),
        "tenure_months": summary.tenure_months,
    }


def export_to_json(path: Path, schedule: Sequence[EMIScheduleItem], summary: Optional[Dict[str, Any]]) -> None:
    """Export schedule and summary to a JSON file."""
    data: Dict[str, Any] = {"schedule": schedule_to_dicts(schedule)}
    if summary is not None:
        data = {"summary": summary, **data}
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def export_to_csv(path: Path, schedule: Sequence[EMIScheduleItem]) -> None:
    """Export schedule to a CSV file."""
    header = [
        "EMI_Number",
        "Due_Date",
        "EMI_Amount",
        "Principal",
        "Interest",
        "Outstanding_Principal",
    ]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for item in schedule:
            writer.writerow(
                [
                    item.emi_number,
                    item.due_date.isoformat(),
                    str(item.emi_amount),
                    str(item.principal_component),
                    str(item.interest_component),
                    str(item.outstanding_principal),
                ]
            )


def write_output(output: str, schedule: Sequence[EMIScheduleItem], summary: Optional[Dict[str, Any]]) -> None:
    path = Path(output)
    if path.suffix.lower() == ".json":
        export_to_json(path, schedule, summary)
    elif path.suffix.lower() == ".csv":
        export_to_csv(path, schedule)
    else:
        raise click.BadParameter("Unsupported output format; use .json or .csv")
    click.echo(f"Schedule exported to {path}")


def show_schedule(schedule: Sequence[EMIScheduleItem]) -> None:
    # Limit schedule length printed to avoid flooding the terminal
    if len(schedule) > MAX_SCREEN_ROWS:
        click.echo(f"Schedule has {len(schedule)} rows; showing first {MAX_SCREEN_ROWS} rows.")
        print_schedule(schedule[:MAX_SCREEN_ROWS])
    else:
        print_schedule(schedule)


def loan_options(func: Callable) -> Callable:
    """Attach the principal/rate/term options shared by several commands."""
    func = click.option("--term", "-t", "term", required=True, type=int, help="Tenure in months")(func)
    func = click.option("--rate", "-r", "rate", required=True, help="Annual interest rate (percent)")(func)
    func = click.option("--principal", "-p", "principal", required=True, help="Loan amount (e.g. 250000, 2.5l)")(func)
    return func


@click.group()
@click.option("--log-level", "log_level", default=None, help="Logging level (default: $EMI_CALC_LOG_LEVEL or WARNING)")
def cli(log_level: Optional[str]) -> None:
    """EMI calculator for microloan origination."""
    try:
        configure_logging(log_level)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--log-level")


@cli.command()
@loan_options
@click.option("--start-date", "-s", "start_date", help="Loan start date (YYYY-MM-DD, default today)")
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
def schedule(principal: str, rate: str, term: int, start_date: Optional[str], output: Optional[str]) -> None:
    """Compute and print the full repayment schedule."""
    result = run_calculation(principal, rate, term, start_date)
    if output:
        write_output(output, result.schedule, summary_to_dict(result))
        return
    print_summary(result.summary)
    show_schedule(result.schedule)


@cli.command()
@loan_options
@click.option("--start-date", "-s", "start_date", help="Loan start date (YYYY-MM-DD, default today)")
@click.option("--output", "output", type=str, help="Output file path (.json)")
def summary(principal: str, rate: str, term: int, start_date: Optional[str], output: Optional[str]) -> None:
    """Compute and print only the summary metrics for a loan."""
    result = run_calculation(principal, rate, term, start_date)
    if output:
        path = Path(output)
        if path.suffix.lower() != ".json":
            raise click.BadParameter("Summary export must use .json extension")
        with path.open("w", encoding="utf-8") as f:
            json.dump({"summary": summary_to_dict(result)}, f, indent=2)
        click.echo(f"Summary exported to {path}")
    else:
        print_summary(result.summary)


@cli.command()
@loan_options
def validate(principal: str, rate: str, term: int) -> None:
    """Check loan parameters against the lending limits."""
    validation = validate_loan_parameters(build_params_from_options(principal, rate, term))
    print_messages("Errors", validation.errors)
    print_messages("Warnings", validation.warnings)
    if not validation.is_valid:
        raise click.exceptions.Exit(1)
    click.echo("Parameters are valid")


@cli.command()
@click.option("--income", "income", required=True, help="Borrower's monthly income")
@click.option("--existing-emis", "existing_emis", default="0", show_default=True, help="EMIs already being paid")
@click.option("--foir", "foir", default=str(DEFAULT_FOIR), show_default=True, help="Fixed obligation to income ratio")
def affordability(income: str, existing_emis: str, foir: str) -> None:
    """Largest new EMI the borrower can afford."""
    try:
        foir_value = decimal_from_str(foir)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--foir")
    emi = calculate_affordability(parse_amount(income), parse_amount(existing_emis), foir_value)
    click.echo(f"Maximum affordable EMI: {format_currency(emi)}")


@cli.command("max-loan")
@click.option("--emi", "emi", required=True, help="Affordable monthly EMI")
@click.option("--rate", "-r", "rate", required=True, help="Annual interest rate (percent)")
@click.option("--term", "-t", "term", required=True, type=int, help="Tenure in months")
def max_loan(emi: str, rate: str, term: int) -> None:
    """Largest loan that an EMI can service."""
    try:
        amount = calculate_max_loan_amount(parse_amount(emi), parse_rate(rate), term)
    except EMICalculationError as exc:
        raise click.ClickException(str(exc))
    click.echo(f"Maximum loan amount: {format_currency(amount)}")


@cli.command()
@loan_options
@click.option("--start-date", "-s", "start_date", help="Loan start date (YYYY-MM-DD, default today)")
@click.option("--amount", "amount", required=True, help="Prepayment amount")
@click.option("--month", "month", required=True, type=int, help="Installment number the prepayment is made with")
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
def prepay(
    principal: str,
    rate: str,
    term: int,
    start_date: Optional[str],
    amount: str,
    month: int,
    output: Optional[str],
) -> None:
    """Apply a prepayment to a loan and print the resulting schedule."""
    result = run_calculation(principal, rate, term, start_date)
    try:
        updated = calculate_prepayment(result.schedule, parse_amount(amount), month)
    except EMICalculationError as exc:
        raise click.ClickException(str(exc))
    if len(updated) < len(result.schedule):
        click.echo(f"Schedule shortened: {len(updated)} of {len(result.schedule)} installments remain.")
    if output:
        write_output(output, updated, None)
        return
    show_schedule(updated)


@cli.command()
@click.option("--principal", "-p", "principal", required=True, help="Outstanding or overdue amount")
@click.option("--rate", "-r", "rate", required=True, help="Annual (penalty) rate in percent")
@click.option("--days", "days", required=True, type=int, help="Number of days")
@click.option("--penalty", "penalty", is_flag=True, help="Label the result as penalty interest")
def interest(principal: str, rate: str, days: int, penalty: bool) -> None:
    """Simple interest for a number of days (actual/365)."""
    if penalty:
        value = calculate_penalty_interest(parse_amount(principal), parse_rate(rate), days)
        click.echo(f"Penalty interest: {format_currency(value)}")
    else:
        value = calculate_periodic_interest(parse_amount(principal), parse_rate(rate), days)
        click.echo(f"Interest: {format_currency(value)}")


@cli.command("loan-number")
@click.option("--lender-code", "lender_code", default=DEFAULT_LENDER_CODE, show_default=True, help="Lender prefix")
@click.option("--branch-code", "branch_code", default=None, help="Optional branch code")
def loan_number(lender_code: str, branch_code: Optional[str]) -> None:
    """Generate a new loan number."""
    click.echo(generate_loan_number(lender_code, branch_code))


if __name__ == "__main__":
    cli()
