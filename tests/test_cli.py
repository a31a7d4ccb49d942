"""
Tests for the click command-line interface.
"""

import csv
import json
import re
from decimal import Decimal

import click
import pytest
from click.testing import CliRunner

from emi_calc import engine
from emi_calc.main import cli, parse_amount, parse_rate
from emi_calc.validation import validate_loan_parameters

LOAN = ["-p", "1l", "-r", "12", "-t", "12", "-s", "2024-01-15"]


@pytest.fixture
def runner():
    return CliRunner()


class TestParsing:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("250000", Decimal("250000")),
            ("2,50,000", Decimal("250000")),
            ("500k", Decimal("500000")),
            ("2.5l", Decimal("250000")),
            ("3 lakh", Decimal("300000")),
            ("1.2m", Decimal("1200000")),
            ("1cr", Decimal("10000000")),
        ],
    )
    def test_parse_amount(self, text, expected):
        assert parse_amount(text) == expected

    def test_parse_amount_rejects_garbage(self):
        with pytest.raises(click.BadParameter):
            parse_amount("lots")

    @pytest.mark.parametrize("text", ["nan", "inf"])
    def test_parse_amount_rejects_non_finite(self, text):
        with pytest.raises(click.BadParameter):
            parse_amount(text)

    def test_parse_rate(self):
        assert parse_rate("12.5%") == Decimal("12.5")
        with pytest.raises(click.BadParameter):
            parse_rate("twelve")


class TestScheduleCommand:
    def test_prints_summary_and_schedule(self, runner):
        result = runner.invoke(cli, ["schedule", *LOAN])

        assert result.exit_code == 0, result.output
        assert "₹8,884.88" in result.output
        assert "₹1,00,000" in result.output
        assert "15 Feb 2024" in result.output
        assert "15 Jan 2025" in result.output

    def test_invalid_principal(self, runner):
        result = runner.invoke(cli, ["schedule", "-p", "500", "-r", "12", "-t", "12"])

        assert result.exit_code != 0
        assert "Invalid loan parameters" in result.output
        assert "at least ₹1,000" in result.output

    def test_warning_is_shown(self, runner):
        result = runner.invoke(cli, ["schedule", "-p", "100000", "-r", "24", "-t", "360", "-s", "2024-01-15"])

        assert result.exit_code == 0
        assert "Warning: Total interest exceeds principal amount" in result.output
        assert "showing first 120 rows" in result.output

    def test_nan_principal_is_a_usage_error(self, runner):
        result = runner.invoke(cli, ["schedule", "-p", "nan", "-r", "12", "-t", "12"])

        assert result.exit_code == 2
        assert "Invalid amount: nan" in result.output

    def test_parameters_are_validated_once(self, runner, monkeypatch):
        calls = []

        def counting_validate(*args, **kwargs):
            calls.append(args)
            return validate_loan_parameters(*args, **kwargs)

        monkeypatch.setattr(engine, "validate_loan_parameters", counting_validate)
        result = runner.invoke(cli, ["schedule", "-p", "100000", "-r", "24", "-t", "360", "-s", "2024-01-15"])

        assert result.exit_code == 0
        assert len(calls) == 1
        assert result.output.count("Warning: Total interest exceeds principal amount") == 1

    def test_bad_start_date(self, runner):
        result = runner.invoke(cli, ["schedule", "-p", "100000", "-r", "12", "-t", "12", "-s", "2024-02-30"])
        assert result.exit_code != 0
        assert "Invalid date string" in result.output

    def test_json_export(self, runner, tmp_path):
        path = tmp_path / "schedule.json"
        result = runner.invoke(cli, ["schedule", *LOAN, "--output", str(path)])

        assert result.exit_code == 0, result.output
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["summary"]["monthly_emi"] == 8884.88
        assert data["summary"]["tenure_months"] == 12
        assert len(data["schedule"]) == 12
        assert data["schedule"][0]["due_date"] == "2024-02-15"
        assert data["schedule"][-1]["outstanding_principal"] == 0

    def test_csv_export(self, runner, tmp_path):
        path = tmp_path / "schedule.csv"
        result = runner.invoke(cli, ["schedule", *LOAN, "--output", str(path)])

        assert result.exit_code == 0, result.output
        with path.open(newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))
        assert rows[0][0] == "EMI_Number"
        assert len(rows) == 13
        assert rows[1][2] == "8884.88"

    def test_unsupported_export(self, runner, tmp_path):
        result = runner.invoke(cli, ["schedule", *LOAN, "--output", str(tmp_path / "out.xlsx")])
        assert result.exit_code != 0


class TestOtherCommands:
    def test_summary(self, runner):
        result = runner.invoke(cli, ["summary", *LOAN])
        assert result.exit_code == 0
        assert "Monthly EMI" in result.output
        assert "Effective rate" in result.output

    def test_validate_valid(self, runner):
        result = runner.invoke(cli, ["validate", "-p", "100000", "-r", "12", "-t", "12"])
        assert result.exit_code == 0
        assert "Parameters are valid" in result.output

    def test_validate_invalid(self, runner):
        result = runner.invoke(cli, ["validate", "-p", "500", "-r", "40", "-t", "12"])
        assert result.exit_code == 1
        assert "Errors" in result.output
        assert "regulatory limit" in result.output

    def test_affordability(self, runner):
        result = runner.invoke(cli, ["affordability", "--income", "50k", "--existing-emis", "5000"])
        assert result.exit_code == 0
        assert "₹15,000" in result.output

    def test_max_loan(self, runner):
        result = runner.invoke(cli, ["max-loan", "--emi", "5000", "-r", "0", "-t", "12"])
        assert result.exit_code == 0
        assert "₹60,000" in result.output

    def test_max_loan_rejects_bad_tenure(self, runner):
        result = runner.invoke(cli, ["max-loan", "--emi", "5000", "-r", "12", "-t", "0"])
        assert result.exit_code != 0
        assert "Tenure must be greater than zero" in result.output

    def test_prepay_closes_loan(self, runner):
        result = runner.invoke(cli, ["prepay", *LOAN, "--amount", "1cr", "--month", "4"])
        assert result.exit_code == 0, result.output
        assert "3 of 12 installments remain" in result.output

    def test_partial_prepay_drops_settled_installment(self, runner):
        result = runner.invoke(cli, ["prepay", *LOAN, "--amount", "10000", "--month", "3"])
        assert result.exit_code == 0, result.output
        assert "11 of 12 installments remain" in result.output

    def test_prepay_bad_month(self, runner):
        result = runner.invoke(cli, ["prepay", *LOAN, "--amount", "1000", "--month", "13"])
        assert result.exit_code != 0
        assert "Invalid prepayment month" in result.output

    def test_interest(self, runner):
        result = runner.invoke(cli, ["interest", "-p", "100000", "-r", "12", "--days", "30"])
        assert result.exit_code == 0
        assert "Interest: ₹986.3" in result.output

    def test_penalty_interest(self, runner):
        result = runner.invoke(cli, ["interest", "-p", "10000", "-r", "36.5", "--days", "1", "--penalty"])
        assert result.exit_code == 0
        assert "Penalty interest: ₹10" in result.output

    def test_loan_number(self, runner):
        result = runner.invoke(cli, ["loan-number", "--branch-code", "PUN"])
        assert result.exit_code == 0
        assert re.fullmatch(r"ML-\d{2}-\d{2}-PUN-\d{5}", result.output.strip())

    def test_bad_log_level(self, runner):
        result = runner.invoke(cli, ["--log-level", "chatty", "loan-number"])
        assert result.exit_code != 0
