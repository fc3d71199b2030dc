"""Tests for loan numbering, schedules and opening balances."""

from datetime import date
from decimal import Decimal

import pytest

from loan_ledger.issuance import (
    LoanRequest,
    build_loan,
    calculate_due_date,
    calculate_expected_repayment,
    format_loan_number,
    interest_from_rate,
)
from loan_ledger.models import LoanStatus, RepaymentPeriod


class TestFormatLoanNumber:
    """Tests for loan numbers."""

    def test_strips_whitespace_and_pads(self) -> None:
        assert format_loan_number("JMS Financial Services", 1) == "JMSFinancialServices_Ln_001"

    def test_wide_sequence_not_truncated(self) -> None:
        assert format_loan_number("Acme", 1234) == "Acme_Ln_1234"

    def test_tabs_and_newlines_stripped(self) -> None:
        assert format_loan_number(" Acme\tLending\n", 42) == "AcmeLending_Ln_042"


class TestCalculateDueDate:
    """Tests for due date arithmetic."""

    @pytest.mark.parametrize(
        "issued, period, value, expected",
        [
            (date(2025, 1, 10), RepaymentPeriod.DAYS, 30, date(2025, 2, 9)),
            (date(2025, 1, 10), RepaymentPeriod.WEEKS, 4, date(2025, 2, 7)),
            (date(2025, 1, 10), RepaymentPeriod.MONTHS, 6, date(2025, 7, 10)),
            (date(2025, 11, 15), RepaymentPeriod.MONTHS, 3, date(2026, 2, 15)),
            (date(2025, 1, 31), RepaymentPeriod.MONTHS, 1, date(2025, 3, 3)),
            (date(2024, 1, 31), RepaymentPeriod.MONTHS, 1, date(2024, 3, 2)),
            (date(2025, 3, 31), RepaymentPeriod.MONTHS, 1, date(2025, 5, 1)),
        ],
    )
    def test_due_dates(self, issued, period, value, expected) -> None:
        assert calculate_due_date(issued, period, value) == expected

    def test_accepts_period_value_string(self) -> None:
        assert calculate_due_date(date(2025, 1, 1), "days", 1) == date(2025, 1, 2)


class TestAmounts:
    """Tests for instalment and interest calculations."""

    def test_expected_repayment_rounds_to_whole_units(self) -> None:
        assert calculate_expected_repayment(Decimal("50000"), Decimal("7500"), 6) == Decimal("9583")

    def test_expected_repayment_rounds_half_up(self) -> None:
        assert calculate_expected_repayment(Decimal("4"), Decimal("1"), 2) == Decimal("3")

    def test_expected_repayment_zero_periods_treated_as_one(self) -> None:
        assert calculate_expected_repayment(Decimal("100"), Decimal("10"), 0) == Decimal("110")

    def test_interest_from_rate(self) -> None:
        assert interest_from_rate(Decimal("50000"), Decimal("15")) == Decimal("7500.00")
        assert interest_from_rate(Decimal("333"), Decimal("12.5")) == Decimal("41.63")


class TestBuildLoan:
    """Tests for constructing a new loan."""

    @pytest.fixture
    def request_(self, borrower) -> LoanRequest:
        return LoanRequest(
            amount=Decimal("20000"),
            loan_type="Business Loan",
            repayment_period=RepaymentPeriod.WEEKS,
            repayment_period_value=4,
            borrower=borrower,
            issuance_date=date(2025, 5, 1),
        )

    def test_opening_balances(self, request_) -> None:
        loan = build_loan(request_, loan_id="x", loan_number="Acme_Ln_001")

        assert loan.status == LoanStatus.RUNNING
        assert loan.principal_balance == loan.amount == Decimal("20000")
        assert loan.interest_balance == loan.total_interest
        assert loan.last_repayment_date is None

    def test_interest_defaults_from_rate(self, request_) -> None:
        loan = build_loan(
            request_, loan_id="x", loan_number="Acme_Ln_001", default_interest_rate=Decimal("10")
        )

        assert loan.interest_rate == Decimal("10")
        assert loan.total_interest == Decimal("2000.00")
        assert loan.expected_repayment_amount == Decimal("5500")
        assert loan.due_date == date(2025, 5, 29)

    def test_explicit_total_interest_wins(self, request_) -> None:
        request_.total_interest = Decimal("1234")

        loan = build_loan(request_, loan_id="x", loan_number="Acme_Ln_001")

        assert loan.total_interest == Decimal("1234")
        assert loan.interest_rate == Decimal("15")

    def test_borrower_snapshot_attached(self, request_, borrower) -> None:
        loan = build_loan(request_, loan_id="x", loan_number="Acme_Ln_001")

        assert loan.loanee == borrower
