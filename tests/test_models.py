"""Tests for ledger models."""

from dataclasses import FrozenInstanceError
from datetime import date
from decimal import Decimal

import pytest

from loan_ledger.ids import IdGenerator
from loan_ledger.models import (
    Borrower,
    EmploymentStatus,
    Loanee,
    LoanStatus,
    Payer,
    RepaymentPeriod,
)


class TestEnums:
    """Tests for enum values as persisted."""

    def test_values(self) -> None:
        assert [s.value for s in LoanStatus] == ["running", "repaid"]
        assert [p.value for p in RepaymentPeriod] == ["days", "weeks", "months"]
        assert [e.value for e in EmploymentStatus] == ["employed", "self-employed"]

    def test_str_enum_compares_to_value(self) -> None:
        assert LoanStatus.RUNNING == "running"


class TestLoan:
    """Tests for the Loan record."""

    def test_is_frozen(self, make_loan) -> None:
        loan = make_loan()

        with pytest.raises(FrozenInstanceError):
            loan.principal_balance = Decimal("0")

    def test_derived_amounts(self, make_loan) -> None:
        loan = make_loan(principal_balance=Decimal("1000"), interest_balance=Decimal("200"))

        assert loan.outstanding == Decimal("1200")
        assert loan.total_due == Decimal("57500")

    def test_is_overdue(self, make_loan) -> None:
        loan = make_loan()

        assert not loan.is_overdue(loan.due_date)
        assert loan.is_overdue(date(2025, 7, 11))
        assert not make_loan(status=LoanStatus.REPAID).is_overdue(date(2025, 7, 11))


class TestParties:
    """Tests for borrower, payer and loanee records."""

    def test_payer_from_borrower(self, borrower) -> None:
        payer = Payer.from_borrower(borrower)

        assert payer == Payer(name="Jane Wanjiru", national_id="12345678", mobile="0712345678")

    def test_unknown_payer(self) -> None:
        assert Payer.unknown() == Payer("Unknown", "Unknown", "Unknown")

    def test_loanee_to_borrower(self) -> None:
        loanee = Loanee(
            id="l-1",
            name="Ann",
            national_id="999",
            mobile="0799",
            date_added=date(2025, 1, 1),
            employment_status=EmploymentStatus.SELF_EMPLOYED,
        )

        assert loanee.to_borrower() == Borrower(
            name="Ann",
            national_id="999",
            mobile="0799",
            employment_status=EmploymentStatus.SELF_EMPLOYED,
        )


class TestIdGenerator:
    """Tests for record IDs."""

    def test_ids_strictly_increase_on_stalled_clock(self) -> None:
        new_id = IdGenerator(clock=lambda: 1000)

        assert [new_id() for _ in range(3)] == ["1000", "1001", "1002"]

    def test_follows_clock(self) -> None:
        ticks = iter([5, 50, 500])
        new_id = IdGenerator(clock=lambda: next(ticks))

        assert [new_id() for _ in range(3)] == ["5", "50", "500"]
