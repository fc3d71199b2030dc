"""Pytest configuration and fixtures."""

import itertools
import logging
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Callable

import pytest

from loan_ledger.issuance import LoanRequest, build_loan
from loan_ledger.ledger import Ledger
from loan_ledger.models import Borrower, Loan, Payer, Repayment, RepaymentPeriod
from loan_ledger.persistence import InMemoryBlobStore

TODAY = date(2025, 6, 15)


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def today() -> date:
    """Fixed 'today' for date-dependent rules."""
    return TODAY


@pytest.fixture
def borrower() -> Borrower:
    """Sample borrower snapshot."""
    return Borrower(
        name="Jane Wanjiru",
        national_id="12345678",
        mobile="0712345678",
        email="jane@example.com",
    )


@pytest.fixture
def make_loan(borrower: Borrower) -> Callable[..., Loan]:
    """Factory for running loans issued on 2025-01-10 over six months."""

    def _make(
        loan_number: str = "Acme_Ln_001",
        amount: str = "50000",
        total_interest: str = "7500",
        **overrides,
    ) -> Loan:
        request = LoanRequest(
            amount=Decimal(amount),
            loan_type="Personal Loan",
            repayment_period=RepaymentPeriod.MONTHS,
            repayment_period_value=6,
            borrower=borrower,
            issuance_date=date(2025, 1, 10),
            interest_rate=Decimal("15"),
            total_interest=Decimal(total_interest),
        )
        loan = build_loan(request, loan_id=f"id-{loan_number}", loan_number=loan_number)
        return replace(loan, **overrides) if overrides else loan

    return _make


@pytest.fixture
def make_repayment() -> Callable[..., Repayment]:
    """Factory for repayments paid in cash."""

    def _make(
        loan_number: str = "Acme_Ln_001",
        principal: str = "0",
        interest: str = "0",
        repayment_id: str = "rep-001",
        on: date = date(2025, 2, 10),
    ) -> Repayment:
        return Repayment(
            id=repayment_id,
            loan_number=loan_number,
            date=on,
            principal_amount=Decimal(principal),
            interest_amount=Decimal(interest),
            payer=Payer(name="Jane Wanjiru", national_id="12345678", mobile="0712345678"),
            payment_channel="Cash",
        )

    return _make


@pytest.fixture
def blob_store() -> InMemoryBlobStore:
    """Empty in-memory blob store."""
    return InMemoryBlobStore()


@pytest.fixture
def ledger(blob_store: InMemoryBlobStore, today: date) -> Ledger:
    """Empty ledger with a fixed clock and predictable IDs."""
    counter = itertools.count(1)
    return Ledger(
        blob_store,
        today=lambda: today,
        id_generator=lambda: f"id-{next(counter):04d}",
    )


@pytest.fixture
def restore_logging():
    """Put root logger handlers and level back after a test reconfigures them."""
    root = logging.getLogger()
    package = logging.getLogger("loan_ledger")
    handlers = root.handlers[:]
    level = root.level
    package_level = package.level
    yield
    package.setLevel(package_level)
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
