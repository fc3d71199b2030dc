"""Loan model."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from loan_ledger.models.base import Borrower
from loan_ledger.models.enums import LoanStatus, RepaymentPeriod


@dataclass(frozen=True)
class Loan:
    """Loan agreement with its principal/interest ledger."""

    id: str
    loan_number: str  # <Company>_Ln_001
    issuance_date: date
    amount: Decimal  # Principal
    loan_type: str
    repayment_period: RepaymentPeriod
    repayment_period_value: int
    due_date: date
    expected_repayment_amount: Decimal  # Per period
    interest_rate: Decimal  # Percent
    total_interest: Decimal
    principal_balance: Decimal
    interest_balance: Decimal
    loanee: Borrower
    status: LoanStatus = LoanStatus.RUNNING
    last_repayment_date: date | None = None

    @property
    def outstanding(self) -> Decimal:
        """Principal plus interest still owed."""
        return self.principal_balance + self.interest_balance

    @property
    def total_due(self) -> Decimal:
        return self.amount + self.total_interest

    def is_overdue(self, today: date) -> bool:
        """Running loans past their due date are overdue."""
        return self.status == LoanStatus.RUNNING and today > self.due_date
