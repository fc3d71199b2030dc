"""Domain models for the loan ledger."""

from loan_ledger.models.base import Borrower, Payer
from loan_ledger.models.enums import EmploymentStatus, LoanStatus, RepaymentPeriod
from loan_ledger.models.loan import Loan
from loan_ledger.models.loanee import Loanee
from loan_ledger.models.repayment import Repayment
from loan_ledger.models.settings import DEFAULT_LOAN_TYPE, Settings

__all__ = [
    "Borrower",
    "DEFAULT_LOAN_TYPE",
    "EmploymentStatus",
    "Loan",
    "LoanStatus",
    "Loanee",
    "Payer",
    "Repayment",
    "RepaymentPeriod",
    "Settings",
]
