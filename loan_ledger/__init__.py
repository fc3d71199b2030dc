"""Loan bookkeeping ledger: loans, repayments, borrowers and reports."""

from loan_ledger.ledger import Ledger
from loan_ledger.store import LedgerState, apply_command

__version__ = "0.1.0"

__all__ = ["Ledger", "LedgerState", "apply_command", "__version__"]
