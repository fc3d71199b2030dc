"""Pure transition rules used by the ledger reducer."""

from loan_ledger.rules.directory import add_loanee, delete_loanee, find_conflict, update_loanee
from loan_ledger.rules.repayment import apply_repayment, apply_repayment_to_loan
from loan_ledger.rules.settings import merge_settings

__all__ = [
    "add_loanee",
    "apply_repayment",
    "apply_repayment_to_loan",
    "delete_loanee",
    "find_conflict",
    "merge_settings",
    "update_loanee",
]
