"""Commands accepted by the ledger reducer.

Every change to the ledger is expressed as one of these frozen records and
applied by :func:`loan_ledger.store.apply_command`. The set is closed: the
reducer rejects anything that is not a :data:`Command`.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Union

from loan_ledger.models import Loan, Loanee, Repayment


@dataclass(frozen=True)
class AddLoan:
    """Append an issued loan and advance the loan-number counter.

    The caller computes ``loan.loan_number`` from the counter before it is
    advanced and sets the opening balances.
    """

    loan: Loan


@dataclass(frozen=True)
class ApplyRepayment:
    """Log a repayment and deduct it from the matching loan."""

    repayment: Repayment


@dataclass(frozen=True)
class AddLoanee:
    loanee: Loanee


@dataclass(frozen=True)
class UpdateLoanee:
    loanee_id: str
    updates: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class DeleteLoanee:
    loanee_id: str


@dataclass(frozen=True)
class UpdateSettings:
    updates: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class LoadSnapshot:
    """Replace the whole ledger with a reconciled persisted snapshot."""

    raw: Mapping[str, Any]


Command = Union[
    AddLoan,
    ApplyRepayment,
    AddLoanee,
    UpdateLoanee,
    DeleteLoanee,
    UpdateSettings,
    LoadSnapshot,
]
