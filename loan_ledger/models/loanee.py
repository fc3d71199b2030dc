"""Loanee directory model."""

from dataclasses import dataclass
from datetime import date

from loan_ledger.models.base import Borrower
from loan_ledger.models.enums import EmploymentStatus


@dataclass(frozen=True)
class Loanee:
    """Borrower directory entry, independent of any particular loan.

    ``total_loans`` and ``active_loans`` are kept for snapshot compatibility
    only. They are not maintained on writes; use
    :func:`loan_ledger.reports.loanee_stats` for live figures.
    """

    id: str
    name: str
    national_id: str
    mobile: str
    date_added: date
    email: str | None = None
    employment_status: EmploymentStatus = EmploymentStatus.EMPLOYED
    total_loans: int = 0
    active_loans: int = 0

    def to_borrower(self) -> Borrower:
        """Snapshot this loanee for embedding in a new loan."""
        return Borrower(
            name=self.name,
            national_id=self.national_id,
            mobile=self.mobile,
            email=self.email,
            employment_status=self.employment_status,
        )
