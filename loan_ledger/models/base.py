"""Borrower and payer snapshots embedded in ledger records."""

from dataclasses import dataclass

from loan_ledger.models.enums import EmploymentStatus


@dataclass(frozen=True)
class Borrower:
    """Borrower details copied onto a loan at issuance time.

    This is a snapshot, not a reference into the loanee directory: editing
    or deleting the loanee later leaves existing loans untouched.
    """

    name: str
    national_id: str
    mobile: str
    email: str | None = None
    employment_status: EmploymentStatus = EmploymentStatus.EMPLOYED


@dataclass(frozen=True)
class Payer:
    """Who made a repayment."""

    name: str
    national_id: str
    mobile: str

    @classmethod
    def unknown(cls) -> "Payer":
        """Placeholder payer for repayments against an unknown loan."""
        return cls(name="Unknown", national_id="Unknown", mobile="Unknown")

    @classmethod
    def from_borrower(cls, borrower: Borrower) -> "Payer":
        return cls(name=borrower.name, national_id=borrower.national_id, mobile=borrower.mobile)
