"""Immutable aggregate holding every ledger collection."""

from dataclasses import dataclass, field

from loan_ledger.exceptions import UnknownLoanReferenceError
from loan_ledger.models import Loan, Loanee, LoanStatus, Repayment, Settings


@dataclass(frozen=True)
class LedgerState:
    """Snapshot of the ledger at one point in time.

    Commands never modify a state in place; the reducer returns a new one.
    """

    loans: tuple[Loan, ...] = ()
    repayments: tuple[Repayment, ...] = ()
    loanees: tuple[Loanee, ...] = ()
    settings: Settings = field(default_factory=Settings)
    next_loan_number: int = 1

    # Query methods
    def find_loan(self, loan_number: str) -> Loan | None:
        """Get a loan by its loan number."""
        for loan in self.loans:
            if loan.loan_number == loan_number:
                return loan
        return None

    def require_loan(self, loan_number: str) -> Loan:
        """Get a loan by its loan number, raising if it does not exist."""
        loan = self.find_loan(loan_number)
        if loan is None:
            raise UnknownLoanReferenceError(loan_number)
        return loan

    def find_loanee(self, loanee_id: str) -> Loanee | None:
        """Get a loanee by ID."""
        for loanee in self.loanees:
            if loanee.id == loanee_id:
                return loanee
        return None

    def get_loan_repayments(self, loan_number: str) -> list[Repayment]:
        """Get all repayments logged against a loan, in logging order."""
        return [r for r in self.repayments if r.loan_number == loan_number]

    def get_borrower_loans(self, national_id: str) -> list[Loan]:
        """Get all loans whose borrower snapshot carries this national ID."""
        return [loan for loan in self.loans if loan.loanee.national_id == national_id]

    def running_loans(self) -> list[Loan]:
        """Get running loans, oldest issuance first."""
        running = [loan for loan in self.loans if loan.status == LoanStatus.RUNNING]
        return sorted(running, key=lambda loan: loan.issuance_date)

    def repaid_loans(self) -> list[Loan]:
        """Get fully repaid loans."""
        return [loan for loan in self.loans if loan.status == LoanStatus.REPAID]

    def search_loans(self, term: str) -> list[Loan]:
        """Case-insensitive match on loan number or borrower name."""
        needle = term.lower()
        return [
            loan
            for loan in self.loans
            if needle in loan.loan_number.lower() or needle in loan.loanee.name.lower()
        ]

    def search_loanees(self, term: str) -> list[Loanee]:
        """Match on name (case-insensitive), national ID or mobile."""
        needle = term.lower()
        return [
            loanee
            for loanee in self.loanees
            if needle in loanee.name.lower() or term in loanee.national_id or term in loanee.mobile
        ]

    def interest_payments(self) -> list[Repayment]:
        """Repayments that carried any interest."""
        return [r for r in self.repayments if r.interest_amount > 0]

    def principal_payments(self) -> list[Repayment]:
        """Repayments that carried any principal."""
        return [r for r in self.repayments if r.principal_amount > 0]

    def summary(self) -> dict[str, int]:
        """Return summary counts of all collections."""
        return {
            "loans": len(self.loans),
            "running_loans": sum(1 for loan in self.loans if loan.status == LoanStatus.RUNNING),
            "repaid_loans": sum(1 for loan in self.loans if loan.status == LoanStatus.REPAID),
            "repayments": len(self.repayments),
            "loanees": len(self.loanees),
            "next_loan_number": self.next_loan_number,
        }
