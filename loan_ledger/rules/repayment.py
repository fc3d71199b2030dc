"""Apply repayments to loan balances."""

from dataclasses import replace
from decimal import Decimal

from loan_ledger.models import Loan, LoanStatus, Repayment

ZERO = Decimal("0")


def apply_repayment_to_loan(loan: Loan, repayment: Repayment) -> Loan:
    """Deduct a repayment from one loan and derive its new status.

    Each balance is floored at zero, so overpayment is absorbed rather than
    rejected. ``last_repayment_date`` is set even when both amounts are zero.
    """
    principal_balance = max(ZERO, loan.principal_balance - repayment.principal_amount)
    interest_balance = max(ZERO, loan.interest_balance - repayment.interest_amount)
    if principal_balance == ZERO and interest_balance == ZERO:
        status = LoanStatus.REPAID
    else:
        status = LoanStatus.RUNNING

    return replace(
        loan,
        principal_balance=principal_balance,
        interest_balance=interest_balance,
        status=status,
        last_repayment_date=repayment.date,
    )


def apply_repayment(loans: tuple[Loan, ...], repayment: Repayment) -> tuple[Loan, ...]:
    """Return ``loans`` with the repayment applied to the loan it references.

    Loans with other numbers pass through unchanged. When no loan matches the
    result equals the input.
    """
    return tuple(
        apply_repayment_to_loan(loan, repayment)
        if loan.loan_number == repayment.loan_number
        else loan
        for loan in loans
    )
