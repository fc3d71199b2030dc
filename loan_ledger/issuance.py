"""Loan issuance: numbering, schedule and opening balances."""

import re
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal

from loan_ledger.models import Borrower, Loan, LoanStatus, RepaymentPeriod
from loan_ledger.persistence.serialization import as_decimal

TWOPLACES = Decimal("0.01")
WHOLE = Decimal("1")


def format_loan_number(company_name: str, sequence: int) -> str:
    """Build a loan number such as ``AcmeLending_Ln_007``.

    Whitespace is stripped from the company name and the sequence is
    zero-padded to at least three digits.
    """
    prefix = re.sub(r"\s+", "", company_name)
    return f"{prefix}_Ln_{sequence:03d}"


def _add_months(start: date, months: int) -> date:
    # Day overflow rolls into the following month: Jan 31 + 1 month is Mar 3
    # (Mar 2 in leap years), never clamped to the month end.
    month_index = start.month - 1 + months
    first = date(start.year + month_index // 12, month_index % 12 + 1, 1)
    return first + timedelta(days=start.day - 1)


def calculate_due_date(issuance_date: date, period: RepaymentPeriod, value: int) -> date:
    """Issuance date plus ``value`` days, weeks or months."""
    period = RepaymentPeriod(period)
    if period == RepaymentPeriod.MONTHS:
        return _add_months(issuance_date, value)
    if period == RepaymentPeriod.WEEKS:
        return issuance_date + timedelta(weeks=value)
    return issuance_date + timedelta(days=value)


def calculate_expected_repayment(amount: Decimal, total_interest: Decimal, periods: int) -> Decimal:
    """Instalment per period, rounded to a whole currency unit."""
    periods = periods if periods >= 1 else 1
    return ((amount + total_interest) / periods).quantize(WHOLE, rounding=ROUND_HALF_UP)


def interest_from_rate(amount: Decimal, rate: Decimal) -> Decimal:
    """Flat interest for the whole term: ``amount * rate%``."""
    return (amount * rate / 100).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


@dataclass
class LoanRequest:
    """What a caller supplies to issue a loan.

    ``interest_rate`` falls back to the configured default rate and
    ``total_interest`` to the flat interest derived from the rate.
    """

    amount: Decimal
    loan_type: str
    repayment_period: RepaymentPeriod
    repayment_period_value: int
    borrower: Borrower
    issuance_date: date | None = None
    interest_rate: Decimal | None = None
    total_interest: Decimal | None = None


def build_loan(
    request: LoanRequest,
    loan_id: str,
    loan_number: str,
    default_interest_rate: Decimal = Decimal("15"),
) -> Loan:
    """Create a running loan whose balances equal its amount and interest.

    Parameters
    ----------
    request : LoanRequest
        Validated loan request.
    loan_id : str
        Opaque record ID.
    loan_number : str
        Number taken from the ledger counter before it advances.
    default_interest_rate : Decimal
        Rate used when the request names none.

    Returns
    -------
    Loan
        The new loan, not yet added to any ledger.
    """
    amount = as_decimal(request.amount)
    rate = as_decimal(
        request.interest_rate if request.interest_rate is not None else default_interest_rate
    )
    if request.total_interest is not None:
        total_interest = as_decimal(request.total_interest)
    else:
        total_interest = interest_from_rate(amount, rate)
    issuance_date = request.issuance_date or date.today()
    period = RepaymentPeriod(request.repayment_period)

    return Loan(
        id=loan_id,
        loan_number=loan_number,
        issuance_date=issuance_date,
        amount=amount,
        loan_type=request.loan_type,
        repayment_period=period,
        repayment_period_value=request.repayment_period_value,
        due_date=calculate_due_date(issuance_date, period, request.repayment_period_value),
        expected_repayment_amount=calculate_expected_repayment(
            amount, total_interest, request.repayment_period_value
        ),
        interest_rate=rate,
        total_interest=total_interest,
        principal_balance=amount,
        interest_balance=total_interest,
        loanee=request.borrower,
        status=LoanStatus.RUNNING,
    )
