"""Dashboard and report figures computed from a ledger state."""

from calendar import monthrange
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum

from loan_ledger.models import Loan, Loanee, LoanStatus, Repayment, RepaymentPeriod
from loan_ledger.store.state import LedgerState

ZERO = Decimal("0")

# Days expected between payments for each repayment period
EXPECTED_PAYMENT_GAP = {
    RepaymentPeriod.DAYS: 1,
    RepaymentPeriod.WEEKS: 7,
    RepaymentPeriod.MONTHS: 30,
}


@dataclass
class LoanTypePerformance:
    count: int = 0
    total_amount: Decimal = ZERO
    repaid: int = 0


@dataclass
class DashboardSummary:
    """Portfolio totals shown on the dashboard."""

    total_principal_issued: Decimal
    total_interest_charged: Decimal
    outstanding_principal: Decimal  # Running loans only
    outstanding_interest: Decimal
    principal_received: Decimal
    interest_received: Decimal
    running_count: int
    repaid_count: int
    overdue_count: int
    interest_collection_rate: Decimal | None  # Percent; None when no interest charged
    loan_type_performance: dict[str, LoanTypePerformance] = field(default_factory=dict)
    recent_loans: list[Loan] = field(default_factory=list)


@dataclass
class ReportMetrics:
    """Activity within a date range."""

    start: date
    end: date
    total_principal_issued: Decimal
    total_interest_charged: Decimal
    outstanding_principal: Decimal
    outstanding_interest: Decimal
    principal_repaid: Decimal
    interest_repaid: Decimal
    loans_count: int
    repayments_count: int


@dataclass
class LoanStatement:
    loan: Loan
    repayments: list[Repayment]
    total_paid: Decimal
    total_due: Decimal
    outstanding: Decimal


@dataclass
class LoaneeStats:
    total_loans: int
    active_loans: int
    total_borrowed: Decimal
    total_outstanding: Decimal


class ReportPeriod(str, Enum):
    THIS_MONTH = "this-month"
    LAST_3_MONTHS = "last-3-months"
    LAST_6_MONTHS = "last-6-months"
    YTD = "ytd"
    CUSTOM = "custom"


def _sum(values) -> Decimal:
    return sum(values, ZERO)


def _month_start(today: date, months_back: int) -> date:
    month_index = today.month - 1 - months_back
    return date(today.year + month_index // 12, month_index % 12 + 1, 1)


def _month_end(today: date) -> date:
    return date(today.year, today.month, monthrange(today.year, today.month)[1])


def resolve_period(
    period: ReportPeriod,
    today: date,
    start: date | None = None,
    end: date | None = None,
) -> tuple[date, date]:
    """Turn a report period into an inclusive (start, end) date range.

    Rolling periods run from the first day of the earliest month to the last
    day of the current month. ``ytd`` ends today. ``custom`` uses ``start``
    and ``end``, each defaulting to today.
    """
    period = ReportPeriod(period)
    if period == ReportPeriod.LAST_3_MONTHS:
        return _month_start(today, 2), _month_end(today)
    if period == ReportPeriod.LAST_6_MONTHS:
        return _month_start(today, 5), _month_end(today)
    if period == ReportPeriod.YTD:
        return date(today.year, 1, 1), today
    if period == ReportPeriod.CUSTOM:
        return start or today, end or today
    return _month_start(today, 0), _month_end(today)


def overdue_loans(state: LedgerState, today: date) -> list[Loan]:
    """Running loans whose due date has passed."""
    return [loan for loan in state.running_loans() if loan.is_overdue(today)]


def dashboard_summary(state: LedgerState, today: date) -> DashboardSummary:
    """Compute the dashboard figures for the whole portfolio."""
    running = state.running_loans()
    interest_charged = _sum(loan.total_interest for loan in state.loans)
    interest_received = _sum(r.interest_amount for r in state.repayments)

    performance: dict[str, LoanTypePerformance] = {}
    for loan in state.loans:
        entry = performance.setdefault(loan.loan_type or "Unknown", LoanTypePerformance())
        entry.count += 1
        entry.total_amount += loan.amount
        if loan.status == LoanStatus.REPAID:
            entry.repaid += 1

    if interest_charged > 0:
        collection_rate = (interest_received / interest_charged * 100).quantize(Decimal("0.1"))
    else:
        collection_rate = None

    return DashboardSummary(
        total_principal_issued=_sum(loan.amount for loan in state.loans),
        total_interest_charged=interest_charged,
        outstanding_principal=_sum(loan.principal_balance for loan in running),
        outstanding_interest=_sum(loan.interest_balance for loan in running),
        principal_received=_sum(r.principal_amount for r in state.repayments),
        interest_received=interest_received,
        running_count=len(running),
        repaid_count=len(state.repaid_loans()),
        overdue_count=sum(1 for loan in running if loan.is_overdue(today)),
        interest_collection_rate=collection_rate,
        loan_type_performance=performance,
        recent_loans=list(reversed(state.loans[-3:])),
    )


def report_metrics(state: LedgerState, start: date, end: date) -> ReportMetrics:
    """Loans issued and repayments received between ``start`` and ``end``."""
    loans = [loan for loan in state.loans if start <= loan.issuance_date <= end]
    repayments = [r for r in state.repayments if start <= r.date <= end]

    return ReportMetrics(
        start=start,
        end=end,
        total_principal_issued=_sum(loan.amount for loan in loans),
        total_interest_charged=_sum(loan.total_interest for loan in loans),
        outstanding_principal=_sum(loan.principal_balance for loan in loans),
        outstanding_interest=_sum(loan.interest_balance for loan in loans),
        principal_repaid=_sum(r.principal_amount for r in repayments),
        interest_repaid=_sum(r.interest_amount for r in repayments),
        loans_count=len(loans),
        repayments_count=len(repayments),
    )


def loan_statement(state: LedgerState, loan_number: str) -> LoanStatement:
    """Statement for one loan.

    Raises
    ------
    UnknownLoanReferenceError
        If the loan number is not in the ledger.
    """
    loan = state.require_loan(loan_number)
    repayments = state.get_loan_repayments(loan_number)
    return LoanStatement(
        loan=loan,
        repayments=repayments,
        total_paid=_sum(r.total_amount for r in repayments),
        total_due=loan.total_due,
        outstanding=loan.outstanding,
    )


def loanee_stats(state: LedgerState, loanee: Loanee) -> LoaneeStats:
    """Live loan counts and totals for a directory entry, matched by national ID."""
    loans = state.get_borrower_loans(loanee.national_id)
    return LoaneeStats(
        total_loans=len(loans),
        active_loans=sum(1 for loan in loans if loan.status == LoanStatus.RUNNING),
        total_borrowed=_sum(loan.amount for loan in loans),
        total_outstanding=_sum(loan.outstanding for loan in loans),
    )


def repayment_status(loan: Loan, today: date) -> str:
    """Describe how long ago the borrower last paid."""
    if loan.last_repayment_date is None:
        return "No payments made"
    days = (today - loan.last_repayment_date).days
    if days > EXPECTED_PAYMENT_GAP.get(loan.repayment_period, 30):
        return f"{days} days since last payment"
    return f"Last payment: {days} days ago"
