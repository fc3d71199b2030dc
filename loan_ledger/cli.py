"""Command-line interface over a ledger snapshot stored in a JSON file.

Usage examples::

    loan-ledger add-loanee --name "Jane Doe" --national-id 12345678 --mobile 0712345678
    loan-ledger issue-loan --national-id 12345678 --name "Jane Doe" --mobile 0712345678 \\
        --amount 50000 --total-interest 7500 --period months --term 6
    loan-ledger repay JMSFinancialServices_Ln_001 --principal 10000 --interest 1500 --channel Cash
    loan-ledger statement JMSFinancialServices_Ln_001
    loan-ledger dashboard
"""

import argparse
import json
import sys
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Callable

from loan_ledger.config import LOG_FORMATS, LedgerConfig
from loan_ledger.exceptions import ConfigurationError, LedgerError, ValidationError
from loan_ledger.generators import SampleLedgerGenerator
from loan_ledger.issuance import LoanRequest
from loan_ledger.ledger import Ledger
from loan_ledger.logging import get_logger, setup_logging
from loan_ledger.models import (
    DEFAULT_LOAN_TYPE,
    Borrower,
    EmploymentStatus,
    LoanStatus,
    RepaymentPeriod,
)
from loan_ledger.persistence import JsonFileBlobStore
from loan_ledger.persistence.serialization import to_dict
from loan_ledger.reports import (
    ReportPeriod,
    dashboard_summary,
    loan_statement,
    loanee_stats,
    overdue_loans,
    report_metrics,
    resolve_period,
)

logger = get_logger(__name__)


def _decimal(value: str) -> Decimal:
    try:
        number = Decimal(value.replace(",", ""))
    except InvalidOperation as exc:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}") from exc
    if not number.is_finite():
        raise argparse.ArgumentTypeError(f"not a finite number: {value!r}")
    return number


def _date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {value!r}") from exc


def _split(value: str | None) -> list[str] | None:
    if value is None:
        return None
    return [item.strip() for item in value.split(",") if item.strip()]


# Handlers
def cmd_add_loanee(ledger: Ledger, args: argparse.Namespace) -> Any:
    loanee = ledger.register_loanee(
        name=args.name,
        national_id=args.national_id,
        mobile=args.mobile,
        email=args.email,
        employment_status=args.employment_status,
    )
    return to_dict(loanee)


def cmd_list_loanees(ledger: Ledger, args: argparse.Namespace) -> Any:
    state = ledger.state
    loanees = state.search_loanees(args.search) if args.search else state.loanees
    return [
        {**to_dict(loanee), "stats": to_dict(loanee_stats(state, loanee))}
        for loanee in loanees
    ]


def cmd_issue_loan(ledger: Ledger, args: argparse.Namespace) -> Any:
    if args.loanee_id:
        borrower = ledger.borrower_for(args.loanee_id)
    else:
        missing = [
            flag
            for flag, value in (
                ("--name", args.name),
                ("--national-id", args.national_id),
                ("--mobile", args.mobile),
            )
            if not value
        ]
        if missing:
            raise ValidationError(
                "Either --loanee-id or " + ", ".join(missing) + " is required",
                {flag: "required" for flag in missing},
            )
        borrower = Borrower(
            name=args.name,
            national_id=args.national_id,
            mobile=args.mobile,
            email=args.email or None,
            employment_status=EmploymentStatus(args.employment_status),
        )

    request = LoanRequest(
        amount=args.amount,
        loan_type=args.loan_type or next(iter(ledger.settings.loan_types), DEFAULT_LOAN_TYPE),
        repayment_period=RepaymentPeriod(args.period),
        repayment_period_value=args.term,
        borrower=borrower,
        issuance_date=args.issued,
        interest_rate=args.interest_rate,
        total_interest=args.total_interest,
    )
    return to_dict(ledger.issue_loan(request))


def cmd_repay(ledger: Ledger, args: argparse.Namespace) -> Any:
    repayment = ledger.record_repayment(
        args.loan_number,
        principal_amount=args.principal,
        interest_amount=args.interest,
        payment_channel=args.channel,
        date=args.date,
        notes=args.notes,
        strict=args.strict,
    )
    loan = ledger.state.find_loan(args.loan_number)
    return {
        "repayment": to_dict(repayment),
        "loan": to_dict(loan) if loan else None,
    }


def cmd_loans(ledger: Ledger, args: argparse.Namespace) -> Any:
    state = ledger.state
    loans = state.search_loans(args.search) if args.search else list(state.loans)
    if args.status:
        loans = [loan for loan in loans if loan.status == LoanStatus(args.status)]
    today = ledger.today()
    return [{**to_dict(loan), "overdue": loan.is_overdue(today)} for loan in loans]


def cmd_statement(ledger: Ledger, args: argparse.Namespace) -> Any:
    return to_dict(loan_statement(ledger.state, args.loan_number))


def cmd_dashboard(ledger: Ledger, args: argparse.Namespace) -> Any:
    today = ledger.today()
    summary = to_dict(dashboard_summary(ledger.state, today))
    summary["overdue_loans"] = [loan.loan_number for loan in overdue_loans(ledger.state, today)]
    return summary


def cmd_report(ledger: Ledger, args: argparse.Namespace) -> Any:
    start, end = resolve_period(ReportPeriod(args.period), ledger.today(), args.start, args.end)
    return to_dict(report_metrics(ledger.state, start, end))


def cmd_settings(ledger: Ledger, args: argparse.Namespace) -> Any:
    updates = {
        "company_name": args.company_name,
        "brand_color": args.brand_color,
        "logo": args.logo,
        "default_interest_rate": args.default_interest_rate,
        "loan_types": _split(args.loan_types),
        "payment_channels": _split(args.payment_channels),
        "repayment_periods": _split(args.repayment_periods),
    }
    updates = {name: value for name, value in updates.items() if value is not None}
    if updates:
        ledger.update_settings(**updates)
    return to_dict(ledger.settings)


def cmd_seed(ledger: Ledger, args: argparse.Namespace) -> Any:
    generator = SampleLedgerGenerator(seed=args.seed, locale=args.locale)
    return generator.populate(
        ledger,
        num_loanees=args.loanees,
        max_loans_per_loanee=args.max_loans,
        max_repayments_per_loan=args.max_repayments,
    )


def _add_borrower_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--name", help="Borrower full name")
    parser.add_argument("--national-id", help="Borrower national ID")
    parser.add_argument("--mobile", help="Borrower mobile number")
    parser.add_argument("--email", default=None, help="Borrower email")
    parser.add_argument(
        "--employment-status",
        choices=[status.value for status in EmploymentStatus],
        default=EmploymentStatus.EMPLOYED.value,
    )


def build_parser(config: LedgerConfig) -> argparse.ArgumentParser:
    """Build the argument parser, with defaults taken from ``config``."""
    parser = argparse.ArgumentParser(
        prog="loan-ledger",
        description="Loan bookkeeping ledger",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=config.storage.data_dir,
        help="Directory holding the snapshot (default: %(default)s)",
    )
    parser.add_argument(
        "--key",
        default=config.storage.storage_key,
        help="Snapshot storage key (default: %(default)s)",
    )
    parser.add_argument(
        "--pretty",
        action="store_true",
        default=config.storage.pretty_json,
        help="Indent the persisted JSON",
    )
    parser.add_argument("--log-level", default=config.log_level)
    parser.add_argument("--log-format", choices=LOG_FORMATS, default=config.log_format)

    subparsers = parser.add_subparsers(dest="command", required=True)

    sub = subparsers.add_parser("add-loanee", help="Register a loanee")
    _add_borrower_arguments(sub)
    sub.set_defaults(handler=cmd_add_loanee)

    sub = subparsers.add_parser("list-loanees", help="List loanees with live loan stats")
    sub.add_argument("--search", help="Filter by name, national ID or mobile")
    sub.set_defaults(handler=cmd_list_loanees)

    sub = subparsers.add_parser("issue-loan", help="Issue a new loan")
    sub.add_argument("--loanee-id", help="Copy borrower details from this directory entry")
    _add_borrower_arguments(sub)
    sub.add_argument("--amount", type=_decimal, required=True, help="Principal")
    sub.add_argument("--loan-type", help="Loan type (default: first configured type)")
    sub.add_argument(
        "--period",
        choices=[period.value for period in RepaymentPeriod],
        default=RepaymentPeriod.MONTHS.value,
    )
    sub.add_argument("--term", type=int, required=True, help="Number of periods")
    sub.add_argument("--interest-rate", type=_decimal, help="Percent (default: configured rate)")
    sub.add_argument("--total-interest", type=_decimal, help="Default: amount * rate / 100")
    sub.add_argument("--issued", type=_date, help="Issuance date (default: today)")
    sub.set_defaults(handler=cmd_issue_loan)

    sub = subparsers.add_parser("repay", help="Record a repayment")
    sub.add_argument("loan_number")
    sub.add_argument("--principal", type=_decimal, default=Decimal("0"))
    sub.add_argument("--interest", type=_decimal, default=Decimal("0"))
    sub.add_argument("--channel", required=True, help="Payment channel")
    sub.add_argument("--date", type=_date, help="Payment date (default: today)")
    sub.add_argument("--notes")
    sub.add_argument(
        "--strict",
        action="store_true",
        help="Reject repayments for loan numbers that are not in the ledger",
    )
    sub.set_defaults(handler=cmd_repay)

    sub = subparsers.add_parser("loans", help="List loans")
    sub.add_argument("--status", choices=[status.value for status in LoanStatus])
    sub.add_argument("--search", help="Filter by loan number or borrower name")
    sub.set_defaults(handler=cmd_loans)

    sub = subparsers.add_parser("statement", help="Show a loan statement")
    sub.add_argument("loan_number")
    sub.set_defaults(handler=cmd_statement)

    sub = subparsers.add_parser("dashboard", help="Show portfolio totals")
    sub.set_defaults(handler=cmd_dashboard)

    sub = subparsers.add_parser("report", help="Show activity for a period")
    sub.add_argument(
        "--period",
        choices=[period.value for period in ReportPeriod],
        default=ReportPeriod.THIS_MONTH.value,
    )
    sub.add_argument("--start", type=_date, help="Start date for --period custom")
    sub.add_argument("--end", type=_date, help="End date for --period custom")
    sub.set_defaults(handler=cmd_report)

    sub = subparsers.add_parser("settings", help="Show or update settings")
    sub.add_argument("--company-name")
    sub.add_argument("--brand-color")
    sub.add_argument("--logo")
    sub.add_argument("--default-interest-rate", type=_decimal)
    sub.add_argument("--loan-types", help="Comma-separated list")
    sub.add_argument("--payment-channels", help="Comma-separated list")
    sub.add_argument("--repayment-periods", help="Comma-separated list")
    sub.set_defaults(handler=cmd_settings)

    sub = subparsers.add_parser("seed", help="Fill the ledger with sample data")
    sub.add_argument("--loanees", type=int, default=10)
    sub.add_argument("--max-loans", type=int, default=2)
    sub.add_argument("--max-repayments", type=int, default=4)
    sub.add_argument("--seed", type=int, default=config.seed)
    sub.add_argument("--locale", default="en_US")
    sub.set_defaults(handler=cmd_seed)

    return parser


def main(argv: list[str] | None = None, today: Callable[[], date] = date.today) -> int:
    """Run the CLI; returns the process exit code."""
    try:
        config = LedgerConfig.from_env()
    except ConfigurationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    parser = build_parser(config)
    args = parser.parse_args(argv)
    setup_logging(level=args.log_level, format_type=args.log_format, stream=sys.stderr)

    ledger = Ledger.open(
        JsonFileBlobStore(args.data_dir),
        key=args.key,
        pretty=args.pretty,
        today=today,
    )
    try:
        result = args.handler(ledger, args)
    except LedgerError as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
