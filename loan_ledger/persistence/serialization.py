"""Snapshot codec: ledger records to and from JSON-shaped dicts.

Persisted records use camelCase keys (``loanNumber``, ``principalBalance``)
so snapshots stay interchangeable with the browser application that first
wrote them. Money is written as JSON numbers and read back as ``Decimal``.
"""

import json
from dataclasses import asdict, fields, is_dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Callable, Mapping, TypeVar

from loan_ledger.exceptions import PersistenceError
from loan_ledger.models import (
    Borrower,
    EmploymentStatus,
    Loan,
    Loanee,
    LoanStatus,
    Payer,
    Repayment,
    RepaymentPeriod,
)

T = TypeVar("T")


def to_camel(name: str) -> str:
    """Convert a snake_case field name to its persisted camelCase key."""
    first, *rest = name.split("_")
    return first + "".join(part.title() for part in rest)


def serialize_value(value: Any) -> Any:
    """Serialize a value for JSON output."""
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise ValueError(f"Cannot serialize non-finite amount {value}")
        if value == value.to_integral_value():
            return int(value)
        return float(value)
    elif isinstance(value, Enum):
        return value.value
    elif isinstance(value, datetime):
        return value.isoformat()
    elif isinstance(value, date):
        return value.isoformat()
    elif isinstance(value, dict):
        return {k: serialize_value(v) for k, v in value.items()}
    elif isinstance(value, (list, tuple)):
        return [serialize_value(v) for v in value]
    return value


def to_dict(obj: Any) -> dict:
    """Convert a dataclass to a snake_case dict of JSON-ready values."""
    if is_dataclass(obj):
        return {key: serialize_value(value) for key, value in asdict(obj).items()}
    elif isinstance(obj, dict):
        return serialize_value(obj)
    else:
        return {"value": str(obj)}


def record_to_dict(obj: Any) -> dict:
    """Convert a ledger record to its persisted camelCase shape.

    Unset optional fields are left out rather than written as null.
    """
    result = {}
    for f in fields(obj):
        value = getattr(obj, f.name)
        if value is None:
            continue
        if is_dataclass(value):
            result[to_camel(f.name)] = record_to_dict(value)
        else:
            result[to_camel(f.name)] = serialize_value(value)
    return result


def snapshot_to_dict(state: Any) -> dict:
    """Convert a LedgerState to the persisted snapshot object."""
    return {
        "loans": [record_to_dict(loan) for loan in state.loans],
        "repayments": [record_to_dict(repayment) for repayment in state.repayments],
        "loanees": [record_to_dict(loanee) for loanee in state.loanees],
        "settings": record_to_dict(state.settings),
        "nextLoanNumber": state.next_loan_number,
    }


def dumps_snapshot(state: Any, pretty: bool = False) -> str:
    """Encode a LedgerState as the JSON blob that gets persisted."""
    try:
        data = snapshot_to_dict(state)
    except ValueError as exc:
        raise PersistenceError(f"Cannot encode snapshot: {exc}") from exc
    if pretty:
        return json.dumps(data, indent=2, ensure_ascii=False)
    return json.dumps(data, ensure_ascii=False)


def loads_snapshot(blob: str) -> dict:
    """Parse a persisted blob into a raw snapshot dict."""
    try:
        data = json.loads(blob)
    except json.JSONDecodeError as exc:
        raise PersistenceError(f"Snapshot is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise PersistenceError(f"Snapshot must be a JSON object, got {type(data).__name__}")
    return data


# Decoding
def as_decimal(value: Any) -> Decimal:
    """Coerce a JSON number (or numeric string) to Decimal."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool) or value is None:
        raise ValueError(f"Not a number: {value!r}")
    return Decimal(str(value))


def parse_date(value: Any) -> date:
    """Parse ``YYYY-MM-DD``; full ISO timestamps are truncated to their date."""
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _optional_date(value: Any) -> date | None:
    return parse_date(value) if value else None


def _decode(kind: str, factory: Callable[[Mapping[str, Any]], T], data: Any) -> T:
    if not isinstance(data, Mapping):
        raise PersistenceError(f"Malformed {kind} record: expected an object")
    try:
        return factory(data)
    except KeyError as exc:
        raise PersistenceError(f"Malformed {kind} record: missing {exc.args[0]!r}") from exc
    except (ValueError, TypeError, InvalidOperation) as exc:
        raise PersistenceError(f"Malformed {kind} record: {exc}") from exc


def _borrower(data: Mapping[str, Any]) -> Borrower:
    return Borrower(
        name=data["name"],
        national_id=str(data["nationalId"]),
        mobile=str(data["mobile"]),
        email=data.get("email"),
        employment_status=EmploymentStatus(data.get("employmentStatus", "employed")),
    )


def _loan(data: Mapping[str, Any]) -> Loan:
    return Loan(
        id=str(data["id"]),
        loan_number=data["loanNumber"],
        issuance_date=parse_date(data["issuanceDate"]),
        amount=as_decimal(data["amount"]),
        loan_type=data["loanType"],
        repayment_period=RepaymentPeriod(data["repaymentPeriod"]),
        repayment_period_value=int(data["repaymentPeriodValue"]),
        due_date=parse_date(data["dueDate"]),
        expected_repayment_amount=as_decimal(data["expectedRepaymentAmount"]),
        interest_rate=as_decimal(data["interestRate"]),
        total_interest=as_decimal(data["totalInterest"]),
        principal_balance=as_decimal(data["principalBalance"]),
        interest_balance=as_decimal(data["interestBalance"]),
        loanee=_decode("borrower", _borrower, data["loanee"]),
        status=LoanStatus(data["status"]),
        last_repayment_date=_optional_date(data.get("lastRepaymentDate")),
    )


def _payer(data: Mapping[str, Any]) -> Payer:
    return Payer(
        name=data["name"],
        national_id=str(data["nationalId"]),
        mobile=str(data["mobile"]),
    )


def _repayment(data: Mapping[str, Any]) -> Repayment:
    return Repayment(
        id=str(data["id"]),
        loan_number=data["loanNumber"],
        date=parse_date(data["date"]),
        principal_amount=as_decimal(data["principalAmount"]),
        interest_amount=as_decimal(data["interestAmount"]),
        payer=_decode("payer", _payer, data["payer"]),
        payment_channel=data["paymentChannel"],
        notes=data.get("notes"),
    )


def _loanee(data: Mapping[str, Any]) -> Loanee:
    return Loanee(
        id=str(data["id"]),
        name=data["name"],
        national_id=str(data["nationalId"]),
        mobile=str(data["mobile"]),
        date_added=parse_date(data["dateAdded"]),
        email=data.get("email"),
        employment_status=EmploymentStatus(data.get("employmentStatus", "employed")),
        total_loans=int(data.get("totalLoans", 0)),
        active_loans=int(data.get("activeLoans", 0)),
    )


def loan_from_dict(data: Any) -> Loan:
    return _decode("loan", _loan, data)


def repayment_from_dict(data: Any) -> Repayment:
    return _decode("repayment", _repayment, data)


def loanee_from_dict(data: Any) -> Loanee:
    return _decode("loanee", _loanee, data)
