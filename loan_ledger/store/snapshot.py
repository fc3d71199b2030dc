"""Reconcile a persisted snapshot against the current record shapes."""

import logging
from typing import Any, Mapping

from loan_ledger.exceptions import PersistenceError
from loan_ledger.models import DEFAULT_LOAN_TYPE, Settings
from loan_ledger.persistence.serialization import (
    loan_from_dict,
    loanee_from_dict,
    repayment_from_dict,
    to_camel,
)
from loan_ledger.rules.settings import LIST_FIELDS, SETTINGS_FIELDS, normalize_setting
from loan_ledger.store.state import LedgerState

logger = logging.getLogger(__name__)

SETTINGS_KEYS = {to_camel(name): name for name in SETTINGS_FIELDS}


def _collection(raw: Mapping[str, Any], key: str) -> list:
    value = raw.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise PersistenceError(f"Snapshot field {key!r} must be a list")
    return value


def settings_from_dict(raw: Any) -> Settings:
    """Overlay persisted settings onto the built-in defaults, field by field."""
    if raw is None:
        return Settings()
    if not isinstance(raw, Mapping):
        raise PersistenceError("Snapshot field 'settings' must be an object")

    updates = {}
    for key, value in raw.items():
        name = SETTINGS_KEYS.get(key)
        if name is None:
            logger.debug("Ignoring unknown setting %r in snapshot", key)
            continue
        if value is None:
            continue
        if name in LIST_FIELDS and not value:
            logger.debug("Empty %r in snapshot, keeping the default", key)
            continue
        try:
            updates[name] = normalize_setting(name, value)
        except (TypeError, ValueError, ArithmeticError) as exc:
            raise PersistenceError(f"Malformed setting {key!r}: {exc}") from exc
    return Settings(**updates)


def _with_loan_type(raw_loan: Any) -> Any:
    if isinstance(raw_loan, Mapping) and not raw_loan.get("loanType"):
        return {**raw_loan, "loanType": DEFAULT_LOAN_TYPE}
    return raw_loan


def reconcile_snapshot(raw: Mapping[str, Any]) -> LedgerState:
    """Build a LedgerState from a raw snapshot, backfilling what is missing.

    Absent collections become empty, settings missing newer fields take the
    defaults, and loans without a ``loanType`` get ``"Personal Loan"``. The
    loan type default is applied on every load; snapshots carry no version.

    Raises
    ------
    PersistenceError
        If a record present in the snapshot cannot be decoded.
    """
    if not isinstance(raw, Mapping):
        raise PersistenceError("Snapshot must be an object")

    loans = tuple(loan_from_dict(_with_loan_type(item)) for item in _collection(raw, "loans"))
    repayments = tuple(repayment_from_dict(item) for item in _collection(raw, "repayments"))
    loanees = tuple(loanee_from_dict(item) for item in _collection(raw, "loanees"))
    settings = settings_from_dict(raw.get("settings"))

    next_loan_number = raw.get("nextLoanNumber")
    if next_loan_number is None:
        next_loan_number = 1
    try:
        next_loan_number = int(next_loan_number)
    except (TypeError, ValueError) as exc:
        raise PersistenceError(f"Malformed nextLoanNumber: {next_loan_number!r}") from exc

    return LedgerState(
        loans=loans,
        repayments=repayments,
        loanees=loanees,
        settings=settings,
        next_loan_number=next_loan_number,
    )
