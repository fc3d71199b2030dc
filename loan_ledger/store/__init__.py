"""Ledger store: immutable state and the command reducer."""

from loan_ledger.store.reducer import apply_command
from loan_ledger.store.snapshot import reconcile_snapshot
from loan_ledger.store.state import LedgerState

__all__ = ["LedgerState", "apply_command", "reconcile_snapshot"]
