"""Ledger reducer: one pure transition per command."""

import logging
from dataclasses import replace
from typing import Callable

from loan_ledger.commands import (
    AddLoan,
    AddLoanee,
    ApplyRepayment,
    Command,
    DeleteLoanee,
    LoadSnapshot,
    UpdateLoanee,
    UpdateSettings,
)
from loan_ledger.rules.directory import add_loanee, delete_loanee, update_loanee
from loan_ledger.rules.repayment import apply_repayment
from loan_ledger.rules.settings import merge_settings
from loan_ledger.store.snapshot import reconcile_snapshot
from loan_ledger.store.state import LedgerState

logger = logging.getLogger(__name__)


def _add_loan(state: LedgerState, command: AddLoan) -> LedgerState:
    return replace(
        state,
        loans=state.loans + (command.loan,),
        next_loan_number=state.next_loan_number + 1,
    )


def _apply_repayment(state: LedgerState, command: ApplyRepayment) -> LedgerState:
    repayment = command.repayment
    if state.find_loan(repayment.loan_number) is None:
        logger.warning(
            "Repayment %s references unknown loan %s; logged without updating balances",
            repayment.id,
            repayment.loan_number,
            extra={"loan_number": repayment.loan_number},
        )
    return replace(
        state,
        loans=apply_repayment(state.loans, repayment),
        repayments=state.repayments + (repayment,),
    )


def _add_loanee(state: LedgerState, command: AddLoanee) -> LedgerState:
    return replace(state, loanees=add_loanee(state.loanees, command.loanee))


def _update_loanee(state: LedgerState, command: UpdateLoanee) -> LedgerState:
    return replace(
        state, loanees=update_loanee(state.loanees, command.loanee_id, command.updates)
    )


def _delete_loanee(state: LedgerState, command: DeleteLoanee) -> LedgerState:
    return replace(state, loanees=delete_loanee(state.loanees, command.loanee_id))


def _update_settings(state: LedgerState, command: UpdateSettings) -> LedgerState:
    return replace(state, settings=merge_settings(state.settings, command.updates))


def _load_snapshot(state: LedgerState, command: LoadSnapshot) -> LedgerState:
    return reconcile_snapshot(command.raw)


_HANDLERS: dict[type, Callable[[LedgerState, Command], LedgerState]] = {
    AddLoan: _add_loan,
    ApplyRepayment: _apply_repayment,
    AddLoanee: _add_loanee,
    UpdateLoanee: _update_loanee,
    DeleteLoanee: _delete_loanee,
    UpdateSettings: _update_settings,
    LoadSnapshot: _load_snapshot,
}


def apply_command(state: LedgerState, command: Command) -> LedgerState:
    """Apply one command and return the resulting state.

    ``state`` is never modified. When a rule rejects the command
    (DuplicateLoaneeError, ValidationError) the exception propagates and the
    caller keeps the state it had.
    """
    handler = _HANDLERS.get(type(command))
    if handler is None:
        raise TypeError(f"Unsupported ledger command: {type(command).__name__}")
    name = type(command).__name__
    logger.debug("Applying %s", name, extra={"command": name})
    return handler(state, command)
