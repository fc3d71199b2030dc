"""Ledger session: owns the current state and persists it after every command."""

from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Any, Callable, Iterable

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
from loan_ledger.config import DEFAULT_STORAGE_KEY
from loan_ledger.exceptions import PersistenceError, UnknownLoanReferenceError, ValidationError
from loan_ledger.ids import IdGenerator
from loan_ledger.issuance import LoanRequest, build_loan, format_loan_number
from loan_ledger.logging import get_logger
from loan_ledger.models import (
    Borrower,
    EmploymentStatus,
    Loan,
    Loanee,
    Payer,
    Repayment,
    Settings,
)
from loan_ledger.persistence.base import BlobStore
from loan_ledger.persistence.serialization import as_decimal, dumps_snapshot, loads_snapshot
from loan_ledger.store import LedgerState, apply_command
from loan_ledger.validation import (
    LIST_SETTINGS,
    validate_loan_request,
    validate_loanee,
    validate_repayment,
    validate_settings_update,
)

logger = get_logger(__name__)


class Ledger:
    """Single-writer session over a ledger snapshot.

    The session applies commands one at a time through the reducer, commits
    the resulting state and overwrites the persisted blob. It is not
    thread-safe; hosts that serve several threads must serialize calls.

    Parameters
    ----------
    blob_store : BlobStore
        Where the snapshot blob lives.
    key : str
        Storage key of the blob.
    state : LedgerState | None
        Starting state (empty ledger when omitted).
    pretty : bool
        Indent the persisted JSON.
    today : Callable[[], date]
        Clock used for default dates and future-date checks.
    id_generator : Callable[[], str] | None
        Source of record IDs.
    """

    def __init__(
        self,
        blob_store: BlobStore,
        key: str = DEFAULT_STORAGE_KEY,
        state: LedgerState | None = None,
        pretty: bool = False,
        today: Callable[[], date] = date.today,
        id_generator: Callable[[], str] | None = None,
    ) -> None:
        self.blob_store = blob_store
        self.key = key
        self.pretty = pretty
        self.today = today
        self._new_id = id_generator or IdGenerator()
        self._state = state or LedgerState()

    @classmethod
    def open(
        cls,
        blob_store: BlobStore,
        key: str = DEFAULT_STORAGE_KEY,
        pretty: bool = False,
        today: Callable[[], date] = date.today,
    ) -> "Ledger":
        """Create a session and load the snapshot stored under ``key``."""
        ledger = cls(blob_store, key=key, pretty=pretty, today=today)
        ledger.load()
        return ledger

    @property
    def state(self) -> LedgerState:
        return self._state

    @property
    def settings(self) -> Settings:
        return self._state.settings

    def load(self) -> LedgerState:
        """Replace the current state with the persisted snapshot.

        A missing blob gives an empty ledger. An unreadable or malformed blob
        is logged and also gives an empty ledger; the blob itself is left
        alone until the next committed command overwrites it.
        """
        try:
            blob = self.blob_store.read(self.key)
            if blob is None:
                logger.info("No snapshot under %r, starting with an empty ledger", self.key)
                state = LedgerState()
            else:
                state = apply_command(LedgerState(), LoadSnapshot(loads_snapshot(blob)))
        except PersistenceError:
            logger.error(
                "Could not load snapshot %r, starting with an empty ledger",
                self.key,
                exc_info=True,
            )
            state = LedgerState()

        self._state = state
        logger.debug("Loaded ledger: %s", state.summary())
        return state

    def save(self) -> None:
        """Overwrite the persisted blob with the current state.

        Raises
        ------
        PersistenceError
            If the blob store cannot be written.
        """
        self.blob_store.write(self.key, dumps_snapshot(self._state, pretty=self.pretty))

    def dispatch(self, command: Command) -> LedgerState:
        """Apply a command, commit the new state and persist it.

        If the command is rejected the current state is kept and nothing is
        written. If only the write fails, the state stays committed in memory
        and the PersistenceError propagates.
        """
        self._state = apply_command(self._state, command)
        self.save()
        return self._state

    # Intents
    def issue_loan(self, request: LoanRequest) -> Loan:
        """Validate a loan request, number it and add it to the ledger."""
        if request.issuance_date is None:
            request = replace(request, issuance_date=self.today())
        validate_loan_request(request, self.today())

        loan_number = format_loan_number(self.settings.company_name, self._state.next_loan_number)
        loan = build_loan(
            request,
            loan_id=self._new_id(),
            loan_number=loan_number,
            default_interest_rate=self.settings.default_interest_rate,
        )
        self.dispatch(AddLoan(loan))
        logger.info(
            "Issued loan %s to %s for %s",
            loan.loan_number,
            loan.loanee.name,
            loan.amount,
            extra={"loan_number": loan.loan_number},
        )
        return loan

    def borrower_for(self, loanee_id: str) -> Borrower:
        """Snapshot a directory loanee for a new loan."""
        loanee = self._state.find_loanee(loanee_id)
        if loanee is None:
            raise ValidationError(
                f"Loanee {loanee_id} not found", {"loanee_id": "Unknown loanee"}
            )
        return loanee.to_borrower()

    def record_repayment(
        self,
        loan_number: str,
        principal_amount: Decimal | int | float = 0,
        interest_amount: Decimal | int | float = 0,
        payment_channel: str = "",
        date: date | None = None,
        notes: str | None = None,
        strict: bool = False,
    ) -> Repayment:
        """Log a repayment and apply it to the loan it references.

        The payer is taken from the loan's borrower snapshot. A repayment for
        a loan number that is not in the ledger is still logged, with an
        unknown payer, unless ``strict`` is set.

        Raises
        ------
        UnknownLoanReferenceError
            If ``strict`` is set and the loan does not exist.
        ValidationError
            If the repayment is malformed.
        """
        loan = self._state.find_loan(loan_number)
        if loan is None and strict:
            raise UnknownLoanReferenceError(loan_number)

        repayment = Repayment(
            id=self._new_id(),
            loan_number=loan_number,
            date=date or self.today(),
            principal_amount=as_decimal(principal_amount),
            interest_amount=as_decimal(interest_amount),
            payer=Payer.from_borrower(loan.loanee) if loan else Payer.unknown(),
            payment_channel=payment_channel,
            notes=notes or None,
        )
        validate_repayment(repayment, self.today())
        self.dispatch(ApplyRepayment(repayment))
        logger.info(
            "Recorded repayment of %s principal and %s interest on %s",
            repayment.principal_amount,
            repayment.interest_amount,
            loan_number,
            extra={"loan_number": loan_number},
        )
        return repayment

    def register_loanee(
        self,
        name: str,
        national_id: str,
        mobile: str,
        email: str | None = None,
        employment_status: EmploymentStatus = EmploymentStatus.EMPLOYED,
        date_added: date | None = None,
    ) -> Loanee:
        """Add a loanee to the directory.

        Raises
        ------
        DuplicateLoaneeError
            If the national ID or mobile is already registered.
        """
        loanee = Loanee(
            id=self._new_id(),
            name=name,
            national_id=national_id,
            mobile=mobile,
            email=email or None,
            employment_status=EmploymentStatus(employment_status),
            date_added=date_added or self.today(),
        )
        validate_loanee(loanee)
        self.dispatch(AddLoanee(loanee))
        logger.info(
            "Registered loanee %s (%s)", loanee.name, loanee.id, extra={"loanee_id": loanee.id}
        )
        return loanee

    def update_loanee(self, loanee_id: str, **updates: Any) -> Loanee | None:
        """Edit a loanee; returns None when the ID is unknown."""
        blanked = {
            name: "This field is required"
            for name in ("name", "national_id", "mobile")
            if name in updates and not updates[name]
        }
        if blanked:
            raise ValidationError("Invalid loanee: required fields cannot be blank", blanked)
        if "email" in updates:
            updates["email"] = updates["email"] or None

        self.dispatch(UpdateLoanee(loanee_id, updates))
        return self._state.find_loanee(loanee_id)

    def delete_loanee(self, loanee_id: str) -> None:
        """Remove a loanee from the directory; their loans are kept."""
        self.dispatch(DeleteLoanee(loanee_id))

    def update_settings(self, **updates: Any) -> Settings:
        """Validate and merge new settings."""
        for name in LIST_SETTINGS:
            if name in updates and not isinstance(updates[name], str):
                updates[name] = [str(item).strip() for item in updates[name] if str(item).strip()]
        validate_settings_update(updates)
        self.dispatch(UpdateSettings(updates))
        return self.settings

    def import_records(
        self,
        loans: Iterable[Loan] = (),
        repayments: Iterable[Repayment] = (),
    ) -> LedgerState:
        """Apply prebuilt loans, then repayments, and persist once.

        Used by bulk importers that construct well-formed records themselves.
        Loans are expected to carry their own loan numbers; each still
        advances the counter.
        """
        state = self._state
        loan_count = repayment_count = 0
        for loan in loans:
            state = apply_command(state, AddLoan(loan))
            loan_count += 1
        for repayment in repayments:
            state = apply_command(state, ApplyRepayment(repayment))
            repayment_count += 1

        self._state = state
        self.save()
        logger.info("Imported %d loans and %d repayments", loan_count, repayment_count)
        return state
