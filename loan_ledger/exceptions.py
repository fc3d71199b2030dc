"""Custom exception hierarchy for loan-ledger."""


class LedgerError(Exception):
    """Base exception for all loan-ledger errors."""


class ValidationError(LedgerError):
    """Raised when a request is rejected before it reaches the store.

    ``errors`` maps each offending field to a human-readable message.
    """

    def __init__(self, message: str, errors: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.errors = dict(errors or {})


class DuplicateLoaneeError(LedgerError):
    """Raised when a loanee's national ID or mobile is already registered."""

    def __init__(self, field: str, value: str, existing_id: str) -> None:
        super().__init__(f"A loanee with {field} {value!r} already exists ({existing_id})")
        self.field = field
        self.value = value
        self.existing_id = existing_id


class UnknownLoanReferenceError(LedgerError):
    """Raised when a loan number does not exist in the ledger."""

    def __init__(self, loan_number: str) -> None:
        super().__init__(f"Loan {loan_number} not found")
        self.loan_number = loan_number


class PersistenceError(LedgerError):
    """Raised when the snapshot cannot be read, decoded or written."""


class ConfigurationError(LedgerError):
    """Raised when configuration is invalid or missing."""
