"""Sample data generators for demos and tests."""

from loan_ledger.generators.ledger import SampleLedgerGenerator
from loan_ledger.generators.loanee import LoaneeGenerator

__all__ = ["LoaneeGenerator", "SampleLedgerGenerator"]
