"""Repayment model."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from loan_ledger.models.base import Payer


@dataclass(frozen=True)
class Repayment:
    """A single payment applied against one loan. Never edited once logged."""

    id: str
    loan_number: str
    date: date
    principal_amount: Decimal
    interest_amount: Decimal
    payer: Payer
    payment_channel: str
    notes: str | None = None

    @property
    def total_amount(self) -> Decimal:
        return self.principal_amount + self.interest_amount
