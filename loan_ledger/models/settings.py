"""Process-wide ledger settings."""

from dataclasses import dataclass
from decimal import Decimal

DEFAULT_LOAN_TYPE = "Personal Loan"


@dataclass(frozen=True)
class Settings:
    """Company branding and the choices offered when issuing and repaying loans.

    The defaults double as the backfill values for snapshots written before a
    field existed.
    """

    company_name: str = "JMS Financial Services"
    brand_color: str = "#0F766E"
    logo: str | None = None
    default_interest_rate: Decimal = Decimal("15")
    loan_types: tuple[str, ...] = (
        DEFAULT_LOAN_TYPE,
        "Business Loan",
        "Emergency Loan",
        "Education Loan",
    )
    payment_channels: tuple[str, ...] = ("Cash", "Bank Transfer", "Mobile Money", "Cheque")
    repayment_periods: tuple[str, ...] = ("Days", "Weeks", "Months")
