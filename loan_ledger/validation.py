"""Caller-level validation, run before commands reach the store."""

import re
from datetime import date
from decimal import Decimal
from typing import Any, Mapping

from loan_ledger.exceptions import ValidationError
from loan_ledger.issuance import LoanRequest
from loan_ledger.models import Loanee, RepaymentPeriod, Repayment
from loan_ledger.persistence.serialization import as_decimal

HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")
LIST_SETTINGS = ("loan_types", "payment_channels", "repayment_periods")


def _raise_if(errors: dict[str, str], message: str) -> None:
    if errors:
        raise ValidationError(f"{message}: " + "; ".join(errors.values()), errors)


def _finite(value: Any) -> Decimal | None:
    """Coerce to Decimal; None for non-numeric, NaN or infinite values."""
    try:
        number = as_decimal(value)
    except (ValueError, ArithmeticError):
        return None
    return number if number.is_finite() else None


def validate_loan_request(request: LoanRequest, today: date) -> None:
    """Check a loan request before it is turned into a loan."""
    errors: dict[str, str] = {}

    amount = _finite(request.amount)
    if amount is None or amount <= 0:
        errors["amount"] = "Loan amount must be a number greater than zero"
    if not request.loan_type:
        errors["loan_type"] = "Loan type is required"
    try:
        RepaymentPeriod(request.repayment_period)
    except ValueError:
        errors["repayment_period"] = f"Unknown repayment period {request.repayment_period!r}"
    if request.repayment_period_value is None or request.repayment_period_value < 1:
        errors["repayment_period_value"] = "Repayment period is required"
    if request.total_interest is not None:
        total_interest = _finite(request.total_interest)
        if total_interest is None or total_interest < 0:
            errors["total_interest"] = "Total interest must be a non-negative number"
    if request.interest_rate is not None:
        rate = _finite(request.interest_rate)
        if rate is None or rate < 0:
            errors["interest_rate"] = "Interest rate must be a non-negative number"

    borrower = request.borrower
    if not borrower.name:
        errors["name"] = "Loanee name is required"
    if not borrower.national_id:
        errors["national_id"] = "National ID is required"
    if not borrower.mobile:
        errors["mobile"] = "Mobile number is required"

    if request.issuance_date is not None and request.issuance_date > today:
        errors["issuance_date"] = "Issuance date cannot be in the future"

    _raise_if(errors, "Invalid loan")


def validate_repayment(repayment: Repayment, today: date) -> None:
    """Check a repayment before it is applied."""
    errors: dict[str, str] = {}

    if not repayment.loan_number:
        errors["loan_number"] = "Loan number is required"
    principal = _finite(repayment.principal_amount)
    interest = _finite(repayment.interest_amount)
    if principal is None or principal < 0:
        errors["principal_amount"] = "Principal amount must be a non-negative number"
    if interest is None or interest < 0:
        errors["interest_amount"] = "Interest amount must be a non-negative number"
    if principal == 0 and interest == 0:
        errors["amount"] = "Either principal or interest amount is required"
    if not repayment.payment_channel:
        errors["payment_channel"] = "Payment channel is required"
    if repayment.date > today:
        errors["date"] = "Payment date cannot be in the future"

    _raise_if(errors, "Invalid repayment")


def validate_loanee(loanee: Loanee) -> None:
    """Check the required loanee fields."""
    errors: dict[str, str] = {}
    if not loanee.name:
        errors["name"] = "Name is required"
    if not loanee.national_id:
        errors["national_id"] = "National ID is required"
    if not loanee.mobile:
        errors["mobile"] = "Mobile number is required"
    _raise_if(errors, "Invalid loanee")


def validate_settings_update(updates: Mapping[str, Any]) -> None:
    """Check the settings a caller wants to change."""
    errors: dict[str, str] = {}

    if "company_name" in updates and not str(updates["company_name"] or "").strip():
        errors["company_name"] = "Company name is required"
    if "brand_color" in updates and not HEX_COLOR.match(str(updates["brand_color"] or "")):
        errors["brand_color"] = "Brand color must be a hex color such as #0F766E"
    if "default_interest_rate" in updates:
        rate = _finite(updates["default_interest_rate"])
        if rate is None or rate < 0:
            errors["default_interest_rate"] = "Default interest rate must be a non-negative number"
    for name in LIST_SETTINGS:
        if name in updates:
            value = updates[name]
            if isinstance(value, str) or not [item for item in value if str(item).strip()]:
                errors[name] = "At least one value is required"

    _raise_if(errors, "Invalid settings")
