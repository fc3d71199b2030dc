"""Settings merge rule."""

from dataclasses import fields, replace
from typing import Any, Mapping

from loan_ledger.exceptions import ValidationError
from loan_ledger.models import Settings
from loan_ledger.persistence.serialization import as_decimal

SETTINGS_FIELDS = frozenset(f.name for f in fields(Settings))
LIST_FIELDS = ("loan_types", "payment_channels", "repayment_periods")


def normalize_setting(name: str, value: Any) -> Any:
    """Coerce a raw setting value to the type the Settings record holds."""
    if name in LIST_FIELDS:
        if isinstance(value, str):
            raise TypeError(f"{name} must be a list of strings")
        return tuple(value)
    if name == "default_interest_rate":
        return as_decimal(value)
    return value


def merge_settings(current: Settings, updates: Mapping[str, Any]) -> Settings:
    """Shallow-merge ``updates`` onto ``current``.

    Fields not named in ``updates`` keep their current value.
    """
    unknown = set(updates) - SETTINGS_FIELDS
    if unknown:
        raise ValidationError(
            "Unknown settings: " + ", ".join(sorted(unknown)),
            {name: "Unknown setting" for name in unknown},
        )
    try:
        normalized = {name: normalize_setting(name, value) for name, value in updates.items()}
    except (TypeError, ValueError, ArithmeticError) as exc:
        raise ValidationError(f"Invalid settings: {exc}") from exc
    return replace(current, **normalized)
