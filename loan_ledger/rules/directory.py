"""Loanee directory rule: add, update and delete with uniqueness checks."""

from dataclasses import fields, replace
from typing import Any, Mapping

from loan_ledger.exceptions import DuplicateLoaneeError, ValidationError
from loan_ledger.models import EmploymentStatus, Loanee

UNIQUE_FIELDS = ("national_id", "mobile")
EDITABLE_FIELDS = frozenset(f.name for f in fields(Loanee)) - {"id"}


def find_conflict(
    loanees: tuple[Loanee, ...],
    candidate: Loanee,
    exclude_id: str | None = None,
) -> tuple[str, Loanee] | None:
    """Find a loanee sharing ``candidate``'s national ID or mobile.

    Matching is exact and case-sensitive. The loanee with ``exclude_id`` (the
    one being edited) is skipped.

    Returns
    -------
    tuple[str, Loanee] | None
        The colliding field name and the existing loanee, or None.
    """
    for existing in loanees:
        if exclude_id is not None and existing.id == exclude_id:
            continue
        for field_name in UNIQUE_FIELDS:
            if getattr(existing, field_name) == getattr(candidate, field_name):
                return field_name, existing
    return None


def _check_unique(
    loanees: tuple[Loanee, ...], candidate: Loanee, exclude_id: str | None = None
) -> None:
    conflict = find_conflict(loanees, candidate, exclude_id)
    if conflict is not None:
        field_name, existing = conflict
        raise DuplicateLoaneeError(field_name, getattr(candidate, field_name), existing.id)


def add_loanee(loanees: tuple[Loanee, ...], loanee: Loanee) -> tuple[Loanee, ...]:
    """Append a loanee, raising DuplicateLoaneeError on a collision."""
    _check_unique(loanees, loanee)
    return loanees + (loanee,)


def update_loanee(
    loanees: tuple[Loanee, ...],
    loanee_id: str,
    updates: Mapping[str, Any],
) -> tuple[Loanee, ...]:
    """Merge ``updates`` into the loanee with ``loanee_id``.

    Unknown IDs are a no-op. The merged record must stay unique against every
    other loanee.
    """
    unknown = set(updates) - EDITABLE_FIELDS
    if unknown:
        raise ValidationError(
            "Cannot update loanee fields: " + ", ".join(sorted(unknown)),
            {name: "Not an editable loanee field" for name in unknown},
        )

    changes = dict(updates)
    if "employment_status" in changes:
        try:
            changes["employment_status"] = EmploymentStatus(changes["employment_status"])
        except ValueError as exc:
            raise ValidationError(
                str(exc), {"employment_status": "Unknown employment status"}
            ) from exc

    result = []
    for loanee in loanees:
        if loanee.id == loanee_id:
            loanee = replace(loanee, **changes)
            _check_unique(loanees, loanee, exclude_id=loanee_id)
        result.append(loanee)
    return tuple(result)


def delete_loanee(loanees: tuple[Loanee, ...], loanee_id: str) -> tuple[Loanee, ...]:
    """Remove the loanee with ``loanee_id``; unknown IDs are a no-op."""
    return tuple(loanee for loanee in loanees if loanee.id != loanee_id)
