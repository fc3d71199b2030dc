"""Enumeration types for ledger entities."""

from enum import Enum


class LoanStatus(str, Enum):
    RUNNING = "running"
    REPAID = "repaid"


class RepaymentPeriod(str, Enum):
    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"


class EmploymentStatus(str, Enum):
    EMPLOYED = "employed"
    SELF_EMPLOYED = "self-employed"
