"""Storage-independent domain layer: enums, errors, calculations and results."""

from rpeconomy.domain.economics import (
    DEFAULT_POLICY,
    PolicyLevers,
    accrual_period,
    monthly_interest,
    split_salary,
)
from rpeconomy.domain.enums import AccountSubType, AccountType, EntryMemo, EntryType
from rpeconomy.domain.errors import ErrorKind, LedgerError

__all__ = [
    "DEFAULT_POLICY",
    "AccountSubType",
    "AccountType",
    "EntryMemo",
    "EntryType",
    "ErrorKind",
    "LedgerError",
    "PolicyLevers",
    "accrual_period",
    "monthly_interest",
    "split_salary",
]
