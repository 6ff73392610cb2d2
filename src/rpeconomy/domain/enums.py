"""Enumerations shared by the ledger models and services."""

from __future__ import annotations

from enum import StrEnum


class AccountType(StrEnum):
    """High-level account classification."""

    PERSONAL = "personal"
    BUSINESS = "business"


class AccountSubType(StrEnum):
    """The three standard sub-accounts."""

    CHEQUING = "chequing"
    SAVINGS = "savings"
    INVESTING = "investing"


class EntryType(StrEnum):
    """Kind of money movement recorded by a ledger entry."""

    DEPOSIT = "deposit"
    WITHDRAW = "withdraw"
    TRANSFER = "transfer"


class EntryMemo(StrEnum):
    """Well-known memo tags written by the policy-driven engines."""

    PAYCHECK = "paycheck"
    INCOME_TAX = "income_tax"
    SAVINGS_INTEREST = "savings_interest"
    TREASURY_SEED = "treasury_opening_balance"
