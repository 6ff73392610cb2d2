"""Error kinds raised by the ledger engine.

Every failure an engine operation can report is a ``LedgerError`` subclass
tagged with an ``ErrorKind``. Mutating operations catch these and return a
result object with ``success=False``; read operations let them propagate.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorKind(StrEnum):
    """Stable, storage-agnostic failure categories."""

    NOT_FOUND = "not_found"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    INSUFFICIENT_CASH = "insufficient_cash"
    BUSINESS_ACCOUNT_RESTRICTION = "business_account_restriction"
    INVALID_AMOUNT = "invalid_amount"
    ACCOUNT_INACTIVE = "account_inactive"
    ALREADY_EXISTS = "already_exists"
    INVALID_POLICY = "invalid_policy"
    POLICY_MISSING = "policy_missing"
    ZERO_OR_NEGATIVE_APR = "zero_or_negative_apr"
    TRANSACTION_CONFLICT = "transaction_conflict"
    STORAGE_ERROR = "storage_error"


class LedgerError(Exception):
    """Base class for all ledger failures."""

    kind: ErrorKind = ErrorKind.STORAGE_ERROR
    default_message = "Ledger operation failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(LedgerError):
    kind = ErrorKind.NOT_FOUND
    default_message = "Resource not found"


class PlayerNotFound(NotFoundError):
    default_message = "Player not found"


class AccountNotFound(NotFoundError):
    default_message = "Account not found"


class JobNotFound(NotFoundError):
    default_message = "Job not found"


class ChequingAccountNotFound(NotFoundError):
    default_message = "Player chequing account not found"


class TreasuryNotFound(NotFoundError):
    default_message = "Government treasury account not found"


class GovernmentNotFound(NotFoundError):
    default_message = "Government entity not found"


class TransactionNotFound(NotFoundError):
    default_message = "Transaction not found"


class InsufficientFunds(LedgerError):
    kind = ErrorKind.INSUFFICIENT_FUNDS
    default_message = "Insufficient funds"


class InsufficientCash(LedgerError):
    kind = ErrorKind.INSUFFICIENT_CASH
    default_message = "Not enough cash"


class BusinessAccountRestriction(LedgerError):
    kind = ErrorKind.BUSINESS_ACCOUNT_RESTRICTION
    default_message = "Cash operations are not allowed on business accounts"


class InvalidAmount(LedgerError):
    kind = ErrorKind.INVALID_AMOUNT
    default_message = "Amount must be a positive whole number"


class AccountInactive(LedgerError):
    kind = ErrorKind.ACCOUNT_INACTIVE
    default_message = "Account is not active"


class AccountsAlreadyExist(LedgerError):
    kind = ErrorKind.ALREADY_EXISTS
    default_message = "Owner already has accounts of this type"


class InvalidPolicy(LedgerError):
    kind = ErrorKind.INVALID_POLICY
    default_message = "Invalid policy update"


class PolicyMissing(LedgerError):
    kind = ErrorKind.POLICY_MISSING
    default_message = "Government policy is missing"


class NoPolicyFound(PolicyMissing):
    default_message = "No government policy found"


class ZeroOrNegativeAPR(LedgerError):
    kind = ErrorKind.ZERO_OR_NEGATIVE_APR
    default_message = "Savings APR must be positive to accrue interest"


class TransactionConflict(LedgerError):
    kind = ErrorKind.TRANSACTION_CONFLICT
    default_message = "Concurrent update conflict"


class StorageError(LedgerError):
    kind = ErrorKind.STORAGE_ERROR
    default_message = "Storage failure"
