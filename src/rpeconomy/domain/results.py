"""Result objects returned by the ledger-mutating operations.

Callers inspect ``success`` and ``error`` instead of catching exceptions, so
the HTTP layer never needs to know which storage engine is underneath.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Self

from rpeconomy.domain.errors import ErrorKind, LedgerError

if TYPE_CHECKING:
    from rpeconomy.models import Account, Player


@dataclass
class OperationResult:
    """Outcome shared by every engine operation."""

    success: bool
    message: str
    error: ErrorKind | None = None

    @classmethod
    def failed(cls, exc: LedgerError) -> Self:
        return cls(success=False, message=exc.message, error=exc.kind)


@dataclass
class CashMovementResult(OperationResult):
    """Result of a deposit or withdrawal."""

    player: Player | None = None
    account: Account | None = None


@dataclass
class TransferResult(OperationResult):
    """Result of an account-to-account transfer."""

    from_account: Account | None = None
    to_account: Account | None = None
    correlation_id: str | None = None


@dataclass
class PayrollResult(OperationResult):
    """Result of paying one salary."""

    player_account: Account | None = None
    gov_account: Account | None = None
    gross_salary: int = 0
    net_salary: int = 0
    tax_amount: int = 0
    correlation_id: str | None = None


@dataclass
class AccrualFailure:
    """One account the interest batch could not update."""

    account_id: str
    error: ErrorKind
    message: str


@dataclass
class InterestResult(OperationResult):
    """Result of one savings interest batch."""

    period: str | None = None
    accounts_updated: int = 0
    accounts_skipped: int = 0
    interest_paid: int = 0
    failures: list[AccrualFailure] = field(default_factory=list)
