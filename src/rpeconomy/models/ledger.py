"""Ledger models: the immutable transaction log and interest accrual markers."""

from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampCreatedMixin

if TYPE_CHECKING:
    from .account import Account


class LedgerEntry(Base, TimestampCreatedMixin):
    """One leg of a money movement. Never updated or deleted.

    Attributes:
        id: Primary key, increasing in insert order
        player_id: Initiator of the movement
        account_id: Account the leg applies to (None for cash-only legs)
        amount: Signed amount; negative for an outflow from the account
        type: deposit, withdraw or transfer
        memo: Free-form tag (``paycheck``, ``to:<account>``, ...)
        correlation_id: Shared by every leg of one logical operation
        counterparty_account_id: The other account of a transfer leg
    """

    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    player_id: Mapped[str] = mapped_column(String(36), ForeignKey("players.id"), nullable=False)
    account_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("bank_accounts.id"), nullable=True
    )
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    memo: Mapped[str | None] = mapped_column("metadata", String(255), nullable=True)
    correlation_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    counterparty_account_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("bank_accounts.id"), nullable=True
    )

    account: Mapped["Account | None"] = relationship("Account", foreign_keys=[account_id])

    __table_args__ = (
        CheckConstraint(
            "type IN ('deposit', 'withdraw', 'transfer')", name="ck_transactions_type"
        ),
        Index("idx_transactions_player_time", "player_id", "created_at"),
        Index("idx_transactions_account_time", "account_id", "created_at"),
        Index("idx_transactions_correlation", "correlation_id"),
    )

    def __repr__(self) -> str:
        return f"<LedgerEntry(id={self.id}, type='{self.type}', amount={self.amount}, memo='{self.memo}')>"


class InterestAccrual(Base, TimestampCreatedMixin):
    """Marks that an account received interest for a ``YYYY-MM`` period.

    Attributes:
        id: Primary key
        account_id: Savings account that was credited
        period: Accrual period, ``YYYY-MM``
        amount: Interest credited
        entry_id: The ledger entry recording the credit
    """

    __tablename__ = "interest_accruals"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    account_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("bank_accounts.id"), nullable=False
    )
    period: Mapped[str] = mapped_column(String(7), nullable=False)
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    entry_id: Mapped[int] = mapped_column(Integer, ForeignKey("transactions.id"), nullable=False)

    __table_args__ = (
        UniqueConstraint("account_id", "period", name="uq_interest_accruals_account_period"),
    )

    def __repr__(self) -> str:
        return f"<InterestAccrual(account='{self.account_id}', period='{self.period}', amount={self.amount})>"
