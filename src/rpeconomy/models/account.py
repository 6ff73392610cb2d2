"""Bank account model.

Each owner has at most one account per (type, sub_type). Balances are
integers in the minor currency unit and a CHECK constraint keeps them
non-negative even if application checks are bypassed.
"""

from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin, new_uuid

if TYPE_CHECKING:
    from .player import Player


class Account(Base, TimestampMixin):
    """Represents one bank account.

    Attributes:
        id: Primary key (uuid string)
        owner_id: Foreign key to the owning player
        type: personal or business
        sub_type: chequing, savings or investing
        balance: Current balance, never negative
        apr: Yearly interest percentage snapshotted from policy at creation
        is_active: Whether the account may take part in operations
    """

    __tablename__ = "bank_accounts"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    owner_id: Mapped[str] = mapped_column(String(36), ForeignKey("players.id"), nullable=False)

    type: Mapped[str] = mapped_column(String(20), nullable=False)
    sub_type: Mapped[str] = mapped_column(String(20), nullable=False)

    balance: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    apr: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    owner: Mapped["Player"] = relationship("Player", back_populates="accounts")

    __table_args__ = (
        CheckConstraint("balance >= 0", name="ck_bank_accounts_balance_non_negative"),
        CheckConstraint("type IN ('personal', 'business')", name="ck_bank_accounts_type"),
        CheckConstraint(
            "sub_type IN ('chequing', 'savings', 'investing')",
            name="ck_bank_accounts_sub_type",
        ),
        UniqueConstraint("owner_id", "type", "sub_type", name="uq_bank_accounts_owner_kind"),
        Index("idx_bank_accounts_sub_type_active", "sub_type", "is_active"),
    )

    def __repr__(self) -> str:
        return (
            f"<Account(id='{self.id}', owner='{self.owner_id}', "
            f"kind='{self.type}/{self.sub_type}', balance={self.balance})>"
        )
