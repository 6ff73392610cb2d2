"""Government singleton: a name, its synthetic player and its treasury."""

from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampCreatedMixin

if TYPE_CHECKING:
    from .account import Account
    from .player import Player


class Government(Base, TimestampCreatedMixin):
    """The single government entity.

    ``slot`` is unique and pinned to 1, so a second concurrent bootstrap
    fails on insert instead of creating a duplicate treasury.

    Attributes:
        id: Primary key
        slot: Always 1
        name: Display name
        player_id: The synthetic player that owns the treasury
        account_id: The treasury account (business/chequing)
    """

    __tablename__ = "governments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    slot: Mapped[int] = mapped_column(Integer, nullable=False, unique=True, default=1)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    player_id: Mapped[str] = mapped_column(String(36), ForeignKey("players.id"), nullable=False)
    account_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("bank_accounts.id"), nullable=True
    )

    player: Mapped["Player"] = relationship("Player")
    account: Mapped["Account | None"] = relationship("Account")

    __table_args__ = (CheckConstraint("slot = 1", name="ck_governments_singleton"),)

    def __repr__(self) -> str:
        return f"<Government(id={self.id}, name='{self.name}', account='{self.account_id}')>"
