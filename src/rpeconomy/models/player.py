"""Player model for the economy.

Players hold physical cash and own bank accounts. The government entity is
itself a player row flagged ``is_system``.
"""

from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, Boolean, CheckConstraint, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin, new_uuid

if TYPE_CHECKING:
    from .account import Account
    from .job import Job


class Player(Base, TimestampMixin):
    """Represents a player (or the synthetic government player).

    Attributes:
        id: Primary key (uuid string)
        first_name: Given name
        last_name: Family name
        attributes: JSON bag of cosmetic attributes (hair, height, ...)
        job_id: Foreign key to the assigned job, if any
        cash: Physical money on hand, never negative
        bank: Cached sum of the balances of every account this player owns
        is_system: True for the synthetic government player
    """

    __tablename__ = "players"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)

    first_name: Mapped[str] = mapped_column(String(255), nullable=False)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False)
    attributes: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    job_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("jobs.id"), nullable=True)

    # Money
    cash: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    bank: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    is_system: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Relationships
    job: Mapped["Job | None"] = relationship("Job", back_populates="players")
    accounts: Mapped[list["Account"]] = relationship(
        "Account", back_populates="owner", order_by="Account.created_at"
    )

    __table_args__ = (
        CheckConstraint("cash >= 0", name="ck_players_cash_non_negative"),
        CheckConstraint("bank >= 0", name="ck_players_bank_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Player(id='{self.id}', name='{self.first_name} {self.last_name}', cash={self.cash})>"
