"""Government economic policy, stored as an append-only version history."""

from sqlalchemy import Boolean, Integer
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampCreatedMixin


class Policy(Base, TimestampCreatedMixin):
    """One version of the economy-wide levers.

    Rows are only ever inserted; the row with the highest id is current.

    Attributes:
        id: Primary key, increasing with every update
        savings_apr: Yearly savings interest, percent
        income_tax_rate: Salary withholding, percent
        sales_tax_rate: Sales tax, percent
        business_tax_rate: Business tax, percent
        investing_lockup_months: How long investing balances are locked
        is_investing_enabled: Whether new investing accounts start active
    """

    __tablename__ = "government_policies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    savings_apr: Mapped[int] = mapped_column(Integer, nullable=False)
    income_tax_rate: Mapped[int] = mapped_column(Integer, nullable=False)
    sales_tax_rate: Mapped[int] = mapped_column(Integer, nullable=False)
    business_tax_rate: Mapped[int] = mapped_column(Integer, nullable=False)
    investing_lockup_months: Mapped[int] = mapped_column(Integer, nullable=False)
    is_investing_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False)

    def as_dict(self) -> dict[str, int | bool]:
        """Return the lever values of this version."""
        return {
            "savings_apr": self.savings_apr,
            "income_tax_rate": self.income_tax_rate,
            "sales_tax_rate": self.sales_tax_rate,
            "business_tax_rate": self.business_tax_rate,
            "investing_lockup_months": self.investing_lockup_months,
            "is_investing_enabled": self.is_investing_enabled,
        }

    def __repr__(self) -> str:
        return f"<Policy(id={self.id}, savings_apr={self.savings_apr}, income_tax={self.income_tax_rate})>"
