"""Job model: a named position paying a fixed gross salary."""

from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampCreatedMixin

if TYPE_CHECKING:
    from .player import Player


class Job(Base, TimestampCreatedMixin):
    """A job players can be assigned to.

    Attributes:
        id: Primary key
        name: Display name of the job
        salary: Gross salary paid per payroll run, in minor units
    """

    __tablename__ = "jobs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    salary: Mapped[int] = mapped_column(Integer, nullable=False)

    players: Mapped[list["Player"]] = relationship("Player", back_populates="job")

    __table_args__ = (CheckConstraint("salary >= 0", name="ck_jobs_salary_non_negative"),)

    def __repr__(self) -> str:
        return f"<Job(id={self.id}, name='{self.name}', salary={self.salary})>"
