"""Pure economic calculations and policy defaults.

Amounts are integers in the minor currency unit and rates are whole
percentages, so every computation here is exact integer arithmetic.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime

MONTHS_PER_YEAR = 12
PERCENT = 100


@dataclass(frozen=True, slots=True)
class PolicyLevers:
    """The economy-wide levers stored in every policy version."""

    savings_apr: int = 2
    income_tax_rate: int = 10
    sales_tax_rate: int = 8
    business_tax_rate: int = 15
    investing_lockup_months: int = 12
    is_investing_enabled: bool = False

    def as_dict(self) -> dict[str, int | bool]:
        return asdict(self)


DEFAULT_POLICY = PolicyLevers()
POLICY_FIELDS = frozenset(DEFAULT_POLICY.as_dict())
RATE_FIELDS = frozenset({"income_tax_rate", "sales_tax_rate", "business_tax_rate"})


def monthly_interest(balance: int, apr: int) -> int:
    """Return one month of simple interest, rounded down.

    Equivalent to ``floor(balance * apr / 100 / 12)`` without float error.

    >>> monthly_interest(1200, 12)
    12
    >>> monthly_interest(99, 2)
    0
    """
    if balance <= 0 or apr <= 0:
        return 0
    return (balance * apr) // (PERCENT * MONTHS_PER_YEAR)


def split_salary(salary: int, income_tax_rate: int) -> tuple[int, int]:
    """Split a gross salary into ``(net, tax)`` with the tax rounded down."""
    tax = (salary * income_tax_rate) // PERCENT
    return salary - tax, tax


def accrual_period(moment: datetime) -> str:
    """Return the ``YYYY-MM`` accrual period containing ``moment``."""
    return f"{moment.year:04d}-{moment.month:02d}"


def is_valid_amount(amount: object) -> bool:
    """Money amounts must be positive integers (bools are rejected)."""
    return isinstance(amount, int) and not isinstance(amount, bool) and amount > 0
