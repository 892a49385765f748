"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum


class ExpenseStatus(str, Enum):
    """Expense lifecycle: pending -> paid, or pending -> expired"""

    PENDING = "pending"
    PAID = "paid"
    EXPIRED = "expired"

    @classmethod
    def parse(cls, value: str) -> "ExpenseStatus":
        """Parse a stored status, case-insensitive. Raises ValueError on unknown values."""
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"Invalid expense status: {value}") from None


@dataclass
class ExpenseRecord:
    """Single scheduled or settled expense owned by a user"""

    id: str
    user_id: str
    amount: Decimal
    category_id: str
    date: date  # Due date
    status: ExpenseStatus


@dataclass
class BudgetRecord:
    """A user's running budget balance (deposits add, paid expenses subtract)"""

    id: str
    user_id: str
    amount: Decimal
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class BudgetHealthResult:
    """Snapshot of paid spending against the budget balance"""

    user_id: str
    total_expenses: Decimal
    budget_amount: Decimal
    percentage_used: float  # 0-100 scale, exceeds 100 when over budget
    is_over_budget: bool
    should_alert: bool
    calculated_at: datetime

    @property
    def remaining_amount(self) -> Decimal:
        """Balance left after paid expenses; negative when overspent"""
        return self.budget_amount - self.total_expenses
