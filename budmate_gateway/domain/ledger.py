"""Budget and expense lifecycle rules: deposits, payments and expiry"""

import uuid
from dataclasses import replace
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import List, Optional, Tuple

from budmate_gateway.domain.budget_health import total_paid_expenses
from budmate_gateway.domain.exceptions import (
    InsufficientBalanceError,
    InvalidAmountError,
    InvalidExpenseStateError,
    RecordNotFoundError,
)
from budmate_gateway.domain.models import BudgetRecord, ExpenseRecord, ExpenseStatus
from budmate_gateway.utils.money import to_money


def available_balance(budget: Optional[BudgetRecord], expenses: List[ExpenseRecord]) -> Decimal:
    """
    Money the user can still spend: stored balance minus every paid expense.

    Same quantity as BudgetHealthResult.remaining_amount, zero without a budget.
    """
    if budget is None:
        return Decimal("0")
    return budget.amount - total_paid_expenses(expenses)


def apply_deposit(
    budget: Optional[BudgetRecord],
    user_id: str,
    amount: Decimal,
    available: Decimal,
) -> BudgetRecord:
    """
    Add money to a user's budget balance, creating the budget on first deposit.

    Rules:
    - First deposit creates the budget and must be positive
    - Later deposits may be negative (withdrawal) but never zero
    - A withdrawal may not exceed the available balance (see available_balance)

    The budget id is the user id so storage holds one budget per user.
    """
    amount = to_money(amount)
    now = datetime.now(timezone.utc)

    if budget is None:
        if amount <= 0:
            raise InvalidAmountError("Initial budget amount must be greater than zero")
        return BudgetRecord(id=user_id, user_id=user_id, amount=amount, created_at=now, updated_at=now)

    if amount == 0:
        raise InvalidAmountError("Deposit amount must not be zero")

    if available + amount < 0:
        raise InsufficientBalanceError(
            f"Withdrawal of {-amount} exceeds available budget of {available}"
        )

    return replace(budget, amount=budget.amount + amount, updated_at=now)


def new_expense(user_id: str, amount: Decimal, category_id: str, due_date: date) -> ExpenseRecord:
    """Create a pending expense. Expenses always start pending."""
    amount = to_money(amount)
    if amount <= 0:
        raise InvalidAmountError("Expense amount must be greater than zero")

    return ExpenseRecord(
        id=str(uuid.uuid4()),
        user_id=user_id,
        amount=amount,
        category_id=category_id,
        date=due_date,
        status=ExpenseStatus.PENDING,
    )


def settle_expense(
    expense: ExpenseRecord, budget: Optional[BudgetRecord], available: Decimal
) -> Tuple[ExpenseRecord, BudgetRecord]:
    """
    Pay a pending expense out of the budget balance.

    The expense must fit in the available balance (stored balance minus paid
    expenses); the stored balance is then reduced by the expense amount.

    Returns (paid expense, budget with the amount deducted).
    """
    if expense.status != ExpenseStatus.PENDING:
        raise InvalidExpenseStateError(
            f"Only pending expenses can be paid, expense {expense.id} is {expense.status.value}"
        )

    if budget is None:
        raise RecordNotFoundError(f"No budget found for user {expense.user_id}")

    if expense.amount > available:
        raise InsufficientBalanceError(
            f"Insufficient budget: required {expense.amount}, available {available}"
        )

    paid = replace(expense, status=ExpenseStatus.PAID)
    updated_budget = replace(
        budget,
        amount=budget.amount - expense.amount,
        updated_at=datetime.now(timezone.utc),
    )
    return paid, updated_budget


def expire_overdue(expenses: List[ExpenseRecord], today: date | None = None) -> List[ExpenseRecord]:
    """Return expired copies of pending expenses whose due date is before today"""
    if today is None:
        today = date.today()

    return [
        replace(e, status=ExpenseStatus.EXPIRED)
        for e in expenses
        if e.status == ExpenseStatus.PENDING and e.date < today
    ]
