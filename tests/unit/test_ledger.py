"""Unit tests for deposits, payments and expiry"""

import pytest
from datetime import date, timedelta
from decimal import Decimal
from budmate_gateway.domain.ledger import (
    apply_deposit,
    available_balance,
    expire_overdue,
    new_expense,
    settle_expense,
)
from budmate_gateway.domain.exceptions import (
    InsufficientBalanceError,
    InvalidAmountError,
    InvalidExpenseStateError,
    RecordNotFoundError,
)
from budmate_gateway.domain.models import ExpenseStatus


def test_first_deposit_creates_budget_keyed_by_user():
    budget = apply_deposit(None, "user_1", Decimal("500"), available=Decimal("0"))

    assert budget.id == "user_1"
    assert budget.user_id == "user_1"
    assert budget.amount == Decimal("500.00")


@pytest.mark.parametrize("amount", ["0", "-10"])
def test_first_deposit_must_be_positive(amount):
    with pytest.raises(InvalidAmountError):
        apply_deposit(None, "user_1", Decimal(amount), available=Decimal("0"))


def test_deposit_adds_to_existing_balance(make_budget):
    budget = apply_deposit(make_budget(500), "user_1", Decimal("250.25"), available=Decimal("500"))

    assert budget.amount == Decimal("750.25")


def test_withdrawal_reduces_balance(make_budget):
    budget = apply_deposit(make_budget(500), "user_1", Decimal("-500"), available=Decimal("500"))

    assert budget.amount == Decimal("0")


def test_withdrawal_below_zero_rejected(make_budget):
    with pytest.raises(InsufficientBalanceError):
        apply_deposit(make_budget(500), "user_1", Decimal("-500.01"), available=Decimal("500"))


def test_zero_deposit_rejected(make_budget):
    with pytest.raises(InvalidAmountError):
        apply_deposit(make_budget(500), "user_1", Decimal("0"), available=Decimal("500"))


def test_new_expense_is_pending():
    expense = new_expense("user_1", Decimal("42.5"), "food", date(2026, 1, 15))

    assert expense.status == ExpenseStatus.PENDING
    assert expense.amount == Decimal("42.50")
    assert expense.id


def test_new_expense_rejects_non_positive_amount():
    with pytest.raises(InvalidAmountError):
        new_expense("user_1", Decimal("0"), "food", date.today())


def test_settle_expense_deducts_budget(make_budget, make_expense):
    expense = make_expense(200, ExpenseStatus.PENDING)

    paid, budget = settle_expense(expense, make_budget(1000), available=Decimal("1000"))

    assert paid.status == ExpenseStatus.PAID
    assert paid.id == expense.id
    assert budget.amount == Decimal("800")
    # Input records are left untouched
    assert expense.status == ExpenseStatus.PENDING


def test_settle_expense_exact_balance_allowed(make_budget, make_expense):
    _, budget = settle_expense(
        make_expense(1000, ExpenseStatus.PENDING), make_budget(1000), available=Decimal("1000")
    )

    assert budget.amount == 0


def test_settle_expense_insufficient_balance(make_budget, make_expense):
    with pytest.raises(InsufficientBalanceError):
        settle_expense(
            make_expense(1000.01, ExpenseStatus.PENDING), make_budget(1000), available=Decimal("1000")
        )


@pytest.mark.parametrize("status", [ExpenseStatus.PAID, ExpenseStatus.EXPIRED])
def test_settle_expense_requires_pending(make_budget, make_expense, status):
    with pytest.raises(InvalidExpenseStateError):
        settle_expense(make_expense(10, status), make_budget(1000), available=Decimal("1000"))


def test_settle_expense_requires_budget(make_expense):
    with pytest.raises(RecordNotFoundError):
        settle_expense(make_expense(10, ExpenseStatus.PENDING), None, available=Decimal("0"))


def test_available_balance_subtracts_paid_expenses(make_budget, make_expense):
    expenses = [
        make_expense(900),
        make_expense(50, ExpenseStatus.PENDING),
        make_expense(25, ExpenseStatus.EXPIRED),
    ]

    assert available_balance(make_budget(1000), expenses) == Decimal("100")
    assert available_balance(None, expenses) == Decimal("0")


def test_payment_checked_against_available_not_stored_balance(make_budget, make_expense):
    budget = make_budget(1000)
    available = available_balance(budget, [make_expense(900)])

    with pytest.raises(InsufficientBalanceError):
        settle_expense(make_expense(200, ExpenseStatus.PENDING), budget, available=available)

    # Fits in what is left: the stored balance drops by the expense amount
    _, updated = settle_expense(make_expense(100, ExpenseStatus.PENDING), budget, available=available)
    assert updated.amount == Decimal("900")


def test_withdrawal_checked_against_available_not_stored_balance(make_budget, make_expense):
    budget = make_budget(1000)
    available = available_balance(budget, [make_expense(900)])

    with pytest.raises(InsufficientBalanceError):
        apply_deposit(budget, "user_1", Decimal("-200"), available=available)

    updated = apply_deposit(budget, "user_1", Decimal("-100"), available=available)
    assert updated.amount == Decimal("900")


def test_expire_overdue_only_touches_past_pending(make_expense):
    today = date(2026, 3, 10)
    overdue = make_expense(10, ExpenseStatus.PENDING, due_date=today - timedelta(days=1))
    due_today = make_expense(20, ExpenseStatus.PENDING, due_date=today)
    future = make_expense(30, ExpenseStatus.PENDING, due_date=today + timedelta(days=3))
    paid_late = make_expense(40, ExpenseStatus.PAID, due_date=today - timedelta(days=10))

    expired = expire_overdue([overdue, due_today, future, paid_late], today=today)

    assert [e.id for e in expired] == [overdue.id]
    assert expired[0].status == ExpenseStatus.EXPIRED
