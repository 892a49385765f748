"""Data access layer for budgets and expenses"""

import uuid
from typing import List, Optional
from sqlalchemy.orm import Session
from budmate_gateway.infrastructure.database.models import Budget, Expense
from budmate_gateway.domain.models import BudgetRecord, ExpenseRecord, ExpenseStatus


def to_budget_record(row: Budget) -> BudgetRecord:
    return BudgetRecord(
        id=row.id,
        user_id=row.user_id,
        amount=row.amount,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def to_expense_record(row: Expense) -> ExpenseRecord:
    return ExpenseRecord(
        id=str(row.id),
        user_id=row.user_id,
        amount=row.amount,
        category_id=row.category_id,
        date=row.date,
        status=ExpenseStatus.parse(row.status),
    )


class BudgetRepository:
    """Repository for budget balances"""

    def __init__(self, db: Session):
        self.db = db

    def get_all(self, user_id: str) -> List[Budget]:
        """Fetch every budget row of a user (at most one by the unique constraint)"""
        return (
            self.db.query(Budget)
            .filter(Budget.user_id == user_id)
            .order_by(Budget.created_at)
            .all()
        )

    def get_by_user(self, user_id: str) -> Optional[Budget]:
        return self.db.query(Budget).filter(Budget.user_id == user_id).first()

    def save(self, budget: BudgetRecord) -> Budget:
        """Insert the budget or overwrite the stored balance"""
        db_budget = self.db.get(Budget, budget.id)
        if db_budget is None:
            db_budget = Budget(id=budget.id, user_id=budget.user_id, amount=budget.amount)
            self.db.add(db_budget)
        else:
            db_budget.amount = budget.amount

        self.db.flush()  # Get server defaults without committing
        return db_budget


class ExpenseRepository:
    """Repository for expenses"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, expense: ExpenseRecord) -> Expense:
        """Persist a new expense"""
        db_expense = Expense(
            id=uuid.UUID(expense.id),
            user_id=expense.user_id,
            amount=expense.amount,
            category_id=expense.category_id,
            date=expense.date,
            status=expense.status.value,
        )
        self.db.add(db_expense)
        self.db.flush()
        return db_expense

    def get_all(self, user_id: str, status: Optional[ExpenseStatus] = None) -> List[Expense]:
        """Fetch a user's expenses, most recent due date first"""
        query = self.db.query(Expense).filter(Expense.user_id == user_id)
        if status is not None:
            query = query.filter(Expense.status == status.value)
        return query.order_by(Expense.date.desc()).all()

    def get_by_id(self, expense_id: uuid.UUID) -> Optional[Expense]:
        return self.db.query(Expense).filter(Expense.id == expense_id).first()

    def update_status(self, expense_id: uuid.UUID, status: ExpenseStatus) -> Optional[Expense]:
        """Move an expense to a new lifecycle status"""
        db_expense = self.get_by_id(expense_id)
        if db_expense is None:
            return None

        db_expense.status = status.value
        self.db.flush()
        return db_expense
