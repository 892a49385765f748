"""Budget health providers reading from the relational store"""

from typing import List
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from budmate_gateway.domain.exceptions import ProviderError
from budmate_gateway.domain.models import BudgetRecord, ExpenseRecord
from budmate_gateway.infrastructure.database.repositories import (
    BudgetRepository,
    ExpenseRepository,
    to_budget_record,
    to_expense_record,
)
from budmate_gateway.infrastructure.observability.metrics import provider_fetch_failures_counter


class SqlBudgetProvider:
    def __init__(self, db: Session):
        self.repository = BudgetRepository(db)

    async def get_all(self, user_id: str) -> List[BudgetRecord]:
        try:
            return [to_budget_record(row) for row in self.repository.get_all(user_id)]
        except SQLAlchemyError as e:
            provider_fetch_failures_counter.labels(provider="sql_budget").inc()
            raise ProviderError(f"Failed to get budgets: {e}") from e


class SqlExpenseProvider:
    def __init__(self, db: Session):
        self.repository = ExpenseRepository(db)

    async def get_all(self, user_id: str) -> List[ExpenseRecord]:
        try:
            return [to_expense_record(row) for row in self.repository.get_all(user_id)]
        except SQLAlchemyError as e:
            provider_fetch_failures_counter.labels(provider="sql_expense").inc()
            raise ProviderError(f"Failed to get expenses: {e}") from e
        except ValueError as e:
            # Unknown status stored in the row
            provider_fetch_failures_counter.labels(provider="sql_expense").inc()
            raise ProviderError(f"Invalid expense data: {e}") from e
