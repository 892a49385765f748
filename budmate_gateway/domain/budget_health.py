"""Budget health engine - paid spending measured against the running budget balance"""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import List

from budmate_gateway.config import settings
from budmate_gateway.domain.exceptions import DatabaseError, InvalidBudgetError, ProviderError
from budmate_gateway.domain.models import BudgetHealthResult, ExpenseRecord, ExpenseStatus
from budmate_gateway.domain.providers import BudgetProvider, ExpenseProvider
from budmate_gateway.utils.money import sum_money


def default_budget_health(user_id: str) -> BudgetHealthResult:
    """Zero-value snapshot for a user who has not created a budget yet"""
    return BudgetHealthResult(
        user_id=user_id,
        total_expenses=Decimal("0"),
        budget_amount=Decimal("0"),
        percentage_used=0.0,
        is_over_budget=False,
        should_alert=False,
        calculated_at=datetime.now(timezone.utc),
    )


def total_paid_expenses(expenses: List[ExpenseRecord]) -> Decimal:
    """Sum of paid expenses. Pending and expired expenses never count."""
    return sum_money(e.amount for e in expenses if e.status == ExpenseStatus.PAID)


def evaluate_budget_health(
    user_id: str,
    budget_amount: Decimal,
    expenses: List[ExpenseRecord],
    alert_threshold: float | None = None,
) -> BudgetHealthResult:
    """
    Compute the health snapshot for a validated budget balance.

    Two unit conventions coexist on purpose:
    - percentage_used is scaled by 100 (90% -> 90.0)
    - should_alert compares the raw 0-1 ratio against the threshold (0.90)

    Thresholds are inclusive for alerts (exactly 90% alerts) and strict for
    over-budget (spending exactly the balance is not over budget).
    """
    if budget_amount <= 0:
        raise InvalidBudgetError("Budget amount must be greater than zero")

    if alert_threshold is None:
        alert_threshold = settings.budget_alert_threshold

    total_expenses = total_paid_expenses(expenses)
    ratio = total_expenses / budget_amount

    return BudgetHealthResult(
        user_id=user_id,
        total_expenses=total_expenses,
        budget_amount=budget_amount,
        percentage_used=float(ratio * 100),
        is_over_budget=total_expenses > budget_amount,
        should_alert=ratio >= Decimal(str(alert_threshold)),
        calculated_at=datetime.now(timezone.utc),
    )


class BudgetHealthCalculator:
    """
    Joins a user's budget and expense history into a BudgetHealthResult.

    Stateless apart from its providers; safe to call concurrently. Budgets are
    fetched before expenses so an unusable budget fails without the second fetch.
    """

    def __init__(
        self,
        budget_provider: BudgetProvider,
        expense_provider: ExpenseProvider,
        alert_threshold: float | None = None,
    ):
        self.budget_provider = budget_provider
        self.expense_provider = expense_provider
        self.alert_threshold = (
            settings.budget_alert_threshold if alert_threshold is None else alert_threshold
        )

    async def calculate_budget_health(self, user_id: str) -> BudgetHealthResult:
        """
        Calculate budget health over the user's full expense history.

        Raises:
            DatabaseError: A provider failed (same message), the budget
                balance is zero or negative (InvalidBudgetError), or anything
                else went wrong while combining the data
        """
        try:
            return await self._calculate(user_id)
        except DatabaseError:
            raise
        except Exception as e:
            logging.error(
                f"Unexpected error calculating budget health: {e}",
                extra={"user_id": user_id, "step": "budget_health"},
                exc_info=True,
            )
            raise DatabaseError(f"Failed to calculate budget health: {e}") from e

    async def _calculate(self, user_id: str) -> BudgetHealthResult:
        log_extra = {"user_id": user_id, "step": "budget_health"}
        logging.info("Calculating budget health", extra=log_extra)

        try:
            budgets = await self.budget_provider.get_all(user_id)
        except ProviderError as e:
            logging.error(f"Failed to get budgets: {e}", extra=log_extra)
            raise DatabaseError(str(e)) from e

        if not budgets:
            logging.info("No budget found, returning default health", extra=log_extra)
            return default_budget_health(user_id)

        # One budget per user is enforced by storage keying on user id; extras are ignored
        budget = budgets[0]

        if budget.amount <= 0:
            error = "Budget amount must be greater than zero"
            logging.error(error, extra={**log_extra, "budget_amount": str(budget.amount)})
            raise InvalidBudgetError(error)

        try:
            expenses = await self.expense_provider.get_all(user_id)
        except ProviderError as e:
            logging.error(f"Failed to get expenses: {e}", extra=log_extra)
            raise DatabaseError(str(e)) from e

        result = evaluate_budget_health(user_id, budget.amount, expenses, self.alert_threshold)

        logging.info(
            f"Budget health calculated - {result.percentage_used:.1f}% used, alert: {result.should_alert}",
            extra=log_extra,
        )
        return result

    async def check_alert_triggers(self, user_id: str) -> bool:
        """Whether the user's spending reached the alert threshold. Raises DatabaseError."""
        logging.info("Checking alert triggers", extra={"user_id": user_id, "step": "alert_check"})

        result = await self.calculate_budget_health(user_id)

        logging.info(
            f"Alert check result: {result.should_alert}",
            extra={"user_id": user_id, "step": "alert_check"},
        )
        return result.should_alert
