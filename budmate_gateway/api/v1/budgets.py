"""/v1/budgets - read the running balance and deposit into it"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from budmate_gateway.api.v1.schemas import BudgetListResponse, BudgetSchema, DepositRequest
from budmate_gateway.api.dependencies import get_request_id
from budmate_gateway.infrastructure.database.models import Budget
from budmate_gateway.infrastructure.database.session import get_db
from budmate_gateway.infrastructure.database.repositories import (
    BudgetRepository,
    ExpenseRepository,
    to_budget_record,
    to_expense_record,
)
from budmate_gateway.domain.exceptions import LedgerError
from budmate_gateway.domain.ledger import apply_deposit, available_balance
from budmate_gateway.domain.models import ExpenseStatus
from budmate_gateway.infrastructure.observability.metrics import ledger_operation_counter
from budmate_gateway.infrastructure.observability.logging import log_ledger_operation

router = APIRouter()


def to_budget_schema(budget: Budget) -> BudgetSchema:
    return BudgetSchema(
        budget_id=budget.id,
        user_id=budget.user_id,
        amount=float(budget.amount),
        created_at=budget.created_at,
        updated_at=budget.updated_at,
    )


@router.get("/budgets", response_model=BudgetListResponse)
def get_budgets(
    user_id: str = Query(..., min_length=1, description="User identifier"),
    db: Session = Depends(get_db),
):
    """Return the user's budget (an empty list before the first deposit)"""
    budgets = BudgetRepository(db).get_all(user_id)
    return BudgetListResponse(user_id=user_id, budgets=[to_budget_schema(b) for b in budgets])


@router.post("/budgets/deposit", response_model=BudgetSchema)
def deposit(
    request_body: DepositRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """
    Add to the user's budget balance, creating the budget on first deposit.

    Negative amounts withdraw, but never more than the available balance
    (stored balance minus paid expenses).
    """
    request_id = get_request_id(request)
    budget_repo = BudgetRepository(db)

    try:
        existing = budget_repo.get_by_user(request_body.user_id)
        current = to_budget_record(existing) if existing else None
        paid = ExpenseRepository(db).get_all(request_body.user_id, status=ExpenseStatus.PAID)

        budget = apply_deposit(
            current,
            request_body.user_id,
            request_body.amount,
            available=available_balance(current, [to_expense_record(e) for e in paid]),
        )
        db_budget = budget_repo.save(budget)
        db.commit()

    except LedgerError:
        db.rollback()
        raise

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    ledger_operation_counter.labels(operation="deposit").inc()
    log_ledger_operation(request_id, request_body.user_id, "deposit", request_body.amount)

    return to_budget_schema(db_budget)
