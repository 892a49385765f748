"""/v1/expenses - record, list, pay and expire expenses"""

import uuid
import logging
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from budmate_gateway.api.v1.schemas import (
    ExpenseListResponse,
    ExpenseRequest,
    ExpenseSchema,
    ExpireResponse,
    PaymentResponse,
)
from budmate_gateway.api.dependencies import get_request_id
from budmate_gateway.infrastructure.database.models import Expense
from budmate_gateway.infrastructure.database.session import get_db
from budmate_gateway.infrastructure.database.repositories import (
    BudgetRepository,
    ExpenseRepository,
    to_budget_record,
    to_expense_record,
)
from budmate_gateway.domain.exceptions import LedgerError, RecordNotFoundError
from budmate_gateway.domain.ledger import available_balance, expire_overdue, new_expense, settle_expense
from budmate_gateway.domain.models import ExpenseStatus
from budmate_gateway.infrastructure.observability.metrics import ledger_operation_counter
from budmate_gateway.infrastructure.observability.logging import log_ledger_operation

router = APIRouter()


def to_expense_schema(expense: Expense) -> ExpenseSchema:
    return ExpenseSchema(
        expense_id=str(expense.id),
        user_id=expense.user_id,
        amount=float(expense.amount),
        category_id=expense.category_id,
        due_date=expense.date,
        status=expense.status,
    )


@router.post("/expenses", response_model=ExpenseSchema, status_code=201)
def create_expense(
    request_body: ExpenseRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """Schedule a new expense. It stays pending until paid or expired."""
    request_id = get_request_id(request)

    try:
        expense = new_expense(
            request_body.user_id,
            request_body.amount,
            request_body.category_id,
            request_body.due_date,
        )
        db_expense = ExpenseRepository(db).create(expense)
        db.commit()

    except LedgerError:
        db.rollback()
        raise

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    ledger_operation_counter.labels(operation="expense_created").inc()
    log_ledger_operation(request_id, request_body.user_id, "expense_created", expense.amount)

    return to_expense_schema(db_expense)


@router.get("/expenses", response_model=ExpenseListResponse)
def get_expenses(
    user_id: str = Query(..., min_length=1, description="User identifier"),
    status: Optional[ExpenseStatus] = Query(None, description="Filter by lifecycle status"),
    db: Session = Depends(get_db),
):
    """List the user's expenses, latest due date first"""
    expenses = ExpenseRepository(db).get_all(user_id, status=status)
    return ExpenseListResponse(user_id=user_id, expenses=[to_expense_schema(e) for e in expenses])


@router.post("/expenses/{expense_id}/pay", response_model=PaymentResponse)
def pay_expense(
    expense_id: str,
    request: Request,
    db: Session = Depends(get_db),
):
    """
    Mark a pending expense as paid and deduct it from the budget balance.

    Flow:
    1. Load the expense and its owner's budget
    2. Validate status, and the amount against the available balance
       (stored balance minus already paid expenses)
    3. Persist the paid status and the new balance in one transaction
    """
    request_id = get_request_id(request)

    try:
        expense_uuid = uuid.UUID(expense_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid expense ID format")

    expense_repo = ExpenseRepository(db)
    budget_repo = BudgetRepository(db)

    try:
        db_expense = expense_repo.get_by_id(expense_uuid)
        if db_expense is None:
            raise RecordNotFoundError(f"Expense {expense_id} not found")

        db_budget = budget_repo.get_by_user(db_expense.user_id)
        current = to_budget_record(db_budget) if db_budget else None
        already_paid = expense_repo.get_all(db_expense.user_id, status=ExpenseStatus.PAID)

        paid, budget = settle_expense(
            to_expense_record(db_expense),
            current,
            available=available_balance(current, [to_expense_record(e) for e in already_paid]),
        )

        db_expense = expense_repo.update_status(expense_uuid, paid.status)
        db_budget = budget_repo.save(budget)
        db.commit()

    except LedgerError:
        db.rollback()
        raise

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    ledger_operation_counter.labels(operation="expense_paid").inc()
    log_ledger_operation(request_id, paid.user_id, "expense_paid", paid.amount)

    return PaymentResponse(
        expense=to_expense_schema(db_expense),
        remaining_budget=float(db_budget.amount),
    )


@router.post("/expenses/expire", response_model=ExpireResponse)
def expire_expenses(
    request: Request,
    user_id: str = Query(..., min_length=1, description="User identifier"),
    today: Optional[date] = Query(None, description="Reference date, defaults to the server's today"),
    db: Session = Depends(get_db),
):
    """Expire the user's pending expenses whose due date has passed"""
    request_id = get_request_id(request)
    expense_repo = ExpenseRepository(db)

    try:
        pending = [to_expense_record(e) for e in expense_repo.get_all(user_id, status=ExpenseStatus.PENDING)]
        expired = expire_overdue(pending, today)

        for expense in expired:
            expense_repo.update_status(uuid.UUID(expense.id), expense.status)
        db.commit()

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    if expired:
        ledger_operation_counter.labels(operation="expense_expired").inc(len(expired))
        logging.info(
            f"Expired {len(expired)} overdue expenses",
            extra={"request_id": request_id, "user_id": user_id, "step": "expense_expired"},
        )

    return ExpireResponse(user_id=user_id, expired_count=len(expired))
