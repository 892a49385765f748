"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
from datetime import date, datetime
from decimal import Decimal
from typing import List


class BudgetHealthResponse(BaseModel):
    """Response for GET /v1/budget-health"""

    user_id: str
    total_expenses: float
    budget_amount: float
    remaining_amount: float
    percentage_used: float = Field(..., description="Spend as a percentage of the balance (0-100+)")
    is_over_budget: bool
    should_alert: bool
    currency: str
    calculated_at: datetime


class AlertResponse(BaseModel):
    """Response for GET /v1/budget-health/alerts"""

    user_id: str
    should_alert: bool


class DepositRequest(BaseModel):
    """Request body for POST /v1/budgets/deposit (negative amount withdraws)"""

    user_id: str = Field(..., min_length=1, description="User identifier")
    amount: Decimal = Field(..., max_digits=14, decimal_places=2)


class BudgetSchema(BaseModel):
    budget_id: str
    user_id: str
    amount: float
    created_at: datetime
    updated_at: datetime


class BudgetListResponse(BaseModel):
    """Response for GET /v1/budgets"""

    user_id: str
    budgets: List[BudgetSchema]


class ExpenseRequest(BaseModel):
    """Request body for POST /v1/expenses"""

    user_id: str = Field(..., min_length=1, description="User identifier")
    amount: Decimal = Field(..., gt=0, max_digits=14, decimal_places=2)
    category_id: str = Field(..., min_length=1)
    due_date: date


class ExpenseSchema(BaseModel):
    expense_id: str
    user_id: str
    amount: float
    category_id: str
    due_date: date
    status: str


class ExpenseListResponse(BaseModel):
    """Response for GET /v1/expenses"""

    user_id: str
    expenses: List[ExpenseSchema]


class PaymentResponse(BaseModel):
    """Response for POST /v1/expenses/{expense_id}/pay"""

    expense: ExpenseSchema
    remaining_budget: float


class ExpireResponse(BaseModel):
    """Response for POST /v1/expenses/expire"""

    user_id: str
    expired_count: int
