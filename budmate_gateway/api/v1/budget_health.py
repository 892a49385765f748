"""GET /v1/budget-health - spending vs. budget balance snapshot and alert check"""

import time
from fastapi import APIRouter, Depends, Query, Request

from budmate_gateway.api.v1.schemas import AlertResponse, BudgetHealthResponse
from budmate_gateway.api.dependencies import get_budget_health_calculator, get_request_id
from budmate_gateway.config import settings
from budmate_gateway.domain.budget_health import BudgetHealthCalculator
from budmate_gateway.infrastructure.observability.metrics import record_budget_health
from budmate_gateway.infrastructure.observability.logging import log_budget_health

router = APIRouter()


@router.get("/budget-health", response_model=BudgetHealthResponse)
async def get_budget_health(
    request: Request,
    user_id: str = Query(..., min_length=1, description="User identifier"),
    calculator: BudgetHealthCalculator = Depends(get_budget_health_calculator),
):
    """
    Compare the user's paid expenses with their budget balance.

    A user without a budget gets an all-zero snapshot rather than an error.
    A zero or negative balance answers 422, unreachable budget data 503.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    # DatabaseError is mapped to 422/503 by the app's exception handlers
    result = await calculator.calculate_budget_health(user_id)

    # A stored budget is always positive, so zero means the default snapshot
    record_budget_health(result, has_budget=result.budget_amount > 0)
    log_budget_health(request_id, result, (time.time() - start_time) * 1000)

    return BudgetHealthResponse(
        user_id=result.user_id,
        total_expenses=float(result.total_expenses),
        budget_amount=float(result.budget_amount),
        remaining_amount=float(result.remaining_amount),
        percentage_used=result.percentage_used,
        is_over_budget=result.is_over_budget,
        should_alert=result.should_alert,
        currency=settings.currency_code,
        calculated_at=result.calculated_at,
    )


@router.get("/budget-health/alerts", response_model=AlertResponse)
async def get_alert_status(
    user_id: str = Query(..., min_length=1, description="User identifier"),
    calculator: BudgetHealthCalculator = Depends(get_budget_health_calculator),
):
    """Whether the user has spent at least the alert threshold of their balance"""
    should_alert = await calculator.check_alert_triggers(user_id)

    return AlertResponse(user_id=user_id, should_alert=should_alert)
