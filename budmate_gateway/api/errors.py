"""Domain exceptions mapped to HTTP responses, registered on the app"""

import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from budmate_gateway.domain.exceptions import (
    DatabaseError,
    InsufficientBalanceError,
    InvalidAmountError,
    InvalidBudgetError,
    InvalidExpenseStateError,
    LedgerError,
    RecordNotFoundError,
)
from budmate_gateway.infrastructure.observability.metrics import record_budget_health_failure

LEDGER_ERROR_STATUS = {
    RecordNotFoundError: 404,
    InsufficientBalanceError: 409,
    InvalidExpenseStateError: 409,
    InvalidAmountError: 422,
}


def ledger_error_status(e: LedgerError) -> int:
    return LEDGER_ERROR_STATUS.get(type(e), 400)


def database_error_status(e: DatabaseError) -> int:
    """Unusable budget data is the client's problem, anything else is ours"""
    return 422 if isinstance(e, InvalidBudgetError) else 503


async def handle_ledger_error(request: Request, exc: LedgerError) -> JSONResponse:
    request_id = getattr(request.state, "request_id", "unknown")
    logging.warning(f"Ledger operation rejected: {exc}", extra={"request_id": request_id})
    return JSONResponse(status_code=ledger_error_status(exc), content={"detail": str(exc)})


async def handle_database_error(request: Request, exc: DatabaseError) -> JSONResponse:
    request_id = getattr(request.state, "request_id", "unknown")
    status_code = database_error_status(exc)
    record_budget_health_failure()

    if status_code == 422:
        logging.warning(f"Invalid budget: {exc}", extra={"request_id": request_id})
    else:
        logging.error(f"Budget data unavailable: {exc}", extra={"request_id": request_id})

    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(LedgerError, handle_ledger_error)
    app.add_exception_handler(DatabaseError, handle_database_error)
