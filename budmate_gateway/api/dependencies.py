"""Dependency injection for FastAPI endpoints"""

from typing import Callable, Generator
from fastapi import Request
from budmate_gateway.config import settings
from budmate_gateway.domain.budget_health import BudgetHealthCalculator
from budmate_gateway.infrastructure.clients.document_store import (
    DocumentStoreBudgetProvider,
    DocumentStoreClient,
    DocumentStoreExpenseProvider,
)
from budmate_gateway.infrastructure.database.providers import SqlBudgetProvider, SqlExpenseProvider
from budmate_gateway.infrastructure.database.session import get_db


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_document_store_client() -> DocumentStoreClient:
    """Provide document store client instance"""
    return DocumentStoreClient()


def _resolve(request: Request, dependency: Callable) -> Callable:
    """Dependency resolved by hand, honouring app.dependency_overrides"""
    return request.app.dependency_overrides.get(dependency, dependency)


def get_budget_health_calculator(request: Request) -> Generator[BudgetHealthCalculator, None, None]:
    """
    Wire the calculator to the configured provider backend.

    Only the backend in use is built: the document store backend never
    opens a database session.
    """
    if settings.provider_backend == "document_store":
        document_store = _resolve(request, get_document_store_client)()
        yield BudgetHealthCalculator(
            budget_provider=DocumentStoreBudgetProvider(document_store),
            expense_provider=DocumentStoreExpenseProvider(document_store),
        )
        return

    sessions = _resolve(request, get_db)()
    db = next(sessions)
    try:
        yield BudgetHealthCalculator(
            budget_provider=SqlBudgetProvider(db),
            expense_provider=SqlExpenseProvider(db),
        )
    finally:
        sessions.close()
