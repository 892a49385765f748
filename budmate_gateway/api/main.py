"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from budmate_gateway.api.errors import register_exception_handlers
from budmate_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from budmate_gateway.api.v1 import budget_health, budgets, expenses
from budmate_gateway.infrastructure.observability.logging import setup_logging
from budmate_gateway.config import settings

VERSION = "0.1.0"

setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """
    Build the gateway: budget health reads plus the budget/expense ledger.

    Rejected ledger operations and budget data failures are raised by the
    routes as domain exceptions and turned into HTTP errors here.
    """
    app = FastAPI(
        title="BudMate Gateway",
        description="Budget, expense and budget health service",
        version=VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Last added runs first, so every response (errors included) gets a request id
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    @app.get("/health")
    def health_check():
        return {
            "status": "ok",
            "service": settings.service_name,
            "version": VERSION,
            "provider_backend": settings.provider_backend,
            "currency": settings.currency_code,
            "alert_threshold": settings.budget_alert_threshold,
        }

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(budget_health.router, prefix="/v1", tags=["budget-health"])
    app.include_router(budgets.router, prefix="/v1", tags=["budgets"])
    app.include_router(expenses.router, prefix="/v1", tags=["expenses"])

    return app


app = create_app()
