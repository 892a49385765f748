"""Unit tests for the document store client and providers"""

import httpx
import pytest
from datetime import date
from decimal import Decimal
from budmate_gateway.domain.budget_health import BudgetHealthCalculator
from budmate_gateway.domain.exceptions import DatabaseError, ProviderError
from budmate_gateway.domain.models import ExpenseStatus
from budmate_gateway.infrastructure.clients.document_store import (
    DocumentStoreBudgetProvider,
    DocumentStoreClient,
    DocumentStoreExpenseProvider,
    parse_expense_document,
)

BUDGET_DOCUMENT = {
    "id": "user_1",
    "fields": {
        "userId": "user_1",
        "amount": 1500.5,
        "createdAt": "2026-01-01T08:00:00+00:00",
        "updatedAt": "2026-02-01T08:00:00+00:00",
    },
}

EXPENSE_DOCUMENTS = [
    {
        "id": "exp_1",
        "fields": {
            "userId": "user_1",
            "amount": 19.99,
            "categoryId": "food",
            "date": "2026-02-03T00:00:00+00:00",
            "status": "PAID",
        },
    },
    {
        "id": "exp_2",
        "fields": {
            "userId": "user_1",
            "amount": 250,
            "categoryId": "transportation",
            "date": "2026-02-10",
            "status": "pending",
        },
    },
]


def client_returning(handler) -> DocumentStoreClient:
    return DocumentStoreClient(
        base_url="http://store.test",
        timeout=1.0,
        api_key="secret",
        transport=httpx.MockTransport(handler),
    )


async def test_budget_provider_parses_documents():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["user"] = request.url.params["userId"]
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json={"documents": [BUDGET_DOCUMENT]})

    budgets = await DocumentStoreBudgetProvider(client_returning(handler)).get_all("user_1")

    assert seen == {"path": "/v1/collections/budgets/documents", "user": "user_1", "auth": "Bearer secret"}
    assert len(budgets) == 1
    assert budgets[0].id == "user_1"
    assert budgets[0].amount == Decimal("1500.50")


async def test_expense_provider_parses_documents():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"documents": EXPENSE_DOCUMENTS})

    expenses = await DocumentStoreExpenseProvider(client_returning(handler)).get_all("user_1")

    assert [e.status for e in expenses] == [ExpenseStatus.PAID, ExpenseStatus.PENDING]
    assert expenses[0].amount == Decimal("19.99")
    assert expenses[0].date == date(2026, 2, 3)
    assert expenses[1].category_id == "transportation"


def test_legacy_expense_without_status_counts_as_paid():
    doc = {"id": "old", "fields": {"userId": "u", "amount": 5, "categoryId": "food", "date": "2025-12-01"}}

    assert parse_expense_document(doc).status == ExpenseStatus.PAID


async def test_unknown_status_is_provider_error():
    bad = {"id": "x", "fields": {**EXPENSE_DOCUMENTS[0]["fields"], "status": "refunded"}}

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"documents": [bad]})

    with pytest.raises(ProviderError, match="Invalid expense data"):
        await DocumentStoreExpenseProvider(client_returning(handler)).get_all("user_1")


async def test_http_error_is_provider_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"error": "boom"})

    with pytest.raises(ProviderError, match="500"):
        await DocumentStoreBudgetProvider(client_returning(handler)).get_all("user_1")


async def test_timeout_is_provider_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(ProviderError, match="timeout"):
        await DocumentStoreExpenseProvider(client_returning(handler)).get_all("user_1")


async def test_missing_fields_is_provider_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"documents": [{"id": "user_1", "fields": {"userId": "user_1"}}]})

    with pytest.raises(ProviderError, match="Invalid budget data"):
        await DocumentStoreBudgetProvider(client_returning(handler)).get_all("user_1")


@pytest.mark.parametrize("payload", [[], {"documents": {}}, {"documents": "none"}])
async def test_malformed_payload_is_provider_error(payload):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=payload)

    with pytest.raises(ProviderError, match="Invalid response from document store"):
        await client_returning(handler).list_documents("budgets", "user_1")


async def test_malformed_payload_surfaces_as_database_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[])

    client = client_returning(handler)
    calculator = BudgetHealthCalculator(
        budget_provider=DocumentStoreBudgetProvider(client),
        expense_provider=DocumentStoreExpenseProvider(client),
    )

    with pytest.raises(DatabaseError, match="Invalid response from document store"):
        await calculator.calculate_budget_health("user_1")
