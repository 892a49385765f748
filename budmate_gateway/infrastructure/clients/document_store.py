"""Cloud document store HTTP client for reading budgets and expenses"""

import httpx
from datetime import date, datetime
from typing import Any, Dict, List
from budmate_gateway.domain.models import BudgetRecord, ExpenseRecord, ExpenseStatus
from budmate_gateway.domain.exceptions import ProviderError
from budmate_gateway.infrastructure.observability.metrics import provider_fetch_failures_counter
from budmate_gateway.utils.money import to_money
from budmate_gateway.config import settings


def parse_budget_document(doc: Dict[str, Any]) -> BudgetRecord:
    fields = doc["fields"]
    return BudgetRecord(
        id=doc["id"],
        user_id=fields["userId"],
        amount=to_money(fields["amount"]),
        created_at=datetime.fromisoformat(fields["createdAt"]),
        updated_at=datetime.fromisoformat(fields["updatedAt"]),
    )


def parse_expense_document(doc: Dict[str, Any]) -> ExpenseRecord:
    fields = doc["fields"]
    status = fields.get("status")
    return ExpenseRecord(
        id=doc["id"],
        user_id=fields["userId"],
        amount=to_money(fields["amount"]),
        category_id=fields["categoryId"],
        date=date.fromisoformat(fields["date"][:10]),
        # Documents written before statuses existed were always paid
        status=ExpenseStatus.parse(status) if status is not None else ExpenseStatus.PAID,
    )


class DocumentStoreClient:
    """Client for the remote document store's collection query API"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        api_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.document_store_base
        self.timeout = timeout or settings.http_timeout_seconds
        self.api_key = api_key or settings.document_store_api_key
        self.transport = transport

    async def list_documents(self, collection: str, user_id: str) -> List[Dict[str, Any]]:
        """
        Fetch every document in a collection owned by the user.

        Raises:
            ProviderError: On timeout, HTTP errors, or invalid response
        """
        headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.get(
                    f"{self.base_url}/v1/collections/{collection}/documents",
                    params={"userId": user_id},
                    headers=headers,
                )
                response.raise_for_status()
                payload = response.json()
                if not isinstance(payload, dict):
                    raise ValueError(f"expected an object, got {type(payload).__name__}")
                documents = payload.get("documents", [])
                if not isinstance(documents, list):
                    raise ValueError(f"'documents' must be a list, got {type(documents).__name__}")
                return documents

            except httpx.TimeoutException as e:
                provider_fetch_failures_counter.labels(provider=collection).inc()
                raise ProviderError(f"Document store timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                provider_fetch_failures_counter.labels(provider=collection).inc()
                raise ProviderError(f"Document store error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                provider_fetch_failures_counter.labels(provider=collection).inc()
                raise ProviderError(f"Document store unavailable: {e}") from e
            except ValueError as e:
                provider_fetch_failures_counter.labels(provider=collection).inc()
                raise ProviderError(f"Invalid response from document store: {e}") from e


class DocumentStoreBudgetProvider:
    """Budgets collection, documents keyed by user id"""

    collection = "budgets"

    def __init__(self, client: DocumentStoreClient):
        self.client = client

    async def get_all(self, user_id: str) -> List[BudgetRecord]:
        documents = await self.client.list_documents(self.collection, user_id)
        try:
            return [parse_budget_document(doc) for doc in documents]
        except (KeyError, ValueError, TypeError, ArithmeticError) as e:
            provider_fetch_failures_counter.labels(provider=self.collection).inc()
            raise ProviderError(f"Invalid budget data from document store: {e}") from e


class DocumentStoreExpenseProvider:
    collection = "expenses"

    def __init__(self, client: DocumentStoreClient):
        self.client = client

    async def get_all(self, user_id: str) -> List[ExpenseRecord]:
        documents = await self.client.list_documents(self.collection, user_id)
        try:
            return [parse_expense_document(doc) for doc in documents]
        except (KeyError, ValueError, TypeError, ArithmeticError) as e:
            provider_fetch_failures_counter.labels(provider=self.collection).inc()
            raise ProviderError(f"Invalid expense data from document store: {e}") from e
