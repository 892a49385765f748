"""Read-only data provider contracts consumed by the budget health calculator"""

from typing import List, Protocol

from budmate_gateway.domain.models import BudgetRecord, ExpenseRecord


class BudgetProvider(Protocol):
    async def get_all(self, user_id: str) -> List[BudgetRecord]:
        """Return every budget record of the user. Raises ProviderError."""
        ...


class ExpenseProvider(Protocol):
    async def get_all(self, user_id: str) -> List[ExpenseRecord]:
        """Return the user's complete expense history. Raises ProviderError."""
        ...
