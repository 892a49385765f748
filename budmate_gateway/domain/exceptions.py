"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ProviderError(DomainException):
    """A budget or expense provider could not return data"""

    pass


class DatabaseError(DomainException):
    """Budget health could not be calculated from the stored data"""

    pass


class InvalidBudgetError(DatabaseError):
    """Stored budget balance cannot be used for a health calculation"""

    pass


class LedgerError(DomainException):
    """A budget or expense mutation was rejected"""

    pass


class InvalidAmountError(LedgerError):
    """Money amount is zero, negative or otherwise unusable"""

    pass


class InsufficientBalanceError(LedgerError):
    """Operation would take the budget balance below zero"""

    pass


class InvalidExpenseStateError(LedgerError):
    """Expense is not in a status that allows the operation"""

    pass


class RecordNotFoundError(LedgerError):
    """Budget or expense does not exist"""

    pass
