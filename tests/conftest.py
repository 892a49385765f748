"""Pytest fixtures for testing"""

import os

# Point the service at SQLite before any module builds the engine
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from budmate_gateway.api.main import create_app
from budmate_gateway.infrastructure.database.models import Base
from budmate_gateway.infrastructure.database.session import get_db
from budmate_gateway.domain.models import BudgetRecord, ExpenseRecord, ExpenseStatus


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def app(db: Session):
    """FastAPI app bound to the test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture
def client(app) -> TestClient:
    """Create FastAPI test client with test database"""
    return TestClient(app)


@pytest.fixture
def make_budget():
    """Factory for budget records"""

    def _make(amount, user_id: str = "user_1") -> BudgetRecord:
        now = datetime.now(timezone.utc)
        return BudgetRecord(
            id=user_id,
            user_id=user_id,
            amount=Decimal(str(amount)),
            created_at=now,
            updated_at=now,
        )

    return _make


@pytest.fixture
def make_expense():
    """Factory for expense records, paid and due today unless told otherwise"""
    counter = {"n": 0}

    def _make(
        amount,
        status: ExpenseStatus = ExpenseStatus.PAID,
        user_id: str = "user_1",
        due_date: date | None = None,
        category_id: str = "food",
    ) -> ExpenseRecord:
        counter["n"] += 1
        return ExpenseRecord(
            id=f"exp_{counter['n']}",
            user_id=user_id,
            amount=Decimal(str(amount)),
            category_id=category_id,
            date=due_date or date.today(),
            status=status,
        )

    return _make


@pytest.fixture
def yesterday() -> date:
    return date.today() - timedelta(days=1)
