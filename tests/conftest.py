"""Pytest fixtures for testing"""

import pytest
from datetime import date, timedelta
from typing import Generator, List
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from finsight.api.main import create_app
from finsight.infrastructure.database.models import Base
from finsight.infrastructure.database.session import get_db
from finsight.domain.models import Budget, Goal, Transaction


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Fixed reference date so 30-day windows and month labels are deterministic
TODAY = date(2025, 6, 15)


@pytest.fixture
def today() -> date:
    return TODAY


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
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def sample_transactions() -> List[Transaction]:
    """Three months of salary, rent and groceries ending before TODAY"""
    transactions = []
    for month in (3, 4, 5):
        transactions.append(
            Transaction(
                id=f"salary_{month}",
                type="income",
                amount=4000.0,
                category="Salary",
                date=date(2025, month, 1),
                description="Monthly Salary",
            )
        )
        transactions.append(
            Transaction(
                id=f"rent_{month}",
                type="expense",
                amount=1200.0,
                category="Bills & Utilities",
                date=date(2025, month, 2),
                description="Monthly Rent",
            )
        )
        for week in range(4):
            transactions.append(
                Transaction(
                    id=f"grocery_{month}_{week}",
                    type="expense",
                    amount=75.0,
                    category="Food & Dining",
                    date=date(2025, month, 3) + timedelta(days=week * 7),
                    description="Grocery Store",
                )
            )
    return transactions


@pytest.fixture
def sample_budgets() -> List[Budget]:
    return [
        Budget(category="Food & Dining", limit=400.0, id="budget_food"),
        Budget(category="Bills & Utilities", limit=1500.0, id="budget_bills"),
    ]


@pytest.fixture
def sample_goals() -> List[Goal]:
    return [
        Goal(
            id="goal_emergency",
            title="Emergency Fund",
            target_amount=10000.0,
            current_amount=6500.0,
            deadline=date(2025, 12, 31),
        ),
    ]
