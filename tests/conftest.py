"""Pytest fixtures for testing"""

import os

# Must be set before the application modules build their engine
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from datetime import date
from typing import Callable, Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from cardfund_gateway.api.dependencies import get_simulation_policy, get_today
from cardfund_gateway.api.main import create_app
from cardfund_gateway.domain.installments import generate_installment_plan
from cardfund_gateway.domain.models import Expense, Fund, SimulationPolicy
from cardfund_gateway.infrastructure.database.models import Base
from cardfund_gateway.infrastructure.database.session import get_db

TODAY = date(2025, 5, 15)

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
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database and a fixed calendar date"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_today] = lambda: TODAY
    app.dependency_overrides[get_simulation_policy] = lambda: SimulationPolicy()
    return TestClient(app)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def fund() -> Fund:
    """Fund saving 10000 a month with 25000 accumulated"""
    return Fund(
        user_id="user_1",
        monthly_contribution=10000,
        accumulated_amount=25000,
        last_update_date=TODAY,
    )


@pytest.fixture
def make_expense() -> Callable[..., Expense]:
    """Factory for committed expenses with a generated schedule"""

    def _make(
        amount: float,
        total_installments: int,
        purchase_date: date,
        is_simulation: bool = False,
        user_id: str = "user_1",
    ) -> Expense:
        return Expense(
            user_id=user_id,
            amount=amount,
            total_installments=total_installments,
            purchase_date=purchase_date,
            is_simulation=is_simulation,
            installments=generate_installment_plan(amount, total_installments, purchase_date),
        )

    return _make
