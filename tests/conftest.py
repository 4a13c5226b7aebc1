"""Pytest fixtures for testing"""

import os

# Settings are read at import time; the signing secret has no default
os.environ.setdefault("JWT_SECRET", "test-signing-secret")
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from datetime import date, datetime
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from lending_gateway.api.main import create_app
from lending_gateway.infrastructure.database.models import Base
from lending_gateway.infrastructure.database.session import get_db
from lending_gateway.domain.models import Installment, LoanRecord


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

BORROWER = {
    "first_name": "Lineo",
    "last_name": "Mokoena",
    "email": "lineo@example.com",
    "phone": "+26655512345",
    "password": "Str0ng!Pass",
    "employment_status": "Employed",
    "annual_income": 240000,
}

STAFF = {
    "full_name": "Thabo Letsie",
    "email": "thabo@lender.example",
    "password": "Staff!Pass1",
    "employee_id": "CM001",
}

APPLICATION = {
    "loan_amount": 12000,
    "loan_purpose": "Home",
    "loan_term": 12,
    "monthly_income": 20000,
    "employment_status": "Employed",
}


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
def borrower_token(client: TestClient) -> str:
    response = client.post("/v1/auth/signup", json=BORROWER)
    assert response.status_code == 201, response.text
    return response.json()["token"]


@pytest.fixture
def borrower_headers(borrower_token: str) -> dict:
    return {"Authorization": f"Bearer {borrower_token}"}


@pytest.fixture
def staff_headers(client: TestClient) -> dict:
    response = client.post("/v1/auth/admin/signup", json=STAFF)
    assert response.status_code == 201, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


def _make_loan(
    loan_id: str = "loan-1",
    status: str = "Active",
    loan_amount: float = 5000,
    loan_purpose: str = "Home",
    loan_type: str = "Term",
    credit_limit: float = 0,
    payment_history: list | None = None,
    loan_term: int = 12,
    interest_rate: float = 8.5,
    schedule: list | None = None,
) -> LoanRecord:
    """Loan snapshot for scoring tests"""
    return LoanRecord(
        loan_id=loan_id,
        status=status,
        loan_amount=loan_amount,
        loan_purpose=loan_purpose,
        loan_term=loan_term,
        interest_rate=interest_rate,
        lender_name="Standard Bank",
        loan_type=loan_type,
        credit_limit=credit_limit,
        remaining_term=loan_term,
        payment_history=payment_history or [],
        repayment_schedule=schedule or [],
        created_at=datetime(2026, 1, 15, 9, 30),
    )


@pytest.fixture
def loan_factory():
    """Build LoanRecord snapshots with sensible defaults"""
    return _make_loan


@pytest.fixture
def sample_schedule() -> list[Installment]:
    """Three monthly installments, first one already paid"""
    return [
        Installment(due_date=date(2026, 2, 15), amount=100.0, status="Paid", paid_date=date(2026, 2, 10)),
        Installment(due_date=date(2026, 3, 15), amount=100.0),
        Installment(due_date=date(2026, 4, 15), amount=100.0),
    ]


@pytest.fixture
def application_payload() -> dict:
    """Valid body for POST /v1/loans"""
    return dict(APPLICATION)


@pytest.fixture
def borrower_payload() -> dict:
    """Valid body for POST /v1/auth/signup"""
    return dict(BORROWER)
