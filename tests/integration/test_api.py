"""Integration tests for API endpoints"""

import pytest
from datetime import date
from fastapi.testclient import TestClient
from dateutil.relativedelta import relativedelta

pytestmark = pytest.mark.integration


def test_health_endpoint(client: TestClient):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient):
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "lending_credit_report" in response.text


def test_request_id_echoed(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "trace-42"})
    assert response.headers["X-Request-ID"] == "trace-42"
    assert client.get("/health").headers["X-Request-ID"]


def test_signup_and_login(client: TestClient, borrower_token: str):
    response = client.post("/v1/auth/login", json={"email": "LINEO@example.com", "password": "Str0ng!Pass"})
    assert response.status_code == 200
    data = response.json()
    assert data["token"]
    assert data["user"]["email"] == "lineo@example.com"
    assert data["user"]["role"] == "user"


def test_signup_rejects_weak_password_and_duplicates(client: TestClient, borrower_token: str, borrower_payload: dict):
    weak = dict(borrower_payload, email="other@example.com", phone="+26655500000", password="weakpassword")
    assert client.post("/v1/auth/signup", json=weak).status_code == 400

    duplicate = dict(borrower_payload, phone="+26655599999")
    assert client.post("/v1/auth/signup", json=duplicate).status_code == 409


def test_login_wrong_password(client: TestClient, borrower_token: str):
    response = client.post("/v1/auth/login", json={"email": "lineo@example.com", "password": "Wrong!Pass1"})
    assert response.status_code == 401


def test_admin_signup_requires_allowlisted_employee_id(client: TestClient):
    response = client.post(
        "/v1/auth/admin/signup",
        json={"full_name": "Eve", "email": "eve@lender.example", "password": "x", "employee_id": "ZZ999"},
    )
    assert response.status_code == 401


def test_admin_login(client: TestClient, staff_headers: dict):
    response = client.post("/v1/auth/admin/login", json={"email": "thabo@lender.example", "password": "Staff!Pass1"})
    assert response.status_code == 200
    assert response.json()["user"]["role"] == "admin"

    response = client.post("/v1/auth/admin/login", json={"email": "thabo@lender.example", "password": "nope"})
    assert response.status_code == 401


def test_loan_routes_require_token(client: TestClient):
    assert client.get("/v1/loans/my-loans").status_code == 401
    bad = {"Authorization": "Bearer not-a-jwt"}
    assert client.get("/v1/loans/credit-report", headers=bad).status_code == 401


def test_role_separation(client: TestClient, borrower_headers: dict, staff_headers: dict):
    assert client.get("/v1/admin/loans", headers=borrower_headers).status_code == 403
    assert client.get("/v1/loans/my-loans", headers=staff_headers).status_code == 403


def test_apply_loan(client: TestClient, borrower_headers: dict, application_payload: dict):
    response = client.post("/v1/loans", json=application_payload, headers=borrower_headers)

    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "Pending"
    assert data["interest_rate"] == 8.5
    assert data["lender_name"] == "General Application"
    assert data["monthly_payment"] == pytest.approx(1046.64)
    assert data["total_repayment"] == pytest.approx(12559.65)


def test_apply_loan_premium_lender_rate(client: TestClient, borrower_headers: dict, application_payload: dict):
    application_payload.update(lender_name="Premium Finance", interest_rate=15)
    response = client.post("/v1/loans", json=application_payload, headers=borrower_headers)

    assert response.status_code == 201
    assert response.json()["interest_rate"] == 6.5


@pytest.mark.parametrize(
    "overrides",
    [{"loan_amount": 500}, {"loan_purpose": "Holiday"}, {"loan_term": 61}, {"employment_status": "pirate"}],
)
def test_apply_loan_validation_errors(client: TestClient, borrower_headers: dict, application_payload: dict, overrides):
    application_payload.update(overrides)
    response = client.post("/v1/loans", json=application_payload, headers=borrower_headers)
    assert response.status_code == 400


def test_get_loan_detail(client: TestClient, borrower_headers: dict, application_payload: dict):
    loan_id = client.post("/v1/loans", json=application_payload, headers=borrower_headers).json()["id"]

    response = client.get(f"/v1/loans/{loan_id}", headers=borrower_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == loan_id
    assert data["loan_term"] == 12
    assert data["remaining_term"] == 12
    assert len(data["repayment_schedule"]) == 12
    assert data["payment_history"] == []
    first_due = date.today() + relativedelta(months=1)
    assert data["next_payment"]["due_date"] == first_due.isoformat()
    assert data["next_payment"]["amount"] == pytest.approx(1046.64)


def test_get_loan_not_found_and_invalid_id(client: TestClient, borrower_headers: dict):
    fake_uuid = "00000000-0000-0000-0000-000000000000"
    assert client.get(f"/v1/loans/{fake_uuid}", headers=borrower_headers).status_code == 404
    assert client.get("/v1/loans/not-a-uuid", headers=borrower_headers).status_code == 400


def test_get_loan_owned_by_other_user(
    client: TestClient, borrower_headers: dict, application_payload: dict, borrower_payload: dict
):
    loan_id = client.post("/v1/loans", json=application_payload, headers=borrower_headers).json()["id"]
    other = dict(borrower_payload, email="palesa@example.com", phone="+26655500001")
    other_token = client.post("/v1/auth/signup", json=other).json()["token"]

    response = client.get(f"/v1/loans/{loan_id}", headers={"Authorization": f"Bearer {other_token}"})
    assert response.status_code == 404


def test_credit_report_without_loans(client: TestClient, borrower_headers: dict):
    response = client.get("/v1/loans/credit-report", headers=borrower_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["credit_score"] == 0
    assert data["score_range"] == "No Credit History"
    assert data["accounts"] == []
    assert data["credit_utilization"] == "0%"
    assert data["open_accounts"] == 0


def test_credit_report_with_pending_application(client: TestClient, borrower_headers: dict, application_payload: dict):
    client.post("/v1/loans", json=application_payload, headers=borrower_headers)

    data = client.get("/v1/loans/credit-report", headers=borrower_headers).json()

    # Pending, no history, single purpose: 300 + 0 + 110 + 11 + 165
    assert data["credit_score"] == 586
    assert data["score_range"] == "Fair"
    assert data["open_accounts"] == 1
    account = data["accounts"][0]
    assert account["type"] == "Home Loan"
    assert account["payment"] == pytest.approx(1046.64)
    assert account["term"] == "12 months"


def test_my_loans(client: TestClient, borrower_headers: dict, application_payload: dict):
    client.post("/v1/loans", json=application_payload, headers=borrower_headers)
    application_payload.update(loan_purpose="Car", loan_amount=5000, loan_term=24)
    client.post("/v1/loans", json=application_payload, headers=borrower_headers)

    response = client.get("/v1/loans/my-loans", headers=borrower_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["count"] == 2
    assert {loan["loan_purpose"] for loan in data["loans"]} == {"Home", "Car"}
    assert all(loan["payment_percentage"] == 0 for loan in data["loans"])
    assert all(loan["next_payment_date"] is not None for loan in data["loans"])


def test_payment_history_empty(client: TestClient, borrower_headers: dict):
    response = client.get("/v1/payments/history", headers=borrower_headers)
    assert response.status_code == 200
    assert response.json() == {"count": 0, "payments": []}
