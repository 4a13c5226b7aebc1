"""Integration tests for LoanService against the test database"""

import uuid
import pytest
from datetime import date
from sqlalchemy.orm import Session
from lending_gateway.domain.exceptions import NotFoundError, ValidationError
from lending_gateway.domain.validation import validate_loan_application
from lending_gateway.services.auth_service import AuthService
from lending_gateway.services.loan_service import LoanService

pytestmark = pytest.mark.integration

START = date(2026, 1, 31)


@pytest.fixture
def borrower_id(db: Session, borrower_payload: dict) -> uuid.UUID:
    user, _ = AuthService(db).register_user(**borrower_payload)
    return user.id


@pytest.fixture
def service(db: Session) -> LoanService:
    return LoanService(db)


def _application(**overrides):
    fields = dict(loan_amount=12000, loan_purpose="Home", loan_term=12, monthly_income=20000, employment_status="Employed")
    fields.update(overrides)
    return validate_loan_application(**fields)


def test_apply_loan_persists_schedule(service: LoanService, borrower_id):
    detail = service.apply_loan(borrower_id, _application(), today=START)
    loan = detail.loan

    assert loan.status == "Pending"
    assert loan.remaining_term == 12
    assert len(loan.installments) == 12
    # Month-end start clamps to the last day of shorter months
    assert loan.installments[0].due_date == date(2026, 2, 28)
    assert loan.installments[1].due_date == date(2026, 3, 31)
    assert loan.installments[-1].due_date == date(2027, 1, 31)
    assert all(inst.amount == pytest.approx(1046.64) for inst in loan.installments)
    assert detail.next_payment is loan.installments[0]
    assert detail.payment_percentage == 0


def test_get_loan_scoped_to_owner(service: LoanService, borrower_id):
    loan_id = service.apply_loan(borrower_id, _application(), today=START).loan.id

    assert service.get_loan(str(borrower_id), str(loan_id)).loan.id == loan_id
    with pytest.raises(NotFoundError):
        service.get_loan(uuid.uuid4(), loan_id)
    with pytest.raises(ValidationError, match="Invalid loan ID format"):
        service.get_loan(borrower_id, "12345")


def test_record_payments_updates_history(service: LoanService, borrower_id):
    loan_id = service.apply_loan(borrower_id, _application(), today=START).loan.id

    first = service.record_payment(loan_id, 500, paid_on=date(2026, 2, 20))
    assert first.installment.status == "Partial"
    assert first.detail.remaining_term == 12
    assert first.detail.next_payment is first.installment

    second = service.record_payment(loan_id, 546.64, paid_on=date(2026, 2, 27), transaction_id="EFT-77")
    assert second.installment is first.installment
    assert second.installment.status == "Paid"
    assert second.installment.amount_paid == pytest.approx(1046.64)
    assert second.installment.transaction_id == "EFT-77"
    assert [p.status for p in second.detail.loan.payments] == ["partial", "paid"]
    assert second.detail.payment_percentage == 50
    assert second.detail.remaining_term == 11
    assert second.detail.next_payment.due_date == date(2026, 3, 31)
    # Recording a payment leaves the loan status alone
    assert second.detail.loan.status == "Pending"

    history = service.get_payment_history(borrower_id)
    assert len(history) == 2
    assert history[0].transaction_id == "EFT-77"


def test_record_payment_on_settled_loan(service: LoanService, borrower_id):
    loan_id = service.apply_loan(borrower_id, _application(loan_amount=1000, loan_term=1), today=START).loan.id
    outcome = service.record_payment(loan_id, 2000, paid_on=date(2026, 3, 5))

    assert outcome.installment.status == "Late"
    assert outcome.detail.remaining_term == 0
    assert outcome.detail.next_payment is None
    with pytest.raises(ValidationError, match="no outstanding"):
        service.record_payment(loan_id, 10)


def test_update_status_returns_previous(service: LoanService, borrower_id):
    loan_id = service.apply_loan(borrower_id, _application(), today=START).loan.id

    assert service.update_status(loan_id, "Defaulted").previous_status == "Pending"
    change = service.update_status(loan_id, "Approved")
    assert change.previous_status == "Defaulted"
    assert change.detail.loan.status == "Approved"

    with pytest.raises(ValidationError):
        service.update_status(loan_id, "Closed")
    with pytest.raises(NotFoundError):
        service.update_status(uuid.uuid4(), "Active")


def test_approve_then_reject(service: LoanService, borrower_id):
    loan_id = service.apply_loan(borrower_id, _application(), today=START).loan.id
    staff_id = uuid.uuid4()

    approved = service.approve_loan(loan_id, staff_id).detail.loan
    assert approved.approved_by == staff_id
    assert approved.approved_at is not None

    with pytest.raises(ValidationError, match="reason"):
        service.reject_loan(loan_id, " ")
    rejected = service.reject_loan(loan_id, "Collateral not verified")
    assert rejected.previous_status == "Approved"
    assert rejected.detail.loan.rejection_reason == "Collateral not verified"


def test_list_loans_filters_by_status(service: LoanService, borrower_id):
    home = service.apply_loan(borrower_id, _application(), today=START).loan.id
    service.apply_loan(borrower_id, _application(loan_purpose="Car"), today=START)
    service.update_status(home, "Active")

    assert [d.loan.id for d in service.list_loans("Active")] == [home]
    assert len(service.list_loans()) == 2
    with pytest.raises(ValidationError):
        service.list_loans("Unknown")


def test_credit_report_reflects_payments(service: LoanService, borrower_id):
    assert service.get_credit_report(borrower_id).score_range == "No Credit History"

    loan_id = service.apply_loan(borrower_id, _application(), today=START).loan.id
    service.update_status(loan_id, "Active")
    service.record_payment(loan_id, 1046.64, paid_on=date(2026, 2, 1))

    report = service.get_credit_report(borrower_id)

    # 300 + 220 + 110 + 11 + 495 clamps to the ceiling
    assert report.credit_score == 850
    assert report.score_range == "Excellent"
    assert report.total_debt == 12000
    assert report.available_credit == 0
    assert report.credit_utilization == "100%"
    assert report.accounts[0].payment_history == ["paid"]
    assert report.accounts[0].remaining_term == "11 months"
    assert report.accounts[0].next_payment_date == "2026-03-31"
