"""Staff loan workflows - review queue, approve/reject, status, payments"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from lending_gateway.api.dependencies import Principal, get_loan_service, get_request_id, require_staff
from lending_gateway.api.v1.errors import handle_domain_errors
from lending_gateway.api.v1.presenters import present_loan_detail, present_payment
from lending_gateway.api.v1.schemas import (
    InstallmentSchema,
    LoanDetailResponse,
    PaymentRecordedResponse,
    PaymentRequest,
    RejectRequest,
    StatusUpdateRequest,
)
from lending_gateway.infrastructure.database.session import get_db
from lending_gateway.infrastructure.observability.logging import log_payment_recorded, log_status_change
from lending_gateway.infrastructure.observability.metrics import payment_counter, status_change_counter
from lending_gateway.services.loan_service import LoanService, StatusChange

router = APIRouter()


def _finish_status_change(change: StatusChange, request_id: str, principal: Principal) -> LoanDetailResponse:
    loan = change.detail.loan
    status_change_counter.labels(status=loan.status).inc()
    log_status_change(request_id, str(loan.id), change.previous_status, loan.status, principal.id)
    return present_loan_detail(change.detail)


@router.get("/admin/loans", response_model=List[LoanDetailResponse])
def list_loans(
    request: Request,
    status: Optional[str] = Query(None, description="Filter by loan status"),
    principal: Principal = Depends(require_staff),
    db: Session = Depends(get_db),
    service: LoanService = Depends(get_loan_service),
):
    with handle_domain_errors(db, get_request_id(request)):
        return [present_loan_detail(detail) for detail in service.list_loans(status)]


@router.post("/admin/loans/{loan_id}/approve", response_model=LoanDetailResponse)
def approve_loan(
    loan_id: str,
    request: Request,
    principal: Principal = Depends(require_staff),
    db: Session = Depends(get_db),
    service: LoanService = Depends(get_loan_service),
):
    request_id = get_request_id(request)
    with handle_domain_errors(db, request_id):
        change = service.approve_loan(loan_id, principal.id)
        db.commit()
        return _finish_status_change(change, request_id, principal)


@router.post("/admin/loans/{loan_id}/reject", response_model=LoanDetailResponse)
def reject_loan(
    loan_id: str,
    body: RejectRequest,
    request: Request,
    principal: Principal = Depends(require_staff),
    db: Session = Depends(get_db),
    service: LoanService = Depends(get_loan_service),
):
    request_id = get_request_id(request)
    with handle_domain_errors(db, request_id):
        change = service.reject_loan(loan_id, body.reason)
        db.commit()
        return _finish_status_change(change, request_id, principal)


@router.patch("/admin/loans/{loan_id}/status", response_model=LoanDetailResponse)
def update_loan_status(
    loan_id: str,
    body: StatusUpdateRequest,
    request: Request,
    principal: Principal = Depends(require_staff),
    db: Session = Depends(get_db),
    service: LoanService = Depends(get_loan_service),
):
    """Set any loan status; transitions are not restricted"""
    request_id = get_request_id(request)
    with handle_domain_errors(db, request_id):
        change = service.update_status(loan_id, body.status)
        db.commit()
        return _finish_status_change(change, request_id, principal)


@router.post("/admin/loans/{loan_id}/payments", response_model=PaymentRecordedResponse)
def record_payment(
    loan_id: str,
    body: PaymentRequest,
    request: Request,
    principal: Principal = Depends(require_staff),
    db: Session = Depends(get_db),
    service: LoanService = Depends(get_loan_service),
):
    """Apply a payment to the loan's earliest open installment"""
    request_id = get_request_id(request)
    with handle_domain_errors(db, request_id):
        outcome = service.record_payment(loan_id, body.amount, body.paid_date, body.transaction_id)
        db.commit()
        payment_counter.labels(outcome=outcome.payment.status).inc()
        log_payment_recorded(request_id, loan_id, outcome.payment.amount, outcome.payment.status, principal.id)

        return PaymentRecordedResponse(
            installment=InstallmentSchema.model_validate(outcome.installment),
            payment=present_payment(outcome.payment),
            loan=present_loan_detail(outcome.detail),
        )
