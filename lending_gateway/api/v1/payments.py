"""GET /v1/payments/history - Borrower's recorded payments"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from lending_gateway.api.dependencies import Principal, get_loan_service, get_request_id, require_borrower
from lending_gateway.api.v1.errors import handle_domain_errors
from lending_gateway.api.v1.presenters import present_payment
from lending_gateway.api.v1.schemas import PaymentHistoryResponse
from lending_gateway.infrastructure.database.session import get_db
from lending_gateway.services.loan_service import LoanService

router = APIRouter()


@router.get("/payments/history", response_model=PaymentHistoryResponse)
def get_payment_history(
    request: Request,
    principal: Principal = Depends(require_borrower),
    db: Session = Depends(get_db),
    service: LoanService = Depends(get_loan_service),
):
    """Payments across all of the borrower's loans, most recent first"""
    with handle_domain_errors(db, get_request_id(request)):
        payments = [present_payment(p) for p in service.get_payment_history(principal.id)]
        return PaymentHistoryResponse(count=len(payments), payments=payments)
