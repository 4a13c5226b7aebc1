"""Borrower loan endpoints - apply, list, credit report, detail"""

import time
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from lending_gateway.api.dependencies import Principal, get_loan_service, get_request_id, require_borrower
from lending_gateway.api.v1.errors import handle_domain_errors
from lending_gateway.api.v1.presenters import present_credit_report, present_loan_detail, present_loan_list_item
from lending_gateway.api.v1.schemas import (
    CreditReportResponse,
    LoanApplicationRequest,
    LoanApplicationResponse,
    LoanDetailResponse,
    LoanListResponse,
)
from lending_gateway.domain.validation import validate_loan_application
from lending_gateway.infrastructure.database.session import get_db
from lending_gateway.infrastructure.observability.logging import log_credit_report, log_loan_application
from lending_gateway.infrastructure.observability.metrics import record_application, record_credit_report
from lending_gateway.services.loan_service import LoanService

router = APIRouter()


@router.post("/loans", response_model=LoanApplicationResponse, status_code=status.HTTP_201_CREATED)
def apply_loan(
    body: LoanApplicationRequest,
    request: Request,
    principal: Principal = Depends(require_borrower),
    db: Session = Depends(get_db),
    service: LoanService = Depends(get_loan_service),
):
    """
    Submit a loan application.

    Flow:
    1. Validate amount, purpose, term, rate and applicant fields
    2. Resolve the interest rate from the lender tier
    3. Generate the monthly repayment schedule
    4. Persist the loan as Pending
    """
    start_time = time.time()
    request_id = get_request_id(request)

    with handle_domain_errors(db, request_id):
        application = validate_loan_application(**body.model_dump())
        detail = service.apply_loan(principal.id, application)
        db.commit()

        loan = detail.loan
        duration_ms = (time.time() - start_time) * 1000
        record_application(loan.loan_purpose, loan.loan_amount)
        log_loan_application(
            request_id, principal.id, str(loan.id), loan.loan_purpose, loan.loan_amount, loan.interest_rate, duration_ms
        )

        return LoanApplicationResponse(
            id=str(loan.id),
            status=loan.status,
            loan_amount=loan.loan_amount,
            loan_purpose=loan.loan_purpose,
            lender_name=loan.lender_name,
            interest_rate=loan.interest_rate,
            monthly_payment=detail.monthly_payment,
            total_repayment=detail.total_repayment,
        )


@router.get("/loans/my-loans", response_model=LoanListResponse)
def get_my_loans(
    request: Request,
    principal: Principal = Depends(require_borrower),
    db: Session = Depends(get_db),
    service: LoanService = Depends(get_loan_service),
):
    """Borrower's loans, newest first, with payment progress"""
    with handle_domain_errors(db, get_request_id(request)):
        loans = [present_loan_list_item(detail) for detail in service.list_user_loans(principal.id)]
        return LoanListResponse(count=len(loans), loans=loans)


@router.get("/loans/credit-report", response_model=CreditReportResponse)
def get_credit_report(
    request: Request,
    principal: Principal = Depends(require_borrower),
    db: Session = Depends(get_db),
    service: LoanService = Depends(get_loan_service),
):
    """
    Score the borrower's loan history.

    Returns:
        Score (300-850) with band and account summaries, or score 0 with
        "No Credit History" when the borrower has no loans
    """
    start_time = time.time()
    request_id = get_request_id(request)

    with handle_domain_errors(db, request_id):
        report = service.get_credit_report(principal.id)

        duration_ms = (time.time() - start_time) * 1000
        record_credit_report(report.score_range)
        log_credit_report(
            request_id, principal.id, report.credit_score, report.score_range, report.open_accounts, duration_ms
        )
        return present_credit_report(report)


@router.get("/loans/{loan_id}", response_model=LoanDetailResponse)
def get_loan(
    loan_id: str,
    request: Request,
    principal: Principal = Depends(require_borrower),
    db: Session = Depends(get_db),
    service: LoanService = Depends(get_loan_service),
):
    """Loan detail with monthly payment, total repayment and next installment"""
    with handle_domain_errors(db, get_request_id(request)):
        return present_loan_detail(service.get_loan(principal.id, loan_id))
