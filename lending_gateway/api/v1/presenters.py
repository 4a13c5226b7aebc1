"""Build response schemas from service results"""

from dataclasses import asdict
from lending_gateway.api.v1.schemas import (
    AccountSchema,
    CreditReportResponse,
    InstallmentSchema,
    LoanDetailResponse,
    LoanListItem,
    PaymentSchema,
)
from lending_gateway.domain.models import CreditReport
from lending_gateway.infrastructure.database.models import LoanPayment
from lending_gateway.services.loan_service import LoanDetail


def present_payment(payment: LoanPayment) -> PaymentSchema:
    return PaymentSchema(
        loan_id=str(payment.loan_id),
        amount=payment.amount,
        status=payment.status,
        paid_date=payment.paid_date,
        transaction_id=payment.transaction_id,
    )


def present_loan_detail(detail: LoanDetail) -> LoanDetailResponse:
    loan = detail.loan
    return LoanDetailResponse(
        id=str(loan.id),
        loan_amount=loan.loan_amount,
        loan_purpose=loan.loan_purpose,
        loan_term=loan.loan_term,
        remaining_term=detail.remaining_term,
        interest_rate=loan.interest_rate,
        status=loan.status,
        lender_id=loan.lender_id,
        lender_name=loan.lender_name,
        monthly_payment=detail.monthly_payment,
        total_repayment=detail.total_repayment,
        next_payment=InstallmentSchema.model_validate(detail.next_payment) if detail.next_payment else None,
        repayment_schedule=[InstallmentSchema.model_validate(inst) for inst in loan.installments],
        payment_history=[payment.status for payment in loan.payments],
        collateral=loan.collateral,
        credit_limit=loan.credit_limit or 0,
        loan_type=loan.loan_type or "Term",
        approved_by=str(loan.approved_by) if loan.approved_by else None,
        approved_at=loan.approved_at,
        rejection_reason=loan.rejection_reason,
        created_at=loan.created_at,
    )


def present_loan_list_item(detail: LoanDetail) -> LoanListItem:
    loan = detail.loan
    return LoanListItem(
        id=str(loan.id),
        loan_amount=loan.loan_amount,
        original_amount=loan.loan_amount,
        loan_purpose=loan.loan_purpose,
        loan_term=loan.loan_term,
        remaining_term=detail.remaining_term,
        interest_rate=loan.interest_rate,
        status=loan.status,
        lender_name=loan.lender_name,
        monthly_payment=detail.monthly_payment,
        payment_history=[payment.status for payment in loan.payments],
        payment_percentage=detail.payment_percentage,
        next_payment_date=detail.next_payment.due_date if detail.next_payment else None,
        credit_limit=loan.credit_limit or 0,
        loan_type=loan.loan_type or "Term",
        collateral=loan.collateral,
        created_at=loan.created_at,
    )


def present_credit_report(report: CreditReport) -> CreditReportResponse:
    return CreditReportResponse(
        credit_score=report.credit_score,
        score_range=report.score_range,
        accounts=[AccountSchema(**asdict(account)) for account in report.accounts],
        inquiries=report.inquiries,
        public_records=report.public_records,
        credit_utilization=report.credit_utilization,
        total_debt=report.total_debt,
        available_credit=report.available_credit,
        open_accounts=report.open_accounts,
        last_updated=report.last_updated,
    )
