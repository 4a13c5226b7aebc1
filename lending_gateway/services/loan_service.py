"""Loan workflows: applications, detail views, credit reports and staff actions"""

import logging
import uuid
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import List, Optional
from sqlalchemy.orm import Session
from lending_gateway.domain.amortization import (
    compute_monthly_payment,
    compute_total_repayment,
    generate_repayment_schedule,
    next_open_installment,
    resolve_interest_rate,
)
from lending_gateway.domain.exceptions import NotFoundError, ValidationError
from lending_gateway.domain.models import BorrowerProfile, CreditReport, InstallmentStatus, LoanApplication, LoanStatus
from lending_gateway.domain.payments import apply_payment, history_tag
from lending_gateway.domain.scoring import build_credit_report
from lending_gateway.domain.validation import validate_status
from lending_gateway.infrastructure.database.models import Loan, LoanInstallment, LoanPayment
from lending_gateway.infrastructure.database.repositories import LoanRepository, UserRepository, to_loan_record
from lending_gateway.utils.number_utils import round_half_up, round_money

logger = logging.getLogger(__name__)

DEFAULT_LENDER_NAME = "General Application"


@dataclass
class LoanDetail:
    """Persisted loan plus the values derived from its terms and history"""

    loan: Loan
    monthly_payment: float
    total_repayment: float
    next_payment: Optional[LoanInstallment]
    payment_percentage: int
    remaining_term: int


@dataclass
class StatusChange:
    detail: LoanDetail
    previous_status: str


@dataclass
class PaymentOutcome:
    detail: LoanDetail
    installment: LoanInstallment
    payment: LoanPayment


def _parse_id(raw_id, label: str) -> uuid.UUID:
    if isinstance(raw_id, uuid.UUID):
        return raw_id
    try:
        return uuid.UUID(str(raw_id))
    except ValueError:
        raise ValidationError(f"Invalid {label} ID format") from None


def describe_loan(loan: Loan) -> LoanDetail:
    """Attach computed payment figures to a persisted loan"""
    monthly = compute_monthly_payment(loan.loan_amount, loan.interest_rate, loan.loan_term)
    history = [payment.status for payment in loan.payments]
    paid = sum(1 for status in history if status == "paid")
    percentage = round_half_up(paid / len(history) * 100) if history else 0

    return LoanDetail(
        loan=loan,
        monthly_payment=round_money(monthly),
        total_repayment=round_money(compute_total_repayment(monthly, loan.loan_term)),
        next_payment=next_open_installment(loan.installments),
        payment_percentage=percentage,
        remaining_term=loan.remaining_term if loan.remaining_term is not None else loan.loan_term - paid,
    )


class LoanService:
    def __init__(self, db: Session):
        self.db = db
        self.loans = LoanRepository(db)
        self.users = UserRepository(db)

    # Borrower operations

    def apply_loan(self, user_id, application: LoanApplication, today: date | None = None) -> LoanDetail:
        """
        Create a Pending loan with its full repayment schedule.

        The application must already have passed validate_loan_application.
        """
        owner_id = _parse_id(user_id, "user")
        rate = resolve_interest_rate(application.interest_rate, application.lender_name)
        monthly = compute_monthly_payment(application.loan_amount, rate, application.loan_term)
        schedule = generate_repayment_schedule(application.loan_term, monthly, start_date=today)

        loan = self.loans.create_loan(
            user_id=owner_id,
            application=application,
            interest_rate=rate,
            lender_name=application.lender_name or DEFAULT_LENDER_NAME,
            schedule=schedule,
        )
        return describe_loan(loan)

    def get_loan(self, user_id, loan_id) -> LoanDetail:
        """
        Raises:
            ValidationError: Malformed loan id
            NotFoundError: Loan missing or owned by someone else
        """
        loan = self.loans.get_loan_for_user(_parse_id(loan_id, "loan"), _parse_id(user_id, "user"))
        if loan is None:
            raise NotFoundError("Loan not found")
        return describe_loan(loan)

    def list_user_loans(self, user_id) -> List[LoanDetail]:
        return [describe_loan(loan) for loan in self.loans.get_loans_by_user(_parse_id(user_id, "user"))]

    def get_credit_report(self, user_id, now: Optional[datetime] = None) -> CreditReport:
        owner_id = _parse_id(user_id, "user")
        loans = self.loans.get_loans_by_user(owner_id)
        user = self.users.get_by_id(owner_id)
        profile = (
            BorrowerProfile(employment_status=user.employment_status, annual_income=user.annual_income)
            if user is not None
            else None
        )
        return build_credit_report([to_loan_record(loan) for loan in loans], profile=profile, now=now)

    def get_payment_history(self, user_id) -> List[LoanPayment]:
        return self.loans.get_payments_by_user(_parse_id(user_id, "user"))

    # Staff operations

    def _get_any_loan(self, loan_id) -> Loan:
        loan = self.loans.get_loan_by_id(_parse_id(loan_id, "loan"))
        if loan is None:
            raise NotFoundError("Loan not found")
        return loan

    def list_loans(self, status: Optional[str] = None) -> List[LoanDetail]:
        if status is not None:
            status = validate_status(status).value
        return [describe_loan(loan) for loan in self.loans.list_loans(status=status)]

    def update_status(self, loan_id, status: str) -> StatusChange:
        """
        Set any of the six statuses. No transition table is enforced; the
        previous status is returned so callers can log the change.
        """
        new_status = validate_status(status)
        loan = self._get_any_loan(loan_id)
        previous = loan.status
        loan.status = new_status.value
        self.loans.flush()
        if previous != LoanStatus.PENDING.value and new_status in (LoanStatus.APPROVED, LoanStatus.REJECTED):
            logger.warning(
                "Loan decided outside Pending",
                extra={"loan_id": str(loan.id), "previous_status": previous, "new_status": new_status.value},
            )
        return StatusChange(detail=describe_loan(loan), previous_status=previous)

    def approve_loan(self, loan_id, staff_id) -> StatusChange:
        change = self.update_status(loan_id, LoanStatus.APPROVED.value)
        loan = change.detail.loan
        loan.approved_by = _parse_id(staff_id, "staff")
        loan.approved_at = datetime.now(timezone.utc)
        loan.rejection_reason = None
        self.loans.flush()
        return change

    def reject_loan(self, loan_id, reason: str) -> StatusChange:
        if not reason or not reason.strip():
            raise ValidationError("Rejection reason is required")
        change = self.update_status(loan_id, LoanStatus.REJECTED.value)
        change.detail.loan.rejection_reason = reason.strip()
        self.loans.flush()
        return change

    def record_payment(
        self,
        loan_id,
        amount: float,
        paid_on: date | None = None,
        transaction_id: Optional[str] = None,
    ) -> PaymentOutcome:
        """
        Apply a payment to the earliest open installment and log it in the
        payment history. Loan status is left unchanged.
        """
        loan = self._get_any_loan(loan_id)
        paid_on = paid_on or date.today()
        index, status = apply_payment(loan.installments, amount, paid_on, transaction_id)

        if status in (InstallmentStatus.PAID, InstallmentStatus.LATE) and (loan.remaining_term or 0) > 0:
            loan.remaining_term -= 1

        payment = self.loans.add_payment(
            loan,
            amount=round_money(amount),
            status=history_tag(status),
            paid_date=paid_on,
            transaction_id=transaction_id,
        )
        return PaymentOutcome(detail=describe_loan(loan), installment=loan.installments[index], payment=payment)
