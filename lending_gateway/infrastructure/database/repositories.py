"""Data access layer for borrowers, staff and loans"""

import uuid
from contextlib import contextmanager
from datetime import date
from enum import Enum
from typing import Iterator, List, Optional
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload
from lending_gateway.infrastructure.database.models import User, Staff, Loan, LoanInstallment, LoanPayment
from lending_gateway.domain.models import Installment, LoanApplication, LoanRecord
from lending_gateway.domain.exceptions import StorageUnavailableError


@contextmanager
def storage_errors(operation: str) -> Iterator[None]:
    """Re-raise driver/ORM failures as StorageUnavailableError"""
    try:
        yield
    except SQLAlchemyError as e:
        raise StorageUnavailableError(f"{operation} failed: {e.__class__.__name__}") from e


def _plain(value):
    """Enum members are stored and scored by their string value"""
    return value.value if isinstance(value, Enum) else value

class UserRepository:
    """Repository for borrower accounts"""

    def __init__(self, db: Session):
        self.db = db

    def create_user(self, **fields) -> User:
        with storage_errors("create user"):
            db_user = User(**fields)
            self.db.add(db_user)
            self.db.flush()
            return db_user

    def get_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        with storage_errors("fetch user"):
            return self.db.get(User, user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        with storage_errors("fetch user"):
            return self.db.query(User).filter(User.email == email.lower()).first()

    def exists_with_email_or_phone(self, email: str, phone: str) -> bool:
        with storage_errors("fetch user"):
            return (
                self.db.query(User.id)
                .filter(or_(User.email == email.lower(), User.phone == phone))
                .first()
                is not None
            )


class StaffRepository:
    """Repository for staff accounts"""

    def __init__(self, db: Session):
        self.db = db

    def create_staff(self, **fields) -> Staff:
        with storage_errors("create staff"):
            db_staff = Staff(**fields)
            self.db.add(db_staff)
            self.db.flush()
            return db_staff

    def get_by_email(self, email: str) -> Optional[Staff]:
        with storage_errors("fetch staff"):
            return self.db.query(Staff).filter(Staff.email == email.lower()).first()

    def exists(self, email: str, employee_id: str) -> bool:
        with storage_errors("fetch staff"):
            return (
                self.db.query(Staff.id)
                .filter(or_(Staff.email == email.lower(), Staff.employee_id == employee_id))
                .first()
                is not None
            )


class LoanRepository:
    """Repository for loans, their schedules and payment history"""

    def __init__(self, db: Session):
        self.db = db

    def create_loan(
        self,
        user_id: uuid.UUID,
        application: LoanApplication,
        interest_rate: float,
        lender_name: str,
        schedule: List[Installment],
    ) -> Loan:
        """Persist loan with its pre-generated installments"""
        with storage_errors("create loan"):
            db_loan = Loan(
                user_id=user_id,
                loan_amount=application.loan_amount,
                loan_purpose=application.loan_purpose.value,
                loan_term=application.loan_term,
                remaining_term=application.loan_term,
                interest_rate=interest_rate,
                monthly_income=application.monthly_income,
                employment_status=application.employment_status,
                lender_id=application.lender_id,
                lender_name=lender_name,
                loan_type=application.loan_type.value,
                credit_limit=application.credit_limit,
                collateral=application.collateral,
                status="Pending",
            )
            self.db.add(db_loan)
            self.db.flush()

            for sequence, inst in enumerate(schedule, start=1):
                self.db.add(
                    LoanInstallment(
                        loan_id=db_loan.id,
                        sequence=sequence,
                        due_date=inst.due_date,
                        amount=inst.amount,
                        amount_paid=inst.amount_paid,
                        status=_plain(inst.status),
                    )
                )
            self.db.flush()
            self.db.refresh(db_loan)
            return db_loan

    def get_loan_by_id(self, loan_id: uuid.UUID) -> Optional[Loan]:
        with storage_errors("fetch loan"):
            return (
                self.db.query(Loan)
                .options(selectinload(Loan.installments), selectinload(Loan.payments))
                .filter(Loan.id == loan_id)
                .first()
            )

    def get_loan_for_user(self, loan_id: uuid.UUID, user_id: uuid.UUID) -> Optional[Loan]:
        """Fetch loan only if owned by user"""
        with storage_errors("fetch loan"):
            return (
                self.db.query(Loan)
                .options(selectinload(Loan.installments), selectinload(Loan.payments))
                .filter(Loan.id == loan_id, Loan.user_id == user_id)
                .first()
            )

    def get_loans_by_user(self, user_id: uuid.UUID) -> List[Loan]:
        """All loans for a user, newest first"""
        with storage_errors("fetch loans"):
            return (
                self.db.query(Loan)
                .options(selectinload(Loan.installments), selectinload(Loan.payments))
                .filter(Loan.user_id == user_id)
                .order_by(Loan.created_at.desc())
                .all()
            )

    def list_loans(self, status: Optional[str] = None, limit: int = 100) -> List[Loan]:
        with storage_errors("fetch loans"):
            query = self.db.query(Loan)
            if status:
                query = query.filter(Loan.status == status)
            return query.order_by(Loan.created_at.desc()).limit(limit).all()

    def add_payment(
        self,
        loan: Loan,
        amount: float,
        status: str,
        paid_date: date,
        transaction_id: Optional[str],
    ) -> LoanPayment:
        with storage_errors("record payment"):
            payment = LoanPayment(
                loan_id=loan.id,
                sequence=len(loan.payments) + 1,
                amount=amount,
                status=status,
                paid_date=paid_date,
                transaction_id=transaction_id,
            )
            loan.payments.append(payment)
            self.db.flush()
            return payment

    def get_payments_by_user(self, user_id: uuid.UUID, limit: int = 100) -> List[LoanPayment]:
        """Payment history across all of a user's loans, newest first"""
        with storage_errors("fetch payments"):
            return (
                self.db.query(LoanPayment)
                .join(Loan, LoanPayment.loan_id == Loan.id)
                .filter(Loan.user_id == user_id)
                .order_by(LoanPayment.paid_date.desc(), LoanPayment.created_at.desc(), LoanPayment.sequence.desc())
                .limit(limit)
                .all()
            )

    def flush(self) -> None:
        with storage_errors("update loan"):
            self.db.flush()


def to_installment(db_installment: LoanInstallment) -> Installment:
    return Installment(
        due_date=db_installment.due_date,
        amount=db_installment.amount,
        amount_paid=db_installment.amount_paid or 0,
        status=_plain(db_installment.status),
        paid_date=db_installment.paid_date,
        transaction_id=db_installment.transaction_id,
    )


def to_loan_record(db_loan: Loan) -> LoanRecord:
    """Map a persisted loan onto the scoring engine's input"""
    return LoanRecord(
        loan_id=str(db_loan.id),
        status=_plain(db_loan.status),
        loan_amount=db_loan.loan_amount,
        loan_purpose=_plain(db_loan.loan_purpose),
        loan_term=db_loan.loan_term,
        interest_rate=db_loan.interest_rate,
        lender_name=db_loan.lender_name,
        loan_type=_plain(db_loan.loan_type) or "Term",
        credit_limit=db_loan.credit_limit or 0,
        remaining_term=db_loan.remaining_term,
        payment_history=[payment.status for payment in db_loan.payments],
        repayment_schedule=[to_installment(inst) for inst in db_loan.installments],
        created_at=db_loan.created_at,
    )
