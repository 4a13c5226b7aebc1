"""SQLAlchemy ORM models for borrowers, staff and loans"""

import uuid
from sqlalchemy import Column, String, Float, DateTime, Date, Integer, ForeignKey, Text, Numeric, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()

Money = Numeric(12, 2, asdecimal=False)


class User(Base):
    """Borrower account"""

    __tablename__ = "app_user"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    email = Column(String(100), nullable=False, unique=True, index=True)
    phone = Column(String(20), nullable=False, unique=True)
    password_hash = Column(Text, nullable=False)
    role = Column(Text, nullable=False, default="user")
    employment_status = Column(Text, nullable=False)
    annual_income = Column(Float, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    loans = relationship("Loan", back_populates="user", foreign_keys="Loan.user_id")


class Staff(Base):
    """Lender staff member with admin rights"""

    __tablename__ = "staff"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    full_name = Column(Text, nullable=False)
    employee_id = Column(String(20), nullable=False, unique=True)
    email = Column(String(100), nullable=False, unique=True, index=True)
    password_hash = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class Loan(Base):
    """Loan application and its lifecycle state"""

    __tablename__ = "loan"
    __table_args__ = (Index("ix_loan_user_status", "user_id", "status"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("app_user.id"), nullable=False, index=True)
    loan_amount = Column(Money, nullable=False)
    loan_purpose = Column(Text, nullable=False, index=True)
    loan_term = Column(Integer, nullable=False)
    remaining_term = Column(Integer, nullable=True)
    interest_rate = Column(Float, nullable=False, default=8.5)
    monthly_income = Column(Money, nullable=False)
    employment_status = Column(Text, nullable=False)
    lender_id = Column(Text, nullable=True)
    lender_name = Column(Text, nullable=False, default="General Application")
    loan_type = Column(Text, nullable=False, default="Term")
    credit_limit = Column(Money, nullable=False, default=0)
    collateral = Column(Text, nullable=True)
    status = Column(Text, nullable=False, default="Pending", index=True)
    approved_by = Column(UUID(as_uuid=True), ForeignKey("staff.id"), nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    rejection_reason = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())

    user = relationship("User", back_populates="loans", foreign_keys=[user_id])
    installments = relationship(
        "LoanInstallment",
        back_populates="loan",
        cascade="all, delete-orphan",
        order_by="LoanInstallment.sequence",
    )
    payments = relationship(
        "LoanPayment",
        back_populates="loan",
        cascade="all, delete-orphan",
        order_by="LoanPayment.sequence",
    )


class LoanInstallment(Base):
    """Scheduled monthly installment"""

    __tablename__ = "loan_installment"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    loan_id = Column(UUID(as_uuid=True), ForeignKey("loan.id", ondelete="CASCADE"), nullable=False, index=True)
    sequence = Column(Integer, nullable=False)
    due_date = Column(Date, nullable=False)
    amount = Column(Money, nullable=False)
    amount_paid = Column(Money, nullable=False, default=0)
    status = Column(Text, nullable=False, default="Pending")
    paid_date = Column(Date, nullable=True)
    transaction_id = Column(Text, nullable=True)

    loan = relationship("Loan", back_populates="installments")


class LoanPayment(Base):
    """Payment attempt recorded against a loan"""

    __tablename__ = "loan_payment"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    loan_id = Column(UUID(as_uuid=True), ForeignKey("loan.id", ondelete="CASCADE"), nullable=False, index=True)
    sequence = Column(Integer, nullable=False)
    amount = Column(Money, nullable=False)
    status = Column(Text, nullable=False)  # paid | late | partial | missed
    paid_date = Column(Date, nullable=False)
    transaction_id = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    loan = relationship("Loan", back_populates="payments")
