"""Validation pass run before any loan entity is built"""

from typing import Optional
from lending_gateway.domain.exceptions import ValidationError
from lending_gateway.domain.models import (
    APPLICATION_EMPLOYMENT_STATUSES,
    LoanApplication,
    LoanPurpose,
    LoanStatus,
    LoanType,
)
from lending_gateway.utils.number_utils import round_money

MIN_LOAN_AMOUNT = 1_000
MAX_LOAN_AMOUNT = 1_000_000
MIN_TERM_MONTHS = 1
MAX_TERM_MONTHS = 60
MIN_INTEREST_RATE = 1
MAX_INTEREST_RATE = 25


def _enum_value(enum_cls, value, label: str):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(f"Invalid {label} '{value}'. Expected one of: {allowed}") from None


def validate_loan_application(
    loan_amount: float,
    loan_purpose: str,
    loan_term: int,
    monthly_income: float,
    employment_status: str,
    interest_rate: Optional[float] = None,
    lender_id: Optional[str] = None,
    lender_name: Optional[str] = None,
    collateral: Optional[str] = None,
    loan_type: str = LoanType.TERM.value,
    credit_limit: Optional[float] = None,
) -> LoanApplication:
    """
    Check application fields and return a normalised LoanApplication.

    Raises:
        ValidationError: On the first field that is missing or out of range
    """
    if loan_amount is None:
        raise ValidationError("Loan amount is required")
    if loan_amount < MIN_LOAN_AMOUNT:
        raise ValidationError(f"Minimum loan amount is {MIN_LOAN_AMOUNT}")
    if loan_amount > MAX_LOAN_AMOUNT:
        raise ValidationError(f"Maximum loan amount is {MAX_LOAN_AMOUNT:,}")

    purpose = _enum_value(LoanPurpose, loan_purpose, "loan purpose")

    if isinstance(loan_term, bool) or not isinstance(loan_term, int):
        raise ValidationError("Loan term must be a whole number of months")
    if not MIN_TERM_MONTHS <= loan_term <= MAX_TERM_MONTHS:
        raise ValidationError(f"Loan term must be between {MIN_TERM_MONTHS} and {MAX_TERM_MONTHS} months")

    if interest_rate is not None and not MIN_INTEREST_RATE <= interest_rate <= MAX_INTEREST_RATE:
        raise ValidationError(f"Interest rate must be between {MIN_INTEREST_RATE}% and {MAX_INTEREST_RATE}%")

    if monthly_income is None or monthly_income < 0:
        raise ValidationError("Monthly income must be zero or more")

    normalised_employment = (employment_status or "").lower()
    if normalised_employment not in APPLICATION_EMPLOYMENT_STATUSES:
        raise ValidationError(f"Invalid employment status '{employment_status}'")

    kind = _enum_value(LoanType, loan_type, "loan type")
    if credit_limit is not None and credit_limit < 0:
        raise ValidationError("Credit limit cannot be negative")

    return LoanApplication(
        loan_amount=round_money(loan_amount),
        loan_purpose=purpose,
        loan_term=loan_term,
        monthly_income=monthly_income,
        employment_status=normalised_employment,
        interest_rate=interest_rate,
        lender_id=lender_id or None,
        lender_name=lender_name or None,
        collateral=collateral or None,
        loan_type=kind,
        credit_limit=credit_limit or 0.0,
    )


def validate_status(status: str) -> LoanStatus:
    """Accept any of the six loan statuses; no transition rules apply"""
    return _enum_value(LoanStatus, status, "loan status")
