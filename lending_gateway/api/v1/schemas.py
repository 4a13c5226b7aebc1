"""Pydantic schemas for API request/response validation"""

from datetime import date, datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


# Auth

class SignupRequest(BaseModel):
    """Request body for POST /v1/auth/signup"""

    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    email: str = Field(..., max_length=100, pattern=r"^[^@\s]+@[^@\s]+\.[A-Za-z]{2,}$")
    phone: str = Field(..., description="+266 followed by 8 digits")
    password: str = Field(..., min_length=8)
    employment_status: str
    annual_income: float = Field(..., ge=0)
    role: Optional[str] = None


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class AdminSignupRequest(BaseModel):
    """Request body for POST /v1/auth/admin/signup"""

    full_name: str = Field(..., min_length=1)
    email: str = Field(..., max_length=100, pattern=r"^[^@\s]+@[^@\s]+\.[A-Za-z]{2,}$")
    password: str = Field(..., min_length=1)
    employee_id: str = Field(..., min_length=1)


class PrincipalSchema(BaseModel):
    id: str
    name: str
    email: str
    role: str


class TokenResponse(BaseModel):
    token: str
    user: PrincipalSchema


# Loans

class LoanApplicationRequest(BaseModel):
    """Request body for POST /v1/loans"""

    loan_amount: float
    loan_purpose: str
    loan_term: int
    monthly_income: float
    employment_status: str
    interest_rate: Optional[float] = None
    lender_id: Optional[str] = None
    lender_name: Optional[str] = None
    collateral: Optional[str] = None
    loan_type: str = "Term"
    credit_limit: Optional[float] = None


class LoanApplicationResponse(BaseModel):
    """Response for POST /v1/loans"""

    id: str
    status: str
    loan_amount: float
    loan_purpose: str
    lender_name: str
    interest_rate: float
    monthly_payment: float
    total_repayment: float
    message: str = "Loan application submitted successfully"


class InstallmentSchema(BaseModel):
    """Single installment in a repayment schedule"""

    model_config = ConfigDict(from_attributes=True)

    due_date: date
    amount: float
    amount_paid: float = 0
    status: str = "Pending"
    paid_date: Optional[date] = None
    transaction_id: Optional[str] = None


class PaymentSchema(BaseModel):
    """Payment history entry"""

    model_config = ConfigDict(from_attributes=True)

    loan_id: str
    amount: float
    status: str
    paid_date: date
    transaction_id: Optional[str] = None


class LoanDetailResponse(BaseModel):
    """Response for GET /v1/loans/{loan_id}"""

    id: str
    loan_amount: float
    loan_purpose: str
    loan_term: int
    remaining_term: int
    interest_rate: float
    status: str
    lender_id: Optional[str] = None
    lender_name: str
    monthly_payment: float
    total_repayment: float
    next_payment: Optional[InstallmentSchema] = None
    repayment_schedule: List[InstallmentSchema]
    payment_history: List[str]
    collateral: Optional[str] = None
    credit_limit: float
    loan_type: str
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    created_at: datetime


class LoanListItem(BaseModel):
    """Entry of GET /v1/loans/my-loans"""

    id: str
    loan_amount: float
    original_amount: float
    loan_purpose: str
    loan_term: int
    remaining_term: int
    interest_rate: float
    status: str
    lender_name: str
    monthly_payment: float
    payment_history: List[str]
    payment_percentage: int
    next_payment_date: Optional[date] = None
    credit_limit: float
    loan_type: str
    collateral: Optional[str] = None
    created_at: datetime


class LoanListResponse(BaseModel):
    count: int
    loans: List[LoanListItem]


class AccountSchema(BaseModel):
    """Per-loan line of the credit report"""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    type: str
    status: str
    balance: float
    payment: float
    interest_rate: str
    opened: str
    term: str
    remaining_term: str
    payment_history: List[str]
    next_payment_date: str
    credit_limit: float
    loan_type: str


class CreditReportResponse(BaseModel):
    """Response for GET /v1/loans/credit-report"""

    credit_score: int
    score_range: str
    accounts: List[AccountSchema]
    inquiries: List[dict] = []
    public_records: List[dict] = []
    credit_utilization: str
    total_debt: float
    available_credit: float
    open_accounts: int
    last_updated: Optional[datetime] = None


class PaymentHistoryResponse(BaseModel):
    count: int
    payments: List[PaymentSchema]


# Staff

class RejectRequest(BaseModel):
    reason: str = Field(..., min_length=1)


class StatusUpdateRequest(BaseModel):
    status: str


class PaymentRequest(BaseModel):
    """Request body for POST /v1/admin/loans/{loan_id}/payments"""

    amount: float = Field(..., gt=0)
    paid_date: Optional[date] = None
    transaction_id: Optional[str] = None


class PaymentRecordedResponse(BaseModel):
    installment: InstallmentSchema
    payment: PaymentSchema
    loan: LoanDetailResponse
