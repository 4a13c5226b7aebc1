"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import List, Optional


class LoanStatus(str, Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    ACTIVE = "Active"
    COMPLETED = "Completed"
    DEFAULTED = "Defaulted"


class InstallmentStatus(str, Enum):
    PENDING = "Pending"
    PAID = "Paid"
    LATE = "Late"
    PARTIAL = "Partial"


# Installments still owed: never paid, or paid short
OPEN_INSTALLMENT_STATUSES = (InstallmentStatus.PENDING, InstallmentStatus.PARTIAL)


class LoanPurpose(str, Enum):
    HOME = "Home"
    CAR = "Car"
    EDUCATION = "Education"
    BUSINESS = "Business"
    PERSONAL = "Personal"
    MEDICAL = "Medical"
    DEBT_CONSOLIDATION = "Debt Consolidation"


class LoanType(str, Enum):
    TERM = "Term"
    CREDIT = "Credit"


# Applicant employment status as captured on the loan application
APPLICATION_EMPLOYMENT_STATUSES = ("employed", "self-employed", "student", "retired", "unemployed")

# Employment status as captured on the borrower profile
PROFILE_EMPLOYMENT_STATUSES = ("Employed", "Self-employed", "Unemployed", "Student", "Retired")


@dataclass
class Installment:
    """Single payment in a repayment schedule"""

    due_date: date
    amount: float
    status: InstallmentStatus = InstallmentStatus.PENDING
    amount_paid: float = 0.0
    paid_date: Optional[date] = None
    transaction_id: Optional[str] = None


@dataclass
class LoanApplication:
    """Validated input for a new loan"""

    loan_amount: float
    loan_purpose: LoanPurpose
    loan_term: int
    monthly_income: float
    employment_status: str
    interest_rate: Optional[float] = None
    lender_id: Optional[str] = None
    lender_name: Optional[str] = None
    collateral: Optional[str] = None
    loan_type: LoanType = LoanType.TERM
    credit_limit: float = 0.0


@dataclass
class LoanRecord:
    """Snapshot of one loan as consumed by the scoring engine"""

    loan_id: str
    status: str
    loan_amount: float
    loan_purpose: str
    loan_term: int
    interest_rate: float
    lender_name: Optional[str] = None
    loan_type: str = LoanType.TERM.value
    credit_limit: float = 0.0
    remaining_term: Optional[int] = None
    payment_history: List[str] = field(default_factory=list)  # status strings, e.g. "paid"
    repayment_schedule: List[Installment] = field(default_factory=list)
    created_at: Optional[datetime] = None


@dataclass
class BorrowerProfile:
    """Profile fields carried alongside the loans; not weighted by the score yet"""

    employment_status: Optional[str] = None
    annual_income: Optional[float] = None


@dataclass
class ScoreFactors:
    """Raw factor values before weighting"""

    payment_history: float
    credit_utilization: float
    credit_mix: float
    account_status: float


@dataclass
class AccountSummary:
    """Per-loan line of the credit report"""

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


@dataclass
class CreditReport:
    """Output of the scoring engine"""

    credit_score: int
    score_range: str
    accounts: List[AccountSummary]
    credit_utilization: str
    total_debt: float
    available_credit: float
    open_accounts: int
    factors: Optional[ScoreFactors] = None
    inquiries: List[dict] = field(default_factory=list)
    public_records: List[dict] = field(default_factory=list)
    last_updated: Optional[datetime] = None
