"""Credit scoring engine - folds a borrower's loan history into a score and report"""

from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence
from lending_gateway.domain.models import (
    AccountSummary,
    BorrowerProfile,
    CreditReport,
    LoanRecord,
    LoanStatus,
    LoanType,
    ScoreFactors,
)
from lending_gateway.domain.amortization import compute_monthly_payment, next_open_installment
from lending_gateway.utils.date_utils import to_iso_date
from lending_gateway.utils.number_utils import round_half_up, round_money

BASE_SCORE = 300
MAX_SCORE = 850
SCORE_SPREAD = MAX_SCORE - BASE_SCORE

PAYMENT_HISTORY_WEIGHT = 0.4
CREDIT_UTILIZATION_WEIGHT = 0.2
CREDIT_MIX_WEIGHT = 0.1
ACCOUNT_STATUS_WEIGHT = 0.3

# Distinct purposes needed for full credit-mix marks
CREDIT_MIX_TARGET = 5

STATUS_POINTS: Dict[str, int] = {
    "Paid": 5,
    LoanStatus.COMPLETED.value: 5,
    LoanStatus.ACTIVE.value: 3,
    LoanStatus.DEFAULTED.value: -10,
    LoanStatus.PENDING.value: 1,
}

NO_HISTORY_RANGE = "No Credit History"


def _is_active(loan: LoanRecord) -> bool:
    return loan.status == LoanStatus.ACTIVE.value


def _is_active_credit_line(loan: LoanRecord) -> bool:
    return _is_active(loan) and loan.loan_type == LoanType.CREDIT.value


def total_debt(loans: Sequence[LoanRecord]) -> float:
    """Outstanding principal across Active loans"""
    return sum(loan.loan_amount or 0 for loan in loans if _is_active(loan))


def total_credit(loans: Sequence[LoanRecord]) -> float:
    """Revolving limit across Active credit lines"""
    return sum(loan.credit_limit or 0 for loan in loans if _is_active_credit_line(loan))


def available_credit(loans: Sequence[LoanRecord]) -> float:
    """Unused headroom across Active credit lines, never negative per line"""
    return sum(
        max(0, (loan.credit_limit or 0) - (loan.loan_amount or 0))
        for loan in loans
        if _is_active_credit_line(loan)
    )


def payment_ratio(loan: LoanRecord) -> float:
    """Share of history entries marked paid; 0 for a loan without history"""
    history = loan.payment_history or []
    paid = sum(1 for entry in history if entry == "paid")
    return paid / (len(history) or 1)


def payment_history_factor(loans: Sequence[LoanRecord]) -> float:
    return sum(payment_ratio(loan) for loan in loans) / len(loans)


def credit_utilization_factor(loans: Sequence[LoanRecord]) -> float:
    """1.0 when no revolving exposure, falling to 0.0 at or above full utilization"""
    credit = total_credit(loans)
    utilization = total_debt(loans) / credit if credit > 0 else 0
    return 1 - min(utilization, 1)


def credit_mix_factor(loans: Sequence[LoanRecord]) -> float:
    """Distinct purposes over 5; not capped, so 6-7 purposes score above 1.0"""
    purposes = {loan.loan_purpose for loan in loans}
    return len(purposes) / CREDIT_MIX_TARGET


def account_status_factor(loans: Sequence[LoanRecord]) -> float:
    """Mean status points; negative when defaults dominate"""
    return sum(STATUS_POINTS.get(loan.status, 0) for loan in loans) / len(loans)


def calculate_score_factors(loans: Sequence[LoanRecord]) -> ScoreFactors:
    """
    Compute the four raw factor values. Callers must not pass an empty
    collection; build_credit_report short-circuits that case.
    """
    return ScoreFactors(
        payment_history=payment_history_factor(loans),
        credit_utilization=credit_utilization_factor(loans),
        credit_mix=credit_mix_factor(loans),
        account_status=account_status_factor(loans),
    )


def calculate_credit_score(factors: ScoreFactors) -> int:
    """
    Weighted sum on a 300-850 scale.

    Scoring weights:
    - 40%: Payment history
    - 30%: Account status
    - 20%: Credit utilization
    - 10%: Credit mix

    Each factor adds value * weight * 550 to the 300 base. The raw sum is
    rounded half-up and clamped, since status and mix factors can leave [0, 1].
    """
    weighted = (
        factors.payment_history * PAYMENT_HISTORY_WEIGHT * SCORE_SPREAD
        + factors.credit_utilization * CREDIT_UTILIZATION_WEIGHT * SCORE_SPREAD
        + factors.credit_mix * CREDIT_MIX_WEIGHT * SCORE_SPREAD
        + factors.account_status * ACCOUNT_STATUS_WEIGHT * SCORE_SPREAD
    )
    return min(max(round_half_up(BASE_SCORE + weighted), BASE_SCORE), MAX_SCORE)


def determine_score_range(score: int) -> str:
    """
    Map score to a qualitative band.

    - 720+:    Excellent
    - 650-719: Good
    - 580-649: Fair
    - below:   Poor
    """
    if score >= 720:
        return "Excellent"
    elif score >= 650:
        return "Good"
    elif score >= 580:
        return "Fair"
    else:
        return "Poor"


def format_utilization(debt: float, available: float) -> str:
    """Debt share of debt plus headroom as a whole percentage string"""
    if debt <= 0 or debt + available <= 0:
        return "0%"
    return f"{round_half_up(debt / (debt + available) * 100)}%"


def _format_rate(rate: Optional[float]) -> str:
    if not rate:
        return "N/A"
    return f"{rate:g}%"


def summarize_account(loan: LoanRecord) -> AccountSummary:
    """Project one loan into its credit-report line"""
    purpose = loan.loan_purpose
    next_installment = next_open_installment(loan.repayment_schedule)
    monthly_payment = (
        round_money(compute_monthly_payment(loan.loan_amount, loan.interest_rate or 0, loan.loan_term))
        if loan.loan_term
        else 0.0
    )

    return AccountSummary(
        id=str(loan.loan_id),
        name=loan.lender_name or "Personal Loan",
        type=f"{purpose} Loan" if purpose else "Personal Loan",
        status=loan.status or LoanStatus.PENDING.value,
        balance=loan.loan_amount or 0,
        payment=monthly_payment,
        interest_rate=_format_rate(loan.interest_rate),
        opened=to_iso_date(loan.created_at),
        term=f"{loan.loan_term or 0} months",
        remaining_term=f"{loan.remaining_term or 0} months",
        payment_history=list(loan.payment_history or []),
        next_payment_date=to_iso_date(next_installment.due_date if next_installment else None),
        credit_limit=loan.credit_limit or 0,
        loan_type=loan.loan_type or LoanType.TERM.value,
    )


def empty_credit_report(now: Optional[datetime] = None) -> CreditReport:
    """Sentinel report for a borrower without loans"""
    return CreditReport(
        credit_score=0,
        score_range=NO_HISTORY_RANGE,
        accounts=[],
        credit_utilization="0%",
        total_debt=0,
        available_credit=0,
        open_accounts=0,
        last_updated=now or datetime.now(timezone.utc),
    )


def build_credit_report(
    loans: Sequence[LoanRecord],
    profile: Optional[BorrowerProfile] = None,
    now: Optional[datetime] = None,
) -> CreditReport:
    """
    Main entry point: score a borrower's loans and build the report.

    The result depends only on the set of loans, not their order. profile is
    accepted for future scoring inputs and is not weighted today.
    """
    if not loans:
        return empty_credit_report(now)

    factors = calculate_score_factors(loans)
    score = calculate_credit_score(factors)
    debt = total_debt(loans)
    headroom = available_credit(loans)
    accounts: List[AccountSummary] = [summarize_account(loan) for loan in loans]

    return CreditReport(
        credit_score=score,
        score_range=determine_score_range(score),
        accounts=accounts,
        credit_utilization=format_utilization(debt, headroom),
        total_debt=debt,
        available_credit=headroom,
        open_accounts=len(loans),
        factors=factors,
        last_updated=now or datetime.now(timezone.utc),
    )
