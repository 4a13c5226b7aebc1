"""Amortization engine - fixed monthly payments and repayment schedules"""

from datetime import date
from typing import List, Optional, Sequence
from lending_gateway.config import settings
from lending_gateway.domain.models import OPEN_INSTALLMENT_STATUSES, Installment, InstallmentStatus
from lending_gateway.domain.exceptions import ComputationError
from lending_gateway.utils.date_utils import add_months
from lending_gateway.utils.number_utils import round_money

PREMIUM_TIER_RATE = 6.5
STANDARD_TIER_RATE = 8.5


def resolve_interest_rate(requested_rate: Optional[float], lender_name: Optional[str]) -> float:
    """
    Pick the annual rate for a new loan.

    Lender tier naming wins over an explicit rate:
    - name contains "Premium"  -> 6.5%
    - name contains "Standard" -> 8.5%
    - otherwise the requested rate, or the configured default (8.5%)
    """
    if lender_name:
        if "Premium" in lender_name:
            return PREMIUM_TIER_RATE
        if "Standard" in lender_name:
            return STANDARD_TIER_RATE
    if requested_rate:
        return requested_rate
    return settings.default_interest_rate


def compute_monthly_payment(principal: float, annual_rate_percent: float, term_months: int) -> float:
    """
    Fixed monthly payment from the annuity formula.

        r = annual_rate_percent / 100 / 12
        payment = principal * r * (1 + r)^n / ((1 + r)^n - 1)

    A zero monthly rate makes the formula 0/0, so the payment is principal / n.

    Example:
        12000 at 8.5% over 12 months -> 1046.64 (unrounded 1046.6374...)
    """
    if term_months <= 0:
        raise ComputationError(f"Term must be at least one month, got {term_months}")

    monthly_rate = annual_rate_percent / 100 / 12
    if monthly_rate == 0:
        return principal / term_months

    growth = (1 + monthly_rate) ** term_months
    return principal * monthly_rate * growth / (growth - 1)


def compute_total_repayment(monthly_payment: float, term_months: int) -> float:
    """Total paid over the life of the loan"""
    return monthly_payment * term_months


def generate_repayment_schedule(
    term_months: int,
    monthly_payment: float,
    start_date: date | None = None,
) -> List[Installment]:
    """
    Generate one flat installment per month.

    Installment i (1..term_months) falls due i calendar months after
    start_date (default: today). Every amount is the payment rounded to
    cents; the final installment is not adjusted for rounding residue.
    """
    if start_date is None:
        start_date = date.today()

    amount = round_money(monthly_payment)
    return [
        Installment(
            due_date=add_months(start_date, i),
            amount=amount,
            status=InstallmentStatus.PENDING,
        )
        for i in range(1, term_months + 1)
    ]


def next_open_installment(schedule: Sequence[Installment]) -> Optional[Installment]:
    """Earliest installment still owed (Pending, or Partial with a balance left)"""
    for installment in sorted(schedule, key=lambda inst: inst.due_date):
        if installment.status in OPEN_INSTALLMENT_STATUSES:
            return installment
    return None
