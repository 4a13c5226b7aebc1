"""Apply received payments to a repayment schedule"""

from datetime import date
from typing import Optional, Sequence, Tuple
from lending_gateway.domain.models import OPEN_INSTALLMENT_STATUSES, Installment, InstallmentStatus
from lending_gateway.domain.exceptions import ValidationError
from lending_gateway.utils.number_utils import round_money

# Payment history tag written for each resulting installment status
HISTORY_TAGS = {
    InstallmentStatus.PAID: "paid",
    InstallmentStatus.LATE: "late",
    InstallmentStatus.PARTIAL: "partial",
}

# Tolerance for cent rounding when comparing the running total with the installment
CENT = 0.005


def apply_payment(
    schedule: Sequence[Installment],
    amount: float,
    paid_on: date | None = None,
    transaction_id: Optional[str] = None,
) -> Tuple[int, InstallmentStatus]:
    """
    Settle the earliest open (Pending or Partial) installment in place.

    Works on domain Installments and on persisted installment rows alike.

    The amount is added to the installment's running amount_paid:

    - running total covers the amount, paid on/before due date -> Paid
    - running total covers the amount, paid after due date     -> Late
    - still short                                              -> Partial

    Returns:
        (index into schedule, new installment status)

    Raises:
        ValidationError: Non-positive amount or no open installment
    """
    if amount is None or amount <= 0:
        raise ValidationError("Payment amount must be positive")

    if paid_on is None:
        paid_on = date.today()

    open_items = sorted(
        (idx for idx, inst in enumerate(schedule) if inst.status in OPEN_INSTALLMENT_STATUSES),
        key=lambda idx: schedule[idx].due_date,
    )
    if not open_items:
        raise ValidationError("Loan has no outstanding installments")

    index = open_items[0]
    installment = schedule[index]

    installment.amount_paid = round_money((installment.amount_paid or 0) + amount)

    if installment.amount_paid + CENT >= installment.amount:
        status = InstallmentStatus.PAID if paid_on <= installment.due_date else InstallmentStatus.LATE
    else:
        status = InstallmentStatus.PARTIAL

    installment.status = status.value
    installment.paid_date = paid_on
    installment.transaction_id = transaction_id
    return index, status


def history_tag(status: InstallmentStatus) -> str:
    """Payment history entry for a settled installment status"""
    return HISTORY_TAGS[InstallmentStatus(status)]
