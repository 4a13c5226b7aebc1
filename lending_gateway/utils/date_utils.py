"""Date manipulation utilities"""

from datetime import date, datetime
from typing import Optional
from dateutil.relativedelta import relativedelta


def add_months(from_date: date, months: int) -> date:
    """Advance by calendar months, clamping the day to the end of shorter months"""
    return from_date + relativedelta(months=months)


def to_iso_date(value: Optional[date]) -> str:
    """ISO date string for reports, 'N/A' when missing"""
    if value is None:
        return "N/A"
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()
