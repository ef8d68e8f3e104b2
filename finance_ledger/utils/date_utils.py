"""Date manipulation utilities"""

from datetime import date, datetime, time
from dateutil.relativedelta import relativedelta


def add_months(from_date: date, months: int) -> date:
    """
    Add calendar months, clamping to the last day of the target month.

    Examples:
        2024-01-31 + 1 month  -> 2024-02-29
        2023-01-31 + 1 month  -> 2023-02-28
        2024-02-29 + 12 months -> 2025-02-28
    """
    return from_date + relativedelta(months=months)


def start_of_day(day: date) -> datetime:
    """Midnight of the given day"""
    return datetime.combine(day, time.min)
