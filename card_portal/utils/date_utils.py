"""Date manipulation utilities"""

from datetime import date, timedelta
from typing import Tuple


def month_start(day: date) -> date:
    """First day of the month containing ``day``"""
    return day.replace(day=1)


def previous_month_range(day: date) -> Tuple[date, date]:
    """First and last day (inclusive) of the month before ``day``'s month"""
    last = month_start(day) - timedelta(days=1)
    return last.replace(day=1), last
