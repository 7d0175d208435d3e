"""Calendar-month arithmetic used by the installment schedule and the ledger"""

from datetime import date
from dateutil.relativedelta import relativedelta
from typing import List, Tuple

MonthKey = Tuple[int, int]

MONTH_NAMES = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def month_key(day: date) -> MonthKey:
    """(year, month) bucket for a date, months one-based"""
    return (day.year, day.month)


def month_start(key: MonthKey) -> date:
    return date(key[0], key[1], 1)


def shift_month(key: MonthKey, months: int) -> MonthKey:
    return month_key(month_start(key) + relativedelta(months=months))


def months_between(start: MonthKey, end: MonthKey) -> int:
    """Calendar-month distance from start to end (negative if end precedes start)"""
    delta = relativedelta(month_start(end), month_start(start))
    return delta.years * 12 + delta.months


def generate_month_range(start: MonthKey, count: int) -> List[MonthKey]:
    """Consecutive month keys beginning at start"""
    return [shift_month(start, i) for i in range(count)]


def format_month_key(key: MonthKey) -> str:
    return month_start(key).strftime("%Y-%m")


def format_month_label(key: MonthKey) -> str:
    return f"{MONTH_NAMES[key[1] - 1]} {key[0]}"
