"""Date comparison utilities"""

from datetime import date


def is_backdated(transaction_date: date, posting_date: date) -> bool:
    """Transaction dated before the day it is being posted"""
    return transaction_date < posting_date


def occurs_between(target: date, start: date, end: date | None) -> bool:
    """True when target falls in [start, end]; open-ended when end is None"""
    return start <= target and (end is None or target <= end)
