"""
Presentation Formatters

India-locale rendering of amounts and dates for dashboards and reports.
"""

from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

from stallbook.config import get_settings

WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def _group_indian(digits: str) -> str:
    """12345678 -> 1,23,45,678"""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_currency(amount: float, symbol: Optional[str] = None) -> str:
    """
    Format an amount as whole rupees with Indian digit grouping.

    Halves round away from zero.

    Examples:
        >>> format_currency(123456)
        '₹1,23,456'
        >>> format_currency(-115)
        '-₹115'
    """
    symbol = symbol if symbol is not None else get_settings().business.currency_symbol
    rounded = Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    sign = "-" if rounded < 0 else ""
    return f"{sign}{symbol}{_group_indian(str(abs(int(rounded))))}"


def format_percent(value: float) -> str:
    """One decimal place with a percent sign"""
    return f"{value:.1f}%"


def _as_date(value: Union[date, str]) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def format_date(value: Union[date, str]) -> str:
    """
    Short weekday, day and short month.

    Examples:
        >>> format_date("2026-10-19")
        'Mon, 19 Oct'
    """
    d = _as_date(value)
    return f"{WEEKDAYS[d.weekday()]}, {d.day} {MONTHS[d.month - 1]}"


def today_iso() -> str:
    """Today's date as YYYY-MM-DD"""
    return date.today().isoformat()


def shift_date(value: Union[date, str], days: int) -> date:
    """Move a date forwards or backwards, e.g. for previous/next day navigation"""
    return _as_date(value) + timedelta(days=days)
