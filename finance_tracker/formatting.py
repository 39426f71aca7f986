"""Formatting utilities for currency, dates and calendar ranges."""

from __future__ import annotations

import calendar
import re
from datetime import date, datetime, timedelta
from typing import Any, Optional, Tuple, Union

import pandas as pd

from . import config

CURRENCY_SYMBOLS = {
    'USD': '$',
    'EUR': '€',
    'GBP': '£',
    'JPY': '¥',
    'INR': '₹',
}

DATE_FORMATS = ('short', 'long', 'time')


def format_currency(
    amount: Union[float, int],
    currency: Optional[str] = None,
    include_sign: bool = True,
) -> str:
    """Format a currency amount with thousands separators and two decimals.

    Args:
        amount: The amount to format
        currency: ISO currency code, defaults to ``config.CURRENCY``
        include_sign: Whether to include the currency symbol

    Returns:
        Formatted currency string (e.g., "$1,234.56" or "1,234.56")

    Example:
        >>> format_currency(1234.56)
        '$1,234.56'
        >>> format_currency(-5)
        '-$5.00'
    """
    formatted = f"{abs(amount):,.2f}"
    if include_sign:
        code = (currency or config.CURRENCY).upper()
        symbol = CURRENCY_SYMBOLS.get(code, f"{code} ")
        formatted = f"{symbol}{formatted}"
    return f"-{formatted}" if amount < 0 else formatted


def parse_currency(text: str) -> float:
    """Strip symbols and separators from a currency string.

    Returns 0.0 when nothing numeric is left.

    Example:
        >>> parse_currency('$1,234.50')
        1234.5
    """
    cleaned = re.sub(r'[^0-9.\-]+', '', text or '')
    try:
        return float(cleaned)
    except ValueError:
        return 0.0


def format_compact_currency(amount: float, currency: Optional[str] = None) -> str:
    """Abbreviate large amounts (``1.5K``, ``2.0M``, ``3.1B``)."""
    if amount >= 1_000_000_000:
        return f"{amount / 1_000_000_000:.1f}B"
    if amount >= 1_000_000:
        return f"{amount / 1_000_000:.1f}M"
    if amount >= 1_000:
        return f"{amount / 1_000:.1f}K"
    return format_currency(amount, currency)


def number_text(value: Any) -> str:
    """Plain text for an amount, dropping a redundant ``.0`` (``50.0`` -> ``50``)."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _timestamp(value: Any) -> Optional[pd.Timestamp]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        parsed = pd.to_datetime(value, errors='coerce')
    except (TypeError, ValueError, OverflowError):
        return None
    if not isinstance(parsed, pd.Timestamp) or pd.isna(parsed):
        return None
    return parsed


def format_date(value: Any, style: str = 'short') -> str:
    """Render a date for display.

    ``short`` gives ``Jan 5, 2024``, ``long`` gives ``Friday, January 5, 2024``
    and ``time`` gives ``10:30 AM``.  Unparseable input renders as
    ``Invalid Date``.
    """
    ts = _timestamp(value)
    if ts is None:
        return 'Invalid Date'
    if style == 'long':
        return f"{ts:%A}, {ts:%B} {ts.day}, {ts.year}"
    if style == 'time':
        return f"{ts:%I:%M %p}"
    return f"{ts:%b} {ts.day}, {ts.year}"


def get_month_name(value: Any, style: str = 'long') -> str:
    ts = _timestamp(value)
    if ts is None:
        return ''
    return f"{ts:%b}" if style == 'short' else f"{ts:%B}"


def get_current_month_range(today: Optional[date] = None) -> Tuple[date, date]:
    """First and last calendar day of the month containing ``today``."""
    today = today or datetime.now().date()
    last_day = calendar.monthrange(today.year, today.month)[1]
    return today.replace(day=1), today.replace(day=last_day)


def get_last_n_days_range(days: int, today: Optional[date] = None) -> Tuple[date, date]:
    today = today or datetime.now().date()
    return today - timedelta(days=days), today


def is_current_month(value: Any, today: Optional[date] = None) -> bool:
    ts = _timestamp(value)
    if ts is None:
        return False
    today = today or datetime.now().date()
    return ts.year == today.year and ts.month == today.month
