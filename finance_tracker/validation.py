"""Validation of user supplied transactions and budgets.

Validators never raise: they collect human readable messages into a
:class:`~finance_tracker.models.ValidationResult` and leave it to the
caller to decide what to do with an invalid record.
"""

from __future__ import annotations

import math
from datetime import date, datetime
from typing import Any, List, Mapping, Optional

import pandas as pd

from .models import Category, TransactionType, ValidationResult, as_record


def parse_amount(value: Any) -> Optional[float]:
    """Coerce an amount to ``float``; ``None`` when it is missing or not numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number):
        return None
    return number


# Calendar days that survive a cast to datetime64[ns].
_MIN_DATE = (pd.Timestamp.min + pd.Timedelta(days=1)).date()
_MAX_DATE = pd.Timestamp.max.date()


def parse_date(value: Any) -> Optional[date]:
    """Parse a calendar date; ``None`` for blanks, non-dates and impossible dates.

    Only strings and ``date``/``datetime`` objects are accepted, and the day
    must lie within the range pandas can hold at nanosecond resolution.
    """
    if isinstance(value, str):
        if not value.strip():
            return None
        try:
            parsed = pd.to_datetime(value, errors='coerce')
        except (TypeError, ValueError, OverflowError):
            return None
        if not isinstance(parsed, datetime) or pd.isna(parsed):
            return None
        day = parsed.date()
    elif isinstance(value, datetime):
        if pd.isna(value):
            return None
        day = value.date()
    elif isinstance(value, date):
        day = value
    else:
        return None
    if not _MIN_DATE <= day <= _MAX_DATE:
        return None
    return day


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == '')


def _category_errors(raw: Any) -> List[str]:
    if _is_blank(raw):
        return ['Category is required']
    if Category.parse(raw) is None:
        return [f'Unknown category: {raw}']
    return []


def validate_expense(expense: Any, require_type: bool = False) -> ValidationResult:
    """Check a transaction record before it is stored.

    Messages are reported in a fixed order: amount, category, date, type.
    A zero amount reports both ``Invalid amount`` and ``Amount must be
    positive``.  A missing type is only an error with ``require_type``.
    """
    record: Mapping[str, Any] = as_record(expense)
    errors: List[str] = []

    amount = parse_amount(record.get('amount'))
    if not amount:
        errors.append('Invalid amount')
    if amount is not None and amount <= 0:
        errors.append('Amount must be positive')

    errors.extend(_category_errors(record.get('category')))

    raw_date = record.get('date')
    if _is_blank(raw_date):
        errors.append('Date is required')
    elif parse_date(raw_date) is None:
        errors.append('Invalid date')

    raw_type = record.get('type')
    if _is_blank(raw_type):
        if require_type:
            errors.append('Invalid transaction type')
    elif raw_type not in [t.value for t in TransactionType]:
        errors.append('Invalid transaction type')

    return ValidationResult(is_valid=not errors, errors=errors)


def validate_budget(budget: Mapping[str, Any]) -> ValidationResult:
    """Check a ``{'category': ..., 'amount': ...}`` budget entry."""
    errors: List[str] = []

    amount = parse_amount(budget.get('amount'))
    if not amount:
        errors.append('Invalid budget amount')
    if amount is not None and amount <= 0:
        errors.append('Budget must be positive')

    errors.extend(_category_errors(budget.get('category')))

    return ValidationResult(is_valid=not errors, errors=errors)
