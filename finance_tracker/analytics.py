"""Transaction aggregation and personal finance calculations.

This module contains the pure functions behind the dashboard, budget and
report views: totals, groupings, statistics, budget utilization and
savings projections.  Every function takes a list of transaction records
(plain mappings as persisted, or :class:`~finance_tracker.models.Transaction`
objects) and never mutates it.  Grouped ``items`` hold the input records
themselves.

Malformed input degrades to defaults instead of raising: a missing or
non-numeric amount counts as 0 and records whose date cannot be parsed are
left out of date based groupings and filters.
"""

from __future__ import annotations

import math
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import numpy as np
import pandas as pd

from .models import (
    UNCATEGORIZED,
    BudgetStatus,
    Category,
    TransactionType,
    as_record,
    category_label,
)
from .formatting import number_text
from .validation import parse_date

Record = Union[Mapping[str, Any], Any]
Group = Dict[str, Any]

# Utilization thresholds, checked from the most severe tier down
BUDGET_THRESHOLDS = (
    (100.0, BudgetStatus.EXCEEDED),
    (90.0, BudgetStatus.WARNING),
    (75.0, BudgetStatus.CAUTION),
)

SORT_KEYS = ('date', 'amount', 'category')


# ---------------------------------------------------------------------------
# Record coercion
# ---------------------------------------------------------------------------


def _views(records: Iterable[Record]) -> tuple[List[Record], List[Mapping[str, Any]]]:
    source = list(records)
    return source, [as_record(r) for r in source]


def _amounts(rows: Sequence[Mapping[str, Any]]) -> pd.Series:
    raw = pd.Series([r.get('amount') for r in rows], dtype=object)
    return pd.to_numeric(raw, errors='coerce').fillna(0.0).astype(float)


def _dates(rows: Sequence[Mapping[str, Any]]) -> pd.Series:
    parsed = [parse_date(r.get('date')) for r in rows]
    return pd.Series(
        [pd.Timestamp(d) if d is not None else pd.NaT for d in parsed],
        dtype='datetime64[ns]',
    )


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (Category, TransactionType)):
        return value.value
    return str(value)


def _category_key(value: Any) -> str:
    text = _text(value)
    return text if text else UNCATEGORIZED


def _frame(rows: Sequence[Mapping[str, Any]]) -> pd.DataFrame:
    """One row per record with coerced ``amount``, ``date``, ``category`` and ``type``."""
    return pd.DataFrame({
        'amount': _amounts(rows),
        'date': _dates(rows),
        'category': pd.Series([_category_key(r.get('category')) for r in rows], dtype=object),
        'type': pd.Series([_text(r.get('type')) for r in rows], dtype=object),
    })


def _aggregate(source: Sequence[Record], amounts: pd.Series, keys: pd.Series) -> Dict[str, Group]:
    """Sum/count/collect records per key, keys in first-occurrence order."""
    frame = pd.DataFrame({'key': keys, 'amount': amounts}).dropna(subset=['key'])
    grouped: Dict[str, Group] = {}
    for key, group in frame.groupby('key', sort=False):
        grouped[key] = {
            'total': float(group['amount'].sum()),
            'count': int(len(group)),
            'items': [source[i] for i in group.index],
        }
    return grouped


def _select(source: Sequence[Record], mask: pd.Series) -> List[Record]:
    return [source[i] for i in np.flatnonzero(mask.to_numpy(dtype=bool))]


# ---------------------------------------------------------------------------
# Totals and grouping
# ---------------------------------------------------------------------------


def calculate_total_expenses(records: Iterable[Record]) -> float:
    """Sum of ``amount`` across all records; missing amounts count as 0."""
    _, rows = _views(records)
    return float(_amounts(rows).sum())


def group_expenses_by_category(records: Iterable[Record]) -> Dict[str, Group]:
    """Group records by category.

    Returns ``{category: {'total', 'count', 'items'}}``.  Records without a
    category are collected under ``'Uncategorized'``.
    """
    source, rows = _views(records)
    keys = pd.Series([_category_key(r.get('category')) for r in rows], dtype=object)
    return _aggregate(source, _amounts(rows), keys)


def group_expenses_by_date(records: Iterable[Record]) -> Dict[str, Group]:
    """Group records by calendar day, keyed ``YYYY-MM-DD``."""
    source, rows = _views(records)
    dates = _dates(rows)
    keys = dates.dt.strftime('%Y-%m-%d')
    return _aggregate(source, _amounts(rows), keys)


def group_expenses_by_month(records: Iterable[Record]) -> Dict[str, Group]:
    """Group records by month, keyed ``YYYY-MM``."""
    source, rows = _views(records)
    dates = _dates(rows)
    keys = dates.dt.strftime('%Y-%m')
    return _aggregate(source, _amounts(rows), keys)


def filter_expenses_by_date_range(
    records: Iterable[Record],
    start_date: Any = None,
    end_date: Any = None,
) -> List[Record]:
    """Records dated between ``start_date`` and ``end_date``, both inclusive.

    Comparison is by calendar day, so a record dated on either boundary is
    kept.  ``None`` leaves that side open; an unparseable bound matches
    nothing.
    """
    source, rows = _views(records)
    dates = _dates(rows)
    mask = dates.notna()
    if start_date is not None:
        start = parse_date(start_date)
        if start is None:
            return []
        mask &= dates >= pd.Timestamp(start)
    if end_date is not None:
        end = parse_date(end_date)
        if end is None:
            return []
        mask &= dates <= pd.Timestamp(end)
    return _select(source, mask)


def filter_expenses_by_category(
    records: Iterable[Record],
    categories: Union[str, Category, Iterable[Union[str, Category]]],
) -> List[Record]:
    if isinstance(categories, (str, Category)):
        categories = [categories]
    wanted = [_text(c) for c in categories]
    source, rows = _views(records)
    return [record for record, row in zip(source, rows) if _text(row.get('category')) in wanted]


def filter_by_type(records: Iterable[Record], transaction_type: Union[str, TransactionType]) -> List[Record]:
    """Income or expense subset of ``records``."""
    wanted = TransactionType(transaction_type).value
    source, rows = _views(records)
    return [record for record, row in zip(source, rows) if _text(row.get('type')) == wanted]


def search_expenses(records: Iterable[Record], keyword: str, match_amount: bool = True) -> List[Record]:
    """Case-insensitive match on description or category, or the amount's text.

    With ``match_amount=False`` only description and category are searched.
    """
    needle = keyword.lower()
    source, rows = _views(records)
    matches = []
    for record, row in zip(source, rows):
        description = str(row.get('description') or '').lower()
        category = (_text(row.get('category')) or '').lower()
        amount = row.get('amount')
        amount_text = number_text(amount) if match_amount and amount is not None else ''
        if needle in description or needle in category or keyword in amount_text:
            matches.append(record)
    return matches


def get_top_categories(records: Iterable[Record], limit: Optional[int] = 5) -> List[Group]:
    """Categories by descending total, at most ``limit`` of them.

    Ties keep the order in which the categories first appear.
    """
    grouped = group_expenses_by_category(records)
    totals = pd.Series({category: data['total'] for category, data in grouped.items()}, dtype=float)
    ranked = totals.sort_values(ascending=False, kind='mergesort')
    return [{'category': category, **grouped[category]} for category in ranked.index[:limit]]


# ---------------------------------------------------------------------------
# Budget calculations
# ---------------------------------------------------------------------------


def calculate_budget_utilization(spent: float, budget: float) -> float:
    """Percentage of ``budget`` used, capped at 100; 0 for a zero budget."""
    if budget == 0:
        return 0.0
    return min(spent / budget * 100, 100.0)


def calculate_remaining_budget(budget: float, spent: float) -> float:
    return max(budget - spent, 0.0)


def is_budget_exceeded(spent: float, budget: float) -> bool:
    return spent > budget


def get_budget_status(spent: float, budget: float) -> BudgetStatus:
    """Map utilization onto healthy / caution / warning / exceeded."""
    utilization = calculate_budget_utilization(spent, budget)
    for threshold, status in BUDGET_THRESHOLDS:
        if utilization >= threshold:
            return status
    return BudgetStatus.HEALTHY


def calculate_daily_allowance(budget: float, spent: float, days_in_month: int, current_day: int) -> float:
    """Remaining budget spread over the days left in the month."""
    days_left = days_in_month - current_day
    if days_left <= 0:
        return 0.0
    return (budget - spent) / days_left


def budget_overview(
    records: Iterable[Record],
    budgets: Mapping[str, float],
    year: Optional[int] = None,
    month: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """Spending against each budget for one calendar month.

    Only expense records count.  ``remaining`` may go negative and
    ``percentage`` is not capped; ``utilization`` and ``status`` follow
    :func:`calculate_budget_utilization` and :func:`get_budget_status`.
    """
    now = datetime.now()
    year = year or now.year
    month = month or now.month

    _, rows = _views(records)
    frame = _frame(rows)
    in_month = (
        (frame['type'] == TransactionType.EXPENSE.value)
        & (frame['date'].dt.year == year)
        & (frame['date'].dt.month == month)
    )
    spent_by_category = frame[in_month].groupby('category')['amount'].sum()

    overview = []
    for category, budget in budgets.items():
        key = _category_key(category)
        spent = float(spent_by_category.get(key, 0.0))
        budget = float(budget)
        overview.append({
            'category': key,
            'label': category_label(key),
            'budget': budget,
            'spent': spent,
            'remaining': budget - spent,
            'percentage': (spent / budget * 100) if budget else 0.0,
            'utilization': calculate_budget_utilization(spent, budget),
            'status': get_budget_status(spent, budget),
        })
    return overview


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------


def calculate_average_expense(records: Iterable[Record]) -> float:
    _, rows = _views(records)
    if not rows:
        return 0.0
    return float(_amounts(rows).mean())


def calculate_median_expense(records: Iterable[Record]) -> float:
    """Median amount; the two middle values are averaged for an even count."""
    _, rows = _views(records)
    if not rows:
        return 0.0
    return float(np.median(_amounts(rows).to_numpy()))


def find_largest_expense(records: Iterable[Record]) -> Optional[Record]:
    """Record with the highest amount (the first one on ties), ``None`` when empty."""
    source, rows = _views(records)
    if not rows:
        return None
    return source[int(_amounts(rows).idxmax())]


def find_smallest_expense(records: Iterable[Record]) -> Optional[Record]:
    source, rows = _views(records)
    if not rows:
        return None
    return source[int(_amounts(rows).idxmin())]


def calculate_spending_trend(current_period: float, previous_period: float) -> float:
    """Percentage change from ``previous_period`` to ``current_period``.

    A zero previous period yields 100 when anything was spent, else 0.
    """
    if previous_period == 0:
        return 100.0 if current_period > 0 else 0.0
    return (current_period - previous_period) / previous_period * 100


def calculate_category_distribution(records: Iterable[Record]) -> List[Dict[str, Any]]:
    """Share of the overall total per category, in first-occurrence order."""
    source = list(records)
    total = calculate_total_expenses(source)
    return [
        {
            'category': category,
            'amount': data['total'],
            'percentage': (data['total'] / total * 100) if total > 0 else 0.0,
            'count': data['count'],
        }
        for category, data in group_expenses_by_category(source).items()
    ]


def identify_recurring_expenses(records: Iterable[Record], threshold: int = 3) -> List[Dict[str, Any]]:
    """Find (category, amount) pairs that occur at least ``threshold`` times."""
    source, rows = _views(records)
    frame = pd.DataFrame({
        'category': pd.Series([_text(r.get('category')) or '' for r in rows], dtype=object),
        'amount': _amounts(rows),
    })
    recurring = []
    for _, group in frame.groupby(['category', 'amount'], sort=False):
        if len(group) < threshold:
            continue
        items = [source[i] for i in group.index]
        first = rows[group.index[0]]
        recurring.append({
            'category': first.get('category'),
            'amount': first.get('amount'),
            'frequency': len(items),
            'items': items,
        })
    return recurring


def sort_expenses(records: Iterable[Record], sort_by: str = 'date', order: str = 'desc') -> List[Record]:
    """Stable sort by ``date``, ``amount`` or ``category``.

    Records with equal keys keep their input order in either direction.  An
    unknown ``sort_by`` returns the records in their original order.
    """
    source, rows = _views(records)
    if sort_by not in SORT_KEYS or not rows:
        return list(source)
    if sort_by == 'date':
        keys = _dates(rows)
    elif sort_by == 'amount':
        keys = _amounts(rows)
    else:
        keys = pd.Series([(_text(r.get('category')) or '').lower() for r in rows], dtype=object)
    ordered = keys.sort_values(ascending=(order != 'desc'), kind='mergesort')
    return [source[i] for i in ordered.index]


# ---------------------------------------------------------------------------
# Savings
# ---------------------------------------------------------------------------


def calculate_savings_rate(income: float, expenses: float) -> float:
    """Share of income kept, as a percentage; 0 when there is no income."""
    if income == 0:
        return 0.0
    return (income - expenses) / income * 100


def calculate_projected_savings(monthly_income: float, monthly_expenses: float, months: int = 12) -> float:
    return (monthly_income - monthly_expenses) * months


def calculate_time_to_goal(current_savings: float, goal: float, monthly_savings: float) -> float:
    """Months needed to reach ``goal``; ``math.inf`` when nothing is being saved."""
    if monthly_savings <= 0:
        return math.inf
    return math.ceil((goal - current_savings) / monthly_savings)


# ---------------------------------------------------------------------------
# Summaries
# ---------------------------------------------------------------------------


def summarize(records: Iterable[Record]) -> Dict[str, float]:
    """Income, expenses, balance and savings rate over ``records``."""
    source = list(records)
    income = calculate_total_expenses(filter_by_type(source, TransactionType.INCOME))
    expenses = calculate_total_expenses(filter_by_type(source, TransactionType.EXPENSE))
    return {
        'income': income,
        'expenses': expenses,
        'balance': income - expenses,
        'savings_rate': calculate_savings_rate(income, expenses),
        'transaction_count': len(source),
    }


def monthly_summary(
    records: Iterable[Record],
    year: Optional[int] = None,
    month: Optional[int] = None,
) -> Dict[str, float]:
    """:func:`summarize` restricted to one calendar month (default: current)."""
    now = datetime.now()
    year = year or now.year
    month = month or now.month
    source, rows = _views(records)
    dates = _dates(rows)
    mask = (dates.dt.year == year) & (dates.dt.month == month)
    return summarize(_select(source, mask))


class TransactionAnalytics:
    """Analytics over a snapshot of transaction records.

    The records are coerced once into a DataFrame (``self.data``) that the
    month based views reuse.
    """

    def __init__(self, records: Iterable[Record]):
        self.records, self._rows = _views(records)
        self.data = _frame(self._rows)

    def expenses(self) -> List[Record]:
        return filter_by_type(self.records, TransactionType.EXPENSE)

    def income(self) -> List[Record]:
        return filter_by_type(self.records, TransactionType.INCOME)

    def summary(self) -> Dict[str, float]:
        return summarize(self.records)

    def monthly_summary(self, year: Optional[int] = None, month: Optional[int] = None) -> Dict[str, float]:
        return monthly_summary(self.records, year, month)

    def budget_overview(
        self,
        budgets: Mapping[str, float],
        year: Optional[int] = None,
        month: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        return budget_overview(self.records, budgets, year, month)

    def top_categories(self, limit: int = 5) -> List[Group]:
        return get_top_categories(self.expenses(), limit)

    def recent(self, count: int = 5) -> List[Record]:
        """The first ``count`` records; the store keeps the newest first."""
        return self.records[:count]

    def monthly_breakdown(self, months: int = 6, today: Optional[date] = None) -> pd.DataFrame:
        """Income, expenses and net per month for the last ``months`` calendar months.

        The window ends at the month containing ``today`` and months without
        transactions are reported as zero.
        """
        today = today or datetime.now().date()
        periods = pd.period_range(end=pd.Period(pd.Timestamp(today), freq='M'), periods=months, freq='M')

        dated = self.data.dropna(subset=['date'])
        dated = dated.assign(Period=dated['date'].dt.to_period('M'))
        totals = {}
        for column, flow in (('Income', TransactionType.INCOME), ('Expenses', TransactionType.EXPENSE)):
            flows = dated[dated['type'] == flow.value]
            totals[column] = (
                flows.groupby('Period')['amount'].sum()
                .reindex(periods, fill_value=0.0)
                .astype(float)
                .to_numpy()
            )

        breakdown = pd.DataFrame(totals, index=periods)
        breakdown['Net'] = breakdown['Income'] - breakdown['Expenses']
        breakdown['Month_Label'] = [period.strftime('%b') for period in periods]
        breakdown.index.name = 'Period'
        return breakdown
