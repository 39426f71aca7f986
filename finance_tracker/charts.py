"""Chart-ready projections of the aggregation helpers.

Each function reshapes grouped data into ordered sequences that a chart
can render directly (see :mod:`finance_tracker.visualization`).  No new
calculations live here.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Sequence

import numpy as np

from .analytics import (
    TransactionAnalytics,
    calculate_category_distribution,
    get_top_categories,
    group_expenses_by_month,
)
from .formatting import get_month_name
from .models import BUDGET_STATUS_COLORS, BudgetStatus, category_label

CATEGORY_PALETTE = [
    '#3b82f6', '#10b981', '#f59e0b', '#ef4444', '#8b5cf6',
    '#ec4899', '#14b8a6', '#f97316', '#06b6d4', '#84cc16',
]
POSITIVE_COLOR = '#10b981'
NEGATIVE_COLOR = '#ef4444'


def prepare_pie_chart_data(records: Iterable[Any]) -> List[Dict[str, Any]]:
    """Category slices: ``name``, display ``label``, ``value`` and ``percentage`` (one decimal)."""
    return [
        {
            'name': item['category'],
            'label': category_label(item['category']),
            'value': item['amount'],
            'percentage': f"{item['percentage']:.1f}",
        }
        for item in calculate_category_distribution(records)
    ]


def prepare_line_chart_data(records: Iterable[Any], months: int = 6) -> List[Dict[str, Any]]:
    """Monthly totals for the most recent ``months`` months that have data."""
    grouped = group_expenses_by_month(records)
    recent = sorted(grouped)[-months:]
    return [
        {
            'month': get_month_name(f"{period}-01", 'short'),
            'period': period,
            'amount': grouped[period]['total'],
            'count': grouped[period]['count'],
        }
        for period in recent
    ]


def prepare_bar_chart_data(records: Iterable[Any]) -> List[Dict[str, Any]]:
    """All categories by descending total."""
    return [
        {
            'category': item['category'],
            'label': category_label(item['category']),
            'amount': item['total'],
            'count': item['count'],
        }
        for item in get_top_categories(records, limit=None)
    ]


def prepare_income_expense_trend(
    records: Iterable[Any],
    months: int = 6,
    today: Optional[date] = None,
) -> Dict[str, List[Any]]:
    """Income and expense series for the trailing calendar window."""
    breakdown = TransactionAnalytics(records).monthly_breakdown(months, today)
    return {
        'labels': breakdown['Month_Label'].tolist(),
        'income': [float(v) for v in breakdown['Income']],
        'expenses': [float(v) for v in breakdown['Expenses']],
    }


def prepare_net_savings_data(
    records: Iterable[Any],
    months: int = 12,
    today: Optional[date] = None,
) -> Dict[str, List[Any]]:
    """Net savings per month, coloured green when non-negative and red otherwise."""
    breakdown = TransactionAnalytics(records).monthly_breakdown(months, today)
    values = breakdown['Net'].to_numpy(dtype=float)
    return {
        'labels': breakdown['Month_Label'].tolist(),
        'values': [float(v) for v in values],
        'colors': np.where(values >= 0, POSITIVE_COLOR, NEGATIVE_COLOR).tolist(),
    }


def get_budget_status_color(status: Any) -> str:
    """Colour for a budget status; unknown values get the healthy colour."""
    try:
        return BudgetStatus(status).color
    except ValueError:
        return BUDGET_STATUS_COLORS[BudgetStatus.HEALTHY]


def generate_category_colors(categories: Sequence[str]) -> Dict[str, str]:
    return {
        category: CATEGORY_PALETTE[index % len(CATEGORY_PALETTE)]
        for index, category in enumerate(categories)
    }
