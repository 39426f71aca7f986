"""Plotly visualisation helpers for the finance tracker.

The functions here accept the chart-ready structures produced by
:mod:`finance_tracker.charts` and return interactive Plotly figures that
Streamlit renders via ``st.plotly_chart``.  Empty input yields an empty
figure titled "No data to display".
"""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from .charts import CATEGORY_PALETTE, NEGATIVE_COLOR, POSITIVE_COLOR


def _empty_figure(title: str = "No data to display") -> go.Figure:
    fig = go.Figure()
    fig.update_layout(title=title)
    return fig


def create_category_pie_chart(slices: Sequence[Dict[str, Any]], title: str | None = None) -> go.Figure:
    """Doughnut chart of spending per category.

    Parameters
    ----------
    slices : sequence of dict
        Output of :func:`~finance_tracker.charts.prepare_pie_chart_data`.
    title : str, optional
        Chart title.

    Returns
    -------
    plotly.graph_objects.Figure
        Doughnut chart with the legend below the plot.
    """
    if not slices:
        return _empty_figure()
    df = pd.DataFrame(slices)
    fig = px.pie(
        df,
        names="label",
        values="value",
        hole=0.5,
        color_discrete_sequence=CATEGORY_PALETTE,
    )
    fig.update_layout(title=title or "Spending by category", legend={"orientation": "h"})
    return fig


def create_category_bar_chart(bars: Sequence[Dict[str, Any]], title: str | None = None) -> go.Figure:
    """Bar chart comparing category totals.

    Parameters
    ----------
    bars : sequence of dict
        Output of :func:`~finance_tracker.charts.prepare_bar_chart_data`.
    title : str, optional
        Chart title.
    """
    if not bars:
        return _empty_figure()
    df = pd.DataFrame(bars)
    fig = px.bar(df, x="label", y="amount")
    fig.update_layout(
        title=title or "Category comparison",
        xaxis_title="Category",
        yaxis_title="Amount",
    )
    return fig


def create_trend_chart(trend: Dict[str, List[Any]], title: str | None = None) -> go.Figure:
    """Income and expense lines over the trailing months.

    Parameters
    ----------
    trend : dict
        Output of :func:`~finance_tracker.charts.prepare_income_expense_trend`.
    title : str, optional
        Chart title.
    """
    if not trend.get("labels"):
        return _empty_figure()
    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=trend["labels"], y=trend["income"], name="Income",
        mode="lines", line={"color": POSITIVE_COLOR, "shape": "spline"},
    ))
    fig.add_trace(go.Scatter(
        x=trend["labels"], y=trend["expenses"], name="Expenses",
        mode="lines", line={"color": NEGATIVE_COLOR, "shape": "spline"},
    ))
    fig.update_layout(
        title=title or "Income vs expenses",
        legend={"orientation": "h"},
        yaxis={"rangemode": "tozero"},
    )
    return fig


def create_net_savings_chart(savings: Dict[str, List[Any]], title: str | None = None) -> go.Figure:
    """Monthly net savings bars, green above zero and red below.

    Parameters
    ----------
    savings : dict
        Output of :func:`~finance_tracker.charts.prepare_net_savings_data`.
    title : str, optional
        Chart title.
    """
    if not savings.get("labels"):
        return _empty_figure()
    fig = go.Figure(go.Bar(
        x=savings["labels"],
        y=savings["values"],
        marker_color=savings["colors"],
        name="Net Savings",
    ))
    fig.update_layout(title=title or "Net savings", showlegend=False)
    return fig


def create_monthly_line_chart(points: Sequence[Dict[str, Any]], title: str | None = None) -> go.Figure:
    """Line chart of monthly totals.

    Parameters
    ----------
    points : sequence of dict
        Output of :func:`~finance_tracker.charts.prepare_line_chart_data`.
    title : str, optional
        Chart title.
    """
    if not points:
        return _empty_figure()
    df = pd.DataFrame(points)
    fig = px.line(df, x="period", y="amount")
    fig.update_layout(
        title=title or "Monthly spending",
        xaxis_title="Month",
        yaxis_title="Amount",
    )
    return fig
