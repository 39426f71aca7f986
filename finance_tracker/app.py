"""Streamlit app for the finance tracker.

The app is a thin layer over :mod:`finance_tracker.store` and the
aggregation helpers: it collects input, hands it to the store and renders
the derived views.  The store lives in ``st.session_state`` so every rerun
of the script sees the writes of the previous one.

To run the app from the command line::

    streamlit run finance_tracker/app.py

or use ``run_app.py`` at the project root.
"""

from __future__ import annotations

import os
import sys
from datetime import date
from typing import Any, Dict, List

import pandas as pd
import streamlit as st

# Support both ``streamlit run finance_tracker/app.py`` and package imports.
if __package__:
    from . import analytics as an
    from . import charts
    from . import config
    from . import visualization as viz
    from .export import default_export_filename, export_transactions_csv
    from .formatting import format_currency, format_date
    from .logger import setup_logger
    from .models import Category, TransactionType, category_label
    from .store import FinanceStore, JsonFileStore
else:
    CURRENT_DIR = os.path.dirname(os.path.abspath(__file__))
    PARENT_DIR = os.path.dirname(CURRENT_DIR)
    if PARENT_DIR not in sys.path:
        sys.path.insert(0, PARENT_DIR)
    from finance_tracker import analytics as an  # type: ignore
    from finance_tracker import charts  # type: ignore
    from finance_tracker import config  # type: ignore
    from finance_tracker import visualization as viz  # type: ignore
    from finance_tracker.export import default_export_filename, export_transactions_csv  # type: ignore
    from finance_tracker.formatting import format_currency, format_date  # type: ignore
    from finance_tracker.logger import setup_logger  # type: ignore
    from finance_tracker.models import Category, TransactionType, category_label  # type: ignore
    from finance_tracker.store import FinanceStore, JsonFileStore  # type: ignore

SECTIONS = ['Dashboard', 'Transactions', 'Budget', 'Reports']
ALL = 'all'


def get_store() -> FinanceStore:
    """Session-scoped store, loaded from disk on first use."""
    if 'store' not in st.session_state:
        config.ensure_data_directories()
        st.session_state['store'] = FinanceStore.open(JsonFileStore(config.STORE_PATH))
    return st.session_state['store']


def filter_transactions(
    records: List[Dict[str, Any]],
    type_filter: str = ALL,
    category_filter: str = ALL,
    search: str = '',
) -> List[Dict[str, Any]]:
    """Apply the transaction list filters (type, category, free-text search).

    The search box matches description and category only, not amounts.
    """
    filtered = list(records)
    if type_filter != ALL:
        filtered = an.filter_by_type(filtered, type_filter)
    if category_filter != ALL:
        filtered = an.filter_expenses_by_category(filtered, category_filter)
    if search:
        filtered = an.search_expenses(filtered, search, match_amount=False)
    return filtered


def request_delete(transaction_id: Any) -> None:
    st.session_state['pending_delete'] = transaction_id


def confirm_delete(store: FinanceStore) -> bool:
    """Delete the transaction awaiting confirmation, if any."""
    pending = st.session_state.get('pending_delete')
    if pending is None:
        return False
    st.session_state['pending_delete'] = None
    return store.delete_transaction(pending)


def render_delete_confirmation(store: FinanceStore) -> None:
    """Ask before deleting the transaction picked with the trash button."""
    if st.session_state.get('pending_delete') is None:
        return
    st.warning("Are you sure you want to delete this transaction?")
    yes, no = st.columns(2)
    if yes.button("Delete", key='confirm_delete'):
        if confirm_delete(store):
            st.info("Transaction deleted!")
        st.rerun()
    if no.button("Cancel", key='cancel_delete'):
        st.session_state['pending_delete'] = None
        st.rerun()


def _transaction_line(record: Dict[str, Any]) -> str:
    sign = '+' if record.get('type') == TransactionType.INCOME.value else '-'
    amount = an.calculate_total_expenses([record])
    return (
        f"**{record.get('description') or '(no description)'}** · "
        f"{category_label(record.get('category'))} · {format_date(record.get('date'))} · "
        f"{sign}{format_currency(amount)}"
    )


def render_dashboard(store: FinanceStore) -> None:
    st.header("Dashboard")
    analytics = store.analytics()
    summary = analytics.monthly_summary()

    cols = st.columns(4)
    cols[0].metric("Balance", format_currency(summary['balance']))
    cols[1].metric("Income", format_currency(summary['income']))
    cols[2].metric("Expenses", format_currency(summary['expenses']))
    cols[3].metric("Savings", format_currency(summary['balance']))

    st.subheader("Recent transactions")
    recent = analytics.recent(5)
    if not recent:
        st.info("No recent transactions")
    for record in recent:
        st.markdown(_transaction_line(record))

    left, right = st.columns(2)
    with left:
        pie = charts.prepare_pie_chart_data(analytics.expenses())
        st.plotly_chart(viz.create_category_pie_chart(pie), use_container_width=True)
    with right:
        trend = charts.prepare_income_expense_trend(store.transactions, months=6)
        st.plotly_chart(viz.create_trend_chart(trend), use_container_width=True)


def render_transactions(store: FinanceStore) -> None:
    st.header("Transactions")

    with st.form('transaction_form', clear_on_submit=True):
        tx_type = st.selectbox("Type", [t.value for t in TransactionType], format_func=str.title)
        amount = st.number_input("Amount", min_value=0.0, step=0.01, format="%.2f")
        category = st.selectbox("Category", [c.value for c in Category], format_func=category_label)
        description = st.text_input("Description")
        tx_date = st.date_input("Date", value=date.today())
        submitted = st.form_submit_button("Add transaction")
    if submitted:
        try:
            store.add_transaction(tx_type, amount, category, description, tx_date)
        except ValueError as exc:
            st.error(str(exc))
        else:
            st.success("Transaction added successfully!")

    f1, f2, f3 = st.columns(3)
    type_filter = f1.selectbox("Filter by type", [ALL] + [t.value for t in TransactionType])
    category_filter = f2.selectbox(
        "Filter by category", [ALL] + [c.value for c in Category],
        format_func=lambda v: 'All' if v == ALL else category_label(v),
    )
    search = f3.text_input("Search")

    render_delete_confirmation(store)

    filtered = filter_transactions(store.transactions, type_filter, category_filter, search)
    if not filtered:
        st.info("No transactions found")
        return
    for record in filtered:
        line, action = st.columns([6, 1])
        line.markdown(_transaction_line(record))
        action.button("🗑", key=f"delete_{record.get('id')}", on_click=request_delete, args=(record.get('id'),))

    st.download_button(
        "Export CSV",
        data=export_transactions_csv(store.transactions),
        file_name=default_export_filename('csv'),
        mime='text/csv',
    )


def render_budgets(store: FinanceStore) -> None:
    st.header("Budget")

    with st.form('budget_form', clear_on_submit=True):
        category = st.selectbox("Category", [c.value for c in Category], format_func=category_label)
        amount = st.number_input("Monthly budget", min_value=0.0, step=1.0, format="%.2f")
        submitted = st.form_submit_button("Set budget")
    if submitted:
        try:
            store.set_budget(category, amount)
        except ValueError as exc:
            st.error(str(exc))
        else:
            st.success("Budget set successfully!")

    overview = store.analytics().budget_overview(store.budgets)
    if not overview:
        st.info("No budgets set yet")
        return
    for row in overview:
        st.markdown(
            f"**{row['label']}** · Spent {format_currency(row['spent'])} of "
            f"{format_currency(row['budget'])} ({row['percentage']:.1f}%) · "
            f"{format_currency(row['remaining'])} remaining"
        )
        st.progress(min(row['utilization'] / 100, 1.0), text=row['status'].value.title())


def render_reports(store: FinanceStore) -> None:
    st.header("Reports")
    analytics = store.analytics()

    st.subheader("Top spending categories")
    top = analytics.top_categories(5)
    if not top:
        st.info("No data available")
    else:
        st.table(pd.DataFrame([
            {'Category': category_label(item['category']), 'Amount': format_currency(item['total'])}
            for item in top
        ]))

    savings = charts.prepare_net_savings_data(store.transactions, months=12)
    st.plotly_chart(viz.create_net_savings_chart(savings), use_container_width=True)

    summary = analytics.summary()
    cols = st.columns(4)
    cols[0].metric("Total Income", format_currency(summary['income']))
    cols[1].metric("Total Expenses", format_currency(summary['expenses']))
    cols[2].metric("Net Savings", format_currency(summary['balance']))
    cols[3].metric("Savings Rate", f"{summary['savings_rate']:.1f}%")


def main() -> None:
    """Entry point for the Streamlit app."""
    st.set_page_config(page_title="Finance Tracker", layout="wide")
    setup_logger("finance_tracker", config.LOG_LEVEL)
    store = get_store()

    section = st.sidebar.radio("Navigate", SECTIONS)
    if section == 'Dashboard':
        render_dashboard(store)
    elif section == 'Transactions':
        render_transactions(store)
    elif section == 'Budget':
        render_budgets(store)
    else:
        render_reports(store)


if __name__ == "__main__":  # pragma: no cover
    main()
