"""CSV and JSON exports of transaction records.

``export_to_csv`` joins fields with bare commas and does not quote them, so a
description containing a comma, quote or newline shifts the columns of that
row.  Pass ``escape=True`` to get standard CSV quoting instead.
"""

from __future__ import annotations

import json
import logging
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence, Union

import pandas as pd

from . import config
from .formatting import format_date, number_text
from .models import as_record, category_label

logger = logging.getLogger(__name__)

CSV_HEADERS = ['Date', 'Category', 'Amount', 'Description', 'Payment Method']
TRANSACTION_CSV_HEADERS = ['Date', 'Type', 'Category', 'Description', 'Amount']


def _field(value: Any) -> str:
    if value is None:
        return ''
    if isinstance(value, Enum):
        value = value.value
    return number_text(value)


def _join(headers: Sequence[str], rows: Iterable[Sequence[str]], escape: bool) -> str:
    rows = list(rows)
    if escape:
        frame = pd.DataFrame(rows, columns=list(headers), dtype=object)
        return frame.to_csv(index=False, lineterminator='\n').rstrip('\n')
    return '\n'.join(','.join(row) for row in [list(headers), *rows])


def export_to_csv(records: Iterable[Any], escape: bool = False) -> str:
    """Expense report with ``Date, Category, Amount, Description, Payment Method`` columns.

    Dates are shown as ``Jan 5, 2024``.
    """
    rows: List[List[str]] = []
    for record in records:
        row = as_record(record)
        rows.append([
            format_date(row.get('date')),
            _field(row.get('category')),
            _field(row.get('amount')),
            _field(row.get('description')),
            _field(row.get('payment_method')),
        ])
    return _join(CSV_HEADERS, rows, escape)


def export_transactions_csv(records: Iterable[Any], escape: bool = False) -> str:
    """Full ledger with ``Date, Type, Category, Description, Amount`` columns.

    Dates stay in ISO form and categories use their display labels.
    """
    rows: List[List[str]] = []
    for record in records:
        row = as_record(record)
        rows.append([
            _field(row.get('date')),
            _field(row.get('type')),
            category_label(row.get('category')),
            _field(row.get('description')),
            _field(row.get('amount')),
        ])
    return _join(TRANSACTION_CSV_HEADERS, rows, escape)


def export_to_json(records: Iterable[Any]) -> str:
    """Pretty-printed JSON array of the records."""
    return json.dumps(
        [dict(as_record(r)) for r in records],
        indent=2,
        ensure_ascii=False,
        default=str,
    )


def default_export_filename(extension: str = 'csv', today: Optional[date] = None) -> str:
    """``finance-tracker-YYYY-MM-DD.<extension>``."""
    today = today or datetime.now().date()
    return f"finance-tracker-{today.isoformat()}.{extension}"


def _write(payload: str, path: Union[str, Path, None], default_name: str) -> Path:
    target = Path(path) if path else config.EXPORT_DIR / default_name
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(payload, encoding='utf-8')
    except OSError as e:
        raise OSError(f"Failed to write export to {target}: {e}") from e
    logger.info("Exported %d bytes to %s", len(payload.encode('utf-8')), target)
    return target


def download_csv(records: Iterable[Any], path: Union[str, Path, None] = None, escape: bool = False) -> Path:
    """Write :func:`export_to_csv` output to ``path`` (default ``expenses.csv``)."""
    return _write(export_to_csv(records, escape=escape), path, 'expenses.csv')


def download_json(records: Iterable[Any], path: Union[str, Path, None] = None) -> Path:
    """Write :func:`export_to_json` output to ``path`` (default ``expenses.json``)."""
    return _write(export_to_json(records), path, 'expenses.json')
