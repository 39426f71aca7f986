"""Persistence for transactions and budgets.

The tracker keeps two collections, a transaction list (newest first) and a
``category -> monthly amount`` budget mapping.  :class:`FinanceStore` owns
both in memory and mirrors the affected collection to a key-value backend
after every mutation.  Backends only need ``get``/``set`` by key; the JSON
file backend keeps everything in one file.
"""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Union

from . import config
from .analytics import TransactionAnalytics
from .models import Category, create_transaction
from .validation import parse_date, validate_budget, validate_expense

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str, default: Any = None) -> Any:
        ...

    def set(self, key: str, value: Any) -> None:
        ...


class MemoryStore:
    """In-process backend; values are copied through JSON like a real blob store."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, str] = {}
        for key, value in (initial or {}).items():
            self.set(key, value)

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return json.loads(self._data[key])

    def set(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value)


class JsonFileStore:
    """All keys in a single JSON object on disk."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else config.STORE_PATH

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open('r', encoding='utf-8') as handle:
                data = json.load(handle)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Could not read store %s, starting empty: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Store %s does not hold a JSON object, starting empty", self.path)
            return {}
        return data

    def get(self, key: str, default: Any = None) -> Any:
        return self._read().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open('w', encoding='utf-8') as handle:
                json.dump(data, handle, indent=2, sort_keys=True, ensure_ascii=False)
        except OSError as e:
            raise OSError(f"Failed to save store to {self.path}: {e}") from e


class FinanceStore:
    """Transactions and budgets with load-on-open, save-on-mutation semantics."""

    def __init__(self, backend: Optional[KeyValueStore] = None):
        self.backend: KeyValueStore = backend if backend is not None else JsonFileStore()
        self.transactions: List[Dict[str, Any]] = []
        self.budgets: Dict[str, float] = {}

    @classmethod
    def open(cls, backend: Optional[KeyValueStore] = None) -> 'FinanceStore':
        store = cls(backend)
        store.load()
        return store

    def load(self) -> None:
        """Replace the in-memory collections with what the backend holds.

        Anything that is not a list of records / a mapping of budgets is
        treated as empty.
        """
        transactions = self.backend.get(config.TRANSACTIONS_KEY) or []
        if not isinstance(transactions, list):
            logger.warning("Ignoring malformed transactions entry of type %s", type(transactions).__name__)
            transactions = []
        self.transactions = [t for t in transactions if isinstance(t, dict)]

        budgets = self.backend.get(config.BUDGETS_KEY) or {}
        if not isinstance(budgets, dict):
            logger.warning("Ignoring malformed budgets entry of type %s", type(budgets).__name__)
            budgets = {}
        self.budgets = {}
        for category, amount in budgets.items():
            try:
                self.budgets[category] = float(amount)
            except (TypeError, ValueError):
                continue

        logger.info(
            "Loaded %d transactions and %d budgets",
            len(self.transactions), len(self.budgets),
        )

    def save(self) -> None:
        self._save_transactions()
        self._save_budgets()

    def _save_transactions(self) -> None:
        self.backend.set(config.TRANSACTIONS_KEY, self.transactions)

    def _save_budgets(self) -> None:
        self.backend.set(config.BUDGETS_KEY, self.budgets)

    def add_transaction(
        self,
        type: str,
        amount: float,
        category: Union[Category, str],
        description: str = '',
        date: Union[date, str, None] = None,
        payment_method: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Validate, store at the front of the list and persist a new transaction.

        The date is stored in ISO ``YYYY-MM-DD`` form whatever format it came in.

        Raises:
            ValueError: If the input fails :func:`validate_expense`.
        """
        candidate = {
            'type': type,
            'amount': amount,
            'category': category,
            'date': date if date is not None else _today(),
        }
        result = validate_expense(candidate, require_type=True)
        if not result.is_valid:
            raise ValueError('; '.join(result.errors))

        record = create_transaction(
            type, amount, category, description, parse_date(candidate['date']), payment_method
        ).to_dict()
        self.transactions.insert(0, record)
        self._save_transactions()
        logger.info("Added %s transaction %s (%s %.2f)", record['type'], record['id'], record['category'], record['amount'])
        return record

    def get_transaction(self, transaction_id: Any) -> Optional[Dict[str, Any]]:
        for record in self.transactions:
            if str(record.get('id')) == str(transaction_id):
                return record
        return None

    def delete_transaction(self, transaction_id: Any) -> bool:
        """Remove a transaction by id; returns ``False`` when it was not found."""
        remaining = [t for t in self.transactions if str(t.get('id')) != str(transaction_id)]
        if len(remaining) == len(self.transactions):
            logger.debug("No transaction with id %s to delete", transaction_id)
            return False
        self.transactions = remaining
        self._save_transactions()
        logger.info("Deleted transaction %s", transaction_id)
        return True

    def set_budget(self, category: Union[Category, str], amount: float) -> None:
        """Set or overwrite the monthly budget of a category.

        Raises:
            ValueError: If the input fails :func:`validate_budget`.
        """
        result = validate_budget({'category': category, 'amount': amount})
        if not result.is_valid:
            raise ValueError('; '.join(result.errors))
        key = Category.parse(category).value
        self.budgets[key] = float(amount)
        self._save_budgets()
        logger.info("Budget for %s set to %.2f", key, self.budgets[key])

    def analytics(self) -> TransactionAnalytics:
        """Analytics over the current snapshot of transactions."""
        return TransactionAnalytics(self.transactions)


def _today() -> str:
    return date.today().isoformat()
