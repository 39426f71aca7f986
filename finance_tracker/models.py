"""Domain types for the finance tracker.

Transactions travel through the aggregation helpers as plain mappings (the
shape they are persisted in).  :class:`Transaction` is the typed view used
when a record is created from user input.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union
from uuid import uuid4

UNCATEGORIZED = 'Uncategorized'


class TransactionType(str, Enum):
    INCOME = 'income'
    EXPENSE = 'expense'


class Category(str, Enum):
    """Closed set of transaction categories."""

    FOOD = 'food'
    TRANSPORT = 'transport'
    SHOPPING = 'shopping'
    ENTERTAINMENT = 'entertainment'
    BILLS = 'bills'
    HEALTH = 'health'
    SALARY = 'salary'
    FREELANCE = 'freelance'
    INVESTMENT = 'investment'
    OTHER = 'other'

    @property
    def label(self) -> str:
        return CATEGORY_LABELS[self]

    @classmethod
    def parse(cls, value: Any) -> Optional['Category']:
        """Return the matching category or ``None`` for unknown values."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


CATEGORY_LABELS: Dict[Category, str] = {
    Category.FOOD: '🍔 Food & Dining',
    Category.TRANSPORT: '🚗 Transportation',
    Category.SHOPPING: '🛍️ Shopping',
    Category.ENTERTAINMENT: '🎬 Entertainment',
    Category.BILLS: '💡 Bills & Utilities',
    Category.HEALTH: '🏥 Healthcare',
    Category.SALARY: '💼 Salary',
    Category.FREELANCE: '💻 Freelance',
    Category.INVESTMENT: '📈 Investment',
    Category.OTHER: '📦 Other',
}


def category_label(value: Any) -> str:
    """Display label for a category; unknown values are returned as-is."""
    category = Category.parse(value)
    if category is None:
        return '' if value is None else str(value)
    return category.label


class BudgetStatus(str, Enum):
    """Budget health tiers, ordered from least to most severe."""

    HEALTHY = 'healthy'
    CAUTION = 'caution'
    WARNING = 'warning'
    EXCEEDED = 'exceeded'

    @property
    def severity(self) -> int:
        return list(BudgetStatus).index(self)

    @property
    def color(self) -> str:
        return BUDGET_STATUS_COLORS[self]


BUDGET_STATUS_COLORS: Dict[BudgetStatus, str] = {
    BudgetStatus.HEALTHY: '#10b981',
    BudgetStatus.CAUTION: '#f59e0b',
    BudgetStatus.WARNING: '#ef4444',
    BudgetStatus.EXCEEDED: '#dc2626',
}


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    errors: List[str] = field(default_factory=list)


def new_id() -> str:
    """Generate a fresh opaque transaction identifier."""
    return uuid4().hex


@dataclass
class Transaction:
    id: str
    type: TransactionType
    amount: float
    category: Category
    description: str
    date: str  # ISO calendar date, e.g. "2024-01-05"
    timestamp: str  # creation instant, ISO-8601
    payment_method: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """JSON-safe mapping in the persisted record shape."""
        data: Dict[str, Any] = {
            'id': self.id,
            'type': self.type.value,
            'amount': self.amount,
            'category': self.category.value,
            'description': self.description,
            'date': self.date,
            'timestamp': self.timestamp,
        }
        if self.payment_method is not None:
            data['payment_method'] = self.payment_method
        return data


def create_transaction(
    type: Union[TransactionType, str],
    amount: float,
    category: Union[Category, str],
    description: str = '',
    date: Union[date, str, None] = None,
    payment_method: Optional[str] = None,
) -> Transaction:
    """Build a new transaction with a fresh id and creation timestamp.

    ``date`` defaults to today.  Unknown categories raise ``ValueError``; run
    :func:`finance_tracker.validation.validate_expense` first when the input
    comes from a user.
    """
    parsed_category = Category.parse(category)
    if parsed_category is None:
        raise ValueError(f"Unknown category: {category!r}")
    return Transaction(
        id=new_id(),
        type=TransactionType(type),
        amount=float(amount),
        category=parsed_category,
        description=description or '',
        date=_iso_date(date if date is not None else datetime.now().date()),
        timestamp=datetime.now().isoformat(),
        payment_method=payment_method,
    )


def _iso_date(value: Union[date, str]) -> str:
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def as_record(record: Any) -> Mapping[str, Any]:
    """Return a mapping view of a record (``Transaction`` or mapping)."""
    if isinstance(record, Transaction):
        return record.to_dict()
    return record
