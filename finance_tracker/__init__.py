"""Top‑level package for the Finance Tracker.

The primary modules are:

* ``analytics`` – pure aggregation functions over transaction records
* ``charts`` / ``visualization`` – chart-ready series and Plotly figures
* ``store`` – the transaction/budget store and its key-value backends
* ``app`` – a Streamlit app that ties everything together

To run the app from the command line you can execute:

```bash
streamlit run finance_tracker/app.py
```

or ``python run_app.py`` from the project root.
"""

from . import analytics  # noqa: F401  # re-exported for convenience
from . import charts  # noqa: F401  # re-exported for convenience
from .models import BudgetStatus, Category, Transaction, TransactionType  # noqa: F401
from .store import FinanceStore, JsonFileStore, MemoryStore  # noqa: F401

__all__ = [
    "analytics",
    "charts",
    "BudgetStatus",
    "Category",
    "Transaction",
    "TransactionType",
    "FinanceStore",
    "JsonFileStore",
    "MemoryStore",
]
