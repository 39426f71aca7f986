"""Configuration management for the finance tracker.

This module centralizes all configuration values including paths,
defaults, and environment variable overrides.
"""

from __future__ import annotations

import os
from pathlib import Path

# Base project root - assumes this file is in finance_tracker/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# Data directories
DATA_DIR = Path(os.getenv("FINTRACK_DATA_DIR", _PROJECT_ROOT / "data"))
EXPORT_DIR = Path(os.getenv("FINTRACK_EXPORT_DIR", DATA_DIR / "exports"))

# Key-value blob holding transactions and budgets
STORE_PATH = Path(
    os.getenv("FINTRACK_STORE_PATH", DATA_DIR / "finance_store.json")
).resolve()

# Keys inside the store
TRANSACTIONS_KEY = "transactions"
BUDGETS_KEY = "budgets"

LOG_LEVEL = os.getenv("FINTRACK_LOG_LEVEL", "INFO")
CURRENCY = os.getenv("FINTRACK_CURRENCY", "USD")


def ensure_data_directories() -> None:
    """Create all required data directories if they don't exist."""
    for directory in [DATA_DIR, EXPORT_DIR, STORE_PATH.parent]:
        directory.mkdir(parents=True, exist_ok=True)


def get_store_path() -> str:
    """Get the store path as a string."""
    return str(STORE_PATH)
