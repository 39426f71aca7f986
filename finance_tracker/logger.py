"""Logging setup shared by the store, exports and the Streamlit app."""

from __future__ import annotations

import logging
import sys
from logging import Logger, StreamHandler
from typing import Dict, Final

LOG_FORMAT: Final[str] = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_LOG_LEVELS: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def setup_logger(name: str = "finance_tracker", level: str = "INFO") -> Logger:
    """Configure stdout logging and return a named logger.

    The level is given as a string (``"DEBUG"``, ``"info"`` ...).  Unknown
    values fall back to ``INFO``.
    """
    log_level = _LOG_LEVELS.get(str(level).upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        handlers=[StreamHandler(sys.stdout)],
        force=True,
    )

    return logging.getLogger(name)
