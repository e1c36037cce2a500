"""Configuration for the budget tracker.

Paths and display defaults live here as module-level values, each one
overridable through a ``BUDGET_*`` environment variable.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

DATA_DIR = Path(os.getenv("BUDGET_DATA_DIR", _PROJECT_ROOT / "data"))
SEED_PATH = Path(os.getenv("BUDGET_SEED_PATH", DATA_DIR / "seed.json"))

DEFAULT_BUDGET_LIMIT = float(os.getenv("BUDGET_DEFAULT_LIMIT", "2500"))
DEFAULT_CURRENCY = os.getenv("BUDGET_DEFAULT_CURRENCY", "USD")

# How many insights the dashboard shows; generation itself is unbounded
INSIGHT_DISPLAY_LIMIT = int(os.getenv("BUDGET_INSIGHT_LIMIT", "5"))
ROLLUP_WINDOW = int(os.getenv("BUDGET_ROLLUP_WINDOW", "6"))

LOG_LEVEL = os.getenv("BUDGET_LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

EMPTY_INSIGHTS_MESSAGE = "Add more transactions to see personalized spending insights and tips."


def configure_logging(level: str | None = None) -> None:
    """Set up root logging once for the app process."""
    logging.basicConfig(level=(level or LOG_LEVEL).upper(), format=LOG_FORMAT)


def get_seed_path() -> str:
    """Seed file path as a string."""
    return str(SEED_PATH)
