"""Configuration management for Finwise.

This module centralizes configuration values including paths, the
persistence key, the simulated analysis delay, and environment variable
overrides.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

# Base project root - assumes this file is in finwise/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# Data directories
DATA_DIR = Path(os.getenv("FINWISE_DATA_DIR", _PROJECT_ROOT / "data"))

# Key-value store backing the grocery list
STORE_PATH = Path(
    os.getenv("FINWISE_STORE_PATH", DATA_DIR / "finwise_store.json")
).resolve()

# Storage key for the grocery list snapshot
GROCERY_LIST_KEY = "finwise-grocery-list"

# Simulated processing time before an analysis result is available
ANALYSIS_DELAY_SECONDS = float(os.getenv("FINWISE_ANALYSIS_DELAY", "1.5"))

# Maximum number of autocomplete suggestions shown at once
SUGGESTION_DISPLAY_LIMIT = 5

LOG_LEVEL = os.getenv("FINWISE_LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def ensure_data_directories() -> None:
    """Create the data directory and the store's parent if they don't exist."""
    for directory in [DATA_DIR, STORE_PATH.parent]:
        directory.mkdir(parents=True, exist_ok=True)


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for the Streamlit shell.

    ``logging.basicConfig`` is a no-op once handlers exist, so repeated
    Streamlit reruns do not stack handlers.
    """
    logging.basicConfig(level=(level or LOG_LEVEL).upper(), format=LOG_FORMAT)
