"""Application defaults and environment overrides."""

import os
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Optional

DB_PATH_ENV = "RESALETRACK_DB_PATH"
DEFAULT_RATE_ENV = "RESALETRACK_DEFAULT_RATE"
LOG_LEVEL_ENV = "RESALETRACK_LOG_LEVEL"

DATA_DIR_NAME = ".resaletrack"
DB_FILE_NAME = "resaletrack.db"

# Key of the settings document holding the PLN -> CZK rate
EXCHANGE_RATE_KEY = "exchangeRate"

IMPORT_BATCH_SIZE = 10


def _default_exchange_rate() -> Decimal:
    raw = os.environ.get(DEFAULT_RATE_ENV)
    if raw:
        try:
            rate = Decimal(raw)
        except InvalidOperation:
            rate = Decimal("0")
        if rate.is_finite() and rate > 0:
            return rate
    return Decimal("5.6")


DEFAULT_EXCHANGE_RATE = _default_exchange_rate()


def resolve_database_path(database_path: Optional[str] = None) -> str:
    """Pick the SQLite file: explicit path, then $RESALETRACK_DB_PATH, then the home directory.

    The home-directory default is created on first use.
    """
    if database_path:
        return database_path
    from_env = os.environ.get(DB_PATH_ENV)
    if from_env:
        return from_env
    data_dir = Path.home() / DATA_DIR_NAME
    data_dir.mkdir(exist_ok=True)
    return str(data_dir / DB_FILE_NAME)
