"""Runtime settings and import limits."""

import os
from pathlib import Path

DB_PATH_ENV = "BANKIMPORT_DB_PATH"
TENANT_ENV = "BANKIMPORT_TENANT"
LOG_LEVEL_ENV = "BANKIMPORT_LOG_LEVEL"

DEFAULT_TENANT = "default"
DEFAULT_LOG_LEVEL = "WARNING"

# Uploaded files larger than this are rejected.
MAX_FILE_SIZE = 5 * 1024 * 1024

# The header row is the first of this many rows with enough non-empty cells.
HEADER_SCAN_ROWS = 5
MIN_HEADER_CELLS = 3

SUPPORTED_EXTENSIONS = (".csv", ".tsv", ".txt", ".xlsx")

# Fallback accounts when neither learning nor keywords resolve one.
DEFAULT_INCOME_ACCOUNT_CODE = "401"
DEFAULT_EXPENSE_ACCOUNT_CODE = "501"


def default_database_path() -> str:
    """Return the database path from the environment or ~/.bankimport/bankimport.db."""
    database_path = os.environ.get(DB_PATH_ENV)
    if database_path:
        return database_path

    db_dir = Path.home() / ".bankimport"
    db_dir.mkdir(exist_ok=True)
    return str(db_dir / "bankimport.db")
