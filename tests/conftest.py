"""Shared pytest fixtures for bankimport tests."""

import tempfile
import os
import pytest

from bankimport.database.factories import create_sqlite_database
from bankimport.domain.batch import ImportBatchService
from bankimport.domain.directory import DirectoryService
from bankimport.domain.import_session import ImportSession
from bankimport.domain.learning import LearningService


TENANT = "tenant-a"

KB_HEADERS = ["거래일자", "적요", "입금액", "출금액", "잔액"]


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def tenant_id():
    return TENANT


@pytest.fixture
def directory_service(temp_db, tenant_id):
    """Create a DirectoryService with the default chart of accounts seeded."""
    service = DirectoryService(temp_db, tenant_id)
    service.seed_default_accounts()
    return service


@pytest.fixture
def learning_service(temp_db):
    return LearningService(temp_db)


@pytest.fixture
def batch_service(temp_db):
    return ImportBatchService(temp_db)


@pytest.fixture
def import_session(temp_db, tenant_id, directory_service):
    """Create an ImportSession for a tenant with seeded accounts."""
    return ImportSession(temp_db, tenant_id)


@pytest.fixture
def accounts_by_code(directory_service):
    """Map account code to ledger account for the seeded tenant."""
    return {a.code: a for a in directory_service.list_accounts()}


@pytest.fixture
def kb_rows():
    """Raw rows of a small Kookmin Bank export."""
    return [
        KB_HEADERS,
        ["2024-03-01", "국민연금 납부", "", "150,000", "1,850,000"],
        ["2024-03-02", "스타벅스 점심", "", "12,500", "1,837,500"],
        ["2024-03-05", "3월 급여", "2,000,000", "", "3,837,500"],
        ["", "", "", "", ""],
        ["2024-03-06", "잔액 조정", "0", "0", "3,837,500"],
    ]


@pytest.fixture
def write_csv(tmp_path):
    """Return a helper writing rows to a CSV file and returning its path."""

    def _write(rows, name="statement.csv", encoding="utf-8"):
        path = tmp_path / name
        lines = [",".join(f'"{cell}"' for cell in row) for row in rows]
        path.write_text("\n".join(lines) + "\n", encoding=encoding)
        return str(path)

    return _write


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
