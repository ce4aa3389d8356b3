"""Shared pytest fixtures for ledgerkit tests."""

import os
import tempfile
from datetime import date
from decimal import Decimal

import pytest

from ledgerkit.database.factories import create_memory_database, create_sqlite_database
from ledgerkit.domain.accounts import load_chart
from ledgerkit.domain.entities import VerificationRow
from ledgerkit.domain.journal import Journal
from ledgerkit.domain.reporting import ReportingService

TODAY = date(2024, 12, 1)


@pytest.fixture
def temp_db():
    """Create a temporary SQLite database for testing."""
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
def memory_db():
    """Create an empty in-memory database."""
    db = create_memory_database()
    db.connect()
    db.initialize_schema()
    yield db
    db.disconnect()


@pytest.fixture(params=["sqlite", "memory"])
def db(request):
    """Run the test once against each storage backend."""
    if request.param == "sqlite":
        return request.getfixturevalue("temp_db")
    return request.getfixturevalue("memory_db")


@pytest.fixture
def registry(monkeypatch):
    """Bundled BAS chart of accounts."""
    monkeypatch.delenv("LEDGERKIT_CHART_PATH", raising=False)
    return load_chart()


@pytest.fixture
def journal(db, registry):
    """Create a Journal over the parametrized backend."""
    return Journal(db, registry)


@pytest.fixture
def reporting(journal, registry):
    """Create a ReportingService with a fixed clock (2024-12-01)."""
    return ReportingService(journal, registry, today=lambda: TODAY)


@pytest.fixture
def book(journal):
    """Post a verification from (code, debit, credit) tuples."""

    def _book(day, description, *rows, verification_id=None, source_type="manual"):
        return journal.post(
            day,
            description,
            [
                VerificationRow(code, Decimal(str(debit)), Decimal(str(credit)))
                for code, debit, credit in rows
            ],
            verification_id=verification_id,
            source_type=source_type,
        )

    return _book


@pytest.fixture
def sample_ledger(book):
    """A small year of activity: share capital, sales, purchases and salaries."""
    book(date(2024, 1, 2), "Aktiekapital", ("1930", 50000, 0), ("2081", 0, 50000),
         verification_id="V1")
    book(date(2024, 7, 10), "Faktura 1001", ("1510", 12500, 0), ("3001", 0, 10000),
         ("2611", 0, 2500), verification_id="V2")
    book(date(2024, 8, 3), "Inbetalning 1001", ("1930", 12500, 0), ("1510", 0, 12500),
         verification_id="V3")
    book(date(2024, 9, 15), "Programvara", ("5420", 4000, 0), ("2640", 1000, 0),
         ("2440", 0, 5000), verification_id="V4")
    book(date(2024, 9, 25), "Lön september", ("7010", 3000, 0), ("1930", 0, 3000),
         verification_id="V5")
    return book


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
