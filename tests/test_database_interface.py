"""Tests for the Database interface returning domain models."""

from datetime import date
from decimal import Decimal

import pytest

from ledgerkit.database.factories import create_sqlite_database
from ledgerkit.domain import entities
from ledgerkit.domain.errors import DuplicateVerificationError


def _verification(verification_id, day, code="5010", amount="100.00"):
    return entities.Verification(
        id=verification_id,
        date=day,
        description=f"Verifikation {verification_id}",
        rows=(
            entities.VerificationRow.debit_row(code, Decimal(amount), "kostnad"),
            entities.VerificationRow.credit_row("1930", Decimal(amount)),
        ),
        source_type="receipt",
    )


class TestDatabaseInterface:
    """Tests run against both backends."""

    def test_get_verification_returns_domain_model(self, db):
        """Test that get_verification returns a domain Verification with rows in order."""
        db.add_verification(_verification("V1", date(2024, 1, 15)))

        verification = db.get_verification("V1")

        assert isinstance(verification, entities.Verification)
        assert verification.description == "Verifikation V1"
        assert verification.source_type == "receipt"
        assert [row.account_code for row in verification.rows] == ["5010", "1930"]
        assert verification.rows[0].debit == Decimal("100.00")
        assert verification.rows[0].description == "kostnad"
        assert verification.rows[1].credit == Decimal("100.00")

    def test_missing_verification(self, db):
        """Test that an unknown id returns None."""
        assert db.get_verification("nope") is None
        assert not db.verification_exists("nope")

    def test_duplicate_id(self, db):
        """Test that a backend refuses to store the same id twice."""
        db.add_verification(_verification("V1", date(2024, 1, 15)))
        with pytest.raises(DuplicateVerificationError):
            db.add_verification(_verification("V1", date(2024, 2, 15)))
        assert db.count_verifications() == 1
        assert db.get_verification("V1").date == date(2024, 1, 15)

    def test_list_filters(self, db):
        """Test date and account filters on list_verifications."""
        db.add_verification(_verification("A", date(2024, 1, 31)))
        db.add_verification(_verification("B", date(2024, 2, 1), code="5420"))
        db.add_verification(_verification("C", date(2024, 3, 1)))

        assert [v.id for v in db.list_verifications()] == ["A", "B", "C"]
        assert [v.id for v in db.list_verifications(start_date=date(2024, 2, 1))] == ["B", "C"]
        assert [v.id for v in db.list_verifications(end_date=date(2024, 2, 1))] == ["A", "B"]
        assert [v.id for v in db.list_verifications(account_code="5420")] == ["B"]
        assert [
            v.id
            for v in db.list_verifications(
                start_date=date(2024, 2, 1), end_date=date(2024, 3, 1), account_code="5010"
            )
        ] == ["C"]

    def test_vat_submissions(self, db):
        """Test recording filed VAT periods."""
        assert not db.is_vat_submitted("Q1 2024")
        db.mark_vat_submitted("Q1 2024")
        db.mark_vat_submitted("Q1 2024")

        assert db.is_vat_submitted("Q1 2024")
        assert db.list_vat_submissions() == ["Q1 2024"]


def test_sqlite_persists_across_connections(temp_db):
    """Test that a reopened SQLite file sees earlier verifications."""
    temp_db.add_verification(_verification("V1", date(2024, 1, 15)))

    reopened = create_sqlite_database(database_path=temp_db.database_path)
    reopened.connect()
    try:
        assert reopened.count_verifications() == 1
        assert reopened.get_verification("V1").rows[0].amount == Decimal("100.00")
    finally:
        reopened.disconnect()


def test_sqlite_env_path(tmp_path, monkeypatch):
    """Test that LEDGERKIT_DB_PATH selects the database file."""
    path = tmp_path / "ledger.db"
    monkeypatch.setenv("LEDGERKIT_DB_PATH", str(path))

    db = create_sqlite_database()
    db.connect()
    db.initialize_schema()
    db.disconnect()

    assert path.exists()
