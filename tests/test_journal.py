"""Tests for the journal service."""

import threading
from datetime import date
from decimal import Decimal

import pytest

from ledgerkit.domain.entities import DateRange, Verification, VerificationRow
from ledgerkit.domain.errors import (
    DuplicateVerificationError,
    InvalidRowError,
    UnbalancedEntryError,
    UnknownAccountError,
    ValidationError,
)


def _verification(verification_id, day, *rows):
    return Verification(
        id=verification_id,
        date=day,
        description="Test",
        rows=tuple(VerificationRow(code, Decimal(d), Decimal(c)) for code, d, c in rows),
    )


class TestAppend:
    """Tests for appending verifications."""

    def test_append_balanced(self, journal):
        """Test appending a balanced verification."""
        verification = _verification(
            "V1", date(2024, 3, 1), ("5010", "8000", "0"), ("1930", "0", "8000")
        )
        journal.append(verification)

        assert journal.count() == 1
        assert journal.get("V1") == verification

    def test_balance_law_holds(self, journal):
        """Test that the sum of debit minus credit over the journal is zero."""
        journal.append(
            _verification(
                "V1", date(2024, 3, 1),
                ("1510", "1250.00", "0"), ("3001", "0", "1000.00"), ("2611", "0", "250.00"),
            )
        )
        journal.append(
            _verification("V2", date(2024, 3, 5), ("1930", "1250.00", "0"), ("1510", "0", "1250.00"))
        )

        total = sum((row.amount for _, row in journal.entries().rows()), Decimal(0))
        assert total == 0

    def test_unbalanced_rejected(self, journal):
        """Test that an unbalanced verification is rejected and not stored."""
        with pytest.raises(UnbalancedEntryError):
            journal.append(
                _verification("V1", date(2024, 3, 1), ("5010", "100", "0"), ("1930", "0", "99.99"))
            )
        assert journal.count() == 0

    def test_unknown_account_rejected(self, journal):
        """Test that a row on account 9999 is rejected and the count is unchanged."""
        journal.append(
            _verification("V1", date(2024, 3, 1), ("5010", "100", "0"), ("1930", "0", "100"))
        )

        with pytest.raises(UnknownAccountError):
            journal.append(
                _verification("V2", date(2024, 3, 2), ("9999", "100", "0"), ("1930", "0", "100"))
            )
        assert journal.count() == 1
        assert journal.get("V2") is None

    @pytest.mark.parametrize(
        "row",
        [
            ("1930", "-100", "0"),
            ("1930", "100", "100"),
            ("1930", "0", "0"),
            ("1930", "100.001", "0"),
        ],
    )
    def test_invalid_rows_rejected(self, journal, row):
        """Test that negative, two-sided, empty and sub-öre rows are rejected."""
        with pytest.raises(InvalidRowError):
            journal.append(_verification("V1", date(2024, 3, 1), row, ("2081", "0", "100")))
        assert journal.count() == 0

    def test_empty_rows_rejected(self, journal):
        """Test that a verification without rows is rejected."""
        with pytest.raises(InvalidRowError):
            journal.append(_verification("V1", date(2024, 3, 1)))

    def test_empty_id_rejected(self, journal):
        """Test that a verification needs an id."""
        with pytest.raises(ValidationError):
            journal.append(
                _verification("", date(2024, 3, 1), ("5010", "100", "0"), ("1930", "0", "100"))
            )

    def test_duplicate_id_rejected(self, journal):
        """Test that an existing verification is never overwritten."""
        original = _verification("V1", date(2024, 3, 1), ("5010", "100", "0"), ("1930", "0", "100"))
        journal.append(original)

        with pytest.raises(DuplicateVerificationError):
            journal.append(
                _verification("V1", date(2024, 4, 1), ("5010", "500", "0"), ("1930", "0", "500"))
            )
        assert journal.count() == 1
        assert journal.get("V1") == original

    def test_post_generates_id(self, journal):
        """Test that post() builds and appends a verification with a fresh id."""
        verification = journal.post(
            date(2024, 3, 1),
            "Hyra",
            [VerificationRow.debit_row("5010", 8000), VerificationRow.credit_row("1930", 8000)],
        )
        assert verification.id
        assert journal.get(verification.id) == verification
        assert verification.rows[0].debit == Decimal("8000")

    def test_rows_detached_from_caller_list(self, journal):
        """Test that changing the list passed to append does not change the entry."""
        rows = [VerificationRow.debit_row("5010", 8000), VerificationRow.credit_row("1930", 8000)]
        journal.append(Verification("M1", date(2024, 3, 1), "Hyra", rows))

        rows.append(VerificationRow.debit_row("5010", 999))

        stored = journal.get("M1")
        assert len(stored.rows) == 2
        assert stored.is_balanced
        assert isinstance(stored.rows, tuple)

    def test_int_and_float_amounts(self, journal):
        """Test that rows built with plain numbers are booked as Decimal."""
        journal.append(
            Verification(
                "X1",
                date(2024, 1, 1),
                "Aktiekapital",
                (VerificationRow("1930", 100), VerificationRow("2081", credit=99.5),
                 VerificationRow("2081", credit=0.5)),
            )
        )

        stored = journal.get("X1")
        assert stored.total_debit == Decimal("100")
        assert stored.total_credit == Decimal("100.0")
        assert all(isinstance(row.credit, Decimal) for row in stored.rows)

    def test_float_with_too_many_decimals_rejected(self, journal):
        """Test that a float amount below one öre is rejected as an invalid row."""
        with pytest.raises(InvalidRowError):
            journal.append(
                Verification(
                    "X2",
                    date(2024, 1, 1),
                    "Test",
                    (VerificationRow("1930", 0.125), VerificationRow("2081", credit=0.125)),
                )
            )
        assert journal.count() == 0

    def test_concurrent_appends(self, memory_db, registry):
        """Test that concurrent appends are all stored exactly once."""
        from ledgerkit.domain.journal import Journal

        journal = Journal(memory_db, registry)

        def worker(offset):
            for i in range(25):
                journal.post(
                    date(2024, 1 + (i % 12), 1),
                    "Parallel",
                    [VerificationRow.debit_row("5010", 1), VerificationRow.credit_row("1930", 1)],
                    verification_id=f"T{offset}-{i}",
                )

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert journal.count() == 100
        assert len(list(journal.entries())) == 100


class TestEntriesInRange:
    """Tests for reading the journal."""

    def test_ordered_by_date_then_insertion(self, journal):
        """Test that entries come in date order, ties in insertion order."""
        for verification_id, day in [
            ("A", date(2024, 5, 2)),
            ("B", date(2024, 5, 1)),
            ("C", date(2024, 5, 2)),
            ("D", date(2024, 4, 30)),
        ]:
            journal.append(
                _verification(verification_id, day, ("5010", "10", "0"), ("1930", "0", "10"))
            )

        assert [v.id for v in journal.entries()] == ["D", "B", "A", "C"]

    def test_range_is_inclusive(self, journal):
        """Test that both range bounds are inclusive."""
        for verification_id, day in [
            ("Q2-end", date(2024, 6, 30)),
            ("Q3-start", date(2024, 7, 1)),
            ("Q3-end", date(2024, 9, 30)),
            ("Q4-start", date(2024, 10, 1)),
        ]:
            journal.append(
                _verification(verification_id, day, ("5010", "10", "0"), ("1930", "0", "10"))
            )

        view = journal.entries_in_range(date(2024, 7, 1), date(2024, 9, 30))
        assert [v.id for v in view] == ["Q3-start", "Q3-end"]
        assert [v.id for v in journal.entries(DateRange(end=date(2024, 6, 30)))] == ["Q2-end"]
        assert [v.id for v in journal.entries(DateRange(start=date(2024, 10, 1)))] == ["Q4-start"]

    def test_view_is_restartable(self, journal):
        """Test that a view can be iterated again and sees later appends."""
        journal.append(_verification("V1", date(2024, 3, 1), ("5010", "10", "0"), ("1930", "0", "10")))
        view = journal.entries_in_range()

        assert [v.id for v in view] == ["V1"]
        assert [v.id for v in view] == ["V1"]

        journal.append(_verification("V2", date(2024, 3, 2), ("5010", "10", "0"), ("1930", "0", "10")))
        assert [v.id for v in view] == ["V1", "V2"]

    def test_entries_for_account(self, journal):
        """Test filtering verifications by account code."""
        journal.append(_verification("V1", date(2024, 3, 1), ("5010", "10", "0"), ("1930", "0", "10")))
        journal.append(_verification("V2", date(2024, 3, 2), ("5420", "10", "0"), ("2440", "0", "10")))

        assert [v.id for v in journal.entries_for_account("1930")] == ["V1"]
        assert [v.id for v in journal.entries_for_account("2440")] == ["V2"]
        assert list(journal.entries_for_account("1510")) == []

    def test_empty_journal(self, journal):
        """Test that an empty journal yields nothing."""
        assert list(journal.entries()) == []
        assert len(journal) == 0
