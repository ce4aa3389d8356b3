"""In-memory database implementation.

Verifications live in an append-only arena (a list whose position is the
insertion sequence) with index maps by account code and by calendar month.
Appends are O(1); range queries only visit the months the range covers.
Readers bound every query by the arena length observed when the query
starts, so a concurrent append is never seen half-way.
"""

from collections import defaultdict
from datetime import date
from typing import Optional

from dateutil.relativedelta import relativedelta

from ledgerkit.database.base import Database
from ledgerkit.domain.entities import Verification
from ledgerkit.domain.errors import DuplicateVerificationError, duplicate_verification


class InMemoryDatabase(Database):
    """Arena-and-index implementation of Database interface."""

    def __init__(self):
        self._arena: list[Verification] = []
        self._by_id: dict[str, int] = {}
        self._by_account: dict[str, list[int]] = defaultdict(list)
        self._by_month: dict[tuple[int, int], list[int]] = defaultdict(list)
        self._vat_submissions: list[str] = []

    def connect(self) -> None:
        """Connect to the database."""
        pass

    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    def initialize_schema(self) -> None:
        """Initialize database schema."""
        pass

    # Verification operations
    def add_verification(self, verification: Verification) -> None:
        """Append a verification to the arena and update the indexes."""
        if verification.id in self._by_id:
            raise DuplicateVerificationError(duplicate_verification(verification.id))

        seq = len(self._arena)
        for code in {row.account_code for row in verification.rows}:
            self._by_account[code].append(seq)
        self._by_month[(verification.date.year, verification.date.month)].append(seq)
        self._by_id[verification.id] = seq
        # Publishing to the arena last makes the entry visible to readers
        self._arena.append(verification)

    def get_verification(self, verification_id: str) -> Optional[Verification]:
        """Get verification by ID."""
        seq = self._by_id.get(verification_id)
        if seq is None or seq >= len(self._arena):
            return None
        return self._arena[seq]

    def verification_exists(self, verification_id: str) -> bool:
        """Check if a verification with the given ID exists."""
        return self.get_verification(verification_id) is not None

    def count_verifications(self) -> int:
        """Number of stored verifications."""
        return len(self._arena)

    def _month_candidates(
        self, start_date: Optional[date], end_date: Optional[date], limit: int
    ) -> set[int]:
        months = list(self._by_month.keys())
        if not months:
            return set()
        first = min(months)
        if start_date is not None:
            first = max(first, (start_date.year, start_date.month))
        last = max(months)
        if end_date is not None:
            last = min(last, (end_date.year, end_date.month))

        candidates: set[int] = set()
        cursor = date(first[0], first[1], 1)
        stop = date(last[0], last[1], 1)
        while cursor <= stop:
            for seq in self._by_month.get((cursor.year, cursor.month), ()):
                if seq < limit:
                    candidates.add(seq)
            cursor += relativedelta(months=1)
        return candidates

    def list_verifications(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_code: Optional[str] = None,
    ) -> list[Verification]:
        """List verifications ordered by date, then insertion order."""
        limit = len(self._arena)

        if account_code is not None:
            seqs = {seq for seq in self._by_account.get(account_code, ()) if seq < limit}
        elif start_date is None and end_date is None:
            seqs = set(range(limit))
        else:
            seqs = self._month_candidates(start_date, end_date, limit)

        selected = []
        for seq in seqs:
            verification = self._arena[seq]
            if start_date is not None and verification.date < start_date:
                continue
            if end_date is not None and verification.date > end_date:
                continue
            selected.append((verification.date, seq, verification))

        selected.sort(key=lambda item: (item[0], item[1]))
        return [verification for _, _, verification in selected]

    # VAT filing operations
    def mark_vat_submitted(self, period_key: str) -> None:
        """Record that the VAT declaration for a period has been filed."""
        if period_key not in self._vat_submissions:
            self._vat_submissions.append(period_key)

    def is_vat_submitted(self, period_key: str) -> bool:
        """Check whether a VAT period has been filed."""
        return period_key in self._vat_submissions

    def list_vat_submissions(self) -> list[str]:
        """List filed VAT periods in filing order."""
        return list(self._vat_submissions)
