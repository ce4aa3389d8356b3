"""Journal domain service - append-only store of balanced verifications."""

import threading
import uuid
from datetime import date
from decimal import Decimal
from typing import Iterable, Iterator, Optional

from ledgerkit.database.base import Database
from ledgerkit.domain.accounts import AccountRegistry
from ledgerkit.domain.entities import ZERO, DateRange, Verification, VerificationRow
from ledgerkit.domain.errors import (
    DomainError,
    DuplicateVerificationError,
    InvalidRowError,
    UnbalancedEntryError,
    UnknownAccountError,
    ValidationError,
    duplicate_verification,
    invalid_row,
    unbalanced_entry,
)
from ledgerkit.utils.logging import get_logger

log = get_logger("ledgerkit.journal")

ORE = Decimal("0.01")


class JournalView:
    """Lazy, restartable sequence of verifications in a date range.

    Every iteration reads a fresh snapshot from the backend, ordered by date
    and then by insertion order.
    """

    def __init__(
        self,
        db: Database,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_code: Optional[str] = None,
    ):
        self.db = db
        self.start_date = start_date
        self.end_date = end_date
        self.account_code = account_code

    def __iter__(self) -> Iterator[Verification]:
        return iter(
            self.db.list_verifications(
                start_date=self.start_date,
                end_date=self.end_date,
                account_code=self.account_code,
            )
        )

    def rows(self) -> Iterator[tuple[Verification, VerificationRow]]:
        """Iterate (verification, row) pairs in journal order."""
        for verification in self:
            for row in verification.rows:
                yield verification, row


class Journal:
    """Service for appending and reading verifications."""

    def __init__(self, db: Database, registry: AccountRegistry):
        """Initialize journal.

        Args:
            db: Database instance
            registry: Chart of accounts used to validate row account codes
        """
        self.db = db
        self.registry = registry
        self._append_lock = threading.Lock()

    def validate(self, verification: Verification) -> None:
        """Check a verification against the double-entry rules.

        Raises:
            InvalidRowError: If there are no rows, or a row is negative, has both
                or neither side set, or has more than two decimals
            UnknownAccountError: If a row references an unregistered account
            UnbalancedEntryError: If total debit differs from total credit
        """
        if not verification.id:
            raise ValidationError("Verification id must not be empty")
        if not verification.rows:
            raise InvalidRowError("Verification has no rows")

        for index, row in enumerate(verification.rows, start=1):
            if row.debit < 0 or row.credit < 0:
                raise InvalidRowError(invalid_row(index, "amounts must not be negative"))
            if row.debit != ZERO and row.credit != ZERO:
                raise InvalidRowError(invalid_row(index, "both debit and credit are set"))
            if row.debit == ZERO and row.credit == ZERO:
                raise InvalidRowError(invalid_row(index, "neither debit nor credit is set"))
            amount = row.debit or row.credit
            if amount != amount.quantize(ORE):
                raise InvalidRowError(invalid_row(index, "amount has more than two decimals"))
            if not self.registry.is_registered(row.account_code):
                raise UnknownAccountError(row.account_code)

        if not verification.is_balanced:
            raise UnbalancedEntryError(
                unbalanced_entry(verification.total_debit, verification.total_credit)
            )

    def append(self, verification: Verification) -> Verification:
        """Validate and append a verification.

        Nothing is written unless every check passes.

        Returns:
            The appended verification

        Raises:
            UnbalancedEntryError, UnknownAccountError, InvalidRowError,
            DuplicateVerificationError
        """
        try:
            self.validate(verification)
            with self._append_lock:
                if self.db.verification_exists(verification.id):
                    raise DuplicateVerificationError(duplicate_verification(verification.id))
                self.db.add_verification(verification)
        except DomainError as e:
            log.warning(
                "verification_rejected",
                verification_id=verification.id,
                error=type(e).__name__,
                reason=str(e),
            )
            raise

        log.info(
            "verification_appended",
            verification_id=verification.id,
            date=verification.date.isoformat(),
            rows=len(verification.rows),
            amount=str(verification.total_debit),
            source_type=verification.source_type,
        )
        return verification

    def post(
        self,
        date: date,
        description: str,
        rows: Iterable[VerificationRow],
        verification_id: Optional[str] = None,
        source_type: str = "manual",
    ) -> Verification:
        """Build a verification from its parts and append it.

        Args:
            date: Booking date
            description: Free text
            rows: Debit/credit rows
            verification_id: Optional id; a random one is generated if omitted
            source_type: Origin of the entry (manual, invoice, receipt, ...)

        Returns:
            The appended verification
        """
        verification = Verification(
            id=verification_id or uuid.uuid4().hex,
            date=date,
            description=description,
            rows=tuple(rows),
            source_type=source_type,
        )
        return self.append(verification)

    def entries_in_range(
        self, start: Optional[date] = None, end: Optional[date] = None
    ) -> JournalView:
        """Verifications dated within [start, end], both bounds optional."""
        return JournalView(self.db, start_date=start, end_date=end)

    def entries(self, date_range: Optional[DateRange] = None) -> JournalView:
        date_range = date_range or DateRange.all_time()
        return self.entries_in_range(date_range.start, date_range.end)

    def entries_for_account(
        self, account_code: str, date_range: Optional[DateRange] = None
    ) -> JournalView:
        """Verifications with at least one row on the account."""
        date_range = date_range or DateRange.all_time()
        return JournalView(
            self.db,
            start_date=date_range.start,
            end_date=date_range.end,
            account_code=account_code,
        )

    def get(self, verification_id: str) -> Optional[Verification]:
        return self.db.get_verification(verification_id)

    def count(self) -> int:
        return self.db.count_verifications()

    def __len__(self) -> int:
        return self.count()
