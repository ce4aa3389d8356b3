"""Abstract storage interface for the journal."""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional

# Import entities directly to avoid circular import through domain/__init__.py
from ledgerkit.domain.entities import Verification


class Database(ABC):
    """Abstract journal storage backend.

    Verifications are append-only: the interface has no update or delete
    operation. Listing returns verifications ordered by date, then by
    insertion order.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Verification operations
    @abstractmethod
    def add_verification(self, verification: Verification) -> None:
        """Store a verification and all its rows as one atomic write."""
        pass

    @abstractmethod
    def get_verification(self, verification_id: str) -> Optional[Verification]:
        """Get verification by ID."""
        pass

    @abstractmethod
    def verification_exists(self, verification_id: str) -> bool:
        """Check if a verification with the given ID exists."""
        pass

    @abstractmethod
    def count_verifications(self) -> int:
        """Number of stored verifications."""
        pass

    @abstractmethod
    def list_verifications(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_code: Optional[str] = None,
    ) -> list[Verification]:
        """List verifications with optional filters.

        Args:
            start_date: Optional inclusive start date
            end_date: Optional inclusive end date
            account_code: Only verifications with at least one row on this account
        """
        pass

    # VAT filing operations
    @abstractmethod
    def mark_vat_submitted(self, period_key: str) -> None:
        """Record that the VAT declaration for a period has been filed."""
        pass

    @abstractmethod
    def is_vat_submitted(self, period_key: str) -> bool:
        """Check whether a VAT period has been filed."""
        pass

    @abstractmethod
    def list_vat_submissions(self) -> list[str]:
        """List filed VAT periods."""
        pass
