"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the journal schema can change
without touching the domain entities.
"""

from decimal import Decimal

from ledgerkit.domain import entities as domain
from ledgerkit.database.models import (
    Verification as ORMVerification,
    VerificationRow as ORMVerificationRow,
)


def _decimal(value) -> Decimal:
    # SQLite hands Numeric columns back with float-like scale; normalise to öre
    return Decimal(str(value if value is not None else 0)).quantize(Decimal("0.01"))


def verification_row_to_domain(orm_row: ORMVerificationRow) -> domain.VerificationRow:
    """Convert SQLAlchemy VerificationRow model to domain VerificationRow entity."""
    return domain.VerificationRow(
        account_code=orm_row.account_code,
        debit=_decimal(orm_row.debit),
        credit=_decimal(orm_row.credit),
        description=orm_row.description,
    )


def verification_to_domain(orm_verification: ORMVerification) -> domain.Verification:
    """Convert SQLAlchemy Verification model to domain Verification entity."""
    return domain.Verification(
        id=orm_verification.id,
        date=orm_verification.date,
        description=orm_verification.description,
        rows=tuple(verification_row_to_domain(row) for row in orm_verification.rows),
        source_type=orm_verification.source_type,
    )


def verification_to_orm(verification: domain.Verification) -> ORMVerification:
    """Build an unsaved SQLAlchemy Verification (with rows) from a domain entity."""
    return ORMVerification(
        id=verification.id,
        date=verification.date,
        description=verification.description,
        source_type=verification.source_type,
        rows=[
            ORMVerificationRow(
                position=position,
                account_code=row.account_code,
                debit=row.debit,
                credit=row.credit,
                description=row.description,
            )
            for position, row in enumerate(verification.rows)
        ],
    )
