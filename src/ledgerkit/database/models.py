"""SQLAlchemy models for the ledgerkit database."""

from datetime import datetime, UTC
from decimal import Decimal
from sqlalchemy import (
    CheckConstraint,
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Verification(Base):
    """Journal entry model.

    ``seq`` is the autoincrement primary key and records insertion order,
    which breaks ties between verifications dated the same day.
    """

    __tablename__ = "verifications"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String, unique=True, nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    description = Column(String, nullable=False)
    source_type = Column(String, nullable=False, default="manual")
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    rows = relationship(
        "VerificationRow",
        back_populates="verification",
        order_by="VerificationRow.position",
        cascade="all, delete-orphan",
    )


class VerificationRow(Base):
    """Journal row model (konteringsrad)."""

    __tablename__ = "verification_rows"

    id = Column(Integer, primary_key=True)
    verification_seq = Column(Integer, ForeignKey("verifications.seq"), nullable=False)
    position = Column(Integer, nullable=False)
    account_code = Column(String(10), nullable=False, index=True)
    debit = Column(Numeric(15, 2), nullable=False, default=Decimal(0))
    credit = Column(Numeric(15, 2), nullable=False, default=Decimal(0))
    description = Column(String, nullable=True)

    # Either debit or credit, never both
    __table_args__ = (
        CheckConstraint(
            "(debit > 0 AND credit = 0) OR (debit = 0 AND credit > 0)",
            name="check_debit_or_credit",
        ),
    )

    # Relationships
    verification = relationship("Verification", back_populates="rows")


class VatSubmission(Base):
    """Filed VAT declaration."""

    __tablename__ = "vat_submissions"

    period = Column(String, primary_key=True)
    submitted_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
