"""Shared domain error messages and error types."""

from decimal import Decimal


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class UnbalancedEntryError(ValidationError):
    """Verification whose debit and credit totals differ."""


class InvalidRowError(ValidationError):
    """Verification row that is not a single positive debit or credit."""


class UnknownAccountError(NotFoundError):
    """Account code that is not registered in the chart of accounts."""

    def __init__(self, code: str):
        super().__init__(unknown_account(code))
        self.code = code


class InvalidPeriodError(ValidationError):
    """Malformed VAT reporting period."""


class DegenerateRatioError(DomainError):
    """Financial ratio requested as a number while its denominator is zero."""


class DuplicateVerificationError(ConflictError):
    """Verification id already present in the journal."""


class InvalidDocumentError(ValidationError):
    """Boundary document payload that cannot be turned into a verification."""


def unknown_account(code: str) -> str:
    """Return message for an unregistered account code."""
    return f"Account '{code}' is not registered in the chart of accounts"


def unbalanced_entry(total_debit: Decimal, total_credit: Decimal) -> str:
    """Return message for a verification that does not balance."""
    return (
        f"Verification does not balance: debit={total_debit}, credit={total_credit}"
    )


def invalid_row(index: int, reason: str) -> str:
    """Return message for an invalid verification row."""
    return f"Row {index}: {reason}"


def duplicate_verification(verification_id: str) -> str:
    """Return message for a verification id that already exists."""
    return (
        f"Verification '{verification_id}' already exists; "
        "post an offsetting verification instead of editing it"
    )


def invalid_period(period: str) -> str:
    """Return message for a malformed VAT period."""
    return f"Invalid VAT period '{period}': expected format 'Q<1-4> <YYYY>', e.g. 'Q4 2024'"


def undefined_ratio(name: str) -> str:
    """Return message for a ratio whose denominator is zero."""
    return f"Ratio '{name}' is undefined for the given totals (zero denominator)"
