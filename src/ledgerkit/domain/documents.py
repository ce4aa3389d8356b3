"""Boundary documents that become verifications.

Inbound payloads (manual entries, customer invoices, supplier invoices,
receipts) are parsed into one typed document per kind before anything
reaches the journal. Each document knows how to book itself.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, ClassVar, Optional, Union

from ledgerkit.domain.entities import ZERO, Verification, VerificationRow, to_decimal
from ledgerkit.domain.errors import InvalidDocumentError
from ledgerkit.utils.amount_parser import parse_amount, round_ore
from ledgerkit.utils.date_parser import parse_date

STANDARD_VAT_RATE = Decimal("0.25")

# Default booking accounts
RECEIVABLES_ACCOUNT = "1510"
DOMESTIC_SALES_ACCOUNT = "3001"
OUTPUT_VAT_ACCOUNT = "2611"
INPUT_VAT_ACCOUNT = "2640"
SUPPLIER_DEBT_ACCOUNT = "2440"


def _require(payload: dict, field: str) -> Any:
    value = payload.get(field)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise InvalidDocumentError(f"Missing required field '{field}'")
    return value


def _date(payload: dict, field: str = "date") -> date:
    value = _require(payload, field)
    if isinstance(value, date):
        return value
    try:
        return parse_date(str(value))
    except ValueError as e:
        raise InvalidDocumentError(f"Invalid {field}: {e}")


def _amount(value: Any, field: str) -> Decimal:
    try:
        if isinstance(value, str):
            amount = parse_amount(value)
        else:
            amount = to_decimal(value)
    except (ValueError, ArithmeticError) as e:
        raise InvalidDocumentError(f"Invalid {field}: {e}")
    if not amount.is_finite():
        raise InvalidDocumentError(f"Invalid {field}: {value!r}")
    return round_ore(amount)


def _positive_amount(payload: dict, field: str) -> Decimal:
    amount = _amount(_require(payload, field), field)
    if amount <= ZERO:
        raise InvalidDocumentError(f"Field '{field}' must be positive, got {amount}")
    return amount


def _vat_included(total: Decimal, vat_amount: Optional[Decimal]) -> tuple[Decimal, Decimal]:
    """Split a VAT-inclusive total into (net, vat), assuming 25 % if vat is not given."""
    if vat_amount is None:
        vat_amount = round_ore(total - total / (1 + STANDARD_VAT_RATE))
    if vat_amount < ZERO or vat_amount > total:
        raise InvalidDocumentError(f"VAT amount {vat_amount} is outside 0..{total}")
    return total - vat_amount, vat_amount


def _optional_vat(payload: dict) -> Optional[Decimal]:
    value = payload.get("vat_amount")
    if value is None or value == "":
        return None
    return _amount(value, "vat_amount")


@dataclass(frozen=True)
class VerificationDocument:
    """Manually entered verification."""

    kind: ClassVar[str] = "verification"

    date: date
    description: str
    rows: tuple[VerificationRow, ...]
    id: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: dict) -> "VerificationDocument":
        raw_rows = _require(payload, "rows")
        if not isinstance(raw_rows, list):
            raise InvalidDocumentError("Field 'rows' must be a list")

        rows = []
        for index, raw in enumerate(raw_rows, start=1):
            if not isinstance(raw, dict):
                raise InvalidDocumentError(f"Row {index} must be an object")
            account = raw.get("account") or raw.get("account_code")
            if not account:
                raise InvalidDocumentError(f"Row {index} has no account")
            rows.append(
                VerificationRow(
                    account_code=str(account),
                    debit=_amount(raw.get("debit") or 0, f"row {index} debit"),
                    credit=_amount(raw.get("credit") or 0, f"row {index} credit"),
                    description=raw.get("description"),
                )
            )

        return cls(
            date=_date(payload),
            description=str(payload.get("description") or ""),
            rows=tuple(rows),
            id=payload.get("id"),
        )

    def to_verification(self, verification_id: Optional[str] = None) -> Verification:
        return Verification(
            id=verification_id or self.id or "",
            date=self.date,
            description=self.description,
            rows=self.rows,
            source_type="manual",
        )


@dataclass(frozen=True)
class CustomerInvoiceDocument:
    """Outgoing invoice, booked as a receivable with 25 % output VAT."""

    kind: ClassVar[str] = "invoice"

    invoice_number: str
    customer: str
    date: date
    total: Decimal
    vat_amount: Optional[Decimal] = None

    @classmethod
    def from_payload(cls, payload: dict) -> "CustomerInvoiceDocument":
        return cls(
            invoice_number=str(_require(payload, "invoice_number")),
            customer=str(_require(payload, "customer")),
            date=_date(payload),
            total=_positive_amount(payload, "total"),
            vat_amount=_optional_vat(payload),
        )

    def to_verification(self, verification_id: Optional[str] = None) -> Verification:
        net, vat = _vat_included(self.total, self.vat_amount)
        rows = [
            VerificationRow.debit_row(RECEIVABLES_ACCOUNT, self.total, "Kundfordringar"),
            VerificationRow.credit_row(DOMESTIC_SALES_ACCOUNT, net, "Försäljning inom Sverige"),
        ]
        if vat > ZERO:
            rows.append(VerificationRow.credit_row(OUTPUT_VAT_ACCOUNT, vat, "Utgående moms 25 %"))
        return Verification(
            id=verification_id or f"invoice-{self.invoice_number}",
            date=self.date,
            description=f"Faktura {self.invoice_number} - {self.customer}",
            rows=tuple(rows),
            source_type="invoice",
        )


@dataclass(frozen=True)
class SupplierInvoiceDocument:
    """Incoming invoice, booked as an expense with deductible input VAT."""

    kind: ClassVar[str] = "supplier_invoice"

    supplier: str
    date: date
    expense_account: str
    total: Decimal
    vat_amount: Optional[Decimal] = None
    invoice_number: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: dict) -> "SupplierInvoiceDocument":
        invoice_number = payload.get("invoice_number")
        return cls(
            supplier=str(_require(payload, "supplier")),
            date=_date(payload),
            expense_account=str(_require(payload, "expense_account")),
            total=_positive_amount(payload, "total"),
            vat_amount=_optional_vat(payload),
            invoice_number=str(invoice_number) if invoice_number else None,
        )

    def to_verification(self, verification_id: Optional[str] = None) -> Verification:
        net, vat = _vat_included(self.total, self.vat_amount)
        rows = [VerificationRow.debit_row(self.expense_account, net)]
        if vat > ZERO:
            rows.append(VerificationRow.debit_row(INPUT_VAT_ACCOUNT, vat, "Ingående moms"))
        rows.append(VerificationRow.credit_row(SUPPLIER_DEBT_ACCOUNT, self.total, "Leverantörsskulder"))

        reference = f" {self.invoice_number}" if self.invoice_number else ""
        default_id = f"supplier-{self.invoice_number}" if self.invoice_number else None
        return Verification(
            id=verification_id or default_id or "",
            date=self.date,
            description=f"Leverantörsfaktura{reference} - {self.supplier}",
            rows=tuple(rows),
            source_type="supplier_invoice",
        )


@dataclass(frozen=True)
class ReceiptDocument:
    """Receipt booked from one account to another."""

    kind: ClassVar[str] = "receipt"

    date: date
    description: str
    debit_account: str
    credit_account: str
    amount: Decimal

    @classmethod
    def from_payload(cls, payload: dict) -> "ReceiptDocument":
        return cls(
            date=_date(payload),
            description=str(payload.get("description") or "Kvitto"),
            debit_account=str(_require(payload, "debit_account")),
            credit_account=str(_require(payload, "credit_account")),
            amount=_positive_amount(payload, "amount"),
        )

    def to_verification(self, verification_id: Optional[str] = None) -> Verification:
        return Verification(
            id=verification_id or "",
            date=self.date,
            description=self.description,
            rows=(
                VerificationRow.debit_row(self.debit_account, self.amount),
                VerificationRow.credit_row(self.credit_account, self.amount),
            ),
            source_type="receipt",
        )


Document = Union[
    VerificationDocument,
    CustomerInvoiceDocument,
    SupplierInvoiceDocument,
    ReceiptDocument,
]

DOCUMENT_KINDS: dict[str, type] = {
    cls.kind: cls
    for cls in (
        VerificationDocument,
        CustomerInvoiceDocument,
        SupplierInvoiceDocument,
        ReceiptDocument,
    )
}


def parse_document(payload: dict) -> Document:
    """Parse a payload into the document type named by its 'kind' field.

    Raises:
        InvalidDocumentError: If the kind is unknown or a field is missing or malformed
    """
    if not isinstance(payload, dict):
        raise InvalidDocumentError("Document payload must be an object")
    kind = payload.get("kind")
    document_cls = DOCUMENT_KINDS.get(kind)
    if document_cls is None:
        raise InvalidDocumentError(
            f"Unknown document kind {kind!r}; expected one of {', '.join(sorted(DOCUMENT_KINDS))}"
        )
    return document_cls.from_payload(payload)
