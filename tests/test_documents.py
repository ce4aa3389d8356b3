"""Tests for boundary documents."""

from datetime import date
from decimal import Decimal

import pytest

from ledgerkit.domain.documents import (
    CustomerInvoiceDocument,
    ReceiptDocument,
    SupplierInvoiceDocument,
    VerificationDocument,
    parse_document,
)
from ledgerkit.domain.errors import InvalidDocumentError


def _rows(verification):
    return [(row.account_code, row.debit, row.credit) for row in verification.rows]


class TestCustomerInvoice:
    """Tests for outgoing invoices."""

    def test_default_vat_is_25_percent_included(self):
        """Test that VAT is derived from the total when not given."""
        document = parse_document(
            {
                "kind": "invoice",
                "invoice_number": "1001",
                "customer": "Acme AB",
                "date": "2024-07-10",
                "total": "12 500,00",
            }
        )
        assert isinstance(document, CustomerInvoiceDocument)

        verification = document.to_verification()
        assert verification.id == "invoice-1001"
        assert verification.source_type == "invoice"
        assert verification.date == date(2024, 7, 10)
        assert _rows(verification) == [
            ("1510", Decimal("12500.00"), 0),
            ("3001", 0, Decimal("10000.00")),
            ("2611", 0, Decimal("2500.00")),
        ]
        assert verification.is_balanced

    def test_rounding_to_ore(self):
        """Test that derived VAT is rounded half-up to öre and still balances."""
        document = parse_document(
            {"kind": "invoice", "invoice_number": "7", "customer": "B", "date": "2024-01-01",
             "total": 99.99}
        )
        verification = document.to_verification()

        assert verification.rows[2].credit == Decimal("20.00")
        assert verification.rows[1].credit == Decimal("79.99")
        assert verification.is_balanced

    def test_explicit_vat(self):
        """Test that a given VAT amount is used as is."""
        document = parse_document(
            {"kind": "invoice", "invoice_number": "8", "customer": "C", "date": "2024-01-01",
             "total": "1000", "vat_amount": "0"}
        )
        assert _rows(document.to_verification()) == [
            ("1510", Decimal("1000.00"), 0),
            ("3001", 0, Decimal("1000.00")),
        ]

    def test_vat_larger_than_total_rejected(self):
        """Test that VAT above the total is rejected."""
        document = parse_document(
            {"kind": "invoice", "invoice_number": "9", "customer": "C", "date": "2024-01-01",
             "total": "100", "vat_amount": "150"}
        )
        with pytest.raises(InvalidDocumentError):
            document.to_verification()


def test_supplier_invoice():
    """Test booking an incoming invoice with input VAT."""
    document = parse_document(
        {
            "kind": "supplier_invoice",
            "supplier": "Molnbolaget AB",
            "invoice_number": "F-55",
            "date": "2024-09-15",
            "expense_account": "5420",
            "total": "5000",
        }
    )
    assert isinstance(document, SupplierInvoiceDocument)

    verification = document.to_verification()
    assert verification.id == "supplier-F-55"
    assert _rows(verification) == [
        ("5420", Decimal("4000.00"), 0),
        ("2640", Decimal("1000.00"), 0),
        ("2440", 0, Decimal("5000.00")),
    ]


def test_receipt():
    """Test booking a receipt between two accounts."""
    document = parse_document(
        {
            "kind": "receipt",
            "date": "2024-03-01",
            "description": "Taxi",
            "debit_account": "5800",
            "credit_account": "1930",
            "amount": "245 kr",
        }
    )
    assert isinstance(document, ReceiptDocument)

    verification = document.to_verification("R-1")
    assert verification.id == "R-1"
    assert verification.source_type == "receipt"
    assert _rows(verification) == [
        ("5800", Decimal("245.00"), 0),
        ("1930", 0, Decimal("245.00")),
    ]


def test_manual_verification():
    """Test a manual verification document with explicit rows."""
    document = parse_document(
        {
            "kind": "verification",
            "id": "M-1",
            "date": "2024-02-01",
            "description": "Hyra",
            "rows": [
                {"account": "5010", "debit": "8000"},
                {"account": "1930", "credit": 8000},
            ],
        }
    )
    assert isinstance(document, VerificationDocument)
    verification = document.to_verification()
    assert verification.id == "M-1"
    assert _rows(verification) == [
        ("5010", Decimal("8000.00"), 0),
        ("1930", 0, Decimal("8000.00")),
    ]


@pytest.mark.parametrize(
    "payload",
    [
        {"kind": "banana"},
        {"invoice_number": "1"},
        {"kind": "invoice", "customer": "A", "date": "2024-01-01", "total": "100"},
        {"kind": "invoice", "invoice_number": "1", "customer": "A", "date": "2024-01-01",
         "total": "abc"},
        {"kind": "invoice", "invoice_number": "1", "customer": "A", "date": "not a date",
         "total": "100"},
        {"kind": "invoice", "invoice_number": "1", "customer": "A", "date": "2024-01-01",
         "total": "-100"},
        {"kind": "receipt", "date": "2024-01-01", "debit_account": "5800", "amount": "10"},
        {"kind": "verification", "date": "2024-01-01", "rows": "nope"},
        {"kind": "verification", "date": "2024-01-01", "rows": [{"debit": "10"}]},
    ],
)
def test_invalid_payloads(payload):
    """Test that malformed payloads raise InvalidDocumentError."""
    with pytest.raises(InvalidDocumentError):
        parse_document(payload)


def test_booked_invoice_feeds_vat_report(journal, reporting):
    """Test that a booked invoice shows up in the VAT report."""
    document = parse_document(
        {"kind": "invoice", "invoice_number": "1001", "customer": "Acme AB",
         "date": "2024-07-10", "total": "12500"}
    )
    journal.append(document.to_verification())

    report = reporting.get_vat_report("Q3 2024")
    assert report.ruta10 == Decimal("2500.00")
    assert report.ruta05 == Decimal("10000.00")
