"""Document booking commands."""

import json

import click

from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.domain.documents import parse_document
from ledgerkit.domain.errors import DomainError


@click.group()
def document_group():
    """Book invoices, receipts and manual entries from JSON documents."""
    pass


@document_group.command("book")
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--id", "verification_id", help="Verification id (derived or generated if omitted)")
@click.pass_context
def book_document(ctx, file_path: str, verification_id: str | None) -> None:
    """Parse a document file and append it to the journal.

    The JSON object must carry a "kind" of verification, invoice,
    supplier_invoice or receipt.

    Examples:
        ledgerkit document book faktura-1001.json
    """
    journal = ctx.obj["journal"]

    try:
        with open(file_path, encoding="utf-8") as f:
            payload = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        click.echo(f"Error: Could not read document: {e}", err=True)
        ctx.exit(1)

    try:
        document = parse_document(payload)
        draft = document.to_verification(verification_id)
        verification = journal.post(
            draft.date,
            draft.description,
            draft.rows,
            verification_id=draft.id or None,
            source_type=draft.source_type,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Booked {document.kind} as verification {verification.id}")
    for row in verification.rows:
        side = "D" if row.debit else "C"
        click.echo(f"  {row.account_code} {side} {row.debit or row.credit:>14,.2f}")


def register_commands(cli: click.Group) -> None:
    """Register document commands with main CLI."""
    cli.add_command(document_group, name="document")
