"""VAT reporting commands."""

import json

import click

from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.domain.errors import DomainError
from ledgerkit.domain.vat import VatPeriod


@click.group()
def vat_group():
    """Quarterly VAT reports (momsdeklaration)."""
    pass


@vat_group.command("report")
@click.argument("period")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--breakdown", is_flag=True, help="Include output VAT per rate")
@click.pass_context
def vat_report(ctx, period: str, as_json: bool, breakdown: bool) -> None:
    """Show the VAT report for a quarter.

    Examples:
        ledgerkit vat report "Q4 2024"
        ledgerkit vat report "Q1 2025" --json
    """
    reporting = ctx.obj["reporting"]

    try:
        report = reporting.get_vat_report(period)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if as_json:
        click.echo(json.dumps(report.to_dict(include_breakdown=breakdown), indent=2))
        return

    click.echo(f"Momsdeklaration {report.period}")
    click.echo(f"  Due date: {report.due_date} ({report.status.value})")
    click.echo(f"  Ruta 05 Momspliktig försäljning: {report.ruta05:>16,.2f}")
    click.echo(f"  Ruta 10 Utgående moms 25 %:      {report.ruta10:>16,.2f}")
    click.echo(f"  Ruta 48 Ingående moms:           {report.ruta48:>16,.2f}")
    click.echo(f"  Ruta 49 Moms att betala:         {report.ruta49:>16,.2f}")
    if breakdown:
        for line in report.rate_lines:
            click.echo(
                f"  {line.rate * 100:>5.0f} %: output VAT {line.output_vat:,.2f}, "
                f"base {line.taxable_base:,.2f}"
            )


@vat_group.command("submit")
@click.argument("period")
@click.pass_context
def vat_submit(ctx, period: str) -> None:
    """Record that the VAT declaration for a quarter has been filed."""
    reporting = ctx.obj["reporting"]

    try:
        vat_period = VatPeriod.parse(period)
        status = reporting.vat_generator.mark_submitted(vat_period)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Marked {vat_period.key} as {status.value}")


def register_commands(cli: click.Group) -> None:
    """Register VAT commands with main CLI."""
    cli.add_command(vat_group, name="vat")
