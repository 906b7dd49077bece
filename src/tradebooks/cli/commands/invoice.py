"""Invoice number commands."""

import click
from tradebooks.domain.errors import DomainError
from tradebooks.domain.invoice import InvoiceNumberService
from tradebooks.cli.error_handling import handle_domain_error


@click.group()
def invoice_group():
    """Invoice numbering."""
    pass


@invoice_group.command("next")
@click.argument("prefix")
@click.pass_context
def next_invoice(ctx, prefix: str):
    """Issue the next invoice number for PREFIX.

    Examples:
        tradebooks invoice next PUR
    """
    try:
        click.echo(InvoiceNumberService(ctx.obj["db"]).next_invoice_number(prefix))
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register invoice commands with main CLI."""
    cli.add_command(invoice_group, name="invoice")
