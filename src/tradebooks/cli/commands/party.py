"""Supplier, customer and item commands."""

import click
from tradebooks.domain.errors import DomainError
from tradebooks.domain.party import PartyService
from tradebooks.cli.error_handling import handle_domain_error


@click.group()
def supplier_group():
    """Manage suppliers."""
    pass


@supplier_group.command("add")
@click.argument("name")
@click.option("--phone", help="Phone number")
@click.pass_context
def add_supplier(ctx, name: str, phone: str | None):
    """Add a supplier."""
    service = PartyService(ctx.obj["db"])
    try:
        supplier_id = service.create_supplier(name, phone=phone)
        click.echo(f"Created supplier '{name}' (ID: {supplier_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@supplier_group.command("list")
@click.pass_context
def list_suppliers(ctx):
    """List suppliers with the amount owed to each."""
    suppliers = PartyService(ctx.obj["db"]).list_suppliers()
    if not suppliers:
        click.echo("No suppliers found.")
        return
    for s in suppliers:
        click.echo(f"ID: {s.id:3d} | {s.name:30s} | Owed: {s.balance:>12,.2f}")


@click.group()
def customer_group():
    """Manage customers."""
    pass


@customer_group.command("add")
@click.argument("name")
@click.option("--phone", help="Phone number")
@click.pass_context
def add_customer(ctx, name: str, phone: str | None):
    """Add a customer."""
    service = PartyService(ctx.obj["db"])
    try:
        customer_id = service.create_customer(name, phone=phone)
        click.echo(f"Created customer '{name}' (ID: {customer_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@customer_group.command("list")
@click.pass_context
def list_customers(ctx):
    """List customers with the amount each owes."""
    customers = PartyService(ctx.obj["db"]).list_customers()
    if not customers:
        click.echo("No customers found.")
        return
    for c in customers:
        click.echo(f"ID: {c.id:3d} | {c.name:30s} | Due: {c.balance:>12,.2f}")


@click.group()
def item_group():
    """Manage stock items."""
    pass


@item_group.command("add")
@click.argument("name")
@click.option("--unit", default="kg", show_default=True, help="Unit of measure")
@click.pass_context
def add_item(ctx, name: str, unit: str):
    """Add a stock item."""
    service = PartyService(ctx.obj["db"])
    try:
        item_id = service.create_item(name, unit=unit)
        click.echo(f"Created item '{name}' (ID: {item_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@item_group.command("list")
@click.pass_context
def list_items(ctx):
    """List items with current stock."""
    items = PartyService(ctx.obj["db"]).list_items()
    if not items:
        click.echo("No items found.")
        return
    for i in items:
        click.echo(f"ID: {i.id:3d} | {i.name:30s} | Stock: {i.current_stock:>10} {i.unit}")


def register_commands(cli):
    """Register party commands with main CLI."""
    cli.add_command(supplier_group, name="supplier")
    cli.add_command(customer_group, name="customer")
    cli.add_command(item_group, name="item")
