"""Business event commands: purchases, sales, payments, receipts, expenses."""

from decimal import Decimal, InvalidOperation

import click
from tradebooks.domain.entities import (
    PaymentInput,
    PaymentMethod,
    PurchaseLineInput,
    SaleLineInput,
)
from tradebooks.domain.errors import DomainError
from tradebooks.domain.posting import PostingService
from tradebooks.cli.account_resolution import parse_amount_or_exit, parse_date_or_exit
from tradebooks.cli.error_handling import handle_domain_error
from tradebooks.utils.amount_parser import parse_amount

METHODS = [m.value for m in PaymentMethod]


def _split_or_exit(ctx, value: str, sizes: tuple[int, ...], usage: str) -> list[str]:
    parts = [p.strip() for p in value.split(":")]
    if len(parts) not in sizes or not all(parts):
        click.echo(f"Error: Invalid value '{value}', expected {usage}", err=True)
        ctx.exit(1)
    return parts


def _parse_purchase_line(ctx, value: str) -> PurchaseLineInput:
    parts = _split_or_exit(ctx, value, (3, 4), "ITEM_ID:QUANTITY:RATE[:DEDUCTION]")
    try:
        return PurchaseLineInput(
            item_id=int(parts[0]),
            quantity=_decimal(parts[1]),
            rate=parse_amount(parts[2]),
            weight_deduction=_decimal(parts[3]) if len(parts) == 4 else _decimal("0"),
        )
    except ValueError as e:
        click.echo(f"Error: Invalid item '{value}': {e}", err=True)
        ctx.exit(1)


def _parse_sale_line(ctx, value: str) -> SaleLineInput:
    parts = _split_or_exit(ctx, value, (3,), "ITEM_ID:QUANTITY:RATE")
    try:
        return SaleLineInput(
            item_id=int(parts[0]), quantity=_decimal(parts[1]), rate=parse_amount(parts[2])
        )
    except ValueError as e:
        click.echo(f"Error: Invalid item '{value}': {e}", err=True)
        ctx.exit(1)


def _decimal(value: str) -> Decimal:
    try:
        return Decimal(value)
    except InvalidOperation:
        raise ValueError(f"Could not parse number '{value}'") from None


def _parse_payment(ctx, value: str) -> PaymentInput:
    parts = _split_or_exit(ctx, value, (2, 3), "METHOD:AMOUNT[:REFERENCE]")
    method = parts[0].upper()
    if method not in METHODS:
        click.echo(f"Error: Invalid payment method '{parts[0]}'. Must be one of: {', '.join(METHODS)}", err=True)
        ctx.exit(1)
    return PaymentInput(
        method=PaymentMethod(method),
        amount=parse_amount_or_exit(ctx, parts[1], "payment amount"),
        reference=parts[2] if len(parts) == 3 else None,
    )


# Purchases


@click.group()
def purchase_group():
    """Record purchases from suppliers."""
    pass


@purchase_group.command("add")
@click.option("--supplier", "supplier_id", required=True, type=int, help="Supplier ID")
@click.option(
    "--item",
    "items",
    multiple=True,
    required=True,
    help="ITEM_ID:QUANTITY:RATE[:DEDUCTION], repeat for more lines",
)
@click.option("--pay", "payments", multiple=True, help="METHOD:AMOUNT[:REFERENCE] paid now")
@click.option("--date", help="Purchase date (default today)")
@click.option("--notes", help="Notes")
@click.pass_context
def add_purchase(ctx, supplier_id: int, items, payments, date: str | None, notes: str | None):
    """Record a purchase.

    Examples:
        tradebooks purchase add --supplier 1 --item 1:120:40:2 --pay CASH:1000
        tradebooks purchase add --supplier 2 --item 1:50:38 --item 2:10:5 --pay UPI:500
    """
    service = PostingService(ctx.obj["db"])
    lines = [_parse_purchase_line(ctx, value) for value in items]
    paid = [_parse_payment(ctx, value) for value in payments]
    posting_date = parse_date_or_exit(ctx, date)

    try:
        purchase = service.create_purchase(
            supplier_id, lines, payments=paid, date=posting_date, notes=notes
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Created purchase {purchase.invoice_no} (ID: {purchase.id})")
    click.echo(f"  Total:   {purchase.total_amount:>12,.2f}")
    click.echo(f"  Paid:    {purchase.paid_amount:>12,.2f}")
    click.echo(f"  Balance: {purchase.balance:>12,.2f}")


@purchase_group.command("delete")
@click.argument("purchase_id", type=int)
@click.pass_context
def delete_purchase(ctx, purchase_id: int):
    """Reverse and delete a purchase."""
    try:
        PostingService(ctx.obj["db"]).delete_purchase(purchase_id)
        click.echo(f"Deleted purchase {purchase_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


# Sales


@click.group()
def sale_group():
    """Record sales to customers."""
    pass


@sale_group.command("add")
@click.option("--customer", "customer_id", required=True, type=int, help="Customer ID")
@click.option(
    "--item", "items", multiple=True, required=True, help="ITEM_ID:QUANTITY:RATE, repeat for more lines"
)
@click.option("--received", default="0", help="Amount received now (default 0)")
@click.option(
    "--method",
    default="CASH",
    show_default=True,
    type=click.Choice(METHODS, case_sensitive=False),
    help="How the received amount was paid",
)
@click.option("--date", help="Sale date (default today)")
@click.option("--notes", help="Notes")
@click.pass_context
def add_sale(ctx, customer_id: int, items, received: str, method: str, date: str | None, notes: str | None):
    """Record a sale.

    Examples:
        tradebooks sale add --customer 1 --item 1:20:25 --received 500
        tradebooks sale add --customer 1 --item 1:20:25 --received 200 --method UPI
    """
    service = PostingService(ctx.obj["db"])
    lines = [_parse_sale_line(ctx, value) for value in items]
    received_amount = parse_amount_or_exit(ctx, received, "received amount")
    posting_date = parse_date_or_exit(ctx, date)

    try:
        sale = service.create_sale(
            customer_id,
            lines,
            received_amount=received_amount,
            payment_method=method,
            date=posting_date,
            notes=notes,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Created sale {sale.invoice_no} (ID: {sale.id})")
    click.echo(f"  Total:    {sale.total_amount:>12,.2f}")
    click.echo(f"  Received: {sale.received_amount:>12,.2f}")
    click.echo(f"  Balance:  {sale.balance:>12,.2f}")


@sale_group.command("delete")
@click.argument("sale_id", type=int)
@click.pass_context
def delete_sale(ctx, sale_id: int):
    """Reverse and delete a sale."""
    try:
        PostingService(ctx.obj["db"]).delete_sale(sale_id)
        click.echo(f"Deleted sale {sale_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


# Payments


@click.group()
def payment_group():
    """Record payments to suppliers."""
    pass


@payment_group.command("add")
@click.option("--supplier", "supplier_id", required=True, type=int, help="Supplier ID")
@click.option("--amount", required=True, help="Amount paid")
@click.option(
    "--method",
    required=True,
    type=click.Choice(METHODS, case_sensitive=False),
    help="Payment method",
)
@click.option("--purchase", "purchase_id", type=int, help="Purchase ID the payment settles")
@click.option("--date", help="Payment date (default today)")
@click.option("--reference", help="Cheque number or transfer reference")
@click.pass_context
def add_payment(ctx, supplier_id: int, amount: str, method: str, purchase_id: int | None, date: str | None, reference: str | None):
    """Record a payment to a supplier."""
    service = PostingService(ctx.obj["db"])
    payment_amount = parse_amount_or_exit(ctx, amount)
    posting_date = parse_date_or_exit(ctx, date)

    try:
        payment = service.create_payment(
            supplier_id,
            payment_amount,
            method,
            purchase_id=purchase_id,
            date=posting_date,
            reference=reference,
        )
        click.echo(f"Created payment {payment.id}: {payment.amount:,.2f} by {payment.payment_method.value}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@payment_group.command("delete")
@click.argument("payment_id", type=int)
@click.pass_context
def delete_payment(ctx, payment_id: int):
    """Reverse and delete a payment."""
    try:
        PostingService(ctx.obj["db"]).delete_payment(payment_id)
        click.echo(f"Deleted payment {payment_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


# Receipts


@click.group()
def receipt_group():
    """Record money received from customers."""
    pass


@receipt_group.command("add")
@click.option("--customer", "customer_id", required=True, type=int, help="Customer ID")
@click.option("--amount", required=True, help="Amount received")
@click.option(
    "--method",
    required=True,
    type=click.Choice(METHODS, case_sensitive=False),
    help="Payment method",
)
@click.option("--sale", "sale_id", type=int, help="Sale ID the receipt settles")
@click.option("--date", help="Receipt date (default today)")
@click.option("--reference", help="Cheque number or transfer reference")
@click.pass_context
def add_receipt(ctx, customer_id: int, amount: str, method: str, sale_id: int | None, date: str | None, reference: str | None):
    """Record money received from a customer."""
    service = PostingService(ctx.obj["db"])
    receipt_amount = parse_amount_or_exit(ctx, amount)
    posting_date = parse_date_or_exit(ctx, date)

    try:
        receipt = service.create_receipt(
            customer_id,
            receipt_amount,
            method,
            sale_id=sale_id,
            date=posting_date,
            reference=reference,
        )
        click.echo(f"Created receipt {receipt.id}: {receipt.amount:,.2f} by {receipt.payment_method.value}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@receipt_group.command("delete")
@click.argument("receipt_id", type=int)
@click.pass_context
def delete_receipt(ctx, receipt_id: int):
    """Reverse and delete a receipt."""
    try:
        PostingService(ctx.obj["db"]).delete_receipt(receipt_id)
        click.echo(f"Deleted receipt {receipt_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


# Expenses


@click.group()
def expense_group():
    """Record cash expenses."""
    pass


@expense_group.command("add")
@click.option("--category", required=True, help="Expense account code or name, e.g. 'Rent'")
@click.option("--amount", required=True, help="Amount paid")
@click.option("--date", help="Expense date (default today)")
@click.option("--description", help="Description")
@click.pass_context
def add_expense(ctx, category: str, amount: str, date: str | None, description: str | None):
    """Record a cash expense.

    Examples:
        tradebooks expense add --category Rent --amount 5000
        tradebooks expense add --category 5230 --amount 350 --description "Truck diesel"
    """
    service = PostingService(ctx.obj["db"])
    expense_amount = parse_amount_or_exit(ctx, amount)
    posting_date = parse_date_or_exit(ctx, date)

    try:
        expense = service.create_expense(
            category, expense_amount, date=posting_date, description=description
        )
        click.echo(f"Created expense {expense.id}: {expense.amount:,.2f} ({expense.category})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@expense_group.command("delete")
@click.argument("expense_id", type=int)
@click.pass_context
def delete_expense(ctx, expense_id: int):
    """Reverse and delete an expense."""
    try:
        PostingService(ctx.obj["db"]).delete_expense(expense_id)
        click.echo(f"Deleted expense {expense_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register posting commands with main CLI."""
    cli.add_command(purchase_group, name="purchase")
    cli.add_command(sale_group, name="sale")
    cli.add_command(payment_group, name="payment")
    cli.add_command(receipt_group, name="receipt")
    cli.add_command(expense_group, name="expense")
