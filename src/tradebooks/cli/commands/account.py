"""Chart of accounts commands."""

import click
from tradebooks.domain.account import AccountService
from tradebooks.domain.balance import BalanceService
from tradebooks.domain.entities import AccountType, ChartNode
from tradebooks.domain.errors import DomainError
from tradebooks.cli.account_resolution import (
    parse_amount_or_exit,
    parse_date_or_exit,
    resolve_account_or_exit,
)
from tradebooks.cli.error_handling import handle_domain_error

ACCOUNT_TYPES = [t.value for t in AccountType]


@click.group()
def account_group():
    """Manage the chart of accounts."""
    pass


@account_group.command("create")
@click.argument("code")
@click.argument("name")
@click.option(
    "--type",
    "account_type",
    required=True,
    type=click.Choice(ACCOUNT_TYPES, case_sensitive=False),
    help="Account type",
)
@click.option("--parent", help="Parent account code or ID")
@click.option("--description", help="Account description")
@click.option("--opening-balance", default="0", help="Opening balance (default 0)")
@click.pass_context
def create_account(
    ctx,
    code: str,
    name: str,
    account_type: str,
    parent: str | None,
    description: str | None,
    opening_balance: str,
):
    """Create a new account.

    Examples:
        tradebooks account create 5330 "Staff Meals" --type EXPENSE --parent 5300
        tradebooks account create 1114 "Cash in Bank - Payroll" --type ASSET --parent 1110
    """
    db = ctx.obj["db"]
    service = AccountService(db)

    parent_id = resolve_account_or_exit(ctx, service, parent) if parent else None
    balance = parse_amount_or_exit(ctx, opening_balance, "opening balance")

    try:
        account_id = service.create_account(
            code=code,
            name=name,
            account_type=account_type,
            parent_id=parent_id,
            description=description,
            opening_balance=balance,
        )
        click.echo(f"Created account {code} '{name}' (ID: {account_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@account_group.command("list")
@click.option(
    "--type",
    "account_type",
    type=click.Choice(ACCOUNT_TYPES, case_sensitive=False),
    help="Only show accounts of this type",
)
@click.option("--active-only", is_flag=True, help="Hide inactive accounts")
@click.pass_context
def list_accounts(ctx, account_type: str | None, active_only: bool):
    """List accounts ordered by code."""
    db = ctx.obj["db"]
    service = AccountService(db)

    accounts = service.list_accounts(account_type=account_type, active_only=active_only)
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 72)
    for acc in accounts:
        flags = []
        if acc.is_seeded:
            flags.append("system")
        if not acc.is_active:
            flags.append("inactive")
        suffix = f" ({', '.join(flags)})" if flags else ""
        click.echo(f"ID: {acc.id:3d} | {acc.code:6s} | {acc.name:32s} | {acc.account_type.value}{suffix}")


@account_group.command("update")
@click.argument("account", metavar="ACCOUNT")
@click.option("--code", help="New account code")
@click.option("--name", help="New account name")
@click.option(
    "--type",
    "account_type",
    type=click.Choice(ACCOUNT_TYPES, case_sensitive=False),
    help="New account type",
)
@click.option("--parent", help="New parent account code or ID")
@click.option("--root", is_flag=True, help="Move the account to the top of the chart")
@click.option("--description", help="New description")
@click.option("--opening-balance", help="New opening balance")
@click.pass_context
def update_account(
    ctx,
    account: str,
    code: str | None,
    name: str | None,
    account_type: str | None,
    parent: str | None,
    root: bool,
    description: str | None,
    opening_balance: str | None,
) -> None:
    """Update an account.

    ACCOUNT can be an account code or ID. System accounts cannot be changed.

    Examples:
        tradebooks account update 5330 --name "Staff Meals & Tea"
        tradebooks account update 5330 --parent 5200
    """
    db = ctx.obj["db"]
    service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, service, account)

    if parent and root:
        click.echo("Error: --parent and --root cannot be combined.", err=True)
        ctx.exit(1)

    patch = {}
    if code is not None:
        patch["code"] = code
    if name is not None:
        patch["name"] = name
    if account_type is not None:
        patch["account_type"] = account_type
    if parent:
        patch["parent_id"] = resolve_account_or_exit(ctx, service, parent)
    if root:
        patch["parent_id"] = None
    if description is not None:
        patch["description"] = description
    if opening_balance is not None:
        patch["opening_balance"] = parse_amount_or_exit(ctx, opening_balance, "opening balance")

    if not patch:
        click.echo("Nothing to update.")
        return

    try:
        updated = service.update_account(account_id, **patch)
        click.echo(f"Updated account {updated.code} '{updated.name}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--force", is_flag=True, help="Move child accounts to the top level and delete")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_account(ctx, account: str, force: bool, yes: bool) -> None:
    """Delete an account.

    ACCOUNT can be an account code or ID.

    Accounts with ledger entries are never deleted; deactivate them instead.

    Examples:
        tradebooks account delete 5330
        tradebooks account delete 5330 --force --yes
    """
    db = ctx.obj["db"]
    service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, service, account)
    account_obj = service.get_account(account_id)

    if not yes and not click.confirm(
        f"Are you sure you want to delete account {account_obj.code} '{account_obj.name}'?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_account(account_id, force=force)
        click.echo(f"Deleted account {account_obj.code} '{account_obj.name}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


@account_group.command("activate")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def activate_account(ctx, account: str) -> None:
    """Mark an account active."""
    db = ctx.obj["db"]
    service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, service, account)
    try:
        service.activate_account(account_id)
        click.echo(f"Activated account {account}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@account_group.command("deactivate")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def deactivate_account(ctx, account: str) -> None:
    """Mark an account inactive."""
    db = ctx.obj["db"]
    service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, service, account)
    try:
        service.deactivate_account(account_id)
        click.echo(f"Deactivated account {account}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def _display_chart(nodes: list[ChartNode], indent: int = 0) -> None:
    for node in nodes:
        acc = node.account
        marker = "" if acc.is_active else " (inactive)"
        click.echo(f"{'    ' * indent}{acc.code} {acc.name} [{acc.account_type.value}]{marker}")
        _display_chart(list(node.children), indent + 1)


@account_group.command("chart")
@click.pass_context
def show_chart(ctx) -> None:
    """Show the chart of accounts as a tree."""
    db = ctx.obj["db"]
    chart = AccountService(db).get_chart()
    if not chart:
        click.echo("No accounts found. Run 'tradebooks init-accounts' to create the default chart.")
        return
    _display_chart(chart)


@account_group.command("balance")
@click.argument("account", metavar="ACCOUNT")
@click.option("--as-of", help="Balance as of this date (default: all entries)")
@click.pass_context
def show_balance(ctx, account: str, as_of: str | None) -> None:
    """Show the balance of an account.

    Examples:
        tradebooks account balance 1111
        tradebooks account balance 2110 --as-of 2024-03-31
    """
    db = ctx.obj["db"]
    account_id = resolve_account_or_exit(ctx, AccountService(db), account)
    as_of_date = parse_date_or_exit(ctx, as_of, "as-of date")
    service = BalanceService(db)

    try:
        balance = service.get_balance(account_id, as_of_date)
        described = service.describe_balance(account_id, as_of_date)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Debits:  {balance.debit_total:>14,.2f}")
    click.echo(f"Credits: {balance.credit_total:>14,.2f}")
    click.echo(
        f"Balance: {described.absolute_balance:>14,.2f} {described.balance_label}"
        f"  ({described.description})"
    )
    if described.warning:
        click.echo(f"Warning: {described.warning}")


@account_group.command("ledger")
@click.argument("account", metavar="ACCOUNT")
@click.option("--as-of", help="Only show entries up to this date")
@click.pass_context
def show_ledger(ctx, account: str, as_of: str | None) -> None:
    """Show the ledger of an account with running balances."""
    db = ctx.obj["db"]
    account_id = resolve_account_or_exit(ctx, AccountService(db), account)
    as_of_date = parse_date_or_exit(ctx, as_of, "as-of date")

    try:
        ledger = BalanceService(db).get_ledger(account_id, as_of_date)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"\nLedger: {ledger.account_name} ({ledger.account_type.value})")
    click.echo("-" * 96)
    click.echo(f"{'Opening balance':<70} {ledger.opening_balance:>14,.2f}")
    for line in ledger.entries:
        click.echo(
            f"{line.date} | #{line.transaction_id:<5d} | {(line.description or '')[:30]:30s} | "
            f"{line.debit_amount:>10,.2f} | {line.credit_amount:>10,.2f} | "
            f"{abs(line.running_balance):>12,.2f} {line.balance_label}"
        )
    click.echo("-" * 96)
    click.echo(f"{'Closing balance':<70} {ledger.closing_balance:>14,.2f}")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
