"""Initialize the default chart of accounts."""

import click
from tradebooks.domain.account import AccountService
from tradebooks.domain.seed import DEFAULT_ACCOUNTS, seed_default_accounts


@click.command("init-accounts")
@click.pass_context
def init_accounts(ctx):
    """Create the default chart of accounts.

    Existing accounts are kept; only missing codes are added.
    """
    db = ctx.obj["db"]
    service = AccountService(db)

    created = seed_default_accounts(service)
    skipped = len(DEFAULT_ACCOUNTS) - created
    click.echo(f"Created {created} accounts.")
    if skipped:
        click.echo(f"Skipped {skipped} existing accounts.")


def register_commands(cli):
    """Register init-accounts command with main CLI."""
    cli.add_command(init_accounts)
