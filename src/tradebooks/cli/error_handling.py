"""Rendering of domain errors on the command line."""

import logging

import click

from tradebooks.domain.errors import ConsistencyError, DomainError, ValidationError

logger = logging.getLogger(__name__)


def handle_domain_error(ctx: click.Context, error: DomainError) -> None:
    """Print a domain error to stderr and exit with status 1.

    Consistency errors mean the books need attention (a missing system
    account, an unbalanced write), so they get a hint about the chart.
    """
    logger.debug("Command %s failed", ctx.command_path, exc_info=error)
    click.echo(f"Error: {error}", err=True)
    if isinstance(error, ValidationError) and error.field:
        click.echo(f"  (check the {error.field.replace('_', ' ')} value)", err=True)
    elif isinstance(error, ConsistencyError):
        click.echo("  Run 'tradebooks init-accounts' to restore the default chart.", err=True)
    ctx.exit(1)
