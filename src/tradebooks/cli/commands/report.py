"""Financial report commands."""

from datetime import date

import click
from tradebooks.domain.entities import AgingType, BalanceSheetLine
from tradebooks.domain.errors import DomainError
from tradebooks.domain.reports import ReportService
from tradebooks.cli.account_resolution import parse_date_or_exit
from tradebooks.cli.error_handling import handle_domain_error
from tradebooks.utils.date_parser import get_date_range

PERIODS = ["this-month", "last-month", "this-year", "last-year"]


def _resolve_range(ctx, start: str | None, end: str | None, period: str | None) -> tuple[date, date]:
    """Resolve a report range from --period or --start/--end (default: this month)."""
    if period and (start or end):
        click.echo("Error: --period cannot be combined with --start or --end.", err=True)
        ctx.exit(1)
    if period:
        return get_date_range(period)
    default_start, default_end = get_date_range("this-month")
    start_date = parse_date_or_exit(ctx, start, "start date") or default_start
    end_date = parse_date_or_exit(ctx, end, "end date") or default_end
    return start_date, end_date


def _money(amount) -> str:
    return f"{amount:>14,.2f}"


@click.group()
def report_group():
    """Financial reports."""
    pass


@report_group.command("trial-balance")
@click.option("--as-of", help="Report date (default today)")
@click.option("--all", "show_all", is_flag=True, help="Include accounts with no balance")
@click.pass_context
def trial_balance(ctx, as_of: str | None, show_all: bool):
    """Show the trial balance."""
    as_of_date = parse_date_or_exit(ctx, as_of, "as-of date")
    try:
        report = ReportService(ctx.obj["db"]).trial_balance(as_of_date)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"\nTrial Balance as of {report.as_of}")
    click.echo("-" * 80)
    click.echo(f"{'Code':6s} {'Account':40s} {'Debit':>14s} {'Credit':>14s}")
    for row in report.rows:
        if not show_all and not row.debit_balance and not row.credit_balance:
            continue
        click.echo(f"{row.code:6s} {row.name[:40]:40s} {_money(row.debit_balance)} {_money(row.credit_balance)}")
    click.echo("-" * 80)
    click.echo(f"{'':6s} {'Total':40s} {_money(report.total_debits)} {_money(report.total_credits)}")
    if report.is_balanced:
        click.echo("Balanced")
    else:
        click.echo(f"NOT BALANCED: difference {report.difference:,.2f}")


def _display_section(title: str, lines: tuple[BalanceSheetLine, ...], total) -> None:
    click.echo(f"\n{title}")
    for line in lines:
        if not line.balance:
            continue
        code = line.code or ""
        click.echo(f"  {code:6s} {line.name[:40]:40s} {_money(line.balance)}")
    click.echo(f"  {'Total ' + title:47s} {_money(total)}")


@report_group.command("balance-sheet")
@click.option("--as-of", help="Report date (default today)")
@click.pass_context
def balance_sheet(ctx, as_of: str | None):
    """Show the balance sheet."""
    as_of_date = parse_date_or_exit(ctx, as_of, "as-of date")
    try:
        report = ReportService(ctx.obj["db"]).balance_sheet(as_of_date)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"\nBalance Sheet as of {report.as_of}")
    _display_section("Assets", report.assets, report.total_assets)
    _display_section("Liabilities", report.liabilities, report.total_liabilities)
    _display_section("Equity", report.equity, report.total_equity)
    click.echo()
    click.echo(f"{'Liabilities + Equity':49s} {_money(report.total_liabilities + report.total_equity)}")
    click.echo("Balanced" if report.is_balanced else "NOT BALANCED")


@report_group.command("profit-loss")
@click.option("--start", help="Start date")
@click.option("--end", help="End date")
@click.option("--period", type=click.Choice(PERIODS), help="Reporting period")
@click.pass_context
def profit_loss(ctx, start: str | None, end: str | None, period: str | None):
    """Show profit and loss (default: this month)."""
    start_date, end_date = _resolve_range(ctx, start, end, period)
    try:
        report = ReportService(ctx.obj["db"]).profit_loss(start_date, end_date)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"\nProfit & Loss {report.start_date} to {report.end_date}")
    click.echo("-" * 50)
    click.echo(f"{'Revenue':34s} {_money(report.revenue)}")
    click.echo(f"{'Cost of goods sold':34s} {_money(report.cost_of_goods_sold)}")
    click.echo(f"{'Gross profit':34s} {_money(report.gross_profit)}  ({report.gross_profit_margin}%)")
    click.echo(f"{'Operating expenses':34s} {_money(report.operating_expenses)}")
    click.echo(f"{'Net profit':34s} {_money(report.net_profit)}  ({report.net_profit_margin}%)")


@report_group.command("cash-flow")
@click.option("--start", help="Start date")
@click.option("--end", help="End date")
@click.option("--period", type=click.Choice(PERIODS), help="Reporting period")
@click.pass_context
def cash_flow(ctx, start: str | None, end: str | None, period: str | None):
    """Show the cash flow statement (default: this month)."""
    start_date, end_date = _resolve_range(ctx, start, end, period)
    try:
        report = ReportService(ctx.obj["db"]).cash_flow(start_date, end_date)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"\nCash Flow {report.start_date} to {report.end_date}")
    click.echo("-" * 50)
    for title, section in (
        ("Operating", report.operating),
        ("Investing", report.investing),
        ("Financing", report.financing),
    ):
        click.echo(f"{title}")
        click.echo(f"  {'Inflows':32s} {_money(section.inflows)}")
        click.echo(f"  {'Outflows':32s} {_money(section.outflows)}")
        click.echo(f"  {'Net':32s} {_money(section.net)}")
    click.echo("-" * 50)
    click.echo(f"{'Net change':34s} {_money(report.net_change)}")
    click.echo(f"{'Opening cash':34s} {_money(report.opening_cash)}")
    click.echo(f"{'Closing cash':34s} {_money(report.closing_cash)}")
    click.echo("Reconciled" if report.is_reconciled else "Not reconciled")


@report_group.command("aging")
@click.option(
    "--type",
    "aging_type",
    type=click.Choice([t.value for t in AgingType], case_sensitive=False),
    default=AgingType.RECEIVABLE.value,
    show_default=True,
    help="Receivables or payables",
)
@click.option("--as-of", help="Report date (default today)")
@click.pass_context
def aging(ctx, aging_type: str, as_of: str | None):
    """Show the aging schedule of receivables or payables."""
    as_of_date = parse_date_or_exit(ctx, as_of, "as-of date")
    try:
        report = ReportService(ctx.obj["db"]).aging(as_of_date, AgingType(aging_type.upper()))
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"\n{report.aging_type.value.title()} aging as of {report.as_of}")
    labels = {
        "current": "0-30 days",
        "days_31_60": "31-60 days",
        "days_61_90": "61-90 days",
        "over_90": "Over 90 days",
    }
    for key, label in labels.items():
        click.echo(f"\n{label}: {report.totals[key]:,.2f}")
        for item in report.buckets[key]:
            click.echo(
                f"  {item.date} | #{item.transaction_id:<5d} | {item.party_name[:30]:30s} | "
                f"{_money(item.amount)} | {item.days_outstanding} days"
            )
    click.echo(f"\nTotal: {report.grand_total:,.2f}")


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
