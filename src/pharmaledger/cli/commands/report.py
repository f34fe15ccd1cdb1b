"""Financial report commands."""

import click
from pharmaledger.cli.date_filters import period_options, pop_period_flags, resolve_cli_date_range
from pharmaledger.domain.entities import AccountType
from pharmaledger.domain.reporting import ReportingService
from pharmaledger.utils.date_parser import parse_date

ROW_WIDTH = 72


def _window(start, end) -> str:
    if start is None and end is None:
        return "all dates"
    return f"{start or 'beginning'} to {end or 'today'}"


def _echo_section(title: str, balances, total) -> None:
    click.echo(title)
    for b in balances:
        label = f"{b.account.code} {b.account.name}"
        click.echo(f"    {label:<50} {b.amount:>16,.2f}")
    click.echo(f"    {'Total ' + title.lower():<50} {total:>16,.2f}")
    click.echo()


@click.group()
def report_group():
    """Produce financial reports from posted journal entries."""
    pass


@report_group.command("trial-balance")
@period_options
@click.option(
    "--type",
    "account_type",
    type=click.Choice([t.value for t in AccountType], case_sensitive=False),
    help="Only include accounts of this type",
)
@click.pass_context
def trial_balance(ctx, start_date, end_date, account_type, **period_kwargs):
    """Show debit and credit totals per account."""
    service = ReportingService(ctx.obj["db"])
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=pop_period_flags(period_kwargs),
    )

    report = service.trial_balance(
        start_date=start,
        end_date=end,
        account_type=AccountType(account_type.lower()) if account_type else None,
    )
    if not report.rows:
        click.echo("No accounts found.")
        return

    click.echo(f"Trial balance ({_window(start, end)})")
    click.echo("-" * ROW_WIDTH)
    click.echo(f"{'Account':<38} {'Debit':>16} {'Credit':>16}")
    for row in report.rows:
        label = f"{row.account.code} {row.account.name}"
        click.echo(f"{label[:38]:<38} {row.debit_total:>16,.2f} {row.credit_total:>16,.2f}")
    click.echo("-" * ROW_WIDTH)
    click.echo(f"{'Total':<38} {report.total_debits:>16,.2f} {report.total_credits:>16,.2f}")
    click.echo("Balanced" if report.is_balanced else "NOT balanced")


@report_group.command("profit-loss")
@period_options
@click.pass_context
def profit_loss(ctx, start_date, end_date, **period_kwargs):
    """Show revenue, expenses and net income."""
    service = ReportingService(ctx.obj["db"])
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=pop_period_flags(period_kwargs),
    )

    report = service.profit_and_loss(start_date=start, end_date=end)

    click.echo(f"Profit and loss ({_window(start, end)})")
    click.echo("-" * ROW_WIDTH)
    _echo_section("Revenue", report.revenue, report.total_revenue)
    _echo_section("Expenses", report.expenses, report.total_expenses)
    click.echo(f"{'Net income':<54} {report.net_income:>16,.2f}")
    click.echo(f"{'Profit margin':<54} {report.profit_margin:>15}%")


@report_group.command("balance-sheet")
@click.option("--as-of", help="Balance date (YYYY-MM-DD or 'today'); defaults to all dates")
@click.pass_context
def balance_sheet(ctx, as_of: str | None):
    """Show assets, liabilities and equity."""
    service = ReportingService(ctx.obj["db"])

    as_of_date = None
    if as_of:
        try:
            as_of_date = parse_date(as_of)
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)

    report = service.balance_sheet(as_of=as_of_date)

    click.echo(f"Balance sheet as of {as_of_date or 'today'}")
    click.echo("-" * ROW_WIDTH)
    _echo_section("Assets", report.assets, report.total_assets)
    _echo_section("Liabilities", report.liabilities, report.total_liabilities)
    click.echo("Equity")
    for b in report.equity:
        label = f"{b.account.code} {b.account.name}"
        click.echo(f"    {label:<50} {b.amount:>16,.2f}")
    click.echo(f"    {'Current earnings':<50} {report.current_earnings:>16,.2f}")
    click.echo(f"    {'Total equity':<50} {report.total_equity:>16,.2f}")
    click.echo()
    click.echo(
        f"{'Liabilities and equity':<54} "
        f"{report.total_liabilities + report.total_equity:>16,.2f}"
    )
    click.echo("Balanced" if report.is_balanced else "NOT balanced")


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
