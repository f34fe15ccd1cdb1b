"""CLI helpers for date range resolution."""

from datetime import date

import click

from pharmaledger.utils.date_parser import PERIODS, get_date_range, parse_date


def period_options(command):
    """Attach --start-date, --end-date and one flag per named period."""
    for period in reversed(PERIODS):
        command = click.option(
            f"--{period}", is_flag=True, help=f"Limit to {period.replace('-', ' ')}"
        )(command)
    command = click.option(
        "--end-date", help="End date (YYYY-MM-DD or relative like 'today')"
    )(command)
    command = click.option(
        "--start-date", help="Start date (YYYY-MM-DD or relative like 'this month')"
    )(command)
    return command


def pop_period_flags(kwargs: dict) -> dict[str, bool]:
    """Remove period flag values from click kwargs, keyed by period name."""
    return {period: kwargs.pop(period.replace("-", "_"), False) for period in PERIODS}


def _fail(ctx, message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    ctx.exit(1)


def _parse_bound(ctx, label: str, value: str | None) -> date | None:
    if not value:
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        _fail(ctx, f"Invalid {label} date: {e}")


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
    default_range: tuple[date, date] | None = None,
) -> tuple[date | None, date | None]:
    """Resolve the reporting window from one period flag or explicit dates.

    Either bound may stay None for an open-ended window. default_range is
    used only when nothing was given at all.
    """
    chosen = [period for period, is_set in period_flags.items() if is_set]

    if len(chosen) > 1:
        flag_names = ", ".join(f"--{period}" for period in PERIODS)
        _fail(ctx, f"Only one period option ({flag_names}) can be specified at a time.")
    if chosen and (start_date or end_date):
        _fail(
            ctx,
            "Period options (--this-month, --last-year, etc.) cannot be combined with --start-date or --end-date.",
        )

    if chosen:
        start, end = get_date_range(chosen[0])
    else:
        start = _parse_bound(ctx, "start", start_date)
        end = _parse_bound(ctx, "end", end_date)
        if start is None and end is None and default_range is not None:
            start, end = default_range

    if start is not None and end is not None and start > end:
        _fail(ctx, f"Start date {start} is after end date {end}")

    return start, end
