"""CLI helpers for report date windows."""

from datetime import date

import click

from ledgerkit.domain.entities import DateRange
from ledgerkit.utils.date_parser import get_date_range, parse_date, parse_period

PERIOD_FLAGS = ("this_month", "this_year", "last_month", "last_year")

_DATE_OPTIONS = [
    click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')"),
    click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')"),
    click.option("--period", help="Accounting period: YYYY-MM or YYYY-MM..YYYY-MM"),
    click.option("--this-month", is_flag=True, help="Report on the current month"),
    click.option("--this-year", is_flag=True, help="Report on the current year"),
    click.option("--last-month", is_flag=True, help="Report on the previous month"),
    click.option("--last-year", is_flag=True, help="Report on the previous year"),
]


def date_range_options(func):
    """Add the shared report window options to a command."""
    for option in reversed(_DATE_OPTIONS):
        func = option(func)
    return func


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
    period_flags: dict[str, bool],
    fiscal_start_month: int = 1,
) -> DateRange:
    """Resolve the report window from period options or explicit dates.

    Without any option the window is the current month to today. A missing
    start date defaults to the fiscal year start of the end date; a missing
    end date defaults to today.
    """
    period_count = sum(1 for is_set in period_flags.values() if is_set) + (1 if period else 0)

    if period_count > 1:
        click.echo(
            "Error: Only one period option (--period, --this-month, --this-year, --last-month, --last-year) can be specified at a time.",
            err=True,
        )
        ctx.exit(1)

    if period_count > 0 and (start_date or end_date):
        click.echo(
            "Error: Period options (--period, --this-month, etc.) cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    if period:
        try:
            start, end = parse_period(period)
        except ValueError as e:
            click.echo(f"Error: Invalid period: {e}", err=True)
            ctx.exit(1)
    elif period_count == 1:
        flag = next(name for name, is_set in period_flags.items() if is_set)
        start, end = get_date_range(flag.replace("_", "-"))
    elif start_date or end_date:
        end = date.today()
        if end_date:
            try:
                end = parse_date(end_date)
            except ValueError as e:
                click.echo(f"Error: Invalid end date: {e}", err=True)
                ctx.exit(1)
        if start_date:
            try:
                start = parse_date(start_date)
            except ValueError as e:
                click.echo(f"Error: Invalid start date: {e}", err=True)
                ctx.exit(1)
        else:
            start = DateRange(end, end).fiscal_year_start(fiscal_start_month)
    else:
        start, end = get_date_range("this-month")

    try:
        return DateRange(start, end)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)


def date_range_from_kwargs(ctx, kwargs: dict) -> DateRange:
    """Resolve the window from the options added by ``date_range_options``."""
    return resolve_cli_date_range(
        ctx,
        start_date=kwargs.pop("start_date"),
        end_date=kwargs.pop("end_date"),
        period=kwargs.pop("period"),
        period_flags={name: kwargs.pop(name) for name in PERIOD_FLAGS},
        fiscal_start_month=ctx.obj.get("fiscal_start_month", 1),
    )
