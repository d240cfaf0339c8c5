"""Fund summary command."""

from concurrent.futures import ThreadPoolExecutor

import click

from ledgerkit.cli.date_filters import date_range_from_kwargs, date_range_options
from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.cli.formatting import format_money
from ledgerkit.domain.errors import DomainError
from ledgerkit.domain.reports import ReportService


@click.command("fund-summary")
@click.option("--jobs", type=click.IntRange(min=1), default=1, help="Accounts to compute in parallel")
@date_range_options
@click.pass_context
def fund_summary(ctx, jobs: int, **kwargs):
    """Show fund account balances and income/expense by category."""
    date_range = date_range_from_kwargs(ctx, kwargs)
    service = ReportService(ctx.obj["db"], ctx.obj["fiscal_start_month"])

    try:
        if jobs > 1:
            with ThreadPoolExecutor(max_workers=jobs) as executor:
                summary = service.fund_summary(date_range, executor=executor)
        else:
            summary = service.fund_summary(date_range)
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)
        return

    if not summary.by_account:
        click.echo("No fund accounts found.")
        return

    click.echo(f"Fund summary {date_range.start} to {date_range.end}")
    click.echo(f"{'Account':<24} {'Opening':>14} {'Income':>14} {'Expense':>14} {'Closing':>14}")
    click.echo("-" * 84)
    for row in summary.by_account:
        click.echo(
            f"{row.name:<24} {format_money(row.opening):>14} {format_money(row.income):>14} "
            f"{format_money(row.expense):>14} {format_money(row.closing):>14}"
        )

    if summary.by_category:
        click.echo()
        click.echo(f"{'Category':<24} {'Kind':<14} {'Income':>14} {'Expense':>14} {'Entries':>8}")
        click.echo("-" * 78)
        for row in summary.by_category:
            click.echo(
                f"{row.name:<24} {row.kind.value:<14} {format_money(row.income):>14} "
                f"{format_money(row.expense):>14} {row.count:>8}"
            )


def register_commands(cli):
    """Register fund summary command with main CLI."""
    cli.add_command(fund_summary)
