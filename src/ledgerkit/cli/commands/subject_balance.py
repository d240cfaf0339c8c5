"""Subject balance report command."""

import click

from ledgerkit.cli.date_filters import date_range_from_kwargs, date_range_options
from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.cli.formatting import format_balance, format_money
from ledgerkit.domain.errors import DomainError
from ledgerkit.domain.reports import ReportService

INDENT_SIZE = 2


@click.command("subject-balance")
@click.option("--from-code", help="Lowest subject code to include")
@click.option("--to-code", help="Highest subject code to include")
@click.option("--level-from", type=click.IntRange(min=1), help="Shallowest subject level (1 = top level)")
@click.option("--level-to", type=click.IntRange(min=1), help="Deepest subject level")
@click.option("--leaves-only", is_flag=True, help="Only show leaf subjects")
@date_range_options
@click.pass_context
def subject_balance(
    ctx,
    from_code: str | None,
    to_code: str | None,
    level_from: int | None,
    level_to: int | None,
    leaves_only: bool,
    **kwargs,
):
    """Show opening, period, year-to-date and closing balances per subject."""
    date_range = date_range_from_kwargs(ctx, kwargs)
    service = ReportService(ctx.obj["db"], ctx.obj["fiscal_start_month"])

    try:
        rows = service.subject_balance(
            date_range,
            code_from=from_code,
            code_to=to_code,
            level_from=level_from,
            level_to=level_to,
        )
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)
        return

    if leaves_only:
        rows = tuple(row for row in rows if row.is_leaf)

    if not rows:
        click.echo("No subjects found.")
        return

    click.echo(f"Subject balances {date_range.start} to {date_range.end}")
    click.echo(
        f"{'Code':<12} {'Name':<24} {'Opening':>18} {'Debit':>14} {'Credit':>14} "
        f"{'YTD Debit':>14} {'YTD Credit':>14} {'Closing':>18}"
    )
    click.echo("-" * 136)
    for row in rows:
        name = " " * (INDENT_SIZE * (row.level - 1)) + row.name
        click.echo(
            f"{row.code:<12} {name:<24} {format_balance(row.opening, row.direction):>18} "
            f"{format_money(row.period_debit):>14} {format_money(row.period_credit):>14} "
            f"{format_money(row.year_debit):>14} {format_money(row.year_credit):>14} "
            f"{format_balance(row.closing, row.direction):>18}"
        )


def register_commands(cli):
    """Register subject balance command with main CLI."""
    cli.add_command(subject_balance)
