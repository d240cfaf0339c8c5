"""Detailed ledger command."""

import click

from ledgerkit.cli.date_filters import date_range_from_kwargs, date_range_options
from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.cli.formatting import format_balance, format_money
from ledgerkit.domain.entities import LedgerReport
from ledgerkit.domain.errors import DomainError
from ledgerkit.domain.ledger import LedgerSortKey
from ledgerkit.domain.reports import ReportService


def _display_page(page: LedgerReport) -> None:
    title = f"{page.subject_code} {page.subject_name}"
    if page.auxiliary_key:
        title += f" [{page.auxiliary_key}]"
    click.echo(title)
    click.echo(
        f"{'Date':<12} {'Voucher':<12} {'Summary':<28} {'Debit':>14} {'Credit':>14} {'Balance':>18}"
    )
    click.echo("-" * 103)
    click.echo(
        f"{page.date_range.start.isoformat():<12} {'':<12} {'Opening balance':<28} "
        f"{'':>14} {'':>14} {format_balance(page.opening, page.direction):>18}"
    )
    for row in page.rows:
        balance = f"{row.direction.label} {format_money(row.running_balance.abs())}"
        click.echo(
            f"{row.date.isoformat():<12} {row.ref or '':<12} {row.summary[:28]:<28} "
            f"{format_money(row.debit):>14} {format_money(row.credit):>14} {balance:>18}"
        )
    closing = format_balance(page.closing, page.direction)
    click.echo(
        f"{'':<12} {'':<12} {'Period total':<28} {format_money(page.period_debit_total):>14} "
        f"{format_money(page.period_credit_total):>14} {closing:>18}"
    )
    click.echo(
        f"{'':<12} {'':<12} {'Year to date':<28} {format_money(page.year_debit_total):>14} "
        f"{format_money(page.year_credit_total):>14} {closing:>18}"
    )


@click.command("detailed-ledger")
@click.argument("subject_code")
@click.option("--to-code", help="Report every leaf subject from SUBJECT_CODE up to this code")
@click.option("--aux", "auxiliary_key", help="Auxiliary item key (customer, project, ...)")
@click.option(
    "--sort",
    "sort_by",
    type=click.Choice(["date", "voucher"]),
    default="date",
    help="Row order within the period",
)
@date_range_options
@click.pass_context
def detailed_ledger(
    ctx,
    subject_code: str,
    to_code: str | None,
    auxiliary_key: str | None,
    sort_by: str,
    **kwargs,
):
    """Show the detailed ledger of SUBJECT_CODE with running balances."""
    if to_code and auxiliary_key:
        click.echo("Error: --aux cannot be combined with --to-code.", err=True)
        ctx.exit(1)

    date_range = date_range_from_kwargs(ctx, kwargs)
    sort_key = LedgerSortKey.DATE if sort_by == "date" else LedgerSortKey.VOUCHER_CODE
    service = ReportService(ctx.obj["db"], ctx.obj["fiscal_start_month"])

    try:
        if to_code:
            pages = service.detailed_ledger_range(
                date_range, subject_code, to_code, sort_key=sort_key
            )
        else:
            pages = (
                service.detailed_ledger(
                    subject_code, date_range, auxiliary_key=auxiliary_key, sort_key=sort_key
                ),
            )
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)
        return

    if not pages:
        click.echo("No leaf subjects found in range.")
        return

    for i, page in enumerate(pages):
        if i:
            click.echo()
        _display_page(page)


def register_commands(cli):
    """Register detailed ledger command with main CLI."""
    cli.add_command(detailed_ledger)
