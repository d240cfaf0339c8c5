"""Reconciliation commands."""

from concurrent.futures import ThreadPoolExecutor

import click

from ledgerkit.cli.date_filters import date_range_from_kwargs, date_range_options
from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.cli.formatting import format_money
from ledgerkit.domain.entities import DiffDetails, Direction, ReconciliationRow
from ledgerkit.domain.errors import DomainError
from ledgerkit.domain.reports import ReportService


def _display_row(row: ReconciliationRow) -> None:
    journal = row.journal_side
    ledger = row.ledger_side
    target = row.subject_code + (f" [{row.auxiliary_key}]" if row.auxiliary_key else "")
    status = "reconciled" if row.is_reconciled else "DIFFERENCE"
    click.echo(f"{row.fund_account_name} <-> {target}: {status}")
    click.echo(f"  {'':<10} {'Opening':>14} {'In/Debit':>14} {'Out/Credit':>14} {'Closing':>14}")
    click.echo(
        f"  {'Journal':<10} {format_money(journal.opening):>14} {format_money(journal.period_in):>14} "
        f"{format_money(journal.period_out):>14} {format_money(journal.closing):>14}"
    )
    click.echo(
        f"  {'Ledger':<10} {format_money(ledger.opening):>14} {format_money(ledger.period_debit):>14} "
        f"{format_money(ledger.period_credit):>14} {format_money(ledger.closing):>14}"
    )
    click.echo(
        f"  {'Diff':<10} {format_money(row.diff_opening):>14} {format_money(row.diff_in):>14} "
        f"{format_money(row.diff_out):>14} {format_money(row.diff):>14}"
    )


def _display_details(details: DiffDetails) -> None:
    if details.is_empty:
        click.echo("  No unmatched entries.")
        return
    if details.only_in_journal:
        click.echo("  Only in cash journal:")
        for item in details.only_in_journal:
            entry = item.entry
            click.echo(
                f"    {entry.date.isoformat()} #{entry.id:<6} {format_money(item.net):>14}  "
                f"{item.reason.label} ({item.reason.value})"
                + (f"  voucher {entry.linked_voucher_code}" if entry.linked_voucher_code else "")
                + (f"  {entry.summary}" if entry.summary else "")
            )
    if details.only_in_ledger:
        click.echo("  Only in ledger:")
        for item in details.only_in_ledger:
            click.echo(
                f"    {item.date.isoformat()} {item.voucher_code:<8} {format_money(item.net):>14}"
                + (f"  {item.line.summary}" if item.line.summary else "")
            )


@click.command("reconcile")
@click.option("--account", "account_name", help="Fund account name (default: all accounts)")
@click.option(
    "--direction",
    type=click.Choice(["debit", "credit"]),
    default="debit",
    help="Normal direction of the ledger subject",
)
@click.option("--details", is_flag=True, help="List entries found on one side only")
@click.option("--jobs", type=click.IntRange(min=1), default=1, help="Accounts to reconcile in parallel")
@date_range_options
@click.pass_context
def reconcile(
    ctx,
    account_name: str | None,
    direction: str,
    details: bool,
    jobs: int,
    **kwargs,
):
    """Compare cash-journal balances with the approved ledger."""
    date_range = date_range_from_kwargs(ctx, kwargs)
    service = ReportService(ctx.obj["db"], ctx.obj["fiscal_start_month"])

    try:
        if jobs > 1:
            with ThreadPoolExecutor(max_workers=jobs) as executor:
                rows = service.reconcile(
                    date_range, account_name, Direction(direction), executor=executor
                )
        else:
            rows = service.reconcile(date_range, account_name, Direction(direction))
        unmatched = {}
        if details:
            for row in rows:
                unmatched[row.fund_account_name] = service.diff_details(
                    row.fund_account_name, date_range
                )
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)
        return

    if not rows:
        click.echo("No fund accounts found.")
        return

    click.echo(f"Reconciliation {date_range.start} to {date_range.end}")
    for row in rows:
        click.echo()
        _display_row(row)
        if details:
            _display_details(unmatched[row.fund_account_name])


def register_commands(cli):
    """Register reconcile command with main CLI."""
    cli.add_command(reconcile)
