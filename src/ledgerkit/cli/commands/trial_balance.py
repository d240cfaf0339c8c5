"""Trial balance command."""

import click

from ledgerkit.cli.date_filters import date_range_from_kwargs, date_range_options
from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.cli.formatting import format_money
from ledgerkit.domain import trial_balance as trial_balance_engine
from ledgerkit.domain.errors import DomainError
from ledgerkit.domain.reports import ReportService
from ledgerkit.utils.amount_parser import parse_money


@click.command("trial-balance")
@click.option("--tolerance", help="Largest difference still accepted as balanced (e.g. 0.01)")
@click.option("--strict", is_flag=True, help="Exit with an error if the book does not balance")
@click.option("--verbose", "-v", is_flag=True, help="Show rolled-up balance of every subject")
@date_range_options
@click.pass_context
def trial_balance(ctx, tolerance: str | None, strict: bool, verbose: bool, **kwargs):
    """Check that debit-side and credit-side root balances agree."""
    date_range = date_range_from_kwargs(ctx, kwargs)
    service = ReportService(ctx.obj["db"], ctx.obj["fiscal_start_month"])

    try:
        limit = parse_money(tolerance) if tolerance else None
        result = service.trial_balance(date_range, tolerance=limit)
        hierarchy = service.get_hierarchy() if verbose else None
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Trial balance as of {date_range.end}")
    if hierarchy is not None:
        for node in hierarchy.nodes:
            indent = "  " * (node.level - 1)
            amount = result.rolled_up[node.subject.id]
            click.echo(f"{node.code:<12} {indent + node.subject.name:<30} {format_money(amount):>18}")
        click.echo()
    click.echo(f"Debit total:  {format_money(result.debit_total):>18}")
    click.echo(f"Credit total: {format_money(result.credit_total):>18}")
    click.echo(f"Difference:   {format_money(result.diff):>18}")
    click.echo("Status: balanced" if result.is_balanced else "Status: NOT balanced")

    if strict:
        try:
            trial_balance_engine.assert_balanced(result)
        except DomainError as e:
            handle_domain_error(ctx, e)


def register_commands(cli):
    """Register trial balance command with main CLI."""
    cli.add_command(trial_balance)
