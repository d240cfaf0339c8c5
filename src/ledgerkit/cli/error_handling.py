"""CLI error handling helpers."""

import click

from ledgerkit.domain.errors import DomainError, UnbalancedInput


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    if isinstance(error, UnbalancedInput) and error.diff is not None:
        click.echo(f"Difference: {error.diff}", err=True)
    ctx.exit(1)
