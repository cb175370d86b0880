"""CLI error handling helpers."""

import click

from pennywise.domain.errors import BatchImportError, DomainError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError | OSError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    if isinstance(error, BatchImportError):
        for message in error.errors:
            click.echo(f"  {message}", err=True)
    ctx.exit(1)
