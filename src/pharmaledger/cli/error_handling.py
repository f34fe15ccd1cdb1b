"""CLI error handling helpers."""

import logging

import click

from pharmaledger.domain.errors import DomainError, StorageError

logger = logging.getLogger(__name__)


def handle_domain_error(ctx: click.Context, error: DomainError | StorageError | ValueError) -> None:
    """Print the error as "Error: ..." on stderr and exit with status 1."""
    if isinstance(error, StorageError):
        logger.debug("Storage failure in '%s'", ctx.command_path, exc_info=error)
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
