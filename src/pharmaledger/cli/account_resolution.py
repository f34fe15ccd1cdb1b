"""Resolve ACCOUNT arguments given on the command line."""

import click
from pharmaledger.domain.account import AccountService
from pharmaledger.utils.account_resolver import resolve_account


def resolve_account_or_exit(
    ctx: click.Context,
    account_service: AccountService,
    account: str | int,
    for_posting: bool = False,
) -> int:
    """Turn an account code or ID into an account ID, exiting 1 on failure.

    With for_posting, deactivated accounts are refused as well, since journal
    lines may only post to active accounts.
    """
    try:
        account_id = resolve_account(account_service, account)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)

    if for_posting:
        resolved = account_service.require_account(account_id)
        if not resolved.is_active:
            click.echo(
                f"Error: Account {resolved.code} '{resolved.name}' is inactive and cannot be posted to",
                err=True,
            )
            ctx.exit(1)
    return account_id
