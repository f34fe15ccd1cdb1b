"""Account management commands."""

import click
from pharmaledger.cli.account_resolution import resolve_account_or_exit
from pharmaledger.cli.error_handling import handle_domain_error
from pharmaledger.domain.account import AccountService
from pharmaledger.domain.entities import AccountType
from pharmaledger.domain.errors import DomainError, StorageError

ACCOUNT_TYPES = [t.value for t in AccountType]


@click.group()
def account_group():
    """Manage the chart of accounts."""
    pass


@account_group.command("create")
@click.argument("code", metavar="CODE")
@click.argument("name", metavar="NAME")
@click.option(
    "--type",
    "account_type",
    required=True,
    type=click.Choice(ACCOUNT_TYPES, case_sensitive=False),
    help="Account type",
)
@click.option("--description", help="Account description")
@click.pass_context
def create_account(ctx, code: str, name: str, account_type: str, description: str | None):
    """Create a new account.

    Examples:
        pharmaledger account create 1100 "Cash" --type asset
        pharmaledger account create 4100 "Sales Revenue" --type revenue
    """
    service = AccountService(ctx.obj["db"])

    try:
        account_id = service.create_account(
            code=code, name=name, account_type=account_type, description=description
        )
        click.echo(f"Created account {code} '{name}' (ID: {account_id})")
    except (DomainError, StorageError) as e:
        handle_domain_error(ctx, e)


@account_group.command("list")
@click.option(
    "--type",
    "account_type",
    type=click.Choice(ACCOUNT_TYPES, case_sensitive=False),
    help="Only list accounts of this type",
)
@click.pass_context
def list_accounts(ctx, account_type: str | None):
    """List active accounts."""
    service = AccountService(ctx.obj["db"])

    accounts = service.list_accounts(account_type)
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 60)
    for acc in accounts:
        click.echo(f"ID: {acc.id:3d} | {acc.code:8s} | {acc.name:30s} | {acc.type.value}")


@account_group.command("show")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def show_account(ctx, account: str):
    """Show account details.

    ACCOUNT can be an account code or ID ("#12" forces an ID).
    """
    service = AccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, account)
    acc = service.require_account(account_id)

    click.echo(f"ID:          {acc.id}")
    click.echo(f"Code:        {acc.code}")
    click.echo(f"Name:        {acc.name}")
    click.echo(f"Type:        {acc.type.value}")
    click.echo(f"Active:      {'yes' if acc.is_active else 'no'}")
    if acc.description:
        click.echo(f"Description: {acc.description}")


@account_group.command("update")
@click.argument("account", metavar="ACCOUNT")
@click.option("--code", help="New account code")
@click.option("--name", help="New account name")
@click.option(
    "--type",
    "account_type",
    type=click.Choice(ACCOUNT_TYPES, case_sensitive=False),
    help="New account type",
)
@click.option("--description", help="New description")
@click.option("--active/--inactive", "is_active", default=None, help="Reactivate or deactivate")
@click.pass_context
def update_account(
    ctx,
    account: str,
    code: str | None,
    name: str | None,
    account_type: str | None,
    description: str | None,
    is_active: bool | None,
) -> None:
    """Update an account.

    Examples:
        pharmaledger account update 6100 --name "Office & Admin Expenses"
        pharmaledger account update "#7" --active
    """
    service = AccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, account)

    try:
        updated = service.update_account(
            account_id,
            code=code,
            name=name,
            account_type=account_type,
            description=description,
            is_active=is_active,
        )
        click.echo(f"Updated account {updated.code} '{updated.name}'")
    except (DomainError, StorageError) as e:
        handle_domain_error(ctx, e)


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_account(ctx, account: str, yes: bool) -> None:
    """Delete an account.

    Accounts that journal lines still reference are deactivated instead,
    so that past entries keep their account.
    """
    service = AccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, account)
    account_obj = service.require_account(account_id)

    if not yes and not click.confirm(
        f"Are you sure you want to delete account {account_obj.code} '{account_obj.name}'?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        removed = service.delete_account(account_id)
    except (DomainError, StorageError) as e:
        handle_domain_error(ctx, e)
        return

    if removed:
        click.echo(f"Deleted account {account_obj.code} '{account_obj.name}'")
    else:
        click.echo(
            f"Account {account_obj.code} '{account_obj.name}' has journal lines; deactivated instead"
        )


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
