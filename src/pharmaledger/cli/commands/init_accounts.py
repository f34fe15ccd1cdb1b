"""Initialize the standard chart of accounts."""

import click
from pharmaledger.domain import posting
from pharmaledger.domain.account import AccountService
from pharmaledger.domain.errors import DomainError


# Standard chart used by the automatic postings
INITIAL_ACCOUNTS = [
    (posting.CASH, "Cash", "asset"),
    (posting.ACCOUNTS_RECEIVABLE, "Accounts Receivable", "asset"),
    (posting.INVENTORY, "Inventory", "asset"),
    ("1500", "Equipment", "asset"),
    (posting.ACCOUNTS_PAYABLE, "Accounts Payable", "liability"),
    (posting.TAX_PAYABLE, "Tax Payable", "liability"),
    ("3100", "Owner's Equity", "equity"),
    (posting.SALES_REVENUE, "Sales Revenue", "revenue"),
    (posting.COST_OF_GOODS_SOLD, "Cost of Goods Sold", "expense"),
    (posting.OFFICE_EXPENSES, "Office Expenses", "expense"),
    (posting.UTILITIES, "Utilities", "expense"),
]


@click.command("init-accounts")
@click.option("--force", is_flag=True, help="Add missing standard accounts even if accounts exist")
@click.pass_context
def init_accounts(ctx, force: bool):
    """Initialize database with the standard chart of accounts."""
    service = AccountService(ctx.obj["db"])

    existing = service.list_accounts()
    if existing and not force:
        click.echo("Accounts already exist. Use --force to add missing standard accounts.")
        return

    click.echo("Creating standard chart of accounts...")

    created = 0
    skipped = 0
    errors = 0
    for code, name, account_type in INITIAL_ACCOUNTS:
        if service.get_account_by_code(code) is not None:
            skipped += 1
            continue
        try:
            service.create_account(code=code, name=name, account_type=account_type)
            created += 1
        except DomainError as e:
            click.echo(f"Warning: Could not create account {code} '{name}': {e}", err=True)
            errors += 1

    if errors == 0:
        click.echo(f"Successfully created {created} accounts ({skipped} already present).")
    else:
        click.echo(f"Created {created} accounts with {errors} errors.")


def register_commands(cli):
    """Register init-accounts command with main CLI."""
    cli.add_command(init_accounts)
