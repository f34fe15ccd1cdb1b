"""Utility for resolving account codes to IDs."""

from pharmaledger.domain.account import AccountService


def resolve_account(account_service: AccountService, account: str | int) -> int:
    """Resolve an account code or ID to an account ID.

    Codes take precedence over IDs: "1100" is looked up as a code first and
    only treated as an ID when no account carries that code. A leading "#"
    forces ID lookup ("#12").

    Args:
        account_service: AccountService instance
        account: Account code (str) or ID (int, digit string or "#<id>")

    Returns:
        Account ID

    Raises:
        ValueError: If account is not found
    """
    if isinstance(account, int):
        if account_service.get_account(account) is None:
            raise ValueError(f"Account ID {account} not found")
        return account

    account = account.strip()
    if account.startswith("#"):
        try:
            account_id = int(account[1:])
        except ValueError:
            raise ValueError(f"Invalid account ID '{account}'")
        return resolve_account(account_service, account_id)

    by_code = account_service.get_account_by_code(account)
    if by_code is not None:
        return by_code.id

    if account.isdigit():
        account_obj = account_service.get_account(int(account))
        if account_obj is not None:
            return account_obj.id

    raise ValueError(f"Account '{account}' not found")
