"""Account registry domain service."""

import logging
from typing import Optional

from pharmaledger.database.base import Database
from pharmaledger.domain.entities import Account as AccountEntity, AccountType
from pharmaledger.domain.errors import (
    DuplicateAccountCodeError,
    NotFoundError,
    ValidationError,
    account_not_found,
)

logger = logging.getLogger(__name__)


def parse_account_type(value: AccountType | str) -> AccountType:
    """Coerce a string such as "Asset" or "asset" to an AccountType.

    Raises:
        ValidationError: If the value names no account type
    """
    if isinstance(value, AccountType):
        return value
    try:
        return AccountType(str(value).strip().lower())
    except ValueError:
        valid = ", ".join(t.value for t in AccountType)
        raise ValidationError(f"Unknown account type '{value}'. Valid types: {valid}")


class AccountService:
    """Service for managing the chart of accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def _check_code_available(self, code: str, exclude_id: Optional[int] = None) -> None:
        existing = self.db.get_account_by_code(code)
        if existing is not None and existing.is_active and existing.id != exclude_id:
            raise DuplicateAccountCodeError(code)

    def create_account(
        self,
        code: str,
        name: str,
        account_type: AccountType | str,
        description: Optional[str] = None,
    ) -> int:
        """Create a new account.

        Args:
            code: Account code, unique among active accounts (e.g. "1100")
            name: Account name
            account_type: asset, liability, equity, revenue or expense
            description: Optional description

        Returns:
            Account ID

        Raises:
            ValidationError: If code or name is blank or the type is unknown
            DuplicateAccountCodeError: If an active account already uses the code
        """
        code = (code or "").strip()
        name = (name or "").strip()
        if not code:
            raise ValidationError("Account code cannot be empty")
        if not name:
            raise ValidationError("Account name cannot be empty")
        parsed_type = parse_account_type(account_type)

        self._check_code_available(code)

        account_id = self.db.create_account(
            code=code, name=name, account_type=parsed_type.value, description=description
        )
        logger.info("Created account %s '%s' (%s)", code, name, parsed_type.value)
        return account_id

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID, including deactivated accounts.

        Args:
            account_id: Account ID

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(account_id)

    def require_account(self, account_id: int) -> AccountEntity:
        """Get account by ID or raise NotFoundError."""
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def get_account_by_code(self, code: str) -> Optional[AccountEntity]:
        """Resolve an exact account code, preferring the active account."""
        return self.db.get_account_by_code(code.strip())

    def list_accounts(self, account_type: AccountType | str | None = None) -> list[AccountEntity]:
        """List active accounts ordered by code, optionally of one type."""
        type_value = None
        if account_type is not None:
            type_value = parse_account_type(account_type).value
        return self.db.list_accounts(account_type=type_value)

    def update_account(
        self,
        account_id: int,
        code: Optional[str] = None,
        name: Optional[str] = None,
        account_type: AccountType | str | None = None,
        description: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> AccountEntity:
        """Update account fields.

        Code uniqueness is re-checked when the code changes or a deactivated
        account is reactivated.

        Raises:
            NotFoundError: If the account does not exist
            ValidationError: If a new code or name is blank, or the type is unknown
            DuplicateAccountCodeError: If the resulting active code is taken
        """
        account = self.require_account(account_id)

        if code is not None:
            code = code.strip()
            if not code:
                raise ValidationError("Account code cannot be empty")
        if name is not None:
            name = name.strip()
            if not name:
                raise ValidationError("Account name cannot be empty")
        type_value = parse_account_type(account_type).value if account_type is not None else None

        will_be_active = account.is_active if is_active is None else is_active
        new_code = code if code is not None else account.code
        if will_be_active and (new_code != account.code or not account.is_active):
            self._check_code_available(new_code, exclude_id=account_id)

        self.db.update_account(
            account_id,
            code=code,
            name=name,
            account_type=type_value,
            description=description,
            is_active=is_active,
        )
        return self.require_account(account_id)

    def deactivate_account(self, account_id: int) -> None:
        """Soft-delete an account.

        The account stays resolvable by ID but disappears from listings.
        Journal lines that reference it are left untouched.
        """
        self.require_account(account_id)
        self.db.update_account(account_id, is_active=False)
        logger.info("Deactivated account %s", account_id)

    def delete_account(self, account_id: int) -> bool:
        """Delete an account.

        Accounts referenced by journal lines are deactivated instead of
        removed.

        Returns:
            True if the row was removed, False if it was deactivated
        """
        self.require_account(account_id)
        if self.db.get_account_line_count(account_id) > 0:
            self.deactivate_account(account_id)
            return False

        self.db.delete_account(account_id)
        logger.info("Deleted account %s", account_id)
        return True
