"""Bank account lifecycle"""

import dataclasses
import uuid
from decimal import Decimal
from typing import Any, Dict, List, Optional

from household_finance.domain.exceptions import AccountInUseError, NotFoundError, ValidationError
from household_finance.domain.models import ACCOUNT_TYPES, Account, AccountPatch
from household_finance.domain.repositories import AccountRepository, TransactionRepository
from household_finance.utils.money import money_error


def _validate_account_fields(values: Dict[str, Any]) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    if "name" in values and not (isinstance(values["name"], str) and values["name"].strip()):
        errors["name"] = "is required"
    if "type" in values and values["type"] not in ACCOUNT_TYPES:
        errors["type"] = "must be one of: " + ", ".join(ACCOUNT_TYPES)
    for field in ("initial_balance", "current_balance"):
        if field in values and values[field] is None:
            errors[field] = "cannot be cleared"
        elif field in values and money_error(values[field]):
            errors[field] = money_error(values[field])
    return errors


def build_account(
    user_id: str,
    name: str,
    type: str,
    initial_balance: Decimal = Decimal("0"),
    current_balance: Optional[Decimal] = None,
) -> Account:
    """New account; current_balance starts at initial_balance unless given"""
    values = {"name": name, "type": type, "initial_balance": initial_balance}
    if current_balance is not None:
        values["current_balance"] = current_balance
    errors = _validate_account_fields(values)
    if errors:
        raise ValidationError(errors)

    return Account(
        user_id=user_id,
        name=name.strip(),
        type=type,
        initial_balance=initial_balance,
        current_balance=initial_balance if current_balance is None else current_balance,
    )


class AccountService:
    def __init__(self, accounts: AccountRepository, transactions: TransactionRepository):
        self.accounts = accounts
        self.transactions = transactions

    def create_account(
        self,
        user_id: str,
        name: str,
        type: str,
        initial_balance: Decimal = Decimal("0"),
        current_balance: Optional[Decimal] = None,
    ) -> Account:
        return self.accounts.save(build_account(user_id, name, type, initial_balance, current_balance))

    def get_account(self, account_id: uuid.UUID) -> Account:
        account = self.accounts.find_by_id(account_id)
        if account is None:
            raise NotFoundError(f"Account {account_id} not found", code="AccountNotFound")
        return account

    def list_accounts(self, user_id: str, account_type: Optional[str] = None) -> List[Account]:
        return self.accounts.list_by_user(user_id, account_type)

    def update_account(self, account_id: uuid.UUID, patch: AccountPatch) -> Account:
        account = self.get_account(account_id)
        updates = patch.provided()
        errors = _validate_account_fields(updates)
        if errors:
            raise ValidationError(errors)
        if "name" in updates:
            updates["name"] = updates["name"].strip()
        return self.accounts.save(dataclasses.replace(account, **updates))

    def delete_account(self, account_id: uuid.UUID) -> None:
        in_use = self.transactions.count_by_account(account_id)
        if in_use:
            raise AccountInUseError(f"Account {account_id} has {in_use} transaction(s)")
        if not self.accounts.delete_by_id(account_id):
            raise NotFoundError(f"Account {account_id} not found", code="AccountNotFound")
