"""Account ledger - the only code path that changes an account balance"""

import logging

from finance_ledger.domain.exceptions import InsufficientFundsError, NotFoundError
from finance_ledger.domain.models import Account
from finance_ledger.domain.ports import UnitOfWork
from finance_ledger.infrastructure.observability.logging import log_balance_change
from finance_ledger.infrastructure.observability.metrics import (
    record_balance_mutation,
    record_insufficient_funds,
)
from finance_ledger.utils.money import MoneyInput, require_positive


class AccountLedger:
    """
    Credits and debits account balances.

    Each mutation re-reads the account row with a write lock held until the
    unit of work commits, so two operations touching the same account are
    applied one after the other instead of overwriting each other.
    """

    def add_to_balance(
        self,
        uow: UnitOfWork,
        account_id: int,
        amount: MoneyInput,
        owner_id: str,
    ) -> Account:
        amount = require_positive(amount)
        account = self.get_account_for_update(uow, account_id, owner_id)

        account.balance = account.balance + amount
        uow.accounts.update_balance(account.id, account.balance)

        record_balance_mutation("credit")
        log_balance_change(owner_id, account.id, "credit", amount, account.balance)
        return account

    def subtract_from_balance(
        self,
        uow: UnitOfWork,
        account_id: int,
        amount: MoneyInput,
        owner_id: str,
        require_funds: bool = False,
        operation: str = "debit",
    ) -> Account:
        """
        Debit an account.

        Args:
            require_funds: reject the debit with InsufficientFundsError when
                the balance is below the amount. Without it the balance may
                go negative.
            operation: label for the rejection metric
        """
        amount = require_positive(amount)
        account = self.get_account_for_update(uow, account_id, owner_id)

        if require_funds and account.balance < amount:
            record_insufficient_funds(operation)
            logging.warning(
                f"Insufficient funds for {operation}",
                extra={"owner_id": owner_id, "account_id": account.id},
            )
            raise InsufficientFundsError(account.id, account.balance, amount)

        account.balance = account.balance - amount
        uow.accounts.update_balance(account.id, account.balance)

        record_balance_mutation("debit")
        log_balance_change(owner_id, account.id, "debit", amount, account.balance)
        return account

    def get_account(self, uow: UnitOfWork, account_id: int, owner_id: str) -> Account:
        """Resolve an owner-matching account without locking it"""
        account = uow.accounts.get(account_id, owner_id)
        if account is None:
            raise NotFoundError("Account", account_id)
        return account

    def get_account_for_update(self, uow: UnitOfWork, account_id: int, owner_id: str) -> Account:
        """Resolve an owner-matching account and lock its row until commit"""
        account = uow.accounts.get_for_update(account_id, owner_id)
        if account is None:
            raise NotFoundError("Account", account_id)
        return account
