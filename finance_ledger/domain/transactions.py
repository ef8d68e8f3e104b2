"""Transaction posting - appends a transaction and applies its balance effect"""

from datetime import datetime
from typing import Optional

from finance_ledger.domain.exceptions import InvalidArgumentError
from finance_ledger.domain.ledger import AccountLedger
from finance_ledger.domain.models import Transaction, TransactionType
from finance_ledger.domain.ports import UnitOfWork
from finance_ledger.utils.money import require_positive


class TransactionPoster:
    """
    INCOME credits the account, EXPENSE debits it, TRANSFER debits the
    source and credits transfer_to_account_id. Debits require funds.
    """

    def __init__(self, ledger: Optional[AccountLedger] = None):
        self.ledger = ledger or AccountLedger()

    def post(self, uow: UnitOfWork, transaction: Transaction, owner_id: str) -> Transaction:
        transaction.owner_id = owner_id
        transaction.amount = require_positive(transaction.amount)
        try:
            transaction.type = TransactionType(transaction.type)
        except ValueError as e:
            raise InvalidArgumentError(f"Unknown transaction type: {transaction.type!r}") from e
        if transaction.transaction_date is None:
            transaction.transaction_date = datetime.now()

        if transaction.type == TransactionType.INCOME:
            self.ledger.add_to_balance(uow, transaction.account_id, transaction.amount, owner_id)
        elif transaction.type == TransactionType.EXPENSE:
            self.ledger.subtract_from_balance(
                uow,
                transaction.account_id,
                transaction.amount,
                owner_id,
                require_funds=True,
                operation="expense",
            )
        else:
            self._transfer(uow, transaction, owner_id)

        return uow.transactions.append(transaction)

    def _transfer(self, uow: UnitOfWork, transaction: Transaction, owner_id: str) -> None:
        source = transaction.account_id
        target = transaction.transfer_to_account_id
        if target is None:
            raise InvalidArgumentError("Transfer requires a target account")
        if target == source:
            raise InvalidArgumentError("Transfer source and target must differ")

        # Lock both rows in id order so opposite transfers cannot deadlock
        for account_id in sorted((source, target)):
            self.ledger.get_account_for_update(uow, account_id, owner_id)

        self.ledger.subtract_from_balance(
            uow,
            source,
            transaction.amount,
            owner_id,
            require_funds=True,
            operation="transfer",
        )
        self.ledger.add_to_balance(uow, target, transaction.amount, owner_id)
