"""Unit tests for posting income, expense and transfer transactions"""

import pytest
from decimal import Decimal
from finance_ledger.domain.exceptions import InsufficientFundsError, InvalidArgumentError, NotFoundError
from finance_ledger.domain.models import Transaction, TransactionType
from finance_ledger.domain.transactions import TransactionPoster


def _tx(type, account_id, amount="100.00", transfer_to=None):
    return Transaction(
        owner_id="user_alice",
        description="Test",
        amount=Decimal(amount),
        type=type,
        account_id=account_id,
        transaction_date=None,
        transfer_to_account_id=transfer_to,
    )


def test_income_credits_account(uow, account, owner_id):
    """Test INCOME adds to the balance and is appended"""
    tx = TransactionPoster().post(uow, _tx(TransactionType.INCOME, account.id), owner_id)

    assert tx.id is not None
    assert tx.transaction_date is not None
    assert uow.accounts.get(account.id, owner_id).balance == Decimal("1100.00")


def test_expense_debits_account(uow, account, owner_id):
    """Test EXPENSE subtracts from the balance"""
    TransactionPoster().post(uow, _tx(TransactionType.EXPENSE, account.id, "250.00"), owner_id)

    assert uow.accounts.get(account.id, owner_id).balance == Decimal("750.00")


def test_expense_requires_funds(uow, make_account, owner_id, read_balance):
    """Test EXPENSE above the balance is rejected and nothing is appended"""
    acc = make_account("10.00")

    with pytest.raises(InsufficientFundsError):
        TransactionPoster().post(uow, _tx(TransactionType.EXPENSE, acc.id, "11.00"), owner_id)

    assert read_balance(acc.id) == Decimal("10.00")
    assert uow.transactions.list_by_account(owner_id, acc.id) == []


def test_transfer_moves_money(uow, make_account, owner_id):
    """Test TRANSFER debits the source and credits the target"""
    source = make_account("500.00")
    target = make_account("0.00", name="Savings")

    TransactionPoster().post(uow, _tx(TransactionType.TRANSFER, source.id, "200.00", target.id), owner_id)

    assert uow.accounts.get(source.id, owner_id).balance == Decimal("300.00")
    assert uow.accounts.get(target.id, owner_id).balance == Decimal("200.00")


def test_transfer_validation(uow, account, owner_id):
    """Test transfers need a distinct target account"""
    poster = TransactionPoster()

    with pytest.raises(InvalidArgumentError):
        poster.post(uow, _tx(TransactionType.TRANSFER, account.id), owner_id)
    with pytest.raises(InvalidArgumentError):
        poster.post(uow, _tx(TransactionType.TRANSFER, account.id, transfer_to=account.id), owner_id)


def test_transfer_to_foreign_account(uow, make_account, owner_id):
    """Test transfer target must belong to the owner"""
    source = make_account("500.00")
    foreign = make_account("0.00", owner_id="user_bob")

    with pytest.raises(NotFoundError):
        TransactionPoster().post(uow, _tx(TransactionType.TRANSFER, source.id, transfer_to=foreign.id), owner_id)


def test_unknown_type_and_bad_amount(uow, account, owner_id):
    """Test invalid type and non-positive amount"""
    poster = TransactionPoster()

    with pytest.raises(InvalidArgumentError):
        poster.post(uow, _tx("REFUND", account.id), owner_id)
    with pytest.raises(InvalidArgumentError):
        poster.post(uow, _tx(TransactionType.INCOME, account.id, "-1.00"), owner_id)
