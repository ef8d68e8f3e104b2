"""Unit tests for account balance mutations"""

import pytest
from decimal import Decimal
from finance_ledger.domain.exceptions import InsufficientFundsError, InvalidArgumentError, NotFoundError
from finance_ledger.domain.ledger import AccountLedger


def test_add_to_balance(uow, account, owner_id):
    """Test credit increases the balance"""
    updated = AccountLedger().add_to_balance(uow, account.id, Decimal("250.50"), owner_id)

    assert updated.balance == Decimal("1250.50")
    assert uow.accounts.get(account.id, owner_id).balance == Decimal("1250.50")


def test_subtract_from_balance(uow, account, owner_id):
    """Test debit decreases the balance"""
    updated = AccountLedger().subtract_from_balance(uow, account.id, "100", owner_id)

    assert updated.balance == Decimal("900.00")


def test_subtract_without_funds_check_goes_negative(uow, make_account, owner_id):
    """Test unchecked debit may overdraw the account"""
    acc = make_account("50.00")

    updated = AccountLedger().subtract_from_balance(uow, acc.id, "80.00", owner_id)

    assert updated.balance == Decimal("-30.00")


def test_subtract_with_funds_check_rejects(uow, make_account, owner_id, read_balance):
    """Test checked debit fails and leaves the balance untouched"""
    acc = make_account("50.00")

    with pytest.raises(InsufficientFundsError) as exc_info:
        AccountLedger().subtract_from_balance(uow, acc.id, "80.00", owner_id, require_funds=True)

    assert exc_info.value.available == Decimal("50.00")
    assert exc_info.value.required == Decimal("80.00")
    assert read_balance(acc.id) == Decimal("50.00")


def test_exact_balance_passes_funds_check(uow, make_account, owner_id):
    """Test debit of the full balance is allowed"""
    acc = make_account("80.00")

    updated = AccountLedger().subtract_from_balance(uow, acc.id, "80.00", owner_id, require_funds=True)

    assert updated.balance == Decimal("0.00")


@pytest.mark.parametrize("amount", ["0", "-5.00", 0])
def test_non_positive_amount_rejected(uow, account, owner_id, amount):
    """Test zero and negative amounts are invalid"""
    with pytest.raises(InvalidArgumentError):
        AccountLedger().add_to_balance(uow, account.id, amount, owner_id)


def test_foreign_account_looks_missing(uow, account):
    """Test an account owned by someone else is reported as not found"""
    with pytest.raises(NotFoundError):
        AccountLedger().add_to_balance(uow, account.id, "10.00", "user_bob")


def test_missing_account(uow, owner_id):
    """Test unknown account id"""
    with pytest.raises(NotFoundError) as exc_info:
        AccountLedger().subtract_from_balance(uow, 9999, "10.00", owner_id)

    assert "9999" in str(exc_info.value)


def test_sub_cent_amounts_leave_balance_untouched(uow, account, owner_id, read_balance):
    """Test amounts with more than two decimals are rejected, not rounded"""
    with pytest.raises(InvalidArgumentError):
        AccountLedger().add_to_balance(uow, account.id, "0.005", owner_id)
    uow.rollback()

    assert read_balance(account.id) == Decimal("1000.00")
