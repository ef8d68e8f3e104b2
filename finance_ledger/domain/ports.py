"""Persistence interfaces consumed by the ledger core

Every lookup is scoped by owner; a row owned by somebody else is reported
exactly like a missing row (None).
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional, Protocol

from finance_ledger.domain.models import (
    Account,
    ExpenseStatus,
    Loan,
    LoanStatus,
    LoanType,
    RecurringExpense,
    Transaction,
)


class AccountRepository(Protocol):
    def get(self, account_id: int, owner_id: str) -> Optional[Account]: ...

    def get_for_update(self, account_id: int, owner_id: str) -> Optional[Account]:
        """Fetch the row locked against concurrent balance writes until commit"""
        ...

    def list_included_active(self, owner_id: str) -> List[Account]: ...

    def update_balance(self, account_id: int, balance: Decimal) -> None: ...

    def add(self, account: Account) -> Account: ...


class LoanRepository(Protocol):
    def get(self, loan_id: int, owner_id: str) -> Optional[Loan]: ...

    def get_for_update(self, loan_id: int, owner_id: str) -> Optional[Loan]: ...

    def list_by_owner(self, owner_id: str) -> List[Loan]: ...

    def list_by_type(self, owner_id: str, loan_type: LoanType) -> List[Loan]: ...

    def list_by_status(self, owner_id: str, status: LoanStatus) -> List[Loan]: ...

    def list_overdue(self, owner_id: str, today: date) -> List[Loan]: ...

    def save(self, loan: Loan) -> Loan: ...


class RecurringExpenseRepository(Protocol):
    def get(self, expense_id: int, owner_id: str) -> Optional[RecurringExpense]: ...

    def get_for_update(self, expense_id: int, owner_id: str) -> Optional[RecurringExpense]: ...

    def list_by_owner(self, owner_id: str) -> List[RecurringExpense]: ...

    def list_due_on(self, owner_id: str, day: date, status: ExpenseStatus = ExpenseStatus.ACTIVE) -> List[RecurringExpense]: ...

    def list_overdue(self, owner_id: str, today: date) -> List[RecurringExpense]: ...

    def save(self, expense: RecurringExpense) -> RecurringExpense: ...


class TransactionSink(Protocol):
    def append(self, transaction: Transaction) -> Transaction:
        """Insert the transaction and return it with its assigned id"""
        ...


class UnitOfWork(Protocol):
    """Transaction scope created by the caller for one operation"""

    accounts: AccountRepository
    loans: LoanRepository
    recurring_expenses: RecurringExpenseRepository
    transactions: TransactionSink

    def commit(self) -> None: ...

    def rollback(self) -> None: ...
