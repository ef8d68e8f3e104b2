"""Data access layer for ledger entities

Repositories hand out detached domain dataclasses; ORM rows never leave this
module.
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional
from sqlalchemy.orm import Session
from finance_ledger.infrastructure.database.models import (
    AccountRecord,
    LoanRecord,
    RecurringExpenseRecord,
    TransactionRecord,
)
from finance_ledger.domain.models import (
    Account,
    AccountStatus,
    AccountType,
    ExpenseStatus,
    Frequency,
    Loan,
    LoanStatus,
    LoanType,
    RecurringExpense,
    Transaction,
    TransactionType,
)


def _to_account(row: AccountRecord) -> Account:
    return Account(
        id=row.id,
        owner_id=row.owner_id,
        name=row.name,
        type=AccountType(row.type),
        balance=Decimal(row.balance),
        currency=row.currency,
        include_in_balance=row.include_in_balance,
        status=AccountStatus(row.status),
    )


def _to_loan(row: LoanRecord) -> Loan:
    return Loan(
        id=row.id,
        owner_id=row.owner_id,
        person_name=row.person_name,
        loan_type=LoanType(row.loan_type),
        principal_amount=Decimal(row.principal_amount),
        interest_rate=Decimal(row.interest_rate),
        total_amount=Decimal(row.total_amount),
        paid_amount=Decimal(row.paid_amount),
        remaining_amount=Decimal(row.remaining_amount),
        status=LoanStatus(row.status),
        loan_date=row.loan_date,
        due_date=row.due_date,
        last_payment_date=row.last_payment_date,
        is_urgent=row.is_urgent,
        account_id=row.account_id,
        description=row.description,
        notes=row.notes,
    )


def _to_expense(row: RecurringExpenseRecord) -> RecurringExpense:
    return RecurringExpense(
        id=row.id,
        owner_id=row.owner_id,
        name=row.name,
        amount=Decimal(row.amount),
        frequency=Frequency(row.frequency),
        start_date=row.start_date,
        end_date=row.end_date,
        next_due_date=row.next_due_date,
        last_paid_date=row.last_paid_date,
        status=ExpenseStatus(row.status),
        is_auto_pay=row.is_auto_pay,
        account_id=row.account_id,
        category_id=row.category_id,
        provider=row.provider,
        reference_number=row.reference_number,
        reminder_days_before=row.reminder_days_before,
    )


class AccountRepository:
    """Repository for accounts"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, account_id: int, owner_id: str) -> Optional[Account]:
        row = self._query(account_id, owner_id).first()
        return _to_account(row) if row else None

    def get_for_update(self, account_id: int, owner_id: str) -> Optional[Account]:
        """SELECT ... FOR UPDATE: the row stays locked until the session commits or rolls back"""
        row = self._query(account_id, owner_id).with_for_update().populate_existing().first()
        return _to_account(row) if row else None

    def list_included_active(self, owner_id: str) -> List[Account]:
        rows = (
            self.db.query(AccountRecord)
            .filter(
                AccountRecord.owner_id == owner_id,
                AccountRecord.include_in_balance.is_(True),
                AccountRecord.status == AccountStatus.ACTIVE.value,
            )
            .order_by(AccountRecord.id)
            .all()
        )
        return [_to_account(r) for r in rows]

    def update_balance(self, account_id: int, balance: Decimal) -> None:
        row = self.db.get(AccountRecord, account_id)
        row.balance = balance
        self.db.flush()

    def add(self, account: Account) -> Account:
        row = AccountRecord(
            owner_id=account.owner_id,
            name=account.name,
            type=AccountType(account.type).value,
            balance=account.balance,
            currency=account.currency,
            include_in_balance=account.include_in_balance,
            status=AccountStatus(account.status).value,
        )
        self.db.add(row)
        self.db.flush()  # Get ID without committing
        account.id = row.id
        return account

    def _query(self, account_id: int, owner_id: str):
        return self.db.query(AccountRecord).filter(
            AccountRecord.id == account_id,
            AccountRecord.owner_id == owner_id,
        )


class LoanRepository:
    """Repository for loans"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, loan_id: int, owner_id: str) -> Optional[Loan]:
        row = self._query(loan_id, owner_id).first()
        return _to_loan(row) if row else None

    def get_for_update(self, loan_id: int, owner_id: str) -> Optional[Loan]:
        """Fresh copy of the row, locked until the session commits or rolls back"""
        row = self._query(loan_id, owner_id).with_for_update().populate_existing().first()
        return _to_loan(row) if row else None

    def list_by_owner(self, owner_id: str) -> List[Loan]:
        rows = self._by_owner(owner_id).all()
        return [_to_loan(r) for r in rows]

    def list_by_type(self, owner_id: str, loan_type: LoanType) -> List[Loan]:
        rows = self._by_owner(owner_id).filter(LoanRecord.loan_type == loan_type.value).all()
        return [_to_loan(r) for r in rows]

    def list_by_status(self, owner_id: str, status: LoanStatus) -> List[Loan]:
        rows = self._by_owner(owner_id).filter(LoanRecord.status == status.value).all()
        return [_to_loan(r) for r in rows]

    def list_overdue(self, owner_id: str, today: date) -> List[Loan]:
        rows = (
            self._by_owner(owner_id)
            .filter(
                LoanRecord.due_date < today,
                LoanRecord.status == LoanStatus.ACTIVE.value,
            )
            .all()
        )
        return [_to_loan(r) for r in rows]

    def save(self, loan: Loan) -> Loan:
        """Insert a new loan or overwrite the stored row with the entity's state"""
        row = self.db.get(LoanRecord, loan.id) if loan.id is not None else None
        if row is None:
            row = LoanRecord()
            self.db.add(row)

        row.owner_id = loan.owner_id
        row.person_name = loan.person_name
        row.loan_type = loan.loan_type.value
        row.principal_amount = loan.principal_amount
        row.interest_rate = loan.interest_rate
        row.total_amount = loan.total_amount
        row.paid_amount = loan.paid_amount
        row.remaining_amount = loan.remaining_amount
        row.status = loan.status.value
        row.loan_date = loan.loan_date
        row.due_date = loan.due_date
        row.last_payment_date = loan.last_payment_date
        row.is_urgent = loan.is_urgent
        row.account_id = loan.account_id
        row.description = loan.description
        row.notes = loan.notes

        self.db.flush()
        loan.id = row.id
        return loan

    def _query(self, loan_id: int, owner_id: str):
        return self.db.query(LoanRecord).filter(LoanRecord.id == loan_id, LoanRecord.owner_id == owner_id)

    def _by_owner(self, owner_id: str):
        return (
            self.db.query(LoanRecord)
            .filter(LoanRecord.owner_id == owner_id)
            .order_by(LoanRecord.id)
        )


class RecurringExpenseRepository:
    """Repository for recurring expenses"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, expense_id: int, owner_id: str) -> Optional[RecurringExpense]:
        row = self._query(expense_id, owner_id).first()
        return _to_expense(row) if row else None

    def get_for_update(self, expense_id: int, owner_id: str) -> Optional[RecurringExpense]:
        row = self._query(expense_id, owner_id).with_for_update().populate_existing().first()
        return _to_expense(row) if row else None

    def list_by_owner(self, owner_id: str) -> List[RecurringExpense]:
        rows = self._by_owner(owner_id).all()
        return [_to_expense(r) for r in rows]

    def list_due_on(
        self,
        owner_id: str,
        day: date,
        status: ExpenseStatus = ExpenseStatus.ACTIVE,
    ) -> List[RecurringExpense]:
        rows = (
            self._by_owner(owner_id)
            .filter(
                RecurringExpenseRecord.next_due_date == day,
                RecurringExpenseRecord.status == status.value,
            )
            .all()
        )
        return [_to_expense(r) for r in rows]

    def list_overdue(self, owner_id: str, today: date) -> List[RecurringExpense]:
        rows = (
            self._by_owner(owner_id)
            .filter(
                RecurringExpenseRecord.next_due_date < today,
                RecurringExpenseRecord.status == ExpenseStatus.ACTIVE.value,
            )
            .all()
        )
        return [_to_expense(r) for r in rows]

    def save(self, expense: RecurringExpense) -> RecurringExpense:
        row = self.db.get(RecurringExpenseRecord, expense.id) if expense.id is not None else None
        if row is None:
            row = RecurringExpenseRecord()
            self.db.add(row)

        row.owner_id = expense.owner_id
        row.name = expense.name
        row.amount = expense.amount
        row.frequency = expense.frequency.value
        row.start_date = expense.start_date
        row.end_date = expense.end_date
        row.next_due_date = expense.next_due_date
        row.last_paid_date = expense.last_paid_date
        row.status = expense.status.value
        row.is_auto_pay = expense.is_auto_pay
        row.account_id = expense.account_id
        row.category_id = expense.category_id
        row.provider = expense.provider
        row.reference_number = expense.reference_number
        row.reminder_days_before = expense.reminder_days_before

        self.db.flush()
        expense.id = row.id
        return expense

    def _query(self, expense_id: int, owner_id: str):
        return self.db.query(RecurringExpenseRecord).filter(
            RecurringExpenseRecord.id == expense_id,
            RecurringExpenseRecord.owner_id == owner_id,
        )

    def _by_owner(self, owner_id: str):
        return (
            self.db.query(RecurringExpenseRecord)
            .filter(RecurringExpenseRecord.owner_id == owner_id)
            .order_by(RecurringExpenseRecord.id)
        )


class TransactionRepository:
    """Append-only sink for transactions produced by the ledger core"""

    def __init__(self, db: Session):
        self.db = db

    def append(self, transaction: Transaction) -> Transaction:
        row = TransactionRecord(
            owner_id=transaction.owner_id,
            description=transaction.description,
            amount=transaction.amount,
            type=TransactionType(transaction.type).value,
            account_id=transaction.account_id,
            category_id=transaction.category_id,
            transfer_to_account_id=transaction.transfer_to_account_id,
            transaction_date=transaction.transaction_date,
            notes=transaction.notes,
            reference_number=transaction.reference_number,
            is_recurring=transaction.is_recurring,
            recurring_frequency=transaction.recurring_frequency.value if transaction.recurring_frequency else None,
        )
        self.db.add(row)
        self.db.flush()
        transaction.id = row.id
        return transaction

    def list_by_account(self, owner_id: str, account_id: int) -> List[Transaction]:
        rows = (
            self.db.query(TransactionRecord)
            .filter(
                TransactionRecord.owner_id == owner_id,
                TransactionRecord.account_id == account_id,
            )
            .order_by(TransactionRecord.id)
            .all()
        )
        return [
            Transaction(
                id=r.id,
                owner_id=r.owner_id,
                description=r.description,
                amount=Decimal(r.amount),
                type=TransactionType(r.type),
                account_id=r.account_id,
                category_id=r.category_id,
                transfer_to_account_id=r.transfer_to_account_id,
                transaction_date=r.transaction_date,
                notes=r.notes,
                reference_number=r.reference_number,
                is_recurring=r.is_recurring,
                recurring_frequency=Frequency(r.recurring_frequency) if r.recurring_frequency else None,
            )
            for r in rows
        ]
