"""Unit of work - one database transaction per ledger operation"""

from typing import Callable, Optional
from sqlalchemy.orm import Session
from finance_ledger.infrastructure.database.session import SessionLocal
from finance_ledger.infrastructure.database.repositories import (
    AccountRepository,
    LoanRepository,
    RecurringExpenseRepository,
    TransactionRepository,
)


class SqlAlchemyUnitOfWork:
    """
    Transaction scope handed to the ledger engines.

    Usage:
        with SqlAlchemyUnitOfWork() as uow:
            engine.create_loan(uow, loan, owner_id)
            uow.commit()

    Leaving the block without commit() discards every change made inside it.
    """

    def __init__(self, session_factory: Optional[Callable[[], Session]] = None):
        self.session_factory = session_factory or SessionLocal
        self.session: Optional[Session] = None

    def __enter__(self) -> "SqlAlchemyUnitOfWork":
        self.session = self.session_factory()
        self.accounts = AccountRepository(self.session)
        self.loans = LoanRepository(self.session)
        self.recurring_expenses = RecurringExpenseRepository(self.session)
        self.transactions = TransactionRepository(self.session)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            self.rollback()
        finally:
            self.session.close()

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()
