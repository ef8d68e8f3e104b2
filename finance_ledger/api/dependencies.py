"""Dependency injection for FastAPI endpoints"""

from typing import Generator
from fastapi import Header, Request

from finance_ledger.config import settings
from finance_ledger.domain.loans import LoanEngine
from finance_ledger.domain.net_worth import NetWorthAggregator
from finance_ledger.domain.recurring import RecurringExpenseScheduler
from finance_ledger.domain.transactions import TransactionPoster
from finance_ledger.infrastructure.database.unit_of_work import SqlAlchemyUnitOfWork


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_owner_id(owner_id: str = Header(..., alias=settings.owner_header, min_length=1)) -> str:
    """Owner identity every ledger operation is scoped to"""
    return owner_id


def get_unit_of_work() -> Generator[SqlAlchemyUnitOfWork, None, None]:
    """One unit of work per request; routes commit it explicitly"""
    with SqlAlchemyUnitOfWork() as uow:
        yield uow


def get_loan_engine() -> LoanEngine:
    return LoanEngine()


def get_scheduler() -> RecurringExpenseScheduler:
    return RecurringExpenseScheduler()


def get_transaction_poster() -> TransactionPoster:
    return TransactionPoster()


def get_net_worth_aggregator() -> NetWorthAggregator:
    return NetWorthAggregator()
