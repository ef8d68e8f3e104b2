"""Recurring expense scheduling - due dates, status transitions and payment processing"""

import logging
import time
from datetime import date, timedelta
from decimal import Decimal
from typing import List, Optional

from finance_ledger.config import settings
from finance_ledger.domain.exceptions import (
    DomainException,
    ExpenseNotPayableError,
    InvalidArgumentError,
    NotFoundError,
)
from finance_ledger.domain.ledger import AccountLedger
from finance_ledger.domain.models import (
    ZERO,
    DueProcessingResult,
    ExpenseStatus,
    Frequency,
    RecurringExpense,
    Transaction,
    TransactionType,
)
from finance_ledger.domain.ports import UnitOfWork
from finance_ledger.infrastructure.observability.logging import log_due_processing
from finance_ledger.infrastructure.observability.metrics import due_batch_histogram, recurring_payment_counter
from finance_ledger.utils.date_utils import add_months, start_of_day
from finance_ledger.utils.money import require_positive


def calculate_next_due_date(from_date: date, frequency: Frequency) -> date:
    """
    Advance a date by one frequency step.

    DAILY +1 day, WEEKLY +7 days, MONTHLY +1 month, QUARTERLY +3 months,
    YEARLY +1 year. Month-based steps clamp to the last day of the target
    month when the day does not exist there (Jan 31 + 1 month = Feb 28/29).
    """
    frequency = _parse_frequency(frequency)
    if frequency == Frequency.DAILY:
        return from_date + timedelta(days=1)
    if frequency == Frequency.WEEKLY:
        return from_date + timedelta(weeks=1)
    if frequency == Frequency.MONTHLY:
        return add_months(from_date, 1)
    if frequency == Frequency.QUARTERLY:
        return add_months(from_date, 3)
    return add_months(from_date, 12)


class RecurringExpenseScheduler:
    """Owns recurring expense status and turns due expenses into payments"""

    def __init__(self, ledger: Optional[AccountLedger] = None, require_funds: Optional[bool] = None):
        self.ledger = ledger or AccountLedger()
        self.require_funds = settings.recurring_requires_funds if require_funds is None else require_funds

    def create_expense(self, uow: UnitOfWork, expense: RecurringExpense, owner_id: str) -> RecurringExpense:
        """Persist a new recurring expense with its first due date"""
        expense.owner_id = owner_id
        expense.amount = require_positive(expense.amount)
        expense.frequency = _parse_frequency(expense.frequency)
        if expense.end_date is not None and expense.end_date < expense.start_date:
            raise InvalidArgumentError("End date must not be before start date")
        if expense.reminder_days_before is not None and expense.reminder_days_before < 0:
            raise InvalidArgumentError("Reminder days must not be negative")
        if expense.account_id is not None:
            self.ledger.get_account(uow, expense.account_id, owner_id)

        if expense.next_due_date is None:
            expense.next_due_date = calculate_next_due_date(expense.start_date, expense.frequency)
        return uow.recurring_expenses.save(expense)

    def mark_as_paid(
        self,
        uow: UnitOfWork,
        expense_id: int,
        owner_id: str,
        today: Optional[date] = None,
    ) -> RecurringExpense:
        """
        Pay the current cycle of a recurring expense.

        Flow:
        1. Reject unless ACTIVE (paused, cancelled and completed are not payable)
        2. last_paid_date = today, next_due_date advances one step from it
        3. Append an EXPENSE transaction flagged as recurring
        4. Debit the linked account

        Not idempotent: calling twice debits twice and advances twice.

        Raises:
            NotFoundError: expense or its account is missing / foreign-owned
            ExpenseNotPayableError: expense is not ACTIVE
            InvalidArgumentError: expense has no linked account
            InsufficientFundsError: balance below amount (when funds are required)
        """
        today = today or date.today()
        expense = self._get_for_update(uow, expense_id, owner_id)

        if expense.status != ExpenseStatus.ACTIVE:
            raise ExpenseNotPayableError(
                f"Recurring expense {expense_id} is {expense.status.value} and cannot be paid"
            )
        if expense.account_id is None:
            raise InvalidArgumentError(f"Recurring expense {expense_id} has no linked account")

        self.ledger.subtract_from_balance(
            uow,
            expense.account_id,
            expense.amount,
            owner_id,
            require_funds=self.require_funds,
            operation="recurring_payment",
        )

        expense.last_paid_date = today
        expense.next_due_date = calculate_next_due_date(today, expense.frequency)
        if expense.end_date is not None and expense.next_due_date > expense.end_date:
            expense.status = ExpenseStatus.COMPLETED

        uow.transactions.append(
            Transaction(
                owner_id=owner_id,
                description=f"Recurring payment: {expense.name}",
                amount=expense.amount,
                type=TransactionType.EXPENSE,
                account_id=expense.account_id,
                category_id=expense.category_id,
                transaction_date=start_of_day(today),
                notes=f"Auto-generated from recurring expense: {expense.name}",
                reference_number=expense.reference_number,
                is_recurring=True,
                recurring_frequency=expense.frequency,
            )
        )
        return uow.recurring_expenses.save(expense)

    def pause(self, uow: UnitOfWork, expense_id: int, owner_id: str) -> RecurringExpense:
        expense = self._get_for_update(uow, expense_id, owner_id)
        self._ensure_not_terminal(expense, "paused")
        expense.status = ExpenseStatus.PAUSED
        return uow.recurring_expenses.save(expense)

    def resume(self, uow: UnitOfWork, expense_id: int, owner_id: str) -> RecurringExpense:
        expense = self._get_for_update(uow, expense_id, owner_id)
        self._ensure_not_terminal(expense, "resumed")
        expense.status = ExpenseStatus.ACTIVE
        return uow.recurring_expenses.save(expense)

    def cancel(self, uow: UnitOfWork, expense_id: int, owner_id: str) -> RecurringExpense:
        expense = self._get_for_update(uow, expense_id, owner_id)
        expense.status = ExpenseStatus.CANCELLED
        return uow.recurring_expenses.save(expense)

    def process_all_due(
        self,
        uow: UnitOfWork,
        owner_id: str,
        today: Optional[date] = None,
    ) -> DueProcessingResult:
        """
        Pay every ACTIVE auto-pay expense due today.

        Each expense is committed on its own; a failing expense is rolled
        back, recorded in the result and the batch moves on.
        """
        today = today or date.today()
        start_time = time.time()
        result = DueProcessingResult()

        due = uow.recurring_expenses.list_due_on(owner_id, today)
        result.examined = len(due)

        for expense in due:
            if not expense.is_auto_pay:
                result.skipped.append(expense.id)
                continue
            try:
                self.mark_as_paid(uow, expense.id, owner_id, today)
                uow.commit()
            except DomainException as e:
                uow.rollback()
                self._record_failure(result, expense.id, e)
                logging.warning(
                    f"Recurring expense {expense.id} not paid: {e}",
                    extra={"owner_id": owner_id, "expense_id": expense.id},
                )
                continue
            except Exception as e:
                # Lock timeouts and deadlocks from the database land here
                uow.rollback()
                self._record_failure(result, expense.id, e)
                logging.exception(
                    f"Unexpected error paying recurring expense {expense.id}: {e}",
                    extra={"owner_id": owner_id, "expense_id": expense.id},
                )
                continue
            result.paid.append(expense.id)
            recurring_payment_counter.labels(outcome="paid").inc()

        duration = time.time() - start_time
        due_batch_histogram.observe(duration)
        log_due_processing(owner_id, result.examined, result.paid_count, len(result.failures), duration * 1000)
        return result

    # ========== Queries ==========

    def get_expense(self, uow: UnitOfWork, expense_id: int, owner_id: str) -> RecurringExpense:
        return self._get(uow, expense_id, owner_id)

    def due_today(self, uow: UnitOfWork, owner_id: str, today: Optional[date] = None) -> List[RecurringExpense]:
        return uow.recurring_expenses.list_due_on(owner_id, today or date.today())

    def overdue(self, uow: UnitOfWork, owner_id: str, today: Optional[date] = None) -> List[RecurringExpense]:
        return uow.recurring_expenses.list_overdue(owner_id, today or date.today())

    def due_soon(
        self,
        uow: UnitOfWork,
        owner_id: str,
        days_ahead: Optional[int] = None,
        today: Optional[date] = None,
    ) -> List[RecurringExpense]:
        """
        ACTIVE expenses coming due and not yet overdue.

        Without days_ahead each expense uses its own reminder_days_before
        window; with it, every expense due within days_ahead (inclusive) counts.
        """
        today = today or date.today()
        expenses = [e for e in uow.recurring_expenses.list_by_owner(owner_id) if e.status == ExpenseStatus.ACTIVE]
        if days_ahead is None:
            return [e for e in expenses if e.is_due_soon(today)]
        horizon = today + timedelta(days=days_ahead)
        return [e for e in expenses if e.next_due_date is not None and today <= e.next_due_date <= horizon]

    def auto_pay_expenses(self, uow: UnitOfWork, owner_id: str) -> List[RecurringExpense]:
        return [e for e in uow.recurring_expenses.list_by_owner(owner_id) if e.is_auto_pay]

    def total_monthly_recurring(self, uow: UnitOfWork, owner_id: str) -> Decimal:
        """Sum of ACTIVE monthly expense amounts"""
        return sum(
            (
                e.amount
                for e in uow.recurring_expenses.list_by_owner(owner_id)
                if e.status == ExpenseStatus.ACTIVE and e.frequency == Frequency.MONTHLY
            ),
            ZERO,
        )

    # ========== Internals ==========

    def _get(self, uow: UnitOfWork, expense_id: int, owner_id: str) -> RecurringExpense:
        expense = uow.recurring_expenses.get(expense_id, owner_id)
        if expense is None:
            raise NotFoundError("Recurring expense", expense_id)
        return expense

    def _get_for_update(self, uow: UnitOfWork, expense_id: int, owner_id: str) -> RecurringExpense:
        expense = uow.recurring_expenses.get_for_update(expense_id, owner_id)
        if expense is None:
            raise NotFoundError("Recurring expense", expense_id)
        return expense

    def _record_failure(self, result: DueProcessingResult, expense_id: int, error: Exception) -> None:
        result.failures.append((expense_id, str(error)))
        recurring_payment_counter.labels(outcome="failed").inc()

    def _ensure_not_terminal(self, expense: RecurringExpense, action: str) -> None:
        if expense.status in (ExpenseStatus.CANCELLED, ExpenseStatus.COMPLETED):
            raise ExpenseNotPayableError(
                f"Recurring expense {expense.id} is {expense.status.value} and cannot be {action}"
            )


def _parse_frequency(value) -> Frequency:
    try:
        return Frequency(value)
    except ValueError as e:
        raise InvalidArgumentError(f"Unknown frequency: {value!r}") from e
