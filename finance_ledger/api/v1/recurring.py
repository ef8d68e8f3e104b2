"""/v1/recurring-expenses - recurring expense lifecycle and due processing"""

from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, Query

from finance_ledger.api.v1.schemas import (
    DueProcessingResponse,
    ProcessingFailure,
    RecurringExpenseCreateRequest,
    RecurringExpenseResponse,
)
from finance_ledger.api.dependencies import get_owner_id, get_scheduler, get_unit_of_work
from finance_ledger.domain.models import RecurringExpense
from finance_ledger.domain.recurring import RecurringExpenseScheduler
from finance_ledger.infrastructure.database.unit_of_work import SqlAlchemyUnitOfWork

router = APIRouter()


@router.post("/recurring-expenses", response_model=RecurringExpenseResponse, status_code=201)
def create_recurring_expense(
    body: RecurringExpenseCreateRequest,
    owner_id: str = Depends(get_owner_id),
    uow: SqlAlchemyUnitOfWork = Depends(get_unit_of_work),
    scheduler: RecurringExpenseScheduler = Depends(get_scheduler),
):
    expense = RecurringExpense(
        owner_id=owner_id,
        name=body.name,
        amount=body.amount,
        frequency=body.frequency,
        start_date=body.start_date,
        end_date=body.end_date,
        next_due_date=body.next_due_date,
        is_auto_pay=body.is_auto_pay,
        account_id=body.account_id,
        category_id=body.category_id,
        provider=body.provider,
        reference_number=body.reference_number,
        reminder_days_before=body.reminder_days_before,
    )
    saved = scheduler.create_expense(uow, expense, owner_id)
    uow.commit()
    return RecurringExpenseResponse.model_validate(saved)


@router.post("/recurring-expenses/process-due", response_model=DueProcessingResponse)
def process_due_expenses(
    today: Optional[date] = Query(None, description="Processing date, defaults to today"),
    owner_id: str = Depends(get_owner_id),
    uow: SqlAlchemyUnitOfWork = Depends(get_unit_of_work),
    scheduler: RecurringExpenseScheduler = Depends(get_scheduler),
):
    """
    Pay every auto-pay expense due on the given day.

    Each expense commits independently, so a partial failure still returns
    200 with the failed items listed.
    """
    result = scheduler.process_all_due(uow, owner_id, today)
    return DueProcessingResponse(
        examined=result.examined,
        paid_count=result.paid_count,
        paid=result.paid,
        skipped=result.skipped,
        failures=[ProcessingFailure(expense_id=i, reason=r) for i, r in result.failures],
    )


@router.get("/recurring-expenses/due-today", response_model=List[RecurringExpenseResponse])
def get_due_today(
    today: Optional[date] = Query(None),
    owner_id: str = Depends(get_owner_id),
    uow: SqlAlchemyUnitOfWork = Depends(get_unit_of_work),
    scheduler: RecurringExpenseScheduler = Depends(get_scheduler),
):
    return [RecurringExpenseResponse.model_validate(e) for e in scheduler.due_today(uow, owner_id, today)]


@router.get("/recurring-expenses/overdue", response_model=List[RecurringExpenseResponse])
def get_overdue(
    today: Optional[date] = Query(None),
    owner_id: str = Depends(get_owner_id),
    uow: SqlAlchemyUnitOfWork = Depends(get_unit_of_work),
    scheduler: RecurringExpenseScheduler = Depends(get_scheduler),
):
    return [RecurringExpenseResponse.model_validate(e) for e in scheduler.overdue(uow, owner_id, today)]


@router.get("/recurring-expenses/{expense_id}", response_model=RecurringExpenseResponse)
def get_recurring_expense(
    expense_id: int,
    owner_id: str = Depends(get_owner_id),
    uow: SqlAlchemyUnitOfWork = Depends(get_unit_of_work),
    scheduler: RecurringExpenseScheduler = Depends(get_scheduler),
):
    return RecurringExpenseResponse.model_validate(scheduler.get_expense(uow, expense_id, owner_id))


@router.post("/recurring-expenses/{expense_id}/pay", response_model=RecurringExpenseResponse)
def pay_recurring_expense(
    expense_id: int,
    owner_id: str = Depends(get_owner_id),
    uow: SqlAlchemyUnitOfWork = Depends(get_unit_of_work),
    scheduler: RecurringExpenseScheduler = Depends(get_scheduler),
):
    expense = scheduler.mark_as_paid(uow, expense_id, owner_id)
    uow.commit()
    return RecurringExpenseResponse.model_validate(expense)


@router.post("/recurring-expenses/{expense_id}/pause", response_model=RecurringExpenseResponse)
def pause_recurring_expense(
    expense_id: int,
    owner_id: str = Depends(get_owner_id),
    uow: SqlAlchemyUnitOfWork = Depends(get_unit_of_work),
    scheduler: RecurringExpenseScheduler = Depends(get_scheduler),
):
    expense = scheduler.pause(uow, expense_id, owner_id)
    uow.commit()
    return RecurringExpenseResponse.model_validate(expense)


@router.post("/recurring-expenses/{expense_id}/resume", response_model=RecurringExpenseResponse)
def resume_recurring_expense(
    expense_id: int,
    owner_id: str = Depends(get_owner_id),
    uow: SqlAlchemyUnitOfWork = Depends(get_unit_of_work),
    scheduler: RecurringExpenseScheduler = Depends(get_scheduler),
):
    expense = scheduler.resume(uow, expense_id, owner_id)
    uow.commit()
    return RecurringExpenseResponse.model_validate(expense)


@router.post("/recurring-expenses/{expense_id}/cancel", response_model=RecurringExpenseResponse)
def cancel_recurring_expense(
    expense_id: int,
    owner_id: str = Depends(get_owner_id),
    uow: SqlAlchemyUnitOfWork = Depends(get_unit_of_work),
    scheduler: RecurringExpenseScheduler = Depends(get_scheduler),
):
    expense = scheduler.cancel(uow, expense_id, owner_id)
    uow.commit()
    return RecurringExpenseResponse.model_validate(expense)
