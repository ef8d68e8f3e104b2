"""/v1/loans - loan lifecycle, payments and reporting"""

from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, Query

from finance_ledger.api.v1.schemas import (
    InstallmentRequest,
    InstallmentResponse,
    LoanCreateRequest,
    LoanResponse,
    LoanSummaryResponse,
    PaymentRequest,
)
from finance_ledger.api.dependencies import get_loan_engine, get_owner_id, get_unit_of_work
from finance_ledger.domain.loans import LoanEngine
from finance_ledger.domain.models import Loan, LoanStatus
from finance_ledger.infrastructure.database.unit_of_work import SqlAlchemyUnitOfWork

router = APIRouter()


@router.post("/loans", response_model=LoanResponse, status_code=201)
def create_loan(
    body: LoanCreateRequest,
    owner_id: str = Depends(get_owner_id),
    uow: SqlAlchemyUnitOfWork = Depends(get_unit_of_work),
    engine: LoanEngine = Depends(get_loan_engine),
):
    """
    Create a loan and move its principal.

    LENT loans debit the linked account, BORROWED loans credit it.
    """
    loan = Loan(
        owner_id=owner_id,
        person_name=body.person_name,
        loan_type=body.loan_type,
        principal_amount=body.principal_amount,
        interest_rate=body.interest_rate,
        loan_date=body.loan_date or date.today(),
        due_date=body.due_date,
        is_urgent=body.is_urgent,
        account_id=body.account_id,
        description=body.description,
        notes=body.notes,
    )
    saved = engine.create_loan(uow, loan, owner_id)
    uow.commit()
    return LoanResponse.model_validate(saved)


@router.get("/loans", response_model=List[LoanResponse])
def list_loans(
    loan_type: Optional[str] = Query(None, description="LENT or BORROWED"),
    status: Optional[LoanStatus] = Query(None),
    owner_id: str = Depends(get_owner_id),
    uow: SqlAlchemyUnitOfWork = Depends(get_unit_of_work),
    engine: LoanEngine = Depends(get_loan_engine),
):
    loans = engine.list_loans(uow, owner_id, loan_type=loan_type, status=status)
    return [LoanResponse.model_validate(l) for l in loans]


@router.get("/loans/summary", response_model=LoanSummaryResponse)
def get_loan_summary(
    owner_id: str = Depends(get_owner_id),
    uow: SqlAlchemyUnitOfWork = Depends(get_unit_of_work),
    engine: LoanEngine = Depends(get_loan_engine),
):
    return LoanSummaryResponse.model_validate(engine.summary_report(uow, owner_id))


@router.get("/loans/{loan_id}", response_model=LoanResponse)
def get_loan(
    loan_id: int,
    owner_id: str = Depends(get_owner_id),
    uow: SqlAlchemyUnitOfWork = Depends(get_unit_of_work),
    engine: LoanEngine = Depends(get_loan_engine),
):
    return LoanResponse.model_validate(engine.get_loan(uow, loan_id, owner_id))


@router.post("/loans/{loan_id}/payments", response_model=LoanResponse)
def record_payment(
    loan_id: int,
    body: PaymentRequest,
    owner_id: str = Depends(get_owner_id),
    uow: SqlAlchemyUnitOfWork = Depends(get_unit_of_work),
    engine: LoanEngine = Depends(get_loan_engine),
):
    """Apply a payment through the loan's own linked account"""
    loan = engine.record_payment(uow, loan_id, body.amount, owner_id, paid_at=body.paid_at)
    uow.commit()
    return LoanResponse.model_validate(loan)


@router.post("/loans/{loan_id}/installments", response_model=InstallmentResponse, status_code=201)
def record_installment(
    loan_id: int,
    body: InstallmentRequest,
    owner_id: str = Depends(get_owner_id),
    uow: SqlAlchemyUnitOfWork = Depends(get_unit_of_work),
    engine: LoanEngine = Depends(get_loan_engine),
):
    """Apply a payment through an explicitly chosen account and return a receipt"""
    receipt = engine.record_installment_payment(
        uow,
        loan_id,
        body.account_id,
        body.amount,
        body.note,
        body.paid_at,
        owner_id,
    )
    uow.commit()
    return InstallmentResponse.model_validate(receipt)


@router.post("/loans/{loan_id}/urgent", response_model=LoanResponse)
def mark_urgent(
    loan_id: int,
    owner_id: str = Depends(get_owner_id),
    uow: SqlAlchemyUnitOfWork = Depends(get_unit_of_work),
    engine: LoanEngine = Depends(get_loan_engine),
):
    loan = engine.mark_as_urgent(uow, loan_id, owner_id)
    uow.commit()
    return LoanResponse.model_validate(loan)


@router.delete("/loans/{loan_id}/urgent", response_model=LoanResponse)
def unmark_urgent(
    loan_id: int,
    owner_id: str = Depends(get_owner_id),
    uow: SqlAlchemyUnitOfWork = Depends(get_unit_of_work),
    engine: LoanEngine = Depends(get_loan_engine),
):
    loan = engine.mark_as_not_urgent(uow, loan_id, owner_id)
    uow.commit()
    return LoanResponse.model_validate(loan)
