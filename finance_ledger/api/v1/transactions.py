"""POST /v1/transactions - post income, expense and transfer transactions"""

from fastapi import APIRouter, Depends

from finance_ledger.api.v1.schemas import TransactionCreateRequest, TransactionResponse
from finance_ledger.api.dependencies import get_owner_id, get_transaction_poster, get_unit_of_work
from finance_ledger.domain.models import Transaction
from finance_ledger.domain.transactions import TransactionPoster
from finance_ledger.infrastructure.database.unit_of_work import SqlAlchemyUnitOfWork

router = APIRouter()


@router.post("/transactions", response_model=TransactionResponse, status_code=201)
def post_transaction(
    body: TransactionCreateRequest,
    owner_id: str = Depends(get_owner_id),
    uow: SqlAlchemyUnitOfWork = Depends(get_unit_of_work),
    poster: TransactionPoster = Depends(get_transaction_poster),
):
    """
    Record a transaction and apply it to account balances.

    The balance change and the transaction row commit together.
    """
    transaction = Transaction(
        owner_id=owner_id,
        description=body.description,
        amount=body.amount,
        type=body.type,
        account_id=body.account_id,
        transaction_date=body.transaction_date,
        category_id=body.category_id,
        transfer_to_account_id=body.transfer_to_account_id,
        notes=body.notes,
        reference_number=body.reference_number,
    )
    saved = poster.post(uow, transaction, owner_id)
    uow.commit()
    return TransactionResponse.model_validate(saved)
