"""GET /v1/net-worth - owner's net worth snapshot"""

from fastapi import APIRouter, Depends

from finance_ledger.api.v1.schemas import NetWorthResponse
from finance_ledger.api.dependencies import get_net_worth_aggregator, get_owner_id, get_unit_of_work
from finance_ledger.domain.net_worth import NetWorthAggregator
from finance_ledger.infrastructure.database.unit_of_work import SqlAlchemyUnitOfWork

router = APIRouter()


@router.get("/net-worth", response_model=NetWorthResponse)
def get_net_worth(
    owner_id: str = Depends(get_owner_id),
    uow: SqlAlchemyUnitOfWork = Depends(get_unit_of_work),
    aggregator: NetWorthAggregator = Depends(get_net_worth_aggregator),
):
    """
    Included account balances plus the net loan position.

    Returns:
        Totals, per account type and per loan type breakdowns
    """
    return NetWorthResponse.model_validate(aggregator.calculate(uow, owner_id))
