import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query

from app.auth import AuthenticatedUser, authorize_resource_owner, require_permission
from app.clock import get_now
from app.schemas.balance_history import BALANCE_HISTORY_RANGES, BalanceHistoryResponse
from app.services.balance_history import derive_balance_history
from app.store import DataStore, get_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/balance-history", tags=["balance-history"])


@router.get("", response_model=BalanceHistoryResponse)
def get_balance_history(
    account_id: str | None = Query(None, alias="accountId"),
    range_: str | None = Query(None, alias="range"),
    user: AuthenticatedUser = Depends(require_permission("read:balance-history")),
    store: DataStore = Depends(get_store),
    now: datetime = Depends(get_now),
):
    if not account_id:
        raise HTTPException(400, "accountId query parameter is required")
    allowed = [r.value for r in BALANCE_HISTORY_RANGES]
    if range_ not in allowed:
        raise HTTPException(
            400,
            f"range query parameter is required and must be one of: {', '.join(allowed)}",
        )

    account = store.get_account(account_id)
    if account is None:
        raise HTTPException(404, "Account not found")
    if not authorize_resource_owner(user, account.customer_id):
        raise HTTPException(403, "Access denied to this account")

    logger.info("Balance history for account %s over %s", account_id, range_)
    transactions = store.list_transactions([account_id])
    points = derive_balance_history(account, transactions, range_, now)
    return BalanceHistoryResponse(data=points)
