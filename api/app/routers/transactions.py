import base64
import binascii
import json
from datetime import datetime, timedelta

from fastapi import APIRouter, Depends, HTTPException, Query

from app.auth import AuthenticatedUser, authorize_resource_owner, require_permission
from app.clock import get_now
from app.schemas.balance_history import DateRangeOption, TRANSACTION_RANGES
from app.schemas.transactions import TRANSACTION_PAGE_SIZE, Transaction, TransactionPage
from app.store import DataStore, get_store


router = APIRouter(prefix="/api/transactions", tags=["transactions"])

RANGE_DAYS = {
    DateRangeOption.FIVE_DAYS: 5,
    DateRangeOption.ONE_MONTH: 30,
}


def _sort_key(t: Transaction) -> tuple[datetime, str]:
    return (t.date, t.id)


def encode_cursor(t: Transaction) -> str:
    raw = json.dumps({"date": t.date.isoformat(), "id": t.id}).encode()
    return base64.urlsafe_b64encode(raw).decode().rstrip("=")


def decode_cursor(cursor: str) -> tuple[datetime, str]:
    """Position of the last transaction on the previous page."""
    try:
        raw = base64.urlsafe_b64decode(cursor + "=" * (-len(cursor) % 4))
        payload = json.loads(raw)
        date = datetime.fromisoformat(payload["date"])
        txn_id = payload["id"]
    except (binascii.Error, ValueError, KeyError, TypeError):
        raise HTTPException(400, "Invalid cursor")
    if date.tzinfo is None or not isinstance(txn_id, str):
        raise HTTPException(400, "Invalid cursor")
    return date, txn_id


@router.get("", response_model=TransactionPage)
def list_transactions(
    account_id: str | None = Query(None, alias="accountId"),
    range_: str | None = Query(None, alias="range"),
    cursor: str | None = None,
    user: AuthenticatedUser = Depends(require_permission("read:transactions")),
    store: DataStore = Depends(get_store),
    now: datetime = Depends(get_now),
):
    if range_ is not None and range_ not in {r.value for r in TRANSACTION_RANGES}:
        raise HTTPException(
            400,
            f"range query parameter must be one of: {', '.join(r.value for r in TRANSACTION_RANGES)}",
        )
    after = decode_cursor(cursor) if cursor else None

    if account_id:
        account = store.get_account(account_id)
        if account is None:
            raise HTTPException(404, "Account not found")
        if not authorize_resource_owner(user, account.customer_id):
            raise HTTPException(403, "Access denied to this account")
        txns = store.list_transactions([account_id])
    elif user.role == "admin":
        txns = store.list_transactions()
    else:
        owned = [a.id for a in store.list_accounts() if a.customer_id == user.id]
        txns = store.list_transactions(owned)

    if range_ is not None:
        since = now - timedelta(days=RANGE_DAYS[DateRangeOption(range_)])
        txns = [t for t in txns if t.date >= since]

    # newest first, id breaks ties so pages never overlap
    txns.sort(key=_sort_key, reverse=True)
    if after is not None:
        txns = [t for t in txns if _sort_key(t) < after]

    page = txns[:TRANSACTION_PAGE_SIZE]
    next_cursor = encode_cursor(page[-1]) if len(txns) > TRANSACTION_PAGE_SIZE else None
    return TransactionPage(data=page, next_cursor=next_cursor)
