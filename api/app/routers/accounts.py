from fastapi import APIRouter, Depends

from app.auth import AuthenticatedUser, require_permission
from app.schemas.accounts import AccountsResponse
from app.store import DataStore, get_store


router = APIRouter(prefix="/api/accounts", tags=["accounts"])


@router.get("", response_model=AccountsResponse)
def list_accounts(
    user: AuthenticatedUser = Depends(require_permission("read:accounts")),
    store: DataStore = Depends(get_store),
):
    accounts = store.list_accounts()
    if user.role != "admin":
        accounts = [a for a in accounts if a.customer_id == user.id]
    return AccountsResponse(data=accounts)
