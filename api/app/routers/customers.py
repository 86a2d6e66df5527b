from fastapi import APIRouter, Depends

from app.auth import AuthenticatedUser, require_permission
from app.schemas.accounts import CustomersResponse
from app.store import DataStore, get_store


router = APIRouter(prefix="/api/customers", tags=["customers"])


@router.get("", response_model=CustomersResponse)
def list_customers(
    user: AuthenticatedUser = Depends(require_permission("read:customers")),
    store: DataStore = Depends(get_store),
):
    customers = store.list_customers()
    if user.role != "admin":
        customers = [c for c in customers if c.id == user.id]
    return CustomersResponse(customers=customers)
