from fastapi import APIRouter, Depends

from app.auth import require_permission
from app.schemas.messages import InsightsResponse, MessagesResponse
from app.store import DataStore, get_store


router = APIRouter(prefix="/api", tags=["messages"])


@router.get("/messages", response_model=MessagesResponse, dependencies=[Depends(require_permission("read:messages"))])
def list_messages(store: DataStore = Depends(get_store)):
    return MessagesResponse(messages=store.list_messages())


@router.get("/insights", response_model=InsightsResponse, dependencies=[Depends(require_permission("read:insights"))])
def list_insights(store: DataStore = Depends(get_store)):
    return InsightsResponse(insights=store.list_insights())
