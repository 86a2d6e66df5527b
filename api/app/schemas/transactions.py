from datetime import datetime, timezone
from typing import Literal

from pydantic import field_validator

from .common import CamelModel, Money


class Transaction(CamelModel):
    id: str
    account_id: str
    amount: Money  # positive magnitude; type decides the direction
    date: datetime
    description: str = ""
    category: str = ""
    type: Literal["debit", "credit"]

    @field_validator("date")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


TRANSACTION_PAGE_SIZE = 20


class TransactionPage(CamelModel):
    data: list[Transaction]
    next_cursor: str | None = None
