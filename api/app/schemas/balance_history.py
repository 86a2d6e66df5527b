from datetime import datetime, timezone
from enum import Enum

from pydantic import field_serializer

from .common import CamelModel, Money


class DateRangeOption(str, Enum):
    FIVE_DAYS = "5d"
    ONE_MONTH = "1m"
    THREE_MONTHS = "3m"
    SIX_MONTHS = "6m"
    ONE_YEAR = "1y"


BALANCE_HISTORY_RANGES = (
    DateRangeOption.ONE_MONTH,
    DateRangeOption.THREE_MONTHS,
    DateRangeOption.SIX_MONTHS,
    DateRangeOption.ONE_YEAR,
)
TRANSACTION_RANGES = (DateRangeOption.FIVE_DAYS, DateRangeOption.ONE_MONTH)


class BalanceHistoryPoint(CamelModel):
    date: datetime
    balance: Money

    @field_serializer("date", when_used="json")
    def iso_utc(self, v: datetime) -> str:
        return v.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class BalanceHistoryResponse(CamelModel):
    data: list[BalanceHistoryPoint]
