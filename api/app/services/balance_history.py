"""Balance history derived by reverse replay of an account's transactions.

Starting from the current balance, transactions are undone newest first
while walking bucket boundaries from newest to oldest. The running balance
at each boundary is the balance that held at that instant.
"""

import calendar
from datetime import datetime, timedelta, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from app.schemas.accounts import Account
from app.schemas.balance_history import BalanceHistoryPoint, DateRangeOption
from app.schemas.transactions import Transaction


CENT = Decimal("0.01")

# range -> (bucket count, days between buckets); 1y steps by calendar month
DAY_STEP_RANGES = {
    DateRangeOption.ONE_MONTH: (30, 1),
    DateRangeOption.THREE_MONTHS: (13, 7),
    DateRangeOption.SIX_MONTHS: (13, 14),
}
MONTHLY_BUCKETS = 12


def _end_of_day(d: datetime) -> datetime:
    return d.replace(hour=23, minute=59, second=59, microsecond=999999)


def _end_of_month(now: datetime, months_back: int) -> datetime:
    year, month = divmod(now.year * 12 + (now.month - 1) - months_back, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return _end_of_day(now.replace(year=year, month=month, day=last_day))


def generate_buckets(range_: DateRangeOption | str, now: datetime) -> list[datetime]:
    """Bucket boundaries for ``range_``, oldest first.

    Every boundary is the last instant of its day (or of its calendar month
    for ``1y``), in the timezone of ``now``. A naive ``now`` is taken as UTC.
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    range_ = DateRangeOption(range_)
    if range_ == DateRangeOption.ONE_YEAR:
        return [_end_of_month(now, i) for i in range(MONTHLY_BUCKETS - 1, -1, -1)]
    if range_ not in DAY_STEP_RANGES:
        raise ValueError(f"No bucket policy for range {range_.value!r}")
    count, step = DAY_STEP_RANGES[range_]
    return [_end_of_day(now - timedelta(days=i * step)) for i in range(count - 1, -1, -1)]


def _undo(balance: Decimal, txn: Transaction) -> Decimal:
    if txn.type == "credit":
        return balance - txn.amount
    return balance + txn.amount


def derive_balance_history(
    account: Account,
    transactions: Iterable[Transaction],
    range_: DateRangeOption | str,
    now: datetime,
) -> list[BalanceHistoryPoint]:
    """Reconstruct the balance of ``account`` at each bucket boundary.

    ``transactions`` may contain other accounts' records; they are ignored.
    A transaction dated exactly on a boundary is not undone for that bucket.
    Rounding to cents happens only when a point is recorded.
    """
    account_txns = sorted(
        (t for t in transactions if t.account_id == account.id),
        key=lambda t: t.date,
        reverse=True,
    )
    buckets = generate_buckets(range_, now)

    running = Decimal(account.balance)
    cursor = 0
    points: list[BalanceHistoryPoint] = []

    for bucket_end in reversed(buckets):
        while cursor < len(account_txns) and account_txns[cursor].date > bucket_end:
            running = _undo(running, account_txns[cursor])
            cursor += 1
        points.append(
            BalanceHistoryPoint(
                date=bucket_end,
                balance=running.quantize(CENT, rounding=ROUND_HALF_UP),
            )
        )

    points.reverse()
    return points
