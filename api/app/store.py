"""Read access to dashboard data, backed by JSON fixtures or the database."""

import json
import logging
from pathlib import Path
from typing import Iterable, Protocol

from fastapi import Depends
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import Settings, get_settings
from app.db import get_sessionmaker
from app.models.account import Account as AccountRow
from app.models.customer import Customer as CustomerRow
from app.models.message import Insight as InsightRow, Message as MessageRow
from app.models.transaction import Transaction as TransactionRow
from app.schemas.accounts import Account, Customer
from app.schemas.messages import Insight, Message
from app.schemas.transactions import Transaction

logger = logging.getLogger(__name__)


class DataSourceError(Exception):
    """A resource could not be loaded from the configured backend."""

    def __init__(self, resource: str, reason: str = ""):
        self.resource = resource
        super().__init__(f"Failed to load {resource} data" + (f": {reason}" if reason else ""))


class DataStore(Protocol):
    def list_customers(self) -> list[Customer]: ...

    def list_accounts(self) -> list[Account]: ...

    def get_account(self, account_id: str) -> Account | None: ...

    def list_transactions(self, account_ids: Iterable[str] | None = None) -> list[Transaction]: ...

    def list_messages(self) -> list[Message]: ...

    def list_insights(self) -> list[Insight]: ...


class FixtureStore:
    """Reads ``<resource>.json`` files from a directory on every call.

    Each file holds a single top-level key named after the resource, e.g.
    ``{"accounts": [...]}``.
    """

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)

    def _read(self, resource: str, model):
        path = self.data_dir / f"{resource}.json"
        try:
            with path.open(encoding="utf-8") as fh:
                payload = json.load(fh)
            return [model.model_validate(item) for item in payload[resource]]
        except (OSError, ValueError, KeyError, TypeError) as exc:
            # ValidationError is a ValueError
            logger.error("Error reading %s: %s", path, exc)
            raise DataSourceError(resource, str(exc)) from exc

    def list_customers(self) -> list[Customer]:
        return self._read("customers", Customer)

    def list_accounts(self) -> list[Account]:
        return self._read("accounts", Account)

    def get_account(self, account_id: str) -> Account | None:
        return next((a for a in self.list_accounts() if a.id == account_id), None)

    def list_transactions(self, account_ids: Iterable[str] | None = None) -> list[Transaction]:
        txns = self._read("transactions", Transaction)
        if account_ids is None:
            return txns
        wanted = set(account_ids)
        return [t for t in txns if t.account_id in wanted]

    def list_messages(self) -> list[Message]:
        return self._read("messages", Message)

    def list_insights(self) -> list[Insight]:
        return self._read("insights", Insight)


class SqlStore:
    def __init__(self, db: Session):
        self.db = db

    def _all(self, resource: str, query, model):
        try:
            return [model.model_validate(row) for row in query.all()]
        except (SQLAlchemyError, ValidationError) as exc:
            logger.error("Error querying %s: %s", resource, exc)
            raise DataSourceError(resource, str(exc)) from exc

    def list_customers(self) -> list[Customer]:
        return self._all("customers", self.db.query(CustomerRow).order_by(CustomerRow.id), Customer)

    def list_accounts(self) -> list[Account]:
        return self._all("accounts", self.db.query(AccountRow).order_by(AccountRow.id), Account)

    def get_account(self, account_id: str) -> Account | None:
        rows = self._all("accounts", self.db.query(AccountRow).filter_by(id=account_id), Account)
        return rows[0] if rows else None

    def list_transactions(self, account_ids: Iterable[str] | None = None) -> list[Transaction]:
        q = self.db.query(TransactionRow)
        if account_ids is not None:
            q = q.filter(TransactionRow.account_id.in_(list(account_ids)))
        q = q.order_by(TransactionRow.date.desc(), TransactionRow.id.desc())
        return self._all("transactions", q, Transaction)

    def list_messages(self) -> list[Message]:
        return self._all("messages", self.db.query(MessageRow).order_by(MessageRow.id), Message)

    def list_insights(self) -> list[Insight]:
        return self._all("insights", self.db.query(InsightRow).order_by(InsightRow.id), Insight)


def get_store(settings: Settings = Depends(get_settings)):
    if settings.data_backend == "database":
        db = get_sessionmaker()()
        try:
            yield SqlStore(db)
        finally:
            db.close()
    else:
        yield FixtureStore(settings.data_dir)
