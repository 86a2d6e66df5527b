import json
from datetime import datetime, timedelta, timezone

import jwt
import pytest
from fastapi.testclient import TestClient

from app.clock import get_now
from app.config import Settings, get_settings
from app.main import app

JWT_SECRET = "test-supabase-jwt-secret-with-enough-bytes"
NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)

ADMIN_ID = "admin-0001"
OWNER_ID = "cust-0001"
OTHER_ID = "cust-0002"


def _write(path, resource, items):
    path.joinpath(f"{resource}.json").write_text(json.dumps({resource: items}))


@pytest.fixture
def data_dir(tmp_path):
    _write(tmp_path, "customers", [
        {"id": OWNER_ID, "name": "Owner", "email": "owner@example.com"},
        {"id": OTHER_ID, "name": "Other", "email": "other@example.com"},
    ])
    _write(tmp_path, "accounts", [
        {"id": "acc_1", "customerId": OWNER_ID, "type": "checking", "nickname": "Main",
         "currency": "USD", "balance": 1000.00, "updatedAt": NOW.isoformat()},
        {"id": "acc_2", "customerId": OTHER_ID, "type": "savings", "nickname": "Nest",
         "currency": "USD", "balance": 500.00, "updatedAt": NOW.isoformat()},
    ])
    _write(tmp_path, "transactions", [
        {"id": "t1", "accountId": "acc_1", "amount": 200.00, "date": (NOW - timedelta(days=10)).isoformat(),
         "description": "Payroll", "category": "income", "type": "credit"},
        {"id": "t2", "accountId": "acc_1", "amount": 25.50, "date": (NOW - timedelta(days=2)).isoformat(),
         "description": "Groceries", "category": "groceries", "type": "debit"},
        {"id": "t3", "accountId": "acc_2", "amount": 50.00, "date": (NOW - timedelta(days=5)).isoformat(),
         "description": "Gym", "category": "health", "type": "debit"},
    ])
    _write(tmp_path, "messages", [
        {"id": "m1", "type": "notice", "title": "Statement ready", "body": "", "time": "2h ago", "icon": "mail"},
    ])
    _write(tmp_path, "insights", [
        {"id": "i1", "title": "Spending down", "body": "Less than last month", "category": "groceries"},
    ])
    return tmp_path


@pytest.fixture
def settings(data_dir):
    return Settings(
        data_backend="fixtures",
        data_dir=data_dir,
        supabase_jwt_secret=JWT_SECRET,
    )


@pytest.fixture
def client(settings):
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_now] = lambda: NOW
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_token(sub, role=None, secret=JWT_SECRET, audience="authenticated", expires_in=timedelta(hours=1), **claims):
    payload = {
        "sub": sub,
        "aud": audience,
        "exp": datetime.now(timezone.utc) + expires_in,
        "email": f"{sub}@example.com",
        "user_metadata": {"role": role} if role else {},
        **claims,
    }
    return jwt.encode(payload, secret, algorithm="HS256")


def auth_headers(sub, role=None, **kwargs):
    return {"Authorization": f"Bearer {make_token(sub, role, **kwargs)}"}
