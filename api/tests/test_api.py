"""Tests for the dashboard HTTP endpoints."""

import json
from datetime import timedelta

import pytest

from conftest import ADMIN_ID, NOW, OTHER_ID, OWNER_ID, auth_headers


def test_health_needs_no_auth(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


class TestAccounts:
    def test_requires_token(self, client):
        assert client.get("/api/accounts").status_code == 401

    def test_user_sees_only_own_accounts(self, client):
        resp = client.get("/api/accounts", headers=auth_headers(OWNER_ID))
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert [a["id"] for a in data] == ["acc_1"]
        assert data[0]["customerId"] == OWNER_ID
        assert data[0]["balance"] == 1000.0

    def test_admin_sees_all_accounts(self, client):
        resp = client.get("/api/accounts", headers=auth_headers(ADMIN_ID, role="admin"))
        assert {a["id"] for a in resp.json()["data"]} == {"acc_1", "acc_2"}

    def test_readonly_role_may_read_accounts(self, client):
        resp = client.get("/api/accounts", headers=auth_headers(OTHER_ID, role="readonly"))
        assert resp.status_code == 200
        assert [a["id"] for a in resp.json()["data"]] == ["acc_2"]

    def test_post_not_allowed(self, client):
        resp = client.post("/api/accounts", headers=auth_headers(OWNER_ID))
        assert resp.status_code == 405


class TestTransactions:
    def test_user_sees_own_transactions_newest_first(self, client):
        resp = client.get("/api/transactions", headers=auth_headers(OWNER_ID))
        assert resp.status_code == 200
        txns = resp.json()["data"]
        assert [t["id"] for t in txns] == ["t2", "t1"]
        assert txns[0]["accountId"] == "acc_1"
        assert txns[0]["amount"] == 25.5
        assert txns[0]["type"] == "debit"

    def test_admin_sees_everything(self, client):
        resp = client.get("/api/transactions", headers=auth_headers(ADMIN_ID, role="admin"))
        assert {t["id"] for t in resp.json()["data"]} == {"t1", "t2", "t3"}

    def test_filter_by_account(self, client):
        resp = client.get("/api/transactions?accountId=acc_1", headers=auth_headers(OWNER_ID))
        assert {t["accountId"] for t in resp.json()["data"]} == {"acc_1"}

    def test_other_customers_account_is_forbidden(self, client):
        resp = client.get("/api/transactions?accountId=acc_2", headers=auth_headers(OWNER_ID))
        assert resp.status_code == 403

    def test_unknown_account(self, client):
        resp = client.get("/api/transactions?accountId=nope", headers=auth_headers(OWNER_ID))
        assert resp.status_code == 404

    def test_range_filter(self, client):
        resp = client.get("/api/transactions?accountId=acc_1&range=5d", headers=auth_headers(OWNER_ID))
        assert [t["id"] for t in resp.json()["data"]] == ["t2"]

        resp = client.get("/api/transactions?accountId=acc_1&range=1m", headers=auth_headers(OWNER_ID))
        assert [t["id"] for t in resp.json()["data"]] == ["t2", "t1"]

    def test_invalid_range(self, client):
        resp = client.get("/api/transactions?range=1y", headers=auth_headers(OWNER_ID))
        assert resp.status_code == 400

    def test_readonly_role_forbidden(self, client):
        resp = client.get("/api/transactions", headers=auth_headers(OWNER_ID, role="readonly"))
        assert resp.status_code == 403
        assert resp.json()["detail"] == "Insufficient permissions"


class TestBalanceHistory:
    def test_requires_account_id(self, client):
        resp = client.get("/api/balance-history?range=1m", headers=auth_headers(OWNER_ID))
        assert resp.status_code == 400
        assert "accountId" in resp.json()["detail"]

    def test_requires_range(self, client):
        resp = client.get("/api/balance-history?accountId=acc_1", headers=auth_headers(OWNER_ID))
        assert resp.status_code == 400

    def test_rejects_ranges_without_bucket_policy(self, client):
        for range_ in ("5d", "2y"):
            resp = client.get(f"/api/balance-history?accountId=acc_1&range={range_}", headers=auth_headers(OWNER_ID))
            assert resp.status_code == 400
            assert "1m, 3m, 6m, 1y" in resp.json()["detail"]

    def test_unknown_account(self, client):
        resp = client.get("/api/balance-history?accountId=nope&range=1m", headers=auth_headers(OWNER_ID))
        assert resp.status_code == 404

    def test_other_customers_account_is_forbidden(self, client):
        resp = client.get("/api/balance-history?accountId=acc_2&range=1m", headers=auth_headers(OWNER_ID))
        assert resp.status_code == 403

    def test_admin_may_read_any_account(self, client):
        resp = client.get("/api/balance-history?accountId=acc_2&range=3m", headers=auth_headers(ADMIN_ID, role="admin"))
        assert resp.status_code == 200
        points = resp.json()["data"]
        assert len(points) == 13
        assert points[-1]["balance"] == 500.0
        assert points[0]["balance"] == 550.0

    def test_one_month_history(self, client):
        resp = client.get("/api/balance-history?accountId=acc_1&range=1m", headers=auth_headers(OWNER_ID))
        assert resp.status_code == 200
        points = resp.json()["data"]
        assert len(points) == 30
        assert points[-1] == {"date": "2026-10-19T23:59:59.999Z", "balance": 1000.0}
        assert points[0]["date"] == "2026-09-20T23:59:59.999Z"
        balances = [p["balance"] for p in points]
        assert balances[27] == 1000.0
        assert balances[26] == 1025.5
        assert balances[19] == 1025.5
        assert balances[18] == 825.5
        assert balances[0] == 825.5

    def test_year_history_has_twelve_months(self, client):
        resp = client.get("/api/balance-history?accountId=acc_1&range=1y", headers=auth_headers(OWNER_ID))
        points = resp.json()["data"]
        assert len(points) == 12
        assert points[-1]["date"] == "2026-10-31T23:59:59.999Z"
        assert points[0]["date"] == "2025-11-30T23:59:59.999Z"


class TestCustomersMessagesInsights:
    def test_user_sees_own_customer_record(self, client):
        resp = client.get("/api/customers", headers=auth_headers(OWNER_ID))
        assert [c["id"] for c in resp.json()["customers"]] == [OWNER_ID]

    def test_admin_sees_all_customers(self, client):
        resp = client.get("/api/customers", headers=auth_headers(ADMIN_ID, role="admin"))
        assert len(resp.json()["customers"]) == 2

    def test_messages(self, client):
        resp = client.get("/api/messages", headers=auth_headers(OWNER_ID))
        assert resp.status_code == 200
        assert resp.json()["messages"][0]["title"] == "Statement ready"

    def test_insights(self, client):
        resp = client.get("/api/insights", headers=auth_headers(OWNER_ID))
        assert resp.status_code == 200
        assert resp.json()["insights"][0]["id"] == "i1"

    def test_readonly_role_cannot_read_messages(self, client):
        resp = client.get("/api/messages", headers=auth_headers(OWNER_ID, role="readonly"))
        assert resp.status_code == 403

    def test_missing_fixture_is_a_server_error(self, client, data_dir):
        data_dir.joinpath("messages.json").unlink()
        resp = client.get("/api/messages", headers=auth_headers(OWNER_ID))
        assert resp.status_code == 500
        assert resp.json()["detail"] == "Failed to load messages data"


class TestTransactionPagination:
    @pytest.fixture
    def many_transactions(self, data_dir):
        # 45 transactions, pairs share a timestamp so the id decides the order
        items = [
            {"id": f"p{i:02d}", "accountId": "acc_1", "amount": 1.00,
             "date": (NOW - timedelta(hours=i // 2)).isoformat(), "type": "debit"}
            for i in range(45)
        ]
        data_dir.joinpath("transactions.json").write_text(json.dumps({"transactions": items}))
        return items

    def _get(self, client, cursor=None):
        url = "/api/transactions?accountId=acc_1"
        if cursor is not None:
            url += f"&cursor={cursor}"
        return client.get(url, headers=auth_headers(OWNER_ID))

    def test_first_page(self, client, many_transactions):
        body = self._get(client).json()
        assert len(body["data"]) == 20
        assert [t["id"] for t in body["data"][:4]] == ["p01", "p00", "p03", "p02"]
        assert body["nextCursor"]

    def test_following_cursors_walks_every_transaction_once(self, client, many_transactions):
        seen, cursor, pages = [], None, 0
        while True:
            body = self._get(client, cursor).json()
            seen.extend(t["id"] for t in body["data"])
            pages += 1
            cursor = body["nextCursor"]
            if cursor is None:
                break
        assert pages == 3
        assert len(seen) == 45
        assert sorted(seen) == sorted(t["id"] for t in many_transactions)

    def test_last_page_has_no_cursor(self, client):
        body = self._get(client).json()
        assert [t["id"] for t in body["data"]] == ["t2", "t1"]
        assert body["nextCursor"] is None

    @pytest.mark.parametrize("cursor", ["not-a-cursor", "e30", "bnVsbA"])
    def test_bad_cursor(self, client, cursor):
        resp = self._get(client, cursor)
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Invalid cursor"
