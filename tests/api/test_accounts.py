"""
Tests for the chart of accounts endpoints.

These test the HTTP layer: status codes, response format and
error mapping. Business rules are tested in
tests/services/test_account_service.py.
"""

import uuid

import pytest


@pytest.fixture
def headers(tenant_id, actor_id):
    return {"X-Tenant-Id": str(tenant_id), "X-Actor-Id": str(actor_id)}


class TestCreateAccount:

    def test_create_account_returns_201(self, client, headers):
        response = client.post("/accounts", headers=headers, json={
            "code": "1000",
            "name": "Cash",
            "account_type": "asset",
        })
        assert response.status_code == 201
        data = response.json()
        assert data["code"] == "1000"
        assert data["account_type"] == "asset"
        assert data["is_active"] is True

    def test_duplicate_code_returns_400(self, client, headers):
        body = {"code": "1000", "name": "Cash", "account_type": "asset"}
        client.post("/accounts", headers=headers, json=body)
        response = client.post("/accounts", headers=headers, json=body)
        assert response.status_code == 400
        assert "already exists" in response.json()["detail"]

    def test_missing_tenant_header_returns_422(self, client, actor_id):
        response = client.post(
            "/accounts",
            headers={"X-Actor-Id": str(actor_id)},
            json={"code": "1000", "name": "Cash", "account_type": "asset"},
        )
        assert response.status_code == 422

    def test_unknown_account_type_returns_422(self, client, headers):
        response = client.post("/accounts", headers=headers, json={
            "code": "1000", "name": "Cash", "account_type": "ASSETS",
        })
        assert response.status_code == 422


class TestReadAccounts:

    def test_list_accounts(self, client, headers, chart):
        response = client.get("/accounts", headers=headers)
        assert response.status_code == 200
        assert len(response.json()) == len(chart)

    def test_get_account(self, client, headers, chart):
        response = client.get(f"/accounts/{chart['4000']}", headers=headers)
        assert response.status_code == 200
        assert response.json()["name"] == "Revenue"

    def test_get_missing_account_returns_404(self, client, headers, chart):
        response = client.get(f"/accounts/{uuid.uuid4()}", headers=headers)
        assert response.status_code == 404
        assert response.json()["detail"]["code"] == "not_found"

    def test_other_tenant_cannot_read(self, client, actor_id, chart):
        other = {"X-Tenant-Id": str(uuid.uuid4()), "X-Actor-Id": str(actor_id)}
        response = client.get(f"/accounts/{chart['4000']}", headers=other)
        assert response.status_code == 404


class TestLifecycle:

    def test_rename(self, client, headers, chart):
        response = client.patch(
            f"/accounts/{chart['4000']}", headers=headers,
            json={"name": "Product Sales"},
        )
        assert response.status_code == 200
        assert response.json()["name"] == "Product Sales"

    def test_deactivate_then_reactivate(self, client, headers, chart):
        response = client.post(
            f"/accounts/{chart['6000']}/deactivate", headers=headers
        )
        assert response.json()["is_active"] is False

        response = client.post(
            f"/accounts/{chart['6000']}/reactivate", headers=headers
        )
        assert response.json()["is_active"] is True

    def test_deactivate_twice_returns_400(self, client, headers, chart):
        client.post(f"/accounts/{chart['6000']}/deactivate", headers=headers)
        response = client.post(
            f"/accounts/{chart['6000']}/deactivate", headers=headers
        )
        assert response.status_code == 400


class TestBalance:

    def test_balance_from_posted_entries(self, client, headers, chart):
        client.post("/journal/post", headers=headers, json={
            "source_type": "manual",
            "source_id": "JE-1",
            "posting_date": "2026-03-10",
            "lines": [
                {"account_id": str(chart["1000"]), "debit": "75.00"},
                {"account_id": str(chart["3000"]), "credit": "75.00"},
            ],
        })

        response = client.get(
            f"/accounts/{chart['3000']}/balance",
            headers=headers,
            params={"as_of": "2026-03-31"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["account_code"] == "3000"
        assert data["as_of"] == "2026-03-31"
        assert float(data["balance"]) == 75.0

    def test_balance_of_missing_account_returns_404(self, client, headers, chart):
        response = client.get(f"/accounts/{uuid.uuid4()}/balance", headers=headers)
        assert response.status_code == 404
