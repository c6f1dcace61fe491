"""
Tests for the journal, period and audit endpoints.

These test the HTTP layer: status codes, response format and
error mapping. Posting rules are tested in tests/services.
"""

import uuid

import pytest


@pytest.fixture
def headers(tenant_id, actor_id):
    return {"X-Tenant-Id": str(tenant_id), "X-Actor-Id": str(actor_id)}


def invoice(chart, source_id="INV-1", total="110.00"):
    return {
        "source_type": "sales_doc",
        "source_id": source_id,
        "posting_date": "2026-03-15",
        "memo": f"Invoice {source_id}",
        "lines": [
            {"account_id": str(chart["1200"]), "debit": total},
            {"account_id": str(chart["4000"]), "credit": "100.00"},
            {"account_id": str(chart["2200"]), "credit": "10.00"},
        ],
    }


class TestPost:

    def test_post_returns_201(self, client, headers, chart):
        response = client.post("/journal/post", headers=headers, json=invoice(chart))
        assert response.status_code == 201
        data = response.json()
        assert data["success"] is True
        assert data["idempotent"] is False
        assert data["line_count"] == 3

    def test_replay_returns_200_with_same_entry(self, client, headers, chart):
        first = client.post("/journal/post", headers=headers, json=invoice(chart))
        second = client.post("/journal/post", headers=headers, json=invoice(chart))

        assert second.status_code == 200
        assert second.json()["idempotent"] is True
        assert second.json()["journal_entry_id"] == first.json()["journal_entry_id"]

    def test_conflicting_repost_returns_409(self, client, headers, chart):
        client.post("/journal/post", headers=headers, json=invoice(chart))
        changed = invoice(chart)
        changed["lines"][0]["debit"] = "120.00"
        changed["lines"][1]["credit"] = "110.00"

        response = client.post("/journal/post", headers=headers, json=changed)
        assert response.status_code == 409
        assert response.json()["detail"]["code"] == "source_already_posted"

    def test_imbalanced_returns_400_with_violations(self, client, headers, chart):
        response = client.post(
            "/journal/post", headers=headers, json=invoice(chart, total="111.00")
        )
        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["code"] == "imbalanced_entry"
        assert detail["violations"][0]["kind"] == "imbalanced"

    def test_reserved_reversal_source_type_returns_400(self, client, headers, chart):
        body = invoice(chart, source_id=str(uuid.uuid4()))
        body["source_type"] = "reversal"

        response = client.post("/journal/post", headers=headers, json=body)
        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "invalid_entry"

    def test_closed_period_returns_400(self, client, headers, chart):
        client.post("/periods/close", headers=headers, json={
            "period_date": "2026-03-01",
        })
        response = client.post("/journal/post", headers=headers, json=invoice(chart))
        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "closed_period"


class TestReverse:

    def test_reverse_returns_201(self, client, headers, chart):
        posted = client.post("/journal/post", headers=headers, json=invoice(chart))
        entry_id = posted.json()["journal_entry_id"]

        response = client.post(
            f"/journal/entries/{entry_id}/reverse", headers=headers,
            json={"reason": "Entered twice", "posting_date": "2026-03-16"},
        )
        assert response.status_code == 201
        data = response.json()
        assert data["success"] is True
        assert data["original_entry_id"] == entry_id

        entry = client.get(f"/journal/entries/{entry_id}", headers=headers).json()
        assert entry["status"] == "reversed"
        assert entry["reversed_by_id"] == data["reversal_entry_id"]

    def test_second_reverse_returns_409(self, client, headers, chart):
        posted = client.post("/journal/post", headers=headers, json=invoice(chart))
        entry_id = posted.json()["journal_entry_id"]
        body = {"reason": "Entered twice", "posting_date": "2026-03-16"}

        client.post(f"/journal/entries/{entry_id}/reverse", headers=headers, json=body)
        response = client.post(
            f"/journal/entries/{entry_id}/reverse", headers=headers, json=body
        )
        assert response.status_code == 409
        assert response.json()["detail"]["code"] == "already_reversed"

    def test_reverse_missing_entry_returns_404(self, client, headers, chart):
        response = client.post(
            f"/journal/entries/{uuid.uuid4()}/reverse", headers=headers,
            json={"reason": "Typo"},
        )
        assert response.status_code == 404

    def test_reason_is_required(self, client, headers, chart):
        posted = client.post("/journal/post", headers=headers, json=invoice(chart))
        entry_id = posted.json()["journal_entry_id"]
        response = client.post(
            f"/journal/entries/{entry_id}/reverse", headers=headers, json={}
        )
        assert response.status_code == 422


class TestReadJournal:

    def test_get_entry_includes_lines(self, client, headers, chart):
        posted = client.post("/journal/post", headers=headers, json=invoice(chart))
        entry_id = posted.json()["journal_entry_id"]

        response = client.get(f"/journal/entries/{entry_id}", headers=headers)
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "posted"
        assert [l["line_no"] for l in data["lines"]] == [1, 2, 3]

    def test_get_missing_entry_returns_404(self, client, headers, chart):
        response = client.get(f"/journal/entries/{uuid.uuid4()}", headers=headers)
        assert response.status_code == 404

    def test_list_entries_by_source(self, client, headers, chart):
        client.post("/journal/post", headers=headers, json=invoice(chart, "INV-1"))
        client.post("/journal/post", headers=headers, json=invoice(chart, "INV-2"))

        response = client.get(
            "/journal/entries", headers=headers, params={"source_id": "INV-2"}
        )
        assert [e["source_id"] for e in response.json()] == ["INV-2"]

    def test_balances(self, client, headers, chart):
        client.post("/journal/post", headers=headers, json=invoice(chart))

        response = client.get("/journal/balances", headers=headers, params={
            "account_id": [str(chart["1200"]), str(chart["4000"])],
            "date_from": "2026-03-01",
            "date_to": "2026-03-31",
        })
        assert response.status_code == 200
        balances = response.json()["balances"]
        assert float(balances[str(chart["1200"])]) == 110.0
        assert float(balances[str(chart["4000"])]) == 100.0

    def test_balances_unknown_account_returns_404(self, client, headers, chart):
        response = client.get("/journal/balances", headers=headers, params={
            "account_id": [str(uuid.uuid4())],
        })
        assert response.status_code == 404

    def test_integrity(self, client, headers, chart):
        client.post("/journal/post", headers=headers, json=invoice(chart))

        data = client.get("/journal/integrity", headers=headers).json()
        assert data["is_balanced"] is True
        assert float(data["total_debits"]) == 110.0
        assert data["unbalanced_entries"] == []


class TestPeriodsAndAudit:

    def test_close_and_reopen(self, client, headers):
        response = client.post("/periods/close", headers=headers, json={
            "period_date": "2026-03-20", "soft": True,
        })
        assert response.status_code == 200
        assert response.json()["status"] == "soft_closed"
        assert response.json()["period_start"] == "2026-03-01"

        response = client.post("/periods/reopen", headers=headers, json={
            "period_date": "2026-03-20",
        })
        assert response.json()["status"] == "open"

        periods = client.get("/periods", headers=headers).json()
        assert len(periods) == 1

    def test_audit_trail_of_a_posting(self, client, headers, chart, actor_id):
        posted = client.post("/journal/post", headers=headers, json=invoice(chart))
        entry_id = posted.json()["journal_entry_id"]

        response = client.get(
            "/audit/events", headers=headers, params={"entity_id": entry_id}
        )
        assert response.status_code == 200
        events = response.json()
        assert [e["action"] for e in events] == ["journal_entry_posted"]
        assert events[0]["actor_id"] == str(actor_id)
        assert events[0]["details"]["source_id"] == "INV-1"
