"""Tests for the API Gateway.

These tests verify that:
1. Risk and asset endpoints create, list, update and delete records
2. Validation, confirmation and store errors map to the right status codes
3. Mutations are audited without affecting the response
"""

import pytest
from fastapi.testclient import TestClient

from riskwatch.api.gateway import ServiceManager, app
from riskwatch.api.service import RiskWatchServices
from riskwatch.core.types import AuditAction
from riskwatch.governance.audit import InMemoryAuditStore

from fixtures.records import StaticEstimator

HEADERS = {
    "X-Actor-Id": "user_123",
    "X-Organization-Id": "org_acme",
    "X-Department": "Finance",
}

RISK = {
    "title": "Vendor outage",
    "description": "Primary payment vendor unavailable",
    "category": "operational",
    "impact": "high",
    "likelihood": "medium",
}

ASSET = {
    "name": "Data Center East",
    "type": "data-center",
    "location": {"address": "9 Harbour Rd", "city": "Dublin", "country": "Ireland"},
    "responsible_officer": {"name": "Sam Okafor", "email": "sam@example.com"},
}


@pytest.fixture
def audit_store() -> InMemoryAuditStore:
    return InMemoryAuditStore()


@pytest.fixture
def services(audit_store) -> RiskWatchServices:
    return RiskWatchServices(audit_store=audit_store, estimator=StaticEstimator(score=40))


@pytest.fixture
def client(services):
    """Test client with lifespan, so the audit writer runs on the app's loop."""
    ServiceManager.install(services)
    with TestClient(app) as test_client:
        yield test_client


class TestHealthEndpoint:
    """Tests for /health and /ready."""

    def test_health_check_returns_healthy(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_ready_reports_audit_stats(self, client):
        response = client.get("/ready")
        assert response.status_code == 200
        assert response.json()["audit"]["events_dropped"] == 0

    def test_request_id_header_is_present(self, client):
        response = client.get("/health")
        assert response.headers["X-Request-ID"].startswith("req_")


class TestRiskEndpoints:

    def test_create_and_list(self, client):
        created = client.post("/risks", json=RISK, headers=HEADERS)
        assert created.status_code == 201
        body = created.json()
        assert body["risk_score"] == 12
        assert body["owner_id"] == "user_123"

        listing = client.get("/risks").json()
        assert listing["matched"] == 1
        assert listing["stats"]["medium"] == 1
        assert listing["sort_field"] == "risk_score"
        assert listing["sort_direction"] == "desc"

    def test_missing_fields_return_400(self, client):
        response = client.post("/risks", json={"title": "Vendor outage"}, headers=HEADERS)
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["message"] == "Please fill in all required fields"
        assert "impact" in body["fields"]
        assert body["request_id"].startswith("req_")

    def test_update(self, client):
        risk_id = client.post("/risks", json=RISK, headers=HEADERS).json()["id"]
        response = client.patch(f"/risks/{risk_id}", json={"impact": "very_high"}, headers=HEADERS)
        assert response.status_code == 200
        assert response.json()["risk_score"] == 15

    def test_null_impact_returns_400(self, client):
        risk_id = client.post("/risks", json=RISK, headers=HEADERS).json()["id"]
        response = client.patch(f"/risks/{risk_id}", json={"impact": None}, headers=HEADERS)
        assert response.status_code == 400
        assert response.json()["fields"] == ["impact"]

    def test_unknown_risk_returns_404(self, client):
        response = client.patch("/risks/missing", json={"status": "closed"}, headers=HEADERS)
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    def test_delete_requires_confirmation(self, client):
        risk_id = client.post("/risks", json=RISK, headers=HEADERS).json()["id"]

        response = client.delete(f"/risks/{risk_id}", headers=HEADERS)
        assert response.status_code == 409
        assert response.json()["error"] == "confirmation_required"
        assert client.get("/risks").json()["matched"] == 1

        response = client.delete(f"/risks/{risk_id}?confirm=true", headers=HEADERS)
        assert response.status_code == 200
        assert client.get("/risks").json()["matched"] == 0

    def test_filters_and_sort(self, client):
        client.post("/risks", json=RISK, headers=HEADERS)
        client.post("/risks", json={**RISK, "title": "Late filing", "impact": "low", "likelihood": "low"},
                    headers=HEADERS)

        listing = client.get("/risks", params={"level": "low"}).json()
        assert [r["title"] for r in listing["items"]] == ["Late filing"]
        assert listing["stats"]["total"] == 2

        listing = client.get("/risks", params={"sort": "title", "direction": "asc"}).json()
        assert [r["title"] for r in listing["items"]] == ["Late filing", "Vendor outage"]

    def test_unknown_sort_field_returns_400(self, client):
        response = client.get("/risks", params={"sort": "colour"})
        assert response.status_code == 400

    def test_store_failure_returns_502(self, client, services):
        services.risk_store.fail_next("list")
        response = client.get("/risks")
        assert response.status_code == 502
        assert response.json()["error"] == "store_error"

    def test_export(self, client):
        client.post("/risks", json=RISK, headers=HEADERS)
        response = client.get("/risks/export")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "Vendor outage" in response.text


class TestAssetEndpoints:

    def test_create_with_mitigations(self, client):
        payload = {
            **ASSET,
            "mitigations": [
                {"mitigation_id": "m1", "applied_risk_reduction_score": 15},
                {"mitigation_id": "m2", "applied_risk_reduction_score": 10},
            ],
        }
        response = client.post("/assets", json=payload, headers=HEADERS)
        assert response.status_code == 201
        score = response.json()["ai_risk_score"]
        assert (score["overall"], score["original_score"], score["total_risk_reduction"]) == (15, 40, 25)

    def test_missing_city_returns_400(self, client):
        payload = {**ASSET, "location": {"city": "", "country": "Ireland"}}
        response = client.post("/assets", json=payload, headers=HEADERS)
        assert response.status_code == 400
        assert response.json()["fields"] == ["location.city"]

    def test_update_mitigations_and_rescore(self, client):
        asset_id = client.post("/assets", json=ASSET, headers=HEADERS).json()["id"]

        response = client.put(
            f"/assets/{asset_id}/mitigations",
            json={"mitigations": [{"mitigation_id": "m1", "applied_risk_reduction_score": 30}]},
            headers=HEADERS,
        )
        assert response.status_code == 200
        assert response.json()["ai_risk_score"]["overall"] == 10

        response = client.post(f"/assets/{asset_id}/rescore", headers=HEADERS)
        assert response.status_code == 200
        body = response.json()
        assert body["applied"] is True
        assert body["asset"]["ai_risk_score"]["overall"] == 10

    def test_list_and_delete(self, client):
        asset_id = client.post("/assets", json=ASSET, headers=HEADERS).json()["id"]
        assert client.get("/assets").json()["matched"] == 1

        assert client.delete(f"/assets/{asset_id}", headers=HEADERS).status_code == 409
        assert client.delete(f"/assets/{asset_id}?confirm=true", headers=HEADERS).status_code == 200
        assert client.get("/assets").json()["matched"] == 0


class TestAuditTrail:

    def test_mutations_are_audited(self, services, audit_store):
        ServiceManager.install(services)
        with TestClient(app) as client:
            risk_id = client.post("/risks", json=RISK, headers=HEADERS).json()["id"]
            client.patch(f"/risks/{risk_id}", json={"status": "assessed"}, headers=HEADERS)
            client.delete(f"/risks/{risk_id}?confirm=true", headers=HEADERS)

        # Shutdown drains the writer
        assert [e.action for e in audit_store.events] == [
            AuditAction.RISK_CREATED,
            AuditAction.RISK_UPDATED,
            AuditAction.RISK_DELETED,
        ]
        deleted = audit_store.events[-1]
        assert deleted.actor_id == "user_123"
        assert deleted.organization_id == "org_acme"
        assert deleted.details["risk_details"]["title"] == "Vendor outage"

    def test_missing_organization_still_mutates(self, services, audit_store):
        ServiceManager.install(services)
        with TestClient(app) as client:
            response = client.post("/risks", json=RISK, headers={"X-Actor-Id": "user_123"})
            assert response.status_code == 201

        assert audit_store.events == []
