"""
Tests for the FastAPI layer.

Endpoints covered:
- GET /health
- POST /equalize
- POST /api/runs, GET /api/runs/{run_id}, GET /api/runs

The LLM client is always the mock: OPENAI_API_KEY is removed from the
environment for every test.
"""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from trade_agent.api import app
from trade_agent.exceptions import InfrastructureError
from trade_agent.run_store import run_store


# =============================================================================
# Test Client & Fixtures
# =============================================================================


@pytest.fixture
def client() -> TestClient:
    """Create test client for the FastAPI app."""
    return TestClient(app)


@pytest.fixture(autouse=True)
def no_openai(monkeypatch):
    """Force the mock LLM client."""
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)


@pytest.fixture(autouse=True)
def clear_run_store():
    """Clear the run store before and after each test."""
    run_store.clear()
    yield
    run_store.clear()


# =============================================================================
# Test Data
# =============================================================================


def make_valid_request() -> dict:
    """Requester asks for a 20-value player and has 8, 9 and 6 to offer."""
    return {
        "teams": [
            {"tid": 0},
            {"tid": 1, "pids": [10]},
        ],
        "players": [
            {"pid": 1, "tid": 0, "position": "PG", "value": 8},
            {"pid": 2, "tid": 0, "position": "SF", "value": 9},
            {"pid": 3, "tid": 0, "position": "C", "value": 6},
            {"pid": 10, "tid": 1, "position": "PF", "value": 20},
        ],
        "draft_picks": [],
        "session_key": "api-test",
    }


def make_hopeless_request() -> dict:
    """Requester has nothing tradable."""
    request = make_valid_request()
    for player in request["players"]:
        if player["tid"] == 0:
            player["untradable"] = True
    return request


# =============================================================================
# Health
# =============================================================================


class TestHealth:
    def test_health_ok(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


# =============================================================================
# POST /equalize
# =============================================================================


class TestEqualizeEndpoint:
    """Tests for the direct equalize endpoint."""

    def test_returns_adjusted_trade(self, client: TestClient) -> None:
        response = client.post("/equalize", json=make_valid_request())

        assert response.status_code == 200
        outcome = response.json()["outcome"]
        assert outcome["status"] == "ok"
        requester, counterparty = outcome["proposal"]["teams"]
        assert requester["pids"] == [2, 1, 3]
        assert counterparty["pids"] == [10]
        assert outcome["final_dv"] > 0

    def test_response_includes_trace_and_explanation(self, client: TestClient) -> None:
        response = client.post("/equalize", json=make_valid_request())

        data = response.json()
        assert len(data["outcome"]["steps"]) >= 3
        assert data["outcome"]["session_key"] == "api-test"
        assert data["explanation"]["summary"]
        categories = {n["category"] for n in data["explanation"]["nodes"]}
        assert {"acceptance", "asset", "direction"} <= categories

    def test_no_deal_is_still_200(self, client: TestClient) -> None:
        response = client.post("/equalize", json=make_hopeless_request())

        assert response.status_code == 200
        outcome = response.json()["outcome"]
        assert outcome["status"] == "no_deal"
        assert outcome["proposal"] is None

    def test_asset_owned_by_other_team_returns_400(self, client: TestClient) -> None:
        request = make_valid_request()
        request["teams"][0]["pids"] = [10]
        request["teams"][1]["pids"] = []

        response = client.post("/equalize", json=request)

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "VALIDATION_FAILED"

    def test_malformed_request_returns_422(self, client: TestClient) -> None:
        request = make_valid_request()
        request["max_assets_to_add"] = -1

        response = client.post("/equalize", json=request)

        assert response.status_code == 422

    def test_same_team_both_sides_rejected(self, client: TestClient) -> None:
        request = make_valid_request()
        request["teams"][1]["tid"] = 0

        response = client.post("/equalize", json=request)

        assert response.status_code in (400, 422)

    def test_unexpected_error_returns_500(self, client: TestClient) -> None:
        with patch("trade_agent.api.run_negotiation") as mock_run:
            mock_run.side_effect = RuntimeError("boom")
            response = client.post("/equalize", json=make_valid_request())

        assert response.status_code == 500
        assert response.json()["detail"]["code"] == "INTERNAL_ERROR"


# =============================================================================
# Runs API
# =============================================================================


class TestCreateRun:
    """Tests for POST /api/runs."""

    def test_create_run_returns_201_completed(self, client: TestClient) -> None:
        response = client.post("/api/runs", json=make_valid_request())

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "completed"
        assert data["response"]["outcome"]["status"] == "ok"

    def test_create_run_returns_uuid(self, client: TestClient) -> None:
        response = client.post("/api/runs", json=make_valid_request())

        run_id = response.json()["run_id"]
        assert len(run_id) == 36
        assert run_id.count("-") == 4

    def test_create_run_stores_record(self, client: TestClient) -> None:
        response = client.post("/api/runs?league_id=L1", json=make_valid_request())

        record = run_store.get(response.json()["run_id"])
        assert record is not None
        assert record.league_id == "L1"
        assert record.requester_tid == 0
        assert record.counterparty_tid == 1
        assert record.response is not None

    def test_validation_error_creates_failed_run(self, client: TestClient) -> None:
        request = make_valid_request()
        request["teams"][1]["pids"] = [99]

        response = client.post("/api/runs", json=request)

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "failed"
        assert "unknown player 99" in data["error"]
        record = run_store.get(data["run_id"])
        assert record.response is None
        assert record.error

    def test_infrastructure_error_returns_503(self, client: TestClient) -> None:
        with patch("trade_agent.api.run_negotiation") as mock_run:
            mock_run.side_effect = InfrastructureError("LLM down")
            response = client.post("/api/runs", json=make_valid_request())

        assert response.status_code == 503
        assert response.json()["detail"]["code"] == "LLM_UNAVAILABLE"
        assert run_store.list_runs() == []


class TestGetRun:
    """Tests for GET /api/runs/{run_id}."""

    def test_get_existing_run(self, client: TestClient) -> None:
        run_id = client.post("/api/runs", json=make_valid_request()).json()["run_id"]

        response = client.get(f"/api/runs/{run_id}")

        assert response.status_code == 200
        data = response.json()
        assert data["run_id"] == run_id
        assert data["status"] == "completed"
        assert data["response"]["outcome"]["steps"]

    def test_get_missing_run_returns_404(self, client: TestClient) -> None:
        response = client.get("/api/runs/does-not-exist")

        assert response.status_code == 404


class TestListRuns:
    """Tests for GET /api/runs."""

    def test_list_most_recent_first(self, client: TestClient) -> None:
        first = client.post("/api/runs", json=make_valid_request()).json()["run_id"]
        second = client.post("/api/runs", json=make_hopeless_request()).json()["run_id"]

        runs = client.get("/api/runs").json()

        assert [r["run_id"] for r in runs] == [second, first]
        assert [r["deal_status"] for r in runs] == ["no_deal", "ok"]

    def test_list_filters_by_league(self, client: TestClient) -> None:
        client.post("/api/runs?league_id=A", json=make_valid_request())
        client.post("/api/runs?league_id=B", json=make_valid_request())

        runs = client.get("/api/runs?league_id=A").json()

        assert len(runs) == 1
        assert runs[0]["league_id"] == "A"

    def test_list_respects_limit(self, client: TestClient) -> None:
        for _ in range(3):
            client.post("/api/runs", json=make_valid_request())

        runs = client.get("/api/runs?limit=2").json()

        assert len(runs) == 2

    def test_list_rejects_bad_limit(self, client: TestClient) -> None:
        response = client.get("/api/runs?limit=0")

        assert response.status_code == 422

    def test_failed_run_has_no_deal_status(self, client: TestClient) -> None:
        request = make_valid_request()
        request["teams"][1]["pids"] = [99]
        client.post("/api/runs", json=request)

        runs = client.get("/api/runs").json()

        assert runs[0]["status"] == "failed"
        assert runs[0]["deal_status"] is None
