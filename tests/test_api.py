"""Tests for the HTTP boundary — routing, envelopes, validation, export, logging.

Covers:
  - Routed actions via /api?action=... and /api/{action}
  - Month validation, pagination clamping, sorting
  - Error envelopes (bad_month, month_required, unknown_action, bad_request, internal_error)
  - Soft API-key check and CORS
  - CSV / ZIP export
  - Request logging through the injected collaborator
"""

from __future__ import annotations

import io
import logging
import zipfile

import pytest

from fleet_metrics.api.handlers import ACTIONS, Action, ActionQuery, envelope
from fleet_metrics.config import ApiSettings
from fleet_metrics.engine.kpi import compute_kpi
from fleet_metrics.engine.vehicles import compute_vehicles


# ═══════════════════════════════════════════════════════════════════════════
# Query parsing
# ═══════════════════════════════════════════════════════════════════════════


class TestActionQuery:
    """ActionQuery.from_params normalisation."""

    def test_defaults(self, settings: ApiSettings):
        query = ActionQuery.from_params(settings)
        assert query.month is None
        assert query.sort == "profit"
        assert query.order == "desc"
        assert query.limit == 50
        assert query.offset == 0

    def test_clamping(self, settings: ApiSettings):
        assert ActionQuery.from_params(settings, limit=0).limit == 1
        assert ActionQuery.from_params(settings, limit=-3).limit == 1
        assert ActionQuery.from_params(settings, limit=10_000).limit == 500
        assert ActionQuery.from_params(settings, offset=-5).offset == 0

    def test_order(self, settings: ApiSettings):
        assert ActionQuery.from_params(settings, order="ASC").order == "asc"
        assert ActionQuery.from_params(settings, order="sideways").order == "desc"

    def test_empty_month_is_missing(self, settings: ApiSettings):
        assert ActionQuery.from_params(settings, month="").month is None

    def test_envelope(self):
        assert envelope({"period": "2024-12"}) == {"ok": True, "period": "2024-12"}


# ═══════════════════════════════════════════════════════════════════════════
# Endpoints
# ═══════════════════════════════════════════════════════════════════════════


class TestEndpoints:
    """Integration tests for FastAPI endpoints."""

    def test_root(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        data = resp.json()
        assert data["ok"] is True
        assert "start_here" in data

    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "healthy"

    def test_health_action(self, client):
        data = client.get("/api", params={"action": "health"}).json()
        assert data["ok"] is True
        assert data["status"] == "healthy"
        assert data["version"] == "2.1.0"
        assert set(data["services"]) == {"dashboard", "vehicles", "charts", "analytics", "drivers"}

    def test_readiness_action(self, client):
        data = client.get("/api", params={"action": "readiness"}).json()
        assert data["ok"] is True
        assert data["status"] == "ready"
        assert data["services"] == {"coordinator": "online", "generator": "online"}

    def test_dashboard(self, client):
        resp = client.get("/api", params={"action": "dashboard", "month": "2024-12"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["ok"] is True
        assert data["period"] == "2024-12"
        assert "generated_at" in data
        assert data["kpi"] == {"revenue": 1_399_731, "costs": 913_731, "profit": 486_000, "marginPct": 34.7}
        assert len(data["vehicles"]) == 6
        assert set(data["vehicles"][0]) == {"plate", "model", "profit", "marginPct"}

    def test_dashboard_is_deterministic(self, client):
        first = client.get("/api", params={"action": "dashboard", "month": "2024-06"}).json()
        second = client.get("/api", params={"action": "dashboard", "month": "2024-06"}).json()
        assert first["kpi"] == second["kpi"]
        assert first["vehicles"] == second["vehicles"]

    def test_path_form(self, client):
        via_query = client.get("/api", params={"action": "dashboard", "month": "2024-12"}).json()
        via_path = client.get("/api/dashboard", params={"month": "2024-12"}).json()
        assert via_path["kpi"] == via_query["kpi"]

    def test_vehicles_pagination(self, client):
        data = client.get("/api", params={"action": "vehicles", "month": "2024-06", "limit": 2, "offset": 1}).json()
        assert data["ok"] is True
        assert data["pagination"] == {"total": 6, "limit": 2, "offset": 1, "hasMore": True}
        expected = [v.plate for v in compute_vehicles("2024-06")][1:3]
        assert [v["plate"] for v in data["vehicles"]] == expected
        assert data["sort"] == {"field": "profit", "order": "desc"}
        assert data["period"] == "2024-06"

    def test_vehicles_last_page(self, client):
        data = client.get("/api", params={"action": "vehicles", "month": "2024-06", "limit": 4, "offset": 4}).json()
        assert len(data["vehicles"]) == 2
        assert data["pagination"]["hasMore"] is False

    def test_vehicles_limit_clamped(self, client):
        data = client.get("/api", params={"action": "vehicles", "month": "2024-06", "limit": 0}).json()
        assert data["pagination"]["limit"] == 1
        assert len(data["vehicles"]) == 1
        data = client.get("/api", params={"action": "vehicles", "month": "2024-06", "limit": 9999}).json()
        assert data["pagination"]["limit"] == 500
        assert len(data["vehicles"]) == 6

    def test_vehicles_ascending(self, client):
        data = client.get("/api", params={"action": "vehicles", "month": "2024-06", "order": "asc"}).json()
        profits = [v["profit"] for v in data["vehicles"]]
        assert profits == sorted(profits)
        assert data["sort"]["order"] == "asc"

    def test_vehicles_sort_by_margin(self, client):
        data = client.get("/api", params={"action": "vehicles", "month": "2024-11", "sort": "marginPct"}).json()
        margins = [v["marginPct"] for v in data["vehicles"]]
        assert margins == sorted(margins, reverse=True)

    def test_vehicles_bad_sort(self, client):
        resp = client.get("/api", params={"action": "vehicles", "month": "2024-06", "sort": "plate"})
        assert resp.status_code == 400
        assert resp.json()["error"] == "bad_sort"

    def test_charts(self, client):
        data = client.get("/api", params={"action": "charts", "month": "2024-01"}).json()
        assert data["ok"] is True
        assert data["profitTrend"]["labels"][0] == "Aug 2023"
        assert data["profitTrend"]["labels"][-1] == "Jan 2024"
        assert data["profitTrend"]["data"][-1] == compute_kpi("2024-01").profit
        assert data["expensesBreakdown"]["labels"] == ["Топливо", "Зарплата", "Дороги", "Прочее"]
        assert data["summary"]["totalRevenue"] == compute_kpi("2024-01").revenue
        assert data["period"] == "2024-01"

    def test_analytics(self, client):
        data = client.get("/api", params={"action": "analytics", "month": "2024-12"}).json()
        assert data["ok"] is True
        assert len(data["insights"]) == 3
        assert len(data["recommendations"]) == 4
        assert data["alerts"][0]["severity"] == "critical"
        assert data["period"] == "2024-12"

    def test_drivers(self, client):
        data = client.get("/api", params={"action": "drivers", "month": "2024-12"}).json()
        assert data["ok"] is True
        assert len(data["drivers"]) == 6
        assert data["topPerformers"] == data["drivers"][:3]
        scores = [d["score"] for d in data["drivers"]]
        assert scores == sorted(scores, reverse=True)
        assert set(data["drivers"][0]) == {
            "name", "vehicle", "experience", "profit", "efficiency",
            "fuelConsumption", "safetyRating", "score", "status",
        }


# ═══════════════════════════════════════════════════════════════════════════
# Errors
# ═══════════════════════════════════════════════════════════════════════════


class TestErrors:
    """Error envelopes and status codes."""

    @pytest.mark.parametrize("month", ["2024-13", "2024-1", "24-12", "december", "2024-12\n"])
    def test_bad_month(self, client, month: str):
        resp = client.get("/api", params={"action": "dashboard", "month": month})
        assert resp.status_code == 400
        data = resp.json()
        assert data == {"ok": False, "error": "bad_month", "hint": "Use YYYY-MM format (e.g., 2024-12)"}

    @pytest.mark.parametrize("action", ["dashboard", "vehicles", "charts", "analytics", "drivers"])
    def test_month_required(self, client, action: str):
        resp = client.get("/api", params={"action": action})
        assert resp.status_code == 400
        assert resp.json()["error"] == "month_required"

    def test_unknown_action(self, client):
        resp = client.get("/api", params={"action": "fuel", "month": "2024-12"})
        assert resp.status_code == 404
        data = resp.json()
        assert data["ok"] is False
        assert data["error"] == "unknown_action"
        assert "dashboard" in data["hint"]

    def test_missing_action(self, client):
        resp = client.get("/api")
        assert resp.status_code == 404
        assert resp.json()["error"] == "unknown_action"

    def test_unknown_path_action(self, client):
        resp = client.get("/api/fuel", params={"month": "2024-12"})
        assert resp.status_code == 404
        assert resp.json()["error"] == "unknown_action"

    def test_non_integer_limit(self, client):
        resp = client.get("/api", params={"action": "vehicles", "month": "2024-12", "limit": "many"})
        assert resp.status_code == 400
        data = resp.json()
        assert data["error"] == "bad_request"
        assert "limit" in data["hint"]

    def test_unknown_route(self, client):
        resp = client.get("/nowhere")
        assert resp.status_code == 404
        assert resp.json()["error"] == "not_found"

    def test_handler_failure_is_502(self, client, request_log, monkeypatch):
        def explode(query, settings):
            raise RuntimeError("generator exploded")

        monkeypatch.setitem(ACTIONS, "dashboard", Action("dashboard", explode, "broken"))
        resp = client.get("/api", params={"action": "dashboard", "month": "2024-12"})
        assert resp.status_code == 502
        assert resp.json() == {"ok": False, "error": "internal_error", "hint": "Service temporarily unavailable"}
        record = request_log.records[-1]
        assert record.status == 502
        assert record.result == "internal_error"
        assert record.error == "generator exploded"

    def test_handler_failure_is_logged_with_traceback(self, client, monkeypatch, caplog):
        def explode(query, settings):
            raise RuntimeError("generator exploded")

        monkeypatch.setitem(ACTIONS, "dashboard", Action("dashboard", explode, "broken"))
        with caplog.at_level(logging.ERROR, logger="fleet_metrics.api.server"):
            client.get("/api", params={"action": "dashboard", "month": "2024-12"})
        failure = next(r for r in caplog.records if r.name == "fleet_metrics.api.server")
        assert failure.msg == "Action '%s' failed: %s"
        assert failure.getMessage() == "Action 'dashboard' failed: generator exploded"
        assert failure.exc_info is not None


# ═══════════════════════════════════════════════════════════════════════════
# API key & CORS
# ═══════════════════════════════════════════════════════════════════════════


class TestAccess:
    """Soft API-key check and CORS headers."""

    def test_no_key_passes(self, keyed_client):
        resp = keyed_client.get("/api", params={"action": "dashboard", "month": "2024-12"})
        assert resp.status_code == 200

    def test_correct_key_passes(self, keyed_client):
        resp = keyed_client.get(
            "/api",
            params={"action": "dashboard", "month": "2024-12"},
            headers={"X-API-Key": "transport-dashboard-2024"},
        )
        assert resp.status_code == 200

    def test_wrong_key_rejected(self, keyed_client):
        resp = keyed_client.get(
            "/api",
            params={"action": "dashboard", "month": "2024-12"},
            headers={"X-API-Key": "nope"},
        )
        assert resp.status_code == 401
        assert resp.json()["error"] == "invalid_api_key"

    def test_wrong_key_in_query_rejected(self, keyed_client):
        resp = keyed_client.get("/export", params={"type": "kpi", "month": "2024-12", "api_key": "nope"})
        assert resp.status_code == 401

    def test_key_ignored_when_not_configured(self, client):
        resp = client.get(
            "/api",
            params={"action": "dashboard", "month": "2024-12"},
            headers={"X-API-Key": "anything"},
        )
        assert resp.status_code == 200

    def test_cors_allowed_origin(self, client):
        resp = client.get("/api", params={"action": "health"}, headers={"Origin": "http://localhost:3000"})
        assert resp.headers["access-control-allow-origin"] == "http://localhost:3000"
        assert resp.headers["access-control-allow-credentials"] == "true"

    def test_cors_disallowed_origin(self, client):
        resp = client.get("/api", params={"action": "health"}, headers={"Origin": "https://evil.example.com"})
        assert "access-control-allow-origin" not in resp.headers

    def test_preflight(self, client):
        resp = client.options(
            "/api",
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "GET",
                "Access-Control-Request-Headers": "X-API-Key",
            },
        )
        assert resp.status_code == 200
        assert "GET" in resp.headers["access-control-allow-methods"]


# ═══════════════════════════════════════════════════════════════════════════
# Export
# ═══════════════════════════════════════════════════════════════════════════


class TestExport:
    """CSV / ZIP download endpoint."""

    def test_kpi_csv(self, client):
        resp = client.get("/export", params={"type": "kpi", "month": "2024-12"})
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/csv")
        assert resp.headers["content-disposition"] == 'attachment; filename="kpi-2024-12.csv"'
        assert resp.headers["cache-control"] == "no-cache, must-revalidate"
        assert resp.content.startswith(b"\xef\xbb\xbf")
        assert "Выручка;1399731;2024-12" in resp.content.decode("utf-8-sig")

    def test_vehicles_csv(self, client):
        resp = client.get("/export", params={"type": "vehicles", "month": "2024-06"})
        assert resp.status_code == 200
        assert resp.headers["content-disposition"] == 'attachment; filename="vehicles-2024-06.csv"'
        assert len(resp.content.decode("utf-8-sig").splitlines()) == 7

    def test_zip(self, client):
        resp = client.get("/export", params={"type": "all", "month": "2024-12"})
        assert resp.status_code == 200
        assert resp.headers["content-type"] == "application/zip"
        assert resp.headers["content-disposition"] == 'attachment; filename="transport-data-2024-12.zip"'
        names = zipfile.ZipFile(io.BytesIO(resp.content)).namelist()
        assert sorted(names) == ["README.txt", "kpi-2024-12.csv", "vehicles-2024-12.csv"]

    def test_invalid_type(self, client):
        resp = client.get("/export", params={"type": "drivers", "month": "2024-12"})
        assert resp.status_code == 400
        assert resp.json() == {"ok": False, "error": "invalid_type", "hint": "Use type=kpi|vehicles|all"}

    def test_invalid_month(self, client):
        resp = client.get("/export", params={"type": "kpi", "month": "2024-00"})
        assert resp.status_code == 400
        assert resp.json()["error"] == "bad_month"

    def test_trailing_newline_month_rejected(self, client):
        resp = client.get("/export", params={"type": "kpi", "month": "2024-12\n"})
        assert resp.status_code == 400
        assert resp.json()["error"] == "bad_month"
        assert "content-disposition" not in resp.headers

    def test_missing_month(self, client):
        resp = client.get("/export", params={"type": "kpi"})
        assert resp.status_code == 400
        assert resp.json()["error"] == "bad_month"


# ═══════════════════════════════════════════════════════════════════════════
# Request logging
# ═══════════════════════════════════════════════════════════════════════════


class TestRequestLogging:
    """One structured record per request via the injected logger."""

    def test_success_record(self, client, request_log):
        client.get(
            "/api",
            params={"action": "drivers", "month": "2024-12"},
            headers={"Origin": "http://localhost:3000", "User-Agent": "pytest-agent"},
        )
        record = request_log.records[-1]
        assert record.method == "GET"
        assert record.path == "/api"
        assert record.action == "drivers"
        assert record.month == "2024-12"
        assert record.origin == "http://localhost:3000"
        assert record.user_agent == "pytest-agent"
        assert record.status == 200
        assert record.result == "success"
        assert record.error is None
        assert record.duration_ms >= 0

    def test_error_record(self, client, request_log):
        client.get("/api", params={"action": "dashboard", "month": "2024-13"})
        record = request_log.records[-1]
        assert record.status == 400
        assert record.result == "bad_month"

    def test_path_action_recorded(self, client, request_log):
        client.get("/api/charts", params={"month": "2024-12"})
        assert request_log.records[-1].action == "charts"

    def test_one_record_per_request(self, client, request_log):
        before = len(request_log.records)
        client.get("/health")
        client.get("/export", params={"type": "kpi", "month": "2024-12"})
        assert len(request_log.records) == before + 2

    def test_process_time_header(self, client):
        resp = client.get("/health")
        assert float(resp.headers["x-process-time"]) >= 0
