from unittest import mock

import pytest
from django.db import OperationalError

from monitoring.monitor import SystemMonitor, format_uptime, monitor


@pytest.mark.parametrize("seconds,expected", [(5, "5s"), (65, "1m 5s"), (90061, "1d 1h 1m 1s"), (3600, "1h 0s")])
def test_format_uptime(seconds, expected):
    assert format_uptime(seconds) == expected


def test_error_rate():
    m = SystemMonitor()
    for _ in range(4):
        m.track_request()
    m.track_error()
    assert m.metrics()["requests"] == {"total": 4, "errors": 1, "errorRate": "25.00%"}


@pytest.mark.django_db
class TestEndpoints:
    def test_welcome(self, client):
        assert client.get("/").json()["message"] == "Welcome to Eat Hub API"

    def test_health(self, client):
        resp = client.get("/api/monitoring/health")
        assert resp.status_code == 200
        assert resp.json()["checks"]["database"]["status"] == "connected"

    def test_health_redirect(self, client):
        resp = client.get("/api/health")
        assert resp.status_code == 302
        assert resp["Location"] == "/api/monitoring/health"

    def test_health_reports_database_down(self, client):
        with mock.patch("monitoring.monitor.connection") as conn:
            conn.ensure_connection.side_effect = OperationalError("down")
            resp = client.get("/api/monitoring/health")
        assert resp.status_code == 503
        assert resp.json()["status"] == "unhealthy"

    def test_requests_are_counted(self, client):
        before = monitor.request_count
        client.get("/api/monitoring/metrics")
        assert monitor.request_count == before + 1

    def test_status(self, client):
        body = client.get("/api/monitoring/status").json()
        assert body["version"] == "1.0.0"
        assert "metrics" in body

    def test_frontend_error(self, client):
        resp = client.post("/api/monitoring/error", '{"message": "boom"}', content_type="application/json")
        assert resp.json() == {"success": True}

    def test_uncaught_exception_becomes_envelope(self, client):
        with mock.patch("menu.views.MenuItem.objects.all", side_effect=RuntimeError("boom")):
            resp = client.get("/api/menu")
        assert resp.status_code == 500
        assert resp.json()["error"]["code"] == "SERVER_ERROR"
