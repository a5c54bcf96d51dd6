"""Tests for the health router."""

from fastapi.testclient import TestClient


class TestHealth:
    def test_health_ok(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "healthy"
        assert body["service"] == "smalljob"
        assert body["scheduler"]["status"] == "Idle"
        assert body["scheduler"]["timer"]["backend"] == "manual"

    def test_liveness(self, client):
        assert client.get("/health/live").json() == {"status": "alive"}

    def test_readiness(self, client):
        resp = client.get("/health/ready")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ready"}

    def test_not_ready_without_lifespan(self, app):
        # no context manager: lifespan never runs, scheduler never starts
        c = TestClient(app)
        assert c.get("/health/ready").status_code == 503
        assert c.get("/health").status_code == 503
