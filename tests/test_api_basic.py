from fastapi.testclient import TestClient
from kleinanzeigen_api.api.main import app


def test_health():
    c = TestClient(app)
    r = c.get("/health")
    assert r.status_code == 200
    data = r.json()
    assert data["status"] == "OK"
    assert data["uptime"] >= 0
    assert data["version"].startswith("2.0.0")


def test_root_lists_endpoints():
    r = TestClient(app).get("/")
    assert r.status_code == 200
    assert r.json()["endpoints"]["ad"] == "/ad/:id"


def test_metrics_exposes_counters():
    c = TestClient(app)
    c.get("/search")
    r = c.get("/metrics")
    assert r.status_code == 200
    assert "search_requests_total" in r.text
    assert "fetch_attempts_total" in r.text


def test_cors_allows_any_origin():
    r = TestClient(app).get("/health", headers={"Origin": "https://frontend.example"})
    assert r.headers["access-control-allow-origin"] == "*"


def test_unhandled_errors_become_json(monkeypatch):
    from kleinanzeigen_api.api.routers import health

    class BrokenClock:
        @staticmethod
        def now(tz=None):
            raise RuntimeError("clock broke")

    monkeypatch.setattr(health, "datetime", BrokenClock)
    r = TestClient(app, raise_server_exceptions=False).get("/health")
    assert r.status_code == 500
    body = r.json()
    assert body["success"] is False
    assert body["error"] == "Interner Serverfehler"
    assert body["details"] is None
