import httpx
from fastapi.testclient import TestClient

from kleinanzeigen_api.api.deps import get_fetcher
from kleinanzeigen_api.api.main import app
from kleinanzeigen_api.scraper.fetcher import ResilientFetcher


async def _no_sleep(seconds):
    return None


def _client_with(handler):
    fetcher = ResilientFetcher(transport=httpx.MockTransport(handler), sleep=_no_sleep)
    app.dependency_overrides[get_fetcher] = lambda: fetcher
    return TestClient(app)


def test_ready_when_marketplace_answers():
    try:
        r = _client_with(lambda request: httpx.Response(200, text="<html></html>")).get("/ready")
    finally:
        app.dependency_overrides.clear()
    assert r.status_code == 200
    data = r.json()
    assert data["status"] == "ready"
    assert data["checks"]["marketplace"] == "ok"


def test_not_ready_when_marketplace_unreachable():
    def handler(request):
        raise httpx.ConnectError("dns failure", request=request)

    try:
        r = _client_with(handler).get("/ready")
    finally:
        app.dependency_overrides.clear()
    data = r.json()
    assert data["status"] == "not_ready"
    assert data["checks"]["marketplace"] == "error"
    assert "dns failure" in data["checks"]["marketplace_error"]


def test_not_ready_on_server_error_status():
    try:
        r = _client_with(lambda request: httpx.Response(503)).get("/ready")
    finally:
        app.dependency_overrides.clear()
    data = r.json()
    assert data["status"] == "not_ready"
    assert data["checks"]["marketplace_status"] == 503


def test_not_ready_on_corrupt_body():
    def handler(request):
        return httpx.Response(200, headers={"Content-Encoding": "gzip"}, stream=httpx.ByteStream(b"not gzip"))

    try:
        r = _client_with(handler).get("/ready")
    finally:
        app.dependency_overrides.clear()
    assert r.status_code == 200
    assert r.json()["status"] == "not_ready"
