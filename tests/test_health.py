"""Tests pour l'endpoint de santé de l'application."""

from fastapi.testclient import TestClient

from shuwen.app.main import app
from shuwen.core.http_constants import HTTP_OK


def test_health(wired_container):
    """Teste que l'endpoint de santé retourne un statut OK."""
    client = TestClient(app)
    r = client.get("/health")
    assert r.status_code == HTTP_OK
    body = r.json()
    assert body["status"] == "ok"
    assert body["storage"] == "memory"
    assert body["oracle"] == "fake"


def test_request_id_header_is_propagated(wired_container):
    client = TestClient(app)
    r = client.get("/health", headers={"X-Request-ID": "req-42"})
    assert r.headers["X-Request-ID"] == "req-42"
    assert client.get("/health").headers["X-Request-ID"]
