# tests/test_security.py
from fastapi.testclient import TestClient

from app.auth.auth import api_key_ok
from app.main import app

client = TestClient(app)


def test_api_key_ok():
    assert api_key_ok("shhh", "shhh")


def test_api_key_bad():
    assert not api_key_ok("bad", "shhh")
    assert not api_key_ok("", "shhh")
    assert not api_key_ok("", "")


def test_health_needs_no_key():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "asguard health running"}


def test_secure_test_requires_key():
    assert client.get("/secure-test").status_code == 401
    r = client.get("/secure-test", headers={"x-api-key": "wrong"})
    assert r.status_code == 401
    assert r.json() == {"error": "unauthorised"}


def test_secure_test_with_key():
    r = client.get("/secure-test", headers={"x-api-key": "test-api-key"})
    assert r.status_code == 200
    assert r.json() == {"message": "API key valid"}


def test_analyze_without_key_uses_error_body():
    r = client.post("/analyze", json={})
    assert r.status_code == 401
    assert r.json() == {"error": "unauthorised"}
