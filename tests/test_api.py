from fastapi.testclient import TestClient

from license_verifier.api import create_app
from license_verifier.config import VerifierSettings
from license_verifier.service import LicenseService

from conftest import NOW


def _client(public_pem, token=None):
    settings = VerifierSettings(public_key=public_pem, license_key=token)
    service = LicenseService(settings, clock=lambda: NOW, fingerprint=lambda: "HOST|api")
    return TestClient(create_app(service))


def test_license_status_for_valid_key(make_token, public_pem):
    response = _client(public_pem, make_token()).get("/api/license/status")
    assert response.status_code == 200
    body = response.json()
    assert body["isValid"] is True
    assert body["customerName"] == "Acme Manufacturing"
    assert body["type"] == "PRO"
    assert body["maxProductLines"] == 5
    assert body["maxUsers"] == 50
    assert body["warning"] is None


def test_license_status_without_key(public_pem):
    body = _client(public_pem).get("/api/license/status").json()
    assert body["isValid"] is True
    assert body["type"] == "COMMUNITY"
    assert body["maxProductLines"] == 1


def test_license_status_for_forged_key(make_token, other_key, public_pem):
    client = _client(public_pem, make_token(key=other_key))
    body = client.get("/api/license/status", params={"refresh": "true"}).json()
    assert body["isValid"] is False
    assert body["error"] == "SignatureInvalid"
    assert body["customerName"] == "Invalid"


def test_health_reports_degraded_license(make_token, public_pem):
    body = _client(public_pem, make_token(expiresAt="2000-01-01T00:00:00Z")).get("/health").json()
    assert body["status"] == "degraded"
    assert body["license_valid"] is False
