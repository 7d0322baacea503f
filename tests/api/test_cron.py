from datetime import timedelta

import pytest

from wewinbid.config import settings
from wewinbid.core.helpers import utcnow

CRON_HEADERS = {"Authorization": "Bearer cron-test-secret"}


@pytest.mark.parametrize("path", [
    "/api/v1/cron/deadline-notifications",
    "/api/v1/cron/alert-digests",
    "/api/v1/cron/calendar-reminders",
    "/api/v1/cron/document-expiry",
    "/api/v1/cron/signature-expiry",
])
def test_cron_requires_secret(client, path):
    assert client.post(path).status_code == 401
    assert client.post(path, headers={"Authorization": "Bearer wrong"}).status_code == 401
    assert client.post(path, headers=CRON_HEADERS).status_code == 200


def test_cron_rejects_non_ascii_secret(client):
    response = client.post("/api/v1/cron/deadline-notifications", headers={"Authorization": b"Bearer caf\xe9"})
    assert response.status_code == 401
    assert response.json()["error"] == "AUTHENTICATION_ERROR"


def test_cron_disabled_without_secret(client, monkeypatch):
    monkeypatch.setattr(settings, "CRON_SECRET", None)
    response = client.post("/api/v1/cron/deadline-notifications", headers=CRON_HEADERS)
    assert response.status_code == 503
    assert response.json()["error"] == "SERVICE_UNAVAILABLE"


def test_deadline_job(client, create_tender):
    create_tender(deadline=(utcnow() + timedelta(days=5)).isoformat())
    response = client.post("/api/v1/cron/deadline-notifications", headers=CRON_HEADERS)
    assert response.json() == {"sent": 1, "total": 1}


def test_weekly_digest_job(client, owner_headers, create_tender):
    client.post("/api/v1/alerts", json={"name": "Sécurité", "frequency": "weekly"}, headers=owner_headers)
    create_tender()
    response = client.post("/api/v1/cron/alert-digests?frequency=weekly", headers=CRON_HEADERS)
    assert response.json() == {"sent": 1, "total": 1}


def test_health(client):
    response = client.get("/api/v1/health")
    assert response.json() == {"status": "ok", "version": settings.APP_VERSION}
