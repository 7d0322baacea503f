import uuid
from datetime import datetime, timedelta

from wewinbid.core.helpers import utcnow
from wewinbid.modules.analytics.services.analytics_service import AnalyticsService
from wewinbid.modules.tenders.db.schema import Tender


def test_analytics_current_and_previous_period(client, owner_headers, create_tender):
    create_tender(sector="SECURITY_PRIVATE", estimated_value=90000)
    create_tender(title="Nettoyage", sector="CLEANING")

    body = client.get("/api/v1/analytics", headers=owner_headers).json()
    current = body["current"]
    assert current["overview"]["total_tenders"] == 2
    assert current["overview"]["win_rate"] == 0
    assert len(current["trends"]) == 31
    assert {c["category"] for c in current["by_category"]} == {"SECURITY_PRIVATE", "CLEANING"}
    assert body["previous"]["overview"]["total_tenders"] == 0


def test_analytics_rejects_inverted_window(client, owner_headers):
    now = utcnow()
    params = {"start": now.isoformat(), "end": (now - timedelta(days=1)).isoformat()}
    response = client.get("/api/v1/analytics", params=params, headers=owner_headers)
    assert response.status_code == 400


def test_dashboard(client, owner_headers, create_tender):
    client.post(
        "/api/v1/alerts",
        json={"name": "Sécurité", "criteria": {"sectors": ["SECURITY_PRIVATE"]}},
        headers=owner_headers,
    )
    client.post("/api/v1/search/saved", json={"name": "Tout"}, headers=owner_headers)
    create_tender(title="Rondes", sector="SECURITY_PRIVATE", deadline=(utcnow() + timedelta(days=3)).isoformat())
    create_tender(title="Cantine", sector="CATERING", deadline=(utcnow() + timedelta(days=30)).isoformat())

    stats = client.get("/api/v1/dashboard/stats", headers=owner_headers).json()
    assert stats == {"total_matched_tenders": 1, "upcoming_deadlines": 1, "active_searches": 2, "win_rate": 0}

    matched = client.get("/api/v1/dashboard/matched-tenders", headers=owner_headers).json()
    assert matched["total"] == 1
    assert matched["tenders"][0]["tender"]["title"] == "Rondes"
    assert matched["tenders"][0]["matched_alerts"] == ["Sécurité"]


def test_tender_on_window_boundary_counts_once(db, owner, create_tender):
    tender = db.get(Tender, uuid.UUID(create_tender()["id"]))
    start = datetime(2026, 3, 1)
    tender.created_at = start
    db.commit()

    body = AnalyticsService(db).get_analytics(owner, start=start, end=datetime(2026, 3, 31))
    assert body["current"]["overview"]["total_tenders"] == 1
    assert body["previous"]["overview"]["total_tenders"] == 0
