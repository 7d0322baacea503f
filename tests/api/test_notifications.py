from datetime import timedelta

from wewinbid.core.helpers import utcnow
from wewinbid.modules.notifications.db.schema import Notification, NotificationSent, NotificationTypeEnum
from wewinbid.modules.notifications.services.deadline_service import send_deadline_notifications


def test_create_list_and_mark_read(client, owner_headers):
    for i in range(3):
        response = client.post(
            "/api/v1/notifications",
            json={"title": f"Info {i}", "message": "Bienvenue", "metadata": {"n": i}},
            headers=owner_headers,
        )
        assert response.status_code == 201
    assert response.json()["metadata"] == {"n": 2}

    listing = client.get("/api/v1/notifications?limit=2", headers=owner_headers).json()
    assert listing["unread_count"] == 3
    assert listing["pagination"] == {"limit": 2, "offset": 0, "total": 3, "has_more": True}

    first_id = listing["notifications"][0]["id"]
    client.post("/api/v1/notifications/mark-read", json={"notification_ids": [first_id]}, headers=owner_headers)
    assert client.get("/api/v1/notifications", headers=owner_headers).json()["unread_count"] == 2

    marked = client.post("/api/v1/notifications/mark-read", json={"mark_all": True}, headers=owner_headers).json()
    assert marked == {"success": True, "updated": 2}
    unread = client.get("/api/v1/notifications?unread=true", headers=owner_headers).json()
    assert unread["notifications"] == []


def test_update_and_delete_notification(client, owner_headers, make_company, make_user, headers_for):
    created = client.post("/api/v1/notifications", json={"title": "A", "message": "B"}, headers=owner_headers).json()
    url = f"/api/v1/notifications/{created['id']}"

    assert client.patch(url, json={"read": True}, headers=owner_headers).json()["read"] is True

    stranger = make_user(make_company(name="Autre"))
    assert client.delete(url, headers=headers_for(stranger)).status_code == 404
    assert client.delete(url, headers=owner_headers).status_code == 204


def test_preferences(client, owner_headers):
    prefs = client.get("/api/v1/notifications/preferences", headers=owner_headers).json()
    assert prefs["deadline_7d"] is True
    assert prefs["marketing"] is False

    updated = client.put(
        "/api/v1/notifications/preferences", json={"deadline_7d": False, "email_enabled": False}, headers=owner_headers
    ).json()
    assert updated["deadline_7d"] is False
    assert updated["email_enabled"] is False
    assert updated["deadline_3d"] is True


def test_deadline_notifications_sent_once_per_threshold(db, owner, create_tender):
    now = utcnow()
    create_tender(title="Échéance proche", deadline=(now + timedelta(days=2, hours=1)).isoformat())
    create_tender(title="Lointain", deadline=(now + timedelta(days=20)).isoformat())

    assert send_deadline_notifications(db, now=now) == {"sent": 1, "total": 1}
    assert send_deadline_notifications(db, now=now) == {"sent": 0, "total": 1}

    notification = db.query(Notification).filter(Notification.type == NotificationTypeEnum.DEADLINE_3D).one()
    assert notification.user_id == owner.id
    assert notification.extra["days_left"] == 3
    assert db.query(NotificationSent).count() == 1


def test_deadline_notifications_respect_preferences(client, db, owner_headers, create_tender):
    client.put("/api/v1/notifications/preferences", json={"deadline_24h": False}, headers=owner_headers)
    now = utcnow()
    create_tender(deadline=(now + timedelta(hours=12)).isoformat())

    assert send_deadline_notifications(db, now=now)["sent"] == 0
