from datetime import timedelta

from wewinbid.core.helpers import utcnow
from wewinbid.modules.calendar.services.calendar_service import CalendarService
from wewinbid.modules.notifications.db.schema import Notification, NotificationTypeEnum


def iso(value):
    return value.replace(microsecond=0).isoformat()


def test_event_crud(client, owner_headers):
    start = utcnow() + timedelta(days=2)
    created = client.post(
        "/api/v1/calendar/events",
        json={
            "title": "Visite de site",
            "event_type": "meeting",
            "start_date": iso(start),
            "location": "Lyon",
            "metadata": {"contact": "M. Durand"},
            "reminders": [{"minutes_before": 60}, {"minutes_before": 1440, "reminder_type": "email"}],
        },
        headers=owner_headers,
    )
    assert created.status_code == 201
    event = created.json()
    assert event["metadata"] == {"contact": "M. Durand"}
    assert [r["minutes_before"] for r in event["reminders"]] == [60, 1440]

    url = f"/api/v1/calendar/events/{event['id']}"
    updated = client.patch(url, json={"title": "Visite reportée"}, headers=owner_headers)
    assert updated.json()["title"] == "Visite reportée"

    window = {"start": iso(start - timedelta(days=1)), "end": iso(start + timedelta(days=1))}
    listing = client.get("/api/v1/calendar/events", params=window, headers=owner_headers)
    assert [e["title"] for e in listing.json()] == ["Visite reportée"]

    cancelled = client.patch(url, json={"status": "cancelled"}, headers=owner_headers)
    assert cancelled.json()["status"] == "cancelled"
    assert client.get("/api/v1/calendar/events", params=window, headers=owner_headers).json() == []

    assert client.delete(url, headers=owner_headers).status_code == 204
    assert client.get(url, headers=owner_headers).status_code == 404


def test_end_before_start_is_rejected(client, owner_headers):
    start = utcnow() + timedelta(days=1)
    response = client.post(
        "/api/v1/calendar/events",
        json={"title": "X", "start_date": iso(start), "end_date": iso(start - timedelta(hours=1))},
        headers=owner_headers,
    )
    assert response.status_code == 422


def test_export_ics(client, owner_headers):
    client.post(
        "/api/v1/calendar/events",
        json={"title": "Remise offre", "event_type": "deadline", "start_date": iso(utcnow() + timedelta(days=5))},
        headers=owner_headers,
    )
    response = client.get("/api/v1/calendar/export", headers=owner_headers)
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/calendar")
    assert "SUMMARY:Remise offre" in response.text
    assert "STATUS:CONFIRMED" in response.text


def test_due_reminders_are_dispatched_once(client, db, owner, owner_headers):
    client.post(
        "/api/v1/calendar/events",
        json={
            "title": "Soutenance",
            "start_date": iso(utcnow() + timedelta(minutes=20)),
            "reminders": [{"minutes_before": 30}, {"minutes_before": 5}],
        },
        headers=owner_headers,
    )
    service = CalendarService(db)
    assert service.dispatch_due_reminders() == 1
    assert service.dispatch_due_reminders() == 0

    reminder = db.query(Notification).one()
    assert reminder.type == NotificationTypeEnum.REMINDER
    assert reminder.user_id == owner.id
