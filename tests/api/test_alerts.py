from wewinbid.modules.notifications.db.schema import Notification, NotificationTypeEnum


def create_alert(client, headers, **fields):
    payload = {"name": "Sécurité France", "criteria": {"sectors": ["SECURITY_PRIVATE"], "countries": ["fr"]}}
    payload.update(fields)
    response = client.post("/api/v1/alerts", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_alert_crud(client, owner_headers):
    alert = create_alert(client, owner_headers)
    assert alert["criteria"]["countries"] == ["FR"]
    assert alert["frequency"] == "daily"

    url = f"/api/v1/alerts/{alert['id']}"
    updated = client.patch(url, json={"is_active": False}, headers=owner_headers).json()
    assert updated["is_active"] is False

    assert client.delete(url, headers=owner_headers).status_code == 204
    assert client.get(url, headers=owner_headers).status_code == 404


def test_invalid_ranges_rejected(client, owner_headers):
    response = client.post(
        "/api/v1/alerts",
        json={"name": "Budget", "criteria": {"min_value": 1000, "max_value": 10}},
        headers=owner_headers,
    )
    assert response.status_code == 422


def test_matches_preview(client, owner_headers, create_tender):
    alert = create_alert(client, owner_headers)
    create_tender(title="Surveillance entrepôt", sector="SECURITY_PRIVATE", country="FR")
    create_tender(title="Nettoyage", sector="CLEANING", country="FR")

    matches = client.get(f"/api/v1/alerts/{alert['id']}/matches", headers=owner_headers).json()
    assert [t["title"] for t in matches] == ["Surveillance entrepôt"]


def test_instant_alert_notifies_on_new_tender(client, db, owner, owner_headers, create_tender):
    create_alert(client, owner_headers, frequency="instant")
    create_tender(title="Rondes de nuit", sector="SECURITY_PRIVATE", country="FR")
    create_tender(title="Cantine scolaire", sector="CATERING", country="FR")

    notices = db.query(Notification).filter(
        Notification.user_id == owner.id, Notification.type == NotificationTypeEnum.NEW_OPPORTUNITY
    ).all()
    assert [n.title for n in notices] == ["Nouvelle opportunité : Rondes de nuit"]

    alert = client.get("/api/v1/alerts", headers=owner_headers).json()[0]
    assert alert["match_count"] == 1


def test_in_app_channel_can_be_disabled(client, db, owner, owner_headers, create_tender):
    create_alert(client, owner_headers, frequency="instant",
                 notification_channels={"email": True, "in_app": False})
    create_tender(title="Rondes de nuit", sector="SECURITY_PRIVATE", country="FR")
    assert db.query(Notification).filter(Notification.type == NotificationTypeEnum.NEW_OPPORTUNITY).count() == 0
