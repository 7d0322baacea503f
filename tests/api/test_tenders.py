import io
import os
from datetime import timedelta

from openpyxl import load_workbook

from wewinbid.core.helpers import utcnow
from wewinbid.modules.calendar.db.schema import CalendarEvent
from wewinbid.modules.companies.db.schema import SubscriptionPlanEnum
from wewinbid.modules.notifications.db.schema import Notification, NotificationTypeEnum
from wewinbid.modules.tenders.db.schema import TenderHistory


def test_create_tender_defaults(client, create_tender):
    tender = create_tender(country="fr", sector="CONSTRUCTION")
    assert tender["reference"].startswith("WW-")
    assert tender["status"] == "DRAFT"
    assert tender["country"] == "FR"
    assert tender["tags"] == []


def test_create_tender_with_deadline_adds_calendar_event(client, db, create_tender):
    deadline = (utcnow() + timedelta(days=20)).replace(microsecond=0)
    tender = create_tender(deadline=deadline.isoformat() + "Z")

    events = db.query(CalendarEvent).all()
    assert len(events) == 1
    assert events[0].event_type.value == "deadline"
    assert str(events[0].entity_id) == tender["id"]


def test_list_and_filter_tenders(client, owner_headers, create_tender):
    create_tender(title="Nettoyage des bureaux", sector="CLEANING")
    create_tender(title="Maintenance CVC", type="PRIVATE", sector="MAINTENANCE")

    everything = client.get("/api/v1/tenders", headers=owner_headers).json()
    assert everything["pagination"]["total"] == 2

    private = client.get("/api/v1/tenders?type=PRIVATE", headers=owner_headers).json()
    assert [t["title"] for t in private["tenders"]] == ["Maintenance CVC"]

    searched = client.get("/api/v1/tenders?search=nettoyage", headers=owner_headers).json()
    assert searched["pagination"]["total"] == 1


def test_tender_quota_on_free_plan(client, company, db, create_tender, owner_headers):
    company.subscription_plan = SubscriptionPlanEnum.FREE
    db.commit()
    create_tender()
    create_tender()
    response = client.post(
        "/api/v1/tenders", json={"title": "Troisième", "type": "PUBLIC", "country": "FR"}, headers=owner_headers
    )
    assert response.status_code == 402
    assert response.json()["details"] == {"current_count": 2, "limit": 2}


def test_tenders_are_isolated_between_companies(client, make_company, make_user, headers_for, create_tender):
    tender = create_tender()
    other = make_user(make_company(name="Concurrent"))
    response = client.get(f"/api/v1/tenders/{tender['id']}", headers=headers_for(other))
    assert response.status_code == 404


def test_status_transitions(client, db, owner_headers, create_tender):
    tender = create_tender()
    url = f"/api/v1/tenders/{tender['id']}"

    invalid = client.patch(url, json={"status": "SUBMITTED"}, headers=owner_headers)
    assert invalid.status_code == 400
    assert "ANALYSIS" in invalid.json()["details"]["allowed"]

    for status in ("IN_PROGRESS", "REVIEW", "SUBMITTED"):
        response = client.patch(url, json={"status": status}, headers=owner_headers)
        assert response.status_code == 200, response.text
    assert response.json()["submission_date"] is not None

    won = client.patch(url, json={"status": "WON", "winning_price": 95000}, headers=owner_headers)
    assert won.status_code == 200
    assert won.json()["result_date"] is not None

    notification = db.query(Notification).one()
    assert notification.type == NotificationTypeEnum.TENDER_WON

    history = client.get(f"{url}/history", headers=owner_headers).json()
    actions = [h["action"] for h in history]
    assert "created" in actions
    assert actions.count("status_changed") == 4


def test_update_records_field_history(client, db, owner_headers, create_tender):
    tender = create_tender()
    client.patch(f"/api/v1/tenders/{tender['id']}", json={"title": "Nouveau titre"}, headers=owner_headers)
    entry = db.query(TenderHistory).filter(TenderHistory.field == "title").one()
    assert entry.old_value == "Gardiennage du siège"
    assert entry.new_value == "Nouveau titre"


def test_comments_thread_and_mentions(client, db, company, make_user, owner_headers, create_tender):
    colleague = make_user(company)
    tender = create_tender()
    url = f"/api/v1/tenders/{tender['id']}/comments"

    root = client.post(url, json={"content": "On y va ?", "mentions": [str(colleague.id)]}, headers=owner_headers)
    assert root.status_code == 201
    reply = client.post(url, json={"content": "Oui", "parent_id": root.json()["id"]}, headers=owner_headers)
    assert reply.status_code == 201

    thread = client.get(url, headers=owner_headers).json()
    assert len(thread) == 1
    assert thread[0]["replies"][0]["content"] == "Oui"

    mention = db.query(Notification).filter(Notification.user_id == colleague.id).one()
    assert mention.type == NotificationTypeEnum.COMMENT


def test_toggle_favorite(client, owner_headers, create_tender):
    tender = create_tender()
    url = f"/api/v1/tenders/{tender['id']}/favorite"
    assert client.post(url, headers=owner_headers).json()["is_favorite"] is True
    assert len(client.get("/api/v1/tenders/favorites", headers=owner_headers).json()) == 1
    assert client.post(url, headers=owner_headers).json()["is_favorite"] is False


def test_score_tender(client, owner_headers, create_tender):
    tender = create_tender(estimated_value=50000)
    missing = client.get(f"/api/v1/tenders/{tender['id']}/score", headers=owner_headers)
    assert missing.status_code == 404

    response = client.post(f"/api/v1/tenders/{tender['id']}/score", headers=owner_headers)
    assert response.status_code == 200
    score = response.json()
    assert score["max_score"] == 100
    assert len(score["criteria"]) == 6

    stored = client.get(f"/api/v1/tenders/{tender['id']}/score", headers=owner_headers).json()
    assert stored["percentage"] == score["percentage"]
    assert client.get(f"/api/v1/tenders/{tender['id']}", headers=owner_headers).json()["ai_score"] == score["percentage"]


def test_score_requires_paid_plan(client, company, db, owner_headers, create_tender):
    tender = create_tender()
    company.subscription_plan = SubscriptionPlanEnum.FREE
    db.commit()
    response = client.post(f"/api/v1/tenders/{tender['id']}/score", headers=owner_headers)
    assert response.status_code == 402


def test_export_csv(client, owner_headers, create_tender):
    create_tender(reference="AO-42")
    response = client.get("/api/v1/tenders/export?format=csv", headers=owner_headers)
    assert response.status_code == 200
    assert "AO-42" in response.content.decode("utf-8-sig")
    assert response.headers["content-disposition"] == 'attachment; filename="tenders.csv"'


def test_export_xlsx(client, owner_headers, create_tender):
    create_tender(reference="AO-43", estimated_value=120000)
    response = client.get("/api/v1/tenders/export?format=xlsx", headers=owner_headers)
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/vnd.openxmlformats")
    assert response.headers["content-disposition"] == 'attachment; filename="tenders.xlsx"'

    sheet = load_workbook(io.BytesIO(response.content)).active
    rows = list(sheet.iter_rows(values_only=True))
    assert rows[0][0] == "Référence"
    assert rows[1][0] == "AO-43"
    assert rows[1][8] == 120000


def test_delete_tender(client, owner_headers, create_tender):
    tender = create_tender()
    assert client.delete(f"/api/v1/tenders/{tender['id']}", headers=owner_headers).status_code == 204
    assert client.get(f"/api/v1/tenders/{tender['id']}", headers=owner_headers).status_code == 404


def test_delete_tender_removes_uploaded_files(client, owner_headers, create_tender, upload_dir):
    tender = create_tender()
    upload = client.post(
        "/api/v1/documents/upload",
        files={"file": ("cctp.pdf", b"%PDF-1.4 cctp", "application/pdf")},
        data={"tender_id": tender["id"]},
        headers=owner_headers,
    )
    assert upload.status_code == 201, upload.text
    company_dir = upload_dir / upload.json()["company_id"]
    assert len(os.listdir(company_dir)) == 1

    assert client.delete(f"/api/v1/tenders/{tender['id']}", headers=owner_headers).status_code == 204
    assert os.listdir(company_dir) == []
    assert client.get(f"/api/v1/documents/{upload.json()['id']}", headers=owner_headers).status_code == 404
