import uuid
from datetime import timedelta

from wewinbid.core.helpers import utcnow
from wewinbid.modules.notifications.db.schema import Notification, NotificationTypeEnum
from wewinbid.modules.signatures.db.schema import SignatureRequest, SignatureSigner
from wewinbid.modules.signatures.services.signature_service import SignatureService

SIGNERS = [
    {"email": "Claire.Client@example.org", "name": "Claire Client"},
    {"email": "owner@example.com", "name": "Olivia Owner"},
]


def create_request(client, headers, **fields):
    payload = {"title": "Acte d'engagement", "document_name": "ae.pdf", "signers": SIGNERS}
    payload.update(fields)
    response = client.post("/api/v1/signatures", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def tokens(db, request_id):
    signers = (
        db.query(SignatureSigner)
        .filter(SignatureSigner.request_id == uuid.UUID(request_id))
        .order_by(SignatureSigner.order_index)
        .all()
    )
    return [s.access_token for s in signers]


def test_create_draft(client, owner, owner_headers):
    request = create_request(client, owner_headers)
    assert request["status"] == "draft"
    assert len(request["document_hash"]) == 64
    signers = request["signers"]
    assert [s["email"] for s in signers] == ["claire.client@example.org", "owner@example.com"]
    assert signers[0]["user_id"] is None
    assert signers[1]["user_id"] == str(owner.id)
    assert "access_token" not in signers[0]


def test_draft_links_are_not_usable(client, db, owner_headers):
    request = create_request(client, owner_headers)
    token = tokens(db, request["id"])[0]
    assert client.get(f"/api/v1/signatures/sign/{token}").status_code == 400


def test_full_signing_flow(client, db, owner, owner_headers):
    request = create_request(client, owner_headers)
    sent = client.post(f"/api/v1/signatures/{request['id']}/send", headers=owner_headers).json()
    assert sent["status"] == "pending"
    assert {s["status"] for s in sent["signers"]} == {"notified"}
    assert client.post(f"/api/v1/signatures/{request['id']}/send", headers=owner_headers).status_code == 400

    first, second = tokens(db, request["id"])
    viewed = client.get(f"/api/v1/signatures/sign/{first}").json()
    assert viewed["signer"]["status"] == "viewed"

    partial = client.post(f"/api/v1/signatures/sign/{first}", json={"signature_data": "data:image/png;base64,AAA"})
    assert partial.json()["request_status"] == "partially_signed"
    again = client.post(f"/api/v1/signatures/sign/{first}", json={"signature_data": "x"})
    assert again.status_code == 400

    done = client.post(f"/api/v1/signatures/sign/{second}", json={"signature_data": "data:image/png;base64,BBB"})
    assert done.json()["request_status"] == "completed"

    detail = client.get(f"/api/v1/signatures/{request['id']}", headers=owner_headers).json()
    assert detail["completed_at"] is not None

    actions = [log["action"] for log in client.get(
        f"/api/v1/signatures/{request['id']}/audit", headers=owner_headers
    ).json()]
    assert {"created", "sent", "viewed", "signed", "completed"} <= set(actions)
    assert actions.count("signed") == 2

    titles = [n.title for n in db.query(Notification).filter(
        Notification.user_id == owner.id, Notification.type == NotificationTypeEnum.SIGNATURE_REQUEST
    )]
    assert "Document signé" in titles


def test_decline_cancels_request(client, db, owner_headers):
    request = create_request(client, owner_headers, send_immediately=True)
    first, second = tokens(db, request["id"])

    declined = client.post(f"/api/v1/signatures/sign/{first}/decline", json={"reason": "Montant erroné"})
    assert declined.json()["signer"]["status"] == "declined"
    assert declined.json()["request_status"] == "cancelled"

    assert client.post(f"/api/v1/signatures/sign/{second}", json={"signature_data": "x"}).status_code == 400


def test_expired_link_is_gone(client, db, owner_headers):
    request = create_request(client, owner_headers, send_immediately=True)
    record = db.get(SignatureRequest, uuid.UUID(request["id"]))
    record.expires_at = utcnow() - timedelta(hours=1)
    db.commit()

    token = tokens(db, request["id"])[0]
    assert client.get(f"/api/v1/signatures/sign/{token}").status_code == 410
    detail = client.get(f"/api/v1/signatures/{request['id']}", headers=owner_headers).json()
    assert detail["status"] == "expired"
    assert {s["status"] for s in detail["signers"]} == {"expired"}


def test_expiry_job(client, db, owner_headers):
    request = create_request(client, owner_headers, send_immediately=True)
    create_request(client, owner_headers)

    assert SignatureService(db).expire_overdue(now=utcnow() + timedelta(days=31)) == 1
    db.expire_all()
    assert db.get(SignatureRequest, uuid.UUID(request["id"])).status.value == "expired"


def test_cancel_and_listing(client, owner_headers):
    request = create_request(client, owner_headers)
    cancelled = client.post(f"/api/v1/signatures/{request['id']}/cancel", headers=owner_headers)
    assert cancelled.json()["status"] == "cancelled"
    assert client.post(f"/api/v1/signatures/{request['id']}/cancel", headers=owner_headers).status_code == 400

    listing = client.get("/api/v1/signatures", params={"status": "cancelled"}, headers=owner_headers).json()
    assert listing["total"] == 1
    assert listing["requests"][0]["id"] == request["id"]


def test_remind_only_open_signers(client, db, owner_headers, monkeypatch):
    sent_to = []
    monkeypatch.setattr(
        "wewinbid.modules.signatures.services.signature_service.send_notification_email",
        lambda email, title, message, link=None: sent_to.append((email, title)),
    )
    request = create_request(client, owner_headers)
    remind_url = f"/api/v1/signatures/{request['id']}/remind"
    assert client.post(remind_url, headers=owner_headers).status_code == 400

    client.post(f"/api/v1/signatures/{request['id']}/send", headers=owner_headers)
    first, _ = tokens(db, request["id"])
    client.post(f"/api/v1/signatures/sign/{first}", json={"signature_data": "data:image/png;base64,AAA"})
    sent_to.clear()

    response = client.post(remind_url, headers=owner_headers)
    assert response.status_code == 200
    assert [email for email, _ in sent_to] == ["owner@example.com"]
    assert sent_to[0][1].startswith("Rappel : ")

    audit = client.get(f"/api/v1/signatures/{request['id']}/audit", headers=owner_headers).json()
    assert "reminder_sent" in [log["action"] for log in audit]
