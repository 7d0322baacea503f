import json
import uuid
import os
from datetime import timedelta

import pytest

from wewinbid.core.helpers import utcnow
from wewinbid.modules.companies.db.schema import SubscriptionPlanEnum
from wewinbid.modules.documents.db.schema import Document, DocumentTypeEnum
from wewinbid.modules.documents.services.document_service import DocumentService
from wewinbid.modules.documents.services.generation_service import GenerationService, stream_generation
from wewinbid.modules.notifications.db.schema import Notification, NotificationTypeEnum


def test_create_update_delete(client, owner_headers, create_tender):
    tender = create_tender()
    created = client.post(
        "/api/v1/documents",
        json={"name": "Mémoire technique", "type": "TECHNICAL_MEMO", "tender_id": tender["id"], "content": "v1"},
        headers=owner_headers,
    )
    assert created.status_code == 201
    document = created.json()
    assert document["version"] == 1

    url = f"/api/v1/documents/{document['id']}"
    updated = client.patch(url, json={"content": "v2", "status": "VALIDATED"}, headers=owner_headers).json()
    assert updated["version"] == 2
    assert updated["status"] == "VALIDATED"

    by_tender = client.get("/api/v1/documents", params={"tender_id": tender["id"]}, headers=owner_headers).json()
    assert [d["id"] for d in by_tender] == [document["id"]]

    assert client.delete(url, headers=owner_headers).status_code == 204
    assert client.get(url, headers=owner_headers).status_code == 404


def test_unknown_tender_is_rejected(client, owner_headers):
    response = client.post(
        "/api/v1/documents",
        json={"name": "Orphelin", "tender_id": "00000000-0000-0000-0000-000000000000"},
        headers=owner_headers,
    )
    assert response.status_code == 404


def test_templates_need_a_paid_plan(client, make_company, make_user, headers_for):
    free_owner = make_user(make_company(name="Petite SARL", plan=SubscriptionPlanEnum.FREE))
    response = client.post(
        "/api/v1/documents", json={"name": "Modèle DC1", "is_template": True}, headers=headers_for(free_owner)
    )
    assert response.status_code == 402


def test_upload_and_download(client, owner_headers, upload_dir):
    response = client.post(
        "/api/v1/documents/upload",
        files={"file": ("kbis.pdf", b"%PDF-1.4 kbis", "application/pdf")},
        data={"type": "KBIS", "expires_at": (utcnow() + timedelta(days=60)).isoformat()},
        headers=owner_headers,
    )
    assert response.status_code == 201, response.text
    document = response.json()
    assert document["file_size"] == len(b"%PDF-1.4 kbis")
    assert document["mime_type"] == "application/pdf"
    assert len(os.listdir(upload_dir / document["company_id"])) == 1

    download = client.get(f"/api/v1/documents/{document['id']}/download", headers=owner_headers)
    assert download.content == b"%PDF-1.4 kbis"


def test_upload_rejects_unknown_extensions(client, owner_headers):
    response = client.post(
        "/api/v1/documents/upload",
        files={"file": ("script.exe", b"MZ", "application/octet-stream")},
        headers=owner_headers,
    )
    assert response.status_code == 400


def test_upload_over_storage_quota(client, db, make_company, make_user, headers_for, upload_dir):
    free_company = make_company(name="Petite SARL", plan=SubscriptionPlanEnum.FREE)
    free_owner = make_user(free_company)
    # FREE plans get 0.1 GB
    db.add(Document(company_id=free_company.id, name="Archives", file_size=int(0.1 * 1024 ** 3)))
    db.commit()

    response = client.post(
        "/api/v1/documents/upload",
        files={"file": ("kbis.pdf", b"%PDF-1.4 kbis", "application/pdf")},
        headers=headers_for(free_owner),
    )
    assert response.status_code == 402
    assert response.json()["error"] == "QUOTA_EXCEEDED"
    assert not (upload_dir / str(free_company.id)).exists()


def test_list_templates(client, owner_headers):
    templates = client.get("/api/v1/documents/templates", headers=owner_headers).json()
    keys = {t["key"] for t in templates}
    assert {"TECHNICAL_MEMO", "COVER_LETTER", "REFERENCES_LIST"} <= keys
    assert all(t["sections"] for t in templates)


def test_generate_with_template_provider(client, owner_headers, create_tender):
    tender = create_tender(reference="AO-2026-042", buyer_name="Ville de Lyon")
    response = client.post(
        "/api/v1/documents/generate",
        json={"tender_id": tender["id"], "document_type": "TECHNICAL_MEMO", "save": True},
        headers=owner_headers,
    )
    assert response.status_code == 200, response.text
    body = response.json()
    assert body["provider"] == "template"
    assert body["title"].endswith("Gardiennage du siège")
    assert "AO-2026-042" in body["content"]
    assert [s["order"] for s in body["sections"]] == list(range(1, len(body["sections"]) + 1))

    saved = client.get(f"/api/v1/documents/{body['document_id']}", headers=owner_headers).json()
    assert saved["type"] == "TECHNICAL_MEMO"
    assert saved["content"] == body["content"]


def test_generate_unsupported_type(client, owner_headers, create_tender):
    tender = create_tender()
    response = client.post(
        "/api/v1/documents/generate",
        json={"tender_id": tender["id"], "document_type": "DPGF"},
        headers=owner_headers,
    )
    assert response.status_code == 400


def test_stream_generation_events(db, owner, create_tender):
    tender = create_tender()
    context = GenerationService(db).prepare(owner, uuid.UUID(tender["id"]), DocumentTypeEnum.COVER_LETTER)

    events = list(stream_generation(context, save=True))
    names = [e.event for e in events]
    assert names[0] == "progress"
    assert names[-1] == "done"
    assert "chunk" in names

    done = json.loads(events[-1].data)
    assert done["provider"] == "template"
    assert db.query(Document).filter(Document.id == uuid.UUID(done["document_id"])).count() == 1


class _FailingModels:
    def generate_content(self, **kwargs):
        raise RuntimeError("quota exhausted")

    def generate_content_stream(self, **kwargs):
        raise RuntimeError("quota exhausted")


class _FailingClient:
    def __init__(self, api_key=None):
        self.models = _FailingModels()


@pytest.fixture
def failing_gemini(monkeypatch):
    from wewinbid.config import settings
    from wewinbid.core import ai
    monkeypatch.setattr(settings, "GOOGLE_API_KEY", "fake-key")
    monkeypatch.setattr(ai.genai, "Client", _FailingClient)


def test_generate_falls_back_to_template_when_gemini_fails(client, owner_headers, create_tender, failing_gemini):
    tender = create_tender(reference="AO-2026-077")
    response = client.post(
        "/api/v1/documents/generate",
        json={"tender_id": tender["id"], "document_type": "TECHNICAL_MEMO"},
        headers=owner_headers,
    )
    assert response.status_code == 200, response.text
    body = response.json()
    assert body["provider"] == "template"
    assert "AO-2026-077" in body["content"]


def test_stream_falls_back_to_template_when_gemini_fails(db, owner, create_tender, failing_gemini):
    tender = create_tender()
    context = GenerationService(db).prepare(owner, uuid.UUID(tender["id"]), DocumentTypeEnum.COVER_LETTER)

    events = list(stream_generation(context))
    names = [e.event for e in events]
    assert "error" not in names
    assert names[-1] == "done"
    assert json.loads(events[-1].data)["provider"] == "template"


def test_export_formats(client, owner_headers):
    document = client.post(
        "/api/v1/documents",
        json={"name": "Note / synthese", "content": "# Titre\n\n## Partie\n\n- point **clé**\n\nTexte."},
        headers=owner_headers,
    ).json()
    url = f"/api/v1/documents/{document['id']}/export"

    pdf = client.get(url, headers=owner_headers)
    assert pdf.headers["content-type"] == "application/pdf"
    assert pdf.content.startswith(b"%PDF")
    assert 'filename="Note___synthese.pdf"' in pdf.headers["content-disposition"]

    docx = client.get(url, params={"format": "docx"}, headers=owner_headers)
    assert docx.content.startswith(b"PK")
    assert client.get(url, params={"format": "odt"}, headers=owner_headers).status_code == 422


def test_expiry_notice_sent_once(client, db, owner, owner_headers):
    client.post(
        "/api/v1/documents",
        json={"name": "Attestation URSSAF", "expires_at": (utcnow() + timedelta(days=10)).isoformat()},
        headers=owner_headers,
    )
    client.post(
        "/api/v1/documents",
        json={"name": "Kbis", "expires_at": (utcnow() + timedelta(days=90)).isoformat()},
        headers=owner_headers,
    )
    service = DocumentService(db)
    assert service.notify_expiring_documents() == 1
    assert service.notify_expiring_documents() == 0

    notice = db.query(Notification).filter(Notification.type == NotificationTypeEnum.DOCUMENT_EXPIRING).one()
    assert notice.user_id == owner.id
    assert notice.title == "Document bientôt expiré : Attestation URSSAF"