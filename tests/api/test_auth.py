import uuid

from wewinbid.modules.auth.db.schema import User, UserRoleEnum
from wewinbid.modules.companies.db.schema import Company

REGISTER = {
    "email": "Camille@Example.com",
    "password": "s3cret-pass",
    "full_name": "Camille Martin",
    "company_name": "Martin Sécurité",
}


def test_register_creates_owner_and_company(client, db):
    response = client.post("/api/v1/auth/register", json=REGISTER)
    assert response.status_code == 201
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["email"] == "camille@example.com"
    assert body["user"]["role"] == "OWNER"

    company = db.get(Company, uuid.UUID(body["user"]["company_id"]))
    assert company.name == "Martin Sécurité"
    assert company.subscription_plan.value == "FREE"


def test_register_duplicate_email(client):
    client.post("/api/v1/auth/register", json=REGISTER)
    response = client.post("/api/v1/auth/register", json=REGISTER)
    assert response.status_code == 409
    assert response.json()["error"] == "CONFLICT"


def test_login(client):
    client.post("/api/v1/auth/register", json=REGISTER)
    response = client.post("/api/v1/auth/login", json={"email": "camille@example.com", "password": "s3cret-pass"})
    assert response.status_code == 200
    token = response.json()["access_token"]

    me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["full_name"] == "Camille Martin"


def test_login_wrong_password(client):
    client.post("/api/v1/auth/register", json=REGISTER)
    response = client.post("/api/v1/auth/login", json={"email": "camille@example.com", "password": "nope-nope"})
    assert response.status_code == 401
    assert response.json() == {"error": "AUTHENTICATION_ERROR", "message": "Invalid email or password", "details": None}


def test_me_requires_token(client):
    assert client.get("/api/v1/auth/me").status_code == 401
    bad = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert bad.status_code == 401


def test_validation_errors_are_rendered(client):
    response = client.post("/api/v1/auth/register", json={"email": "bad", "password": "x"})
    assert response.status_code == 422
    body = response.json()
    assert body["error"] == "VALIDATION_ERROR"
    assert {d["field"] for d in body["details"]} >= {"email", "password"}


def test_update_profile_and_password(client, owner, owner_headers):
    response = client.patch("/api/v1/auth/me", json={"job_title": "Directrice"}, headers=owner_headers)
    assert response.status_code == 200
    assert response.json()["job_title"] == "Directrice"

    wrong = client.post(
        "/api/v1/auth/me/password",
        json={"current_password": "wrong-password", "new_password": "another-pass"},
        headers=owner_headers,
    )
    assert wrong.status_code == 400

    ok = client.post(
        "/api/v1/auth/me/password",
        json={"current_password": "password123", "new_password": "another-pass"},
        headers=owner_headers,
    )
    assert ok.status_code == 204
    login = client.post("/api/v1/auth/login", json={"email": owner.email, "password": "another-pass"})
    assert login.status_code == 200


def test_export_personal_data(client, owner_headers, create_tender):
    create_tender()
    response = client.get("/api/v1/auth/me/export", headers=owner_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["profile"]["email"] == "owner@example.com"
    assert len(data["tenders"]) == 1
    assert "notifications" in data and "calendar_events" in data


def test_delete_account_of_last_member_removes_company(client, db, owner, company, owner_headers, create_tender):
    create_tender()
    response = client.delete("/api/v1/auth/me", headers=owner_headers)
    assert response.status_code == 204

    db.expire_all()
    assert db.query(User).count() == 0
    assert db.query(Company).count() == 0


def test_owner_with_members_cannot_delete_account(client, company, owner_headers, make_user):
    make_user(company, role=UserRoleEnum.MEMBER)
    response = client.delete("/api/v1/auth/me", headers=owner_headers)
    assert response.status_code == 400
