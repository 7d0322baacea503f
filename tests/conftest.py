import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")
os.environ["CRON_SECRET"] = "cron-test-secret"
os.environ["JOBS_INTERVAL_MINUTES"] = "0"
os.environ["SMTP_HOST"] = ""
os.environ["GOOGLE_API_KEY"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from wewinbid.core.security import create_access_token, hash_password
from wewinbid.db import models  # noqa: F401
from wewinbid.db.database import Base, SessionLocal, get_db_session
from wewinbid.main import app
from wewinbid.modules.auth.db.schema import User, UserRoleEnum
from wewinbid.modules.companies.db.schema import Company, SubscriptionPlanEnum

engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
# Background tasks and jobs open their own sessions through SessionLocal
SessionLocal.configure(bind=engine)


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    from wewinbid.config import settings
    monkeypatch.setattr(settings, "UPLOAD_BASE_DIR", str(tmp_path / "uploads"))
    return tmp_path / "uploads"


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        session = SessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db_session] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_company(db):
    def _make(name="Acme Sécurité", plan=SubscriptionPlanEnum.PRO, **fields):
        company = Company(name=name, country=fields.pop("country", "FR"), subscription_plan=plan,
                          subscription_status="active", **fields)
        db.add(company)
        db.commit()
        db.refresh(company)
        return company
    return _make


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(company, role=UserRoleEnum.MEMBER, email=None, password="password123", full_name=None):
        counter["n"] += 1
        user = User(
            email=email or f"user{counter['n']}@example.com",
            hashed_password=hash_password(password),
            full_name=full_name or f"User {counter['n']}",
            role=role,
            company_id=company.id,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make


def auth_headers(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def headers_for():
    return auth_headers


@pytest.fixture
def company(make_company):
    return make_company()


@pytest.fixture
def owner(company, make_user):
    return make_user(company, role=UserRoleEnum.OWNER, email="owner@example.com", full_name="Olivia Owner")


@pytest.fixture
def owner_headers(owner):
    return auth_headers(owner)


@pytest.fixture
def create_tender(client, owner_headers):
    def _create(headers=None, **fields):
        payload = {"title": "Gardiennage du siège", "type": "PUBLIC", "country": "FR"}
        payload.update(fields)
        response = client.post("/api/v1/tenders", json=payload, headers=headers or owner_headers)
        assert response.status_code == 201, response.text
        return response.json()
    return _create
