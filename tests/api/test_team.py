from datetime import timedelta

from wewinbid.core.helpers import utcnow
from wewinbid.modules.auth.db.schema import User, UserRoleEnum
from wewinbid.modules.companies.db.schema import SubscriptionPlanEnum
from wewinbid.modules.team.db.schema import TeamInvitation


def invite(client, headers, email="new.member@example.com", role="MEMBER"):
    return client.post("/api/v1/team/invitations", json={"email": email, "role": role}, headers=headers)


def test_invite_and_accept(client, db, owner_headers):
    response = invite(client, owner_headers, email="New.Member@Example.com")
    assert response.status_code == 201
    assert response.json()["email"] == "new.member@example.com"
    assert response.json()["status"] == "pending"

    token = db.query(TeamInvitation).one().token
    accepted = client.post(
        "/api/v1/team/invitations/accept",
        json={"token": token, "full_name": "Nina Nouvelle", "password": "password123"},
    )
    assert accepted.status_code == 201
    assert accepted.json()["access_token"]

    members = client.get("/api/v1/team/members", headers=owner_headers).json()
    assert sorted(m["email"] for m in members) == ["new.member@example.com", "owner@example.com"]

    again = client.post(
        "/api/v1/team/invitations/accept",
        json={"token": token, "full_name": "Nina Nouvelle", "password": "password123"},
    )
    assert again.status_code == 410


def test_expired_invitation_is_gone(client, db, owner_headers):
    invite(client, owner_headers)
    invitation = db.query(TeamInvitation).one()
    invitation.expires_at = utcnow() - timedelta(minutes=1)
    db.commit()

    response = client.post(
        "/api/v1/team/invitations/accept",
        json={"token": invitation.token, "full_name": "Late", "password": "password123"},
    )
    assert response.status_code == 410


def test_duplicate_invitation_conflicts(client, owner_headers):
    assert invite(client, owner_headers).status_code == 201
    assert invite(client, owner_headers).status_code == 409
    assert invite(client, owner_headers, email="owner@example.com").status_code == 409


def test_owner_role_cannot_be_invited(client, owner_headers):
    assert invite(client, owner_headers, role="OWNER").status_code == 422


def test_members_cannot_invite(client, company, make_user, headers_for):
    member = make_user(company)
    assert invite(client, headers_for(member)).status_code == 403


def test_free_plan_collaborator_quota(client, make_company, make_user, headers_for):
    free = make_company(name="Petite SARL", plan=SubscriptionPlanEnum.FREE)
    owner = make_user(free, role=UserRoleEnum.OWNER)

    response = invite(client, headers_for(owner))
    assert response.status_code == 402
    assert response.json()["details"] == {"current_count": 1, "limit": 1}


def test_revoke_invitation(client, owner_headers):
    invitation = invite(client, owner_headers).json()
    url = f"/api/v1/team/invitations/{invitation['id']}"
    assert client.delete(url, headers=owner_headers).json()["status"] == "revoked"
    assert client.delete(url, headers=owner_headers).status_code == 400


def test_role_update_and_ownership_transfer(client, db, owner, owner_headers, company, make_user, headers_for):
    member = make_user(company)

    response = client.patch(f"/api/v1/team/members/{member.id}", json={"role": "ADMIN"}, headers=owner_headers)
    assert response.json()["role"] == "ADMIN"

    denied = client.patch(f"/api/v1/team/members/{owner.id}", json={"role": "MEMBER"}, headers=headers_for(member))
    assert denied.status_code == 403

    transfer = client.patch(f"/api/v1/team/members/{member.id}", json={"role": "OWNER"}, headers=owner_headers)
    assert transfer.json()["role"] == "OWNER"
    db.expire_all()
    assert db.get(User, owner.id).role == UserRoleEnum.ADMIN


def test_remove_member(client, db, owner, owner_headers, company, make_user, headers_for):
    member = make_user(company)
    admin = make_user(company, role=UserRoleEnum.ADMIN)

    assert client.delete(f"/api/v1/team/members/{owner.id}", headers=owner_headers).status_code == 400
    assert client.delete(f"/api/v1/team/members/{owner.id}", headers=headers_for(admin)).status_code == 403
    assert client.delete(f"/api/v1/team/members/{member.id}", headers=headers_for(admin)).status_code == 204
    db.expire_all()
    assert db.get(User, member.id) is None
