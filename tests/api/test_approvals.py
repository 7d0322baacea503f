import pytest

from wewinbid.modules.auth.db.schema import UserRoleEnum
from wewinbid.modules.notifications.db.schema import Notification, NotificationTypeEnum


@pytest.fixture
def team(company, owner, make_user):
    return {
        "owner": owner,
        "admin": make_user(company, role=UserRoleEnum.ADMIN, full_name="Adam Admin"),
        "member": make_user(company, full_name="Mia Member"),
    }


@pytest.fixture
def workflow(client, team, headers_for):
    response = client.post(
        "/api/v1/approvals/workflows",
        json={
            "name": "Validation offre",
            "steps": [
                {"name": "Direction technique", "approvers": [{"approver_type": "user", "user_id": str(team["admin"].id)}]},
                {"name": "Direction générale", "approvers": [{"approver_type": "role", "role_name": "owner"}]},
            ],
        },
        headers=headers_for(team["admin"]),
    )
    assert response.status_code == 201, response.text
    return response.json()


def submit(client, headers, workflow):
    response = client.post(
        "/api/v1/approvals",
        json={"workflow_id": workflow["id"], "entity_type": "tender", "title": "Offre lot 1"},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


def decide(client, headers, request_id, decision, comment=None):
    return client.post(
        f"/api/v1/approvals/{request_id}/decisions",
        json={"decision": decision, "comment": comment},
        headers=headers,
    )


def test_members_cannot_create_workflows(client, team, headers_for):
    response = client.post(
        "/api/v1/approvals/workflows",
        json={"name": "X", "steps": []},
        headers=headers_for(team["member"]),
    )
    assert response.status_code == 403


def test_workflow_steps_are_ordered_and_roles_uppercased(workflow):
    steps = workflow["steps"]
    assert [s["step_order"] for s in steps] == [1, 2]
    assert steps[1]["approvers"][0]["role_name"] == "OWNER"


def test_request_walks_through_steps(client, db, team, workflow, headers_for):
    member_headers = headers_for(team["member"])
    request = submit(client, member_headers, workflow)
    assert request["status"] == "in_progress"
    assert request["current_step"]["name"] == "Direction technique"

    detail = client.get(f"/api/v1/approvals/{request['id']}", headers=headers_for(team["admin"])).json()
    assert detail["can_approve"] is True
    assert detail["is_requester"] is False

    assert decide(client, member_headers, request["id"], "approved").status_code == 403

    first = decide(client, headers_for(team["admin"]), request["id"], "approved", "OK technique")
    assert first.status_code == 200
    assert first.json()["request"]["current_step"]["name"] == "Direction générale"
    assert decide(client, headers_for(team["admin"]), request["id"], "approved").status_code == 403

    final = decide(client, headers_for(team["owner"]), request["id"], "approved").json()["request"]
    assert final["status"] == "approved"
    assert final["completed_at"] is not None
    assert len(final["decisions"]) == 2

    actions = [log["action"] for log in client.get(
        f"/api/v1/approvals/{request['id']}/audit", headers=member_headers
    ).json()]
    assert actions.count("step_started") == 2
    assert actions.count("step_completed") == 2
    assert {"created", "decision_made", "approved"} <= set(actions)

    approval_notices = db.query(Notification).filter(
        Notification.user_id == team["member"].id,
        Notification.type == NotificationTypeEnum.APPROVAL_REQUEST,
    ).all()
    assert [n.title for n in approval_notices] == ["Demande approuvée"]


def test_request_changes_then_resubmit(client, team, workflow, headers_for):
    member_headers = headers_for(team["member"])
    admin_headers = headers_for(team["admin"])
    request = submit(client, member_headers, workflow)

    changed = decide(client, admin_headers, request["id"], "request_changes", "Préciser le planning")
    assert changed.json()["request"]["status"] == "changes_requested"
    assert decide(client, admin_headers, request["id"], "approved").status_code == 400

    resubmitted = client.post(f"/api/v1/approvals/{request['id']}/resubmit", headers=member_headers)
    assert resubmitted.json()["status"] == "in_progress"
    assert resubmitted.json()["current_step"]["name"] == "Direction technique"

    # A new round lets the same approver decide again
    assert decide(client, admin_headers, request["id"], "approved").status_code == 200


def test_rejection_is_final(client, team, workflow, headers_for):
    request = submit(client, headers_for(team["member"]), workflow)
    rejected = decide(client, headers_for(team["admin"]), request["id"], "rejected").json()["request"]
    assert rejected["status"] == "rejected"

    cancel = client.delete(f"/api/v1/approvals/{request['id']}", headers=headers_for(team["member"]))
    assert cancel.status_code == 400


def test_only_requester_can_cancel(client, team, workflow, headers_for):
    request = submit(client, headers_for(team["member"]), workflow)
    assert client.delete(f"/api/v1/approvals/{request['id']}", headers=headers_for(team["owner"])).status_code == 403

    cancelled = client.delete(f"/api/v1/approvals/{request['id']}", headers=headers_for(team["member"]))
    assert cancelled.json()["status"] == "cancelled"


def test_comments_and_approver_listing(client, team, workflow, headers_for):
    request = submit(client, headers_for(team["member"]), workflow)
    admin_headers = headers_for(team["admin"])

    comment = client.post(
        f"/api/v1/approvals/{request['id']}/comments", json={"content": "Je regarde demain"}, headers=admin_headers
    )
    assert comment.status_code == 201
    comments = client.get(f"/api/v1/approvals/{request['id']}/comments", headers=admin_headers).json()
    assert [c["content"] for c in comments] == ["Je regarde demain"]

    pending_for_admin = client.get("/api/v1/approvals", params={"role": "approver"}, headers=admin_headers).json()
    assert [r["id"] for r in pending_for_admin] == [request["id"]]
    pending_for_owner = client.get("/api/v1/approvals", params={"role": "approver"}, headers=headers_for(team["owner"]))
    assert pending_for_owner.json() == []


def single_step_workflow(client, headers, approval_type, user_ids, threshold_count=None):
    step = {
        "name": "Comité",
        "approval_type": approval_type,
        "approvers": [{"approver_type": "user", "user_id": str(user_id)} for user_id in user_ids],
    }
    if threshold_count:
        step["threshold_count"] = threshold_count
    response = client.post("/api/v1/approvals/workflows", json={"name": "Comité", "steps": [step]}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_all_step_needs_every_approver(client, team, make_user, company, headers_for):
    approvers = [team["owner"], team["admin"]]
    workflow = single_step_workflow(client, headers_for(team["admin"]), "all", [u.id for u in approvers])
    request = submit(client, headers_for(make_user(company)), workflow)

    first = decide(client, headers_for(team["admin"]), request["id"], "approved")
    assert first.json()["request"]["status"] == "in_progress"

    again = decide(client, headers_for(team["admin"]), request["id"], "approved")
    assert again.status_code == 400
    detail = client.get(f"/api/v1/approvals/{request['id']}", headers=headers_for(team["admin"])).json()
    assert detail["can_approve"] is False

    last = decide(client, headers_for(team["owner"]), request["id"], "approved")
    assert last.json()["request"]["status"] == "approved"


def test_majority_step_completes_with_two_of_three(client, team, make_user, company, headers_for):
    approvers = [team["owner"], team["admin"], team["member"]]
    workflow = single_step_workflow(client, headers_for(team["admin"]), "majority", [u.id for u in approvers])
    request = submit(client, headers_for(make_user(company)), workflow)

    assert decide(client, headers_for(team["member"]), request["id"], "approved").json()["request"]["status"] == "in_progress"
    assert decide(client, headers_for(team["admin"]), request["id"], "approved").json()["request"]["status"] == "approved"
    assert decide(client, headers_for(team["owner"]), request["id"], "approved").status_code == 400


def test_threshold_step_uses_configured_count(client, team, make_user, company, headers_for):
    approvers = [team["owner"], team["admin"], team["member"]]
    workflow = single_step_workflow(
        client, headers_for(team["admin"]), "threshold", [u.id for u in approvers], threshold_count=3
    )
    request = submit(client, headers_for(make_user(company)), workflow)

    for user in approvers[:2]:
        assert decide(client, headers_for(user), request["id"], "approved").json()["request"]["status"] == "in_progress"
    assert decide(client, headers_for(team["member"]), request["id"], "approved").json()["request"]["status"] == "approved"
