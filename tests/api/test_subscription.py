from wewinbid.modules.auth.db.schema import UserRoleEnum
from wewinbid.modules.companies.db.schema import SubscriptionPlanEnum


def test_pricing_is_public(client):
    body = client.get("/api/v1/pricing", params={"country": "ma"}).json()
    assert body["region"] == "MENA"
    assert body["country"] == "MA"
    assert [p["id"] for p in body["plans"]][0] == "free"


def test_pricing_defaults_to_france(client):
    body = client.get("/api/v1/pricing").json()
    assert body["country"] == "FR"
    assert body["currency"] == "EUR"


def test_usage(client, make_company, make_user, headers_for, create_tender):
    free = make_company(name="Petite SARL", plan=SubscriptionPlanEnum.FREE)
    owner = make_user(free, role=UserRoleEnum.OWNER)
    headers = headers_for(owner)
    create_tender(headers=headers)

    usage = client.get("/api/v1/subscription/usage", headers=headers).json()
    assert usage["plan"] == "FREE"
    assert usage["is_active"] is True
    assert usage["usage"]["tenders"] == {"current": 1, "limit": 2, "percentage": 50.0}
    assert usage["usage"]["collaborators"] == {"current": 1, "limit": 1, "percentage": 100.0}
    assert usage["features"]["ai_score"] is False
