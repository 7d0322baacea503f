def test_get_company(client, company, owner_headers):
    body = client.get("/api/v1/company", headers=owner_headers).json()
    assert body["id"] == str(company.id)
    assert body["subscription_plan"] == "PRO"


def test_update_profile(client, owner_headers):
    response = client.patch(
        "/api/v1/company",
        json={"siret": "12345678901234", "country": "be", "sectors": ["SECURITY_PRIVATE"], "employee_count": 42},
        headers=owner_headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["country"] == "BE"
    assert body["sectors"] == ["SECURITY_PRIVATE"]
    assert body["employee_count"] == 42


def test_invalid_siret(client, owner_headers):
    assert client.patch("/api/v1/company", json={"siret": "123"}, headers=owner_headers).status_code == 422


def test_members_cannot_edit(client, company, make_user, headers_for):
    member = make_user(company)
    assert client.patch("/api/v1/company", json={"name": "Hack"}, headers=headers_for(member)).status_code == 403
