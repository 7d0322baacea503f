import pytest


def create_snippet(client, headers, **fields):
    payload = {"title": "Présentation société", "content": "Acme Sécurité est une entreprise..."}
    payload.update(fields)
    response = client.post("/api/v1/snippets", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def category(client, owner_headers):
    response = client.post(
        "/api/v1/snippets/categories",
        json={"name": "Entreprise", "color": "#2563EB", "display_order": 1},
        headers=owner_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


def test_create_and_fetch_snippet(client, owner, owner_headers, category):
    snippet = create_snippet(
        client, owner_headers, category_id=category["id"], tags=["RSE ", "rse", "Qualité"], shortcut="presentation"
    )
    assert snippet["tags"] == ["rse", "qualité"]
    assert snippet["usage_count"] == 0
    assert snippet["created_by"] == str(owner.id)
    assert snippet["category"]["name"] == "Entreprise"

    by_shortcut = client.get("/api/v1/snippets/shortcut/presentation", headers=owner_headers).json()
    assert by_shortcut["id"] == snippet["id"]


def test_invalid_shortcut_and_short_content(client, owner_headers):
    response = client.post(
        "/api/v1/snippets",
        json={"title": "Politique HSE", "content": "Texte HSE", "shortcut": "Not Valid"},
        headers=owner_headers,
    )
    assert response.status_code == 422
    response = client.post("/api/v1/snippets", json={"title": "HSE", "content": "abc"}, headers=owner_headers)
    assert response.status_code == 422


def test_shortcut_is_unique_among_active_snippets(client, owner_headers):
    first = create_snippet(client, owner_headers, shortcut="hse")
    duplicate = client.post(
        "/api/v1/snippets", json={"title": "Politique HSE", "content": "Texte HSE bis", "shortcut": "hse"},
        headers=owner_headers,
    )
    assert duplicate.status_code == 409

    assert client.delete(f"/api/v1/snippets/{first['id']}", headers=owner_headers).status_code == 204
    assert client.get(f"/api/v1/snippets/{first['id']}", headers=owner_headers).status_code == 404
    create_snippet(client, owner_headers, shortcut="hse")


def test_list_filters_and_usage_order(client, owner_headers, category):
    memo = create_snippet(client, owner_headers, title="Moyens humains", content="Équipe de 40 agents",
                          tags=["rh", "effectifs"], category_id=category["id"])
    create_snippet(client, owner_headers, title="Références", content="Ville de Lyon, 2024", is_favorite=True)

    client.post(f"/api/v1/snippets/{memo['id']}/use", headers=owner_headers)
    used = client.post(f"/api/v1/snippets/{memo['id']}/use", headers=owner_headers).json()
    assert used["usage_count"] == 2
    assert used["last_used_at"] is not None

    listing = client.get("/api/v1/snippets", headers=owner_headers).json()
    assert listing["total"] == 2
    assert listing["snippets"][0]["id"] == memo["id"]

    def titles(**params):
        body = client.get("/api/v1/snippets", params=params, headers=owner_headers).json()
        return [s["title"] for s in body["snippets"]]

    assert titles(is_favorite="true") == ["Références"]
    assert titles(query="lyon") == ["Références"]
    assert titles(category_id=category["id"]) == ["Moyens humains"]
    assert titles(tags="rh,effectifs") == ["Moyens humains"]
    assert titles(tags="rh,finance") == []


def test_update_snippet(client, owner_headers, category):
    snippet = create_snippet(client, owner_headers, category_id=category["id"], shortcut="intro")
    other = create_snippet(client, owner_headers, title="Conclusion", shortcut="fin")
    url = f"/api/v1/snippets/{snippet['id']}"

    assert client.patch(url, json={"shortcut": "fin"}, headers=owner_headers).status_code == 409
    updated = client.patch(url, json={"title": "Présentation du groupe", "category_id": None},
                           headers=owner_headers).json()
    assert updated["title"] == "Présentation du groupe"
    assert updated["category_id"] is None
    assert updated["shortcut"] == "intro"
    assert other["shortcut"] == "fin"


def test_snippets_are_company_scoped(client, owner_headers, make_company, make_user, headers_for):
    snippet = create_snippet(client, owner_headers, shortcut="presentation")
    stranger = headers_for(make_user(make_company(name="Concurrent SA")))

    assert client.get(f"/api/v1/snippets/{snippet['id']}", headers=stranger).status_code == 404
    assert client.get("/api/v1/snippets", headers=stranger).json()["total"] == 0
    # Shortcuts are unique per company only
    create_snippet(client, stranger, shortcut="presentation")


def test_category_lifecycle(client, owner_headers, category):
    duplicate = client.post("/api/v1/snippets/categories", json={"name": "entreprise"}, headers=owner_headers)
    assert duplicate.status_code == 409

    snippet = create_snippet(client, owner_headers, category_id=category["id"])
    categories = client.get("/api/v1/snippets/categories", headers=owner_headers).json()
    assert [(c["name"], c["snippet_count"]) for c in categories] == [("Entreprise", 1)]

    url = f"/api/v1/snippets/categories/{category['id']}"
    blocked = client.delete(url, headers=owner_headers)
    assert blocked.status_code == 400
    assert blocked.json()["details"] == {"snippet_count": 1}

    renamed = client.patch(url, json={"name": "Société", "color": "#10B981"}, headers=owner_headers).json()
    assert renamed["name"] == "Société"
    assert renamed["snippet_count"] == 1

    client.delete(f"/api/v1/snippets/{snippet['id']}", headers=owner_headers)
    assert client.delete(url, headers=owner_headers).status_code == 204
    assert client.get("/api/v1/snippets/categories", headers=owner_headers).json() == []


def test_unknown_category_is_rejected(client, owner_headers):
    response = client.post(
        "/api/v1/snippets",
        json={"title": "Orphelin", "content": "Sans catégorie", "category_id": "00000000-0000-0000-0000-000000000000"},
        headers=owner_headers,
    )
    assert response.status_code == 404
