import pytest


@pytest.fixture
def tenders(create_tender):
    return [
        create_tender(title="Gardiennage du siège", sector="SECURITY_PRIVATE", country="FR",
                      buyer_name="Ville de Lyon", estimated_value=120000),
        create_tender(title="Vidéosurveillance parking", sector="SECURITY_ELECTRONIC", country="BE",
                      buyer_name="Port d'Anvers", estimated_value=450000),
        create_tender(title="Nettoyage des bureaux", sector="CLEANING", country="FR",
                      buyer_name="Région Sud", estimated_value=60000),
    ]


def titles(response):
    return sorted(t["title"] for t in response.json()["results"])


def test_text_search_matches_every_term(client, owner_headers, tenders):
    response = client.get("/api/v1/search", params={"q": "gardiennage lyon"}, headers=owner_headers)
    assert titles(response) == ["Gardiennage du siège"]
    assert response.json()["pagination"] == {"page": 1, "limit": 20, "total": 1, "total_pages": 1}


def test_filters(client, owner_headers, tenders):
    params = {"country": "fr", "sector": "security_private,cleaning", "min_budget": 50000, "max_budget": 100000}
    response = client.get("/api/v1/search", params=params, headers=owner_headers)
    assert titles(response) == ["Nettoyage des bureaux"]
    assert response.json()["filters"]["countries"] == ["fr"]


def test_invalid_sector_filter(client, owner_headers, tenders):
    response = client.get("/api/v1/search", params={"sector": "bakery"}, headers=owner_headers)
    assert response.status_code == 400
    assert "CLEANING" in response.json()["details"]["allowed"]


def test_pagination(client, owner_headers, tenders):
    response = client.get("/api/v1/search", params={"limit": 2, "page": 2}, headers=owner_headers)
    body = response.json()
    assert len(body["results"]) == 1
    assert body["pagination"]["total_pages"] == 2


def test_search_is_scoped_to_company(client, tenders, make_company, make_user, headers_for):
    outsider = make_user(make_company(name="Concurrent SA"))
    response = client.get("/api/v1/search", params={"q": "gardiennage"}, headers=headers_for(outsider))
    assert response.json()["results"] == []


def test_suggestions(client, owner_headers, tenders):
    response = client.get("/api/v1/search/suggestions", params={"q": "ville"}, headers=owner_headers)
    assert response.json() == {"suggestions": ["Ville de Lyon"]}


def test_history(client, owner_headers, tenders):
    client.get("/api/v1/search", params={"q": "nettoyage"}, headers=owner_headers)
    history = client.get("/api/v1/search/history", headers=owner_headers).json()
    assert history[0]["query"] == "nettoyage"
    assert history[0]["results_count"] == 1

    assert client.delete("/api/v1/search/history", headers=owner_headers).status_code == 204
    assert client.get("/api/v1/search/history", headers=owner_headers).json() == []


def test_saved_searches(client, owner_headers, make_company, make_user, headers_for):
    created = client.post(
        "/api/v1/search/saved",
        json={"name": "Sécurité FR", "query": "gardiennage", "filters": {"countries": ["FR"]}},
        headers=owner_headers,
    ).json()
    url = f"/api/v1/search/saved/{created['id']}"

    updated = client.patch(url, json={"notify": True}, headers=owner_headers).json()
    assert updated["notify"] is True
    assert updated["query"] == "gardiennage"

    outsider = make_user(make_company(name="Concurrent SA"))
    assert client.get(url, headers=headers_for(outsider)).status_code == 404

    assert client.delete(url, headers=owner_headers).status_code == 204
    assert client.get("/api/v1/search/saved", headers=owner_headers).json() == []
