"""API tests for /api/domains."""
from conftest import auth_headers, make_project


def test_list_requires_authentication(client):
    assert client.get("/api/domains").status_code == 401


def test_crud_with_project_counts(client, db_session, admin, candidate):
    headers = auth_headers(admin)
    make_project(db_session, candidate, domain="Intelligence Artificielle")
    make_project(db_session, candidate, domain="Intelligence Artificielle")

    response = client.post(
        "/api/domains",
        json={"name": "Intelligence Artificielle", "description": "IA et apprentissage"},
        headers=headers,
    )
    assert response.status_code == 201
    domain_id = response.json()["id"]
    assert response.json()["project_count"] == 2

    client.post("/api/domains", json={"name": "Cybersécurité"}, headers=headers)

    response = client.get("/api/domains", headers=auth_headers(candidate))
    assert [(d["name"], d["project_count"]) for d in response.json()] == [
        ("Cybersécurité", 0),
        ("Intelligence Artificielle", 2),
    ]

    response = client.put(
        f"/api/domains/{domain_id}",
        json={"name": "IA", "description": None},
        headers=headers,
    )
    assert response.json()["name"] == "IA"
    assert response.json()["project_count"] == 0

    assert client.delete(f"/api/domains/{domain_id}", headers=headers).status_code == 204
    assert len(client.get("/api/domains", headers=headers).json()) == 1


def test_duplicate_name_is_rejected(client, admin):
    headers = auth_headers(admin)
    client.post("/api/domains", json={"name": "Réseaux"}, headers=headers)
    response = client.post("/api/domains", json={"name": " Réseaux "}, headers=headers)
    assert response.status_code == 422


def test_candidate_cannot_create(client, candidate):
    response = client.post("/api/domains", json={"name": "X"}, headers=auth_headers(candidate))
    assert response.status_code == 403


def test_unknown_domain(client, admin):
    response = client.put("/api/domains/999", json={"name": "X"}, headers=auth_headers(admin))
    assert response.status_code == 404
