from fastapi.testclient import TestClient


def _payload(**overrides):
    data = {
        "name": "Spring Smash",
        "sport": "badminton",
        "format": "knockout",
        "categories": ["singles", "doubles"],
        "ageGroups": ["U-18", " U-18 ", "Open"],
    }
    data.update(overrides)
    return data


def test_create_and_get_tournament(client: TestClient, admin_headers):
    response = client.post("/api/tournaments", json=_payload(), headers=admin_headers)
    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Spring Smash"
    assert data["format"] == "knockout"
    assert data["categories"] == ["singles", "doubles"]
    assert data["ageGroups"] == ["U-18", "Open"]
    assert data["hasFixtures"] is False
    assert data["status"] == "draft"

    fetched = client.get(f"/api/tournaments/{data['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["id"] == data["id"]

    listed = client.get("/api/tournaments")
    assert [t["id"] for t in listed.json()] == [data["id"]]


def test_create_requires_admin(client: TestClient, player_headers):
    response = client.post("/api/tournaments", json=_payload(), headers=player_headers)
    assert response.status_code == 403
    assert response.json() == {"success": False, "error": "Admin access required"}

    anonymous = client.post("/api/tournaments", json=_payload())
    assert anonymous.status_code == 403


def test_create_validates_payload(client: TestClient, admin_headers):
    assert client.post("/api/tournaments", json=_payload(categories=[]), headers=admin_headers).status_code == 422
    assert client.post("/api/tournaments", json=_payload(format="swiss"), headers=admin_headers).status_code == 422
    assert client.post("/api/tournaments", json=_payload(name="  "), headers=admin_headers).status_code == 422


def test_get_missing_tournament(client: TestClient):
    response = client.get("/api/tournaments/999")
    assert response.status_code == 404
    assert response.json()["success"] is False


def test_health(client: TestClient):
    assert client.get("/api/health").json() == {"status": "ok"}
