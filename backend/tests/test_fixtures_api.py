"""HTTP flow for fixture generation, listing and sync."""
from fastapi.testclient import TestClient
from sqlmodel import Session

from tests.helpers import add_doubles, add_participant, add_singles, create_tournament


def test_generate_fixtures_response_contract(client: TestClient, session: Session, admin_headers):
    tournament = create_tournament(session)
    add_singles(session, tournament, 5)
    add_participant(session, tournament, "mx1", category="mixed", partner_id="mx2", partner_name="MX2")

    response = client.post(
        f"/api/tournaments/{tournament.id}/fixtures/generate",
        json={"seedingMethod": "random", "randomSeed": 3},
        headers=admin_headers,
    )

    assert response.status_code == 201
    data = response.json()
    assert data["success"] is True
    assert data["matchesCreated"] == 7
    assert data["message"] == "Generated 7 matches successfully"
    assert data["partitions"][0]["category"] == "singles"
    assert data["partitions"][0]["bracketSize"] == 8
    assert data["skippedPartitions"] == [
        {"category": "mixed", "ageGroup": None, "participantCount": 1, "reason": "insufficient participants"}
    ]


def test_generate_without_body_uses_defaults(client: TestClient, session: Session, admin_headers):
    tournament = create_tournament(session, format="round_robin")
    add_doubles(session, tournament, 6)

    response = client.post(f"/api/tournaments/{tournament.id}/fixtures/generate", headers=admin_headers)
    assert response.status_code == 201
    assert response.json()["matchesCreated"] == 15


def test_generate_twice_conflicts(client: TestClient, session: Session, admin_headers):
    tournament = create_tournament(session)
    add_singles(session, tournament, 4)
    url = f"/api/tournaments/{tournament.id}/fixtures/generate"

    assert client.post(url, json={}, headers=admin_headers).status_code == 201
    second = client.post(url, json={}, headers=admin_headers)
    assert second.status_code == 409
    assert second.json() == {"success": False, "error": "Fixtures already generated for this tournament"}

    listed = client.get(f"/api/tournaments/{tournament.id}/fixtures").json()
    assert listed["total"] == 3


def test_generate_error_statuses(client: TestClient, session: Session, admin_headers, player_headers):
    tournament = create_tournament(session)
    add_participant(session, tournament, "only")
    url = f"/api/tournaments/{tournament.id}/fixtures/generate"

    forbidden = client.post(url, json={}, headers=player_headers)
    assert forbidden.status_code == 403

    too_few = client.post(url, json={}, headers=admin_headers)
    assert too_few.status_code == 400
    assert too_few.json()["success"] is False
    assert "At least 2" in too_few.json()["error"]

    missing = client.post("/api/tournaments/999/fixtures/generate", json={}, headers=admin_headers)
    assert missing.status_code == 404

    bad_method = client.post(url, json={"seedingMethod": "coin_flip"}, headers=admin_headers)
    assert bad_method.status_code == 422


def test_generate_rejects_unknown_skill_level(client: TestClient, session: Session, admin_headers):
    tournament = create_tournament(session)
    add_participant(session, tournament, "p1", skill_level="pro")
    add_participant(session, tournament, "p2", skill_level="advanced")

    response = client.post(
        f"/api/tournaments/{tournament.id}/fixtures/generate",
        json={"seedingMethod": "skill_based"},
        headers=admin_headers,
    )
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert "invalid skill level" in body["error"]
    assert client.get(f"/api/tournaments/{tournament.id}/fixtures").json()["total"] == 0


def test_generate_with_scheduling(client: TestClient, session: Session, admin_headers):
    tournament = create_tournament(session, format="round_robin")
    add_singles(session, tournament, 4)

    response = client.post(
        f"/api/tournaments/{tournament.id}/fixtures/generate",
        json={
            "scheduling": {
                "startAt": "2026-08-01T09:00:00",
                "matchDurationMinutes": 20,
                "courtNames": ["East", "West"],
            }
        },
        headers=admin_headers,
    )
    assert response.status_code == 201
    assert response.json()["matchesScheduled"] == 6

    matches = client.get(f"/api/tournaments/{tournament.id}/fixtures").json()["matches"]
    assert {m["court"] for m in matches} == {"East", "West"}
    assert sorted({m["scheduledAt"] for m in matches}) == [
        "2026-08-01T09:00:00",
        "2026-08-01T09:20:00",
        "2026-08-01T09:40:00",
    ]


def test_list_fixtures_sorted_and_filtered(client: TestClient, session: Session, admin_headers):
    tournament = create_tournament(session)
    add_singles(session, tournament, 4)
    add_doubles(session, tournament, 2)
    client.post(f"/api/tournaments/{tournament.id}/fixtures/generate", json={}, headers=admin_headers)

    data = client.get(f"/api/tournaments/{tournament.id}/fixtures").json()
    assert data["success"] is True
    assert data["total"] == 4
    keys = [(m["category"], m["roundNumber"], m["matchNumber"]) for m in data["matches"]]
    assert keys == sorted(keys)
    final = [m for m in data["matches"] if m["category"] == "singles" and m["roundName"] == "Final"][0]
    assert final["isReady"] is False
    assert final["player1Name"] == "TBD"

    doubles = client.get(f"/api/tournaments/{tournament.id}/fixtures", params={"category": "doubles"}).json()
    assert doubles["total"] == 1
    assert doubles["matches"][0]["roundName"] == "Final"
    assert doubles["matches"][0]["isReady"] is True

    assert client.get("/api/tournaments/999/fixtures").status_code == 404


def test_sync_endpoint(client: TestClient, session: Session, admin_headers, player_headers):
    tournament = create_tournament(session)
    add_singles(session, tournament, 4)
    client.post(f"/api/tournaments/{tournament.id}/fixtures/generate", json={}, headers=admin_headers)

    url = f"/api/tournaments/{tournament.id}/fixtures/sync"
    assert client.post(url, headers=player_headers).status_code == 403

    response = client.post(url, headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == {"success": True, "matchesProcessed": 0, "slotsAdvanced": 0, "errors": []}
