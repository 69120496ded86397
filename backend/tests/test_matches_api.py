"""HTTP flow for match results: complete, declare winner, status, schedule."""
import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from tests.helpers import add_singles, create_tournament


@pytest.fixture
def bracket(client: TestClient, session: Session, admin_headers):
    """Generated 4-player knockout; returns (semis, final) as JSON dicts"""
    tournament = create_tournament(session)
    add_singles(session, tournament, 4)
    client.post(
        f"/api/tournaments/{tournament.id}/fixtures/generate",
        json={"randomSeed": 1},
        headers=admin_headers,
    )
    matches = client.get(f"/api/tournaments/{tournament.id}/fixtures").json()["matches"]
    semis = [m for m in matches if m["roundNumber"] == 1]
    final = [m for m in matches if m["roundNumber"] == 2][0]
    return semis, final


def test_complete_match_advances_winner(client: TestClient, admin_headers, bracket):
    semis, final = bracket
    semi = semis[0]

    response = client.post(
        f"/api/matches/{semi['id']}/complete",
        json={"winnerId": semi["player1Id"], "player1Score": [21, 21], "player2Score": [10, 12]},
        headers=admin_headers,
    )
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["advancedCount"] == 1
    assert data["alreadyCompleted"] is False
    assert data["message"] == "Match completed and winner advanced"
    assert data["match"]["status"] == "completed"
    assert data["match"]["winnerId"] == semi["player1Id"]

    updated_final = client.get(f"/api/matches/{final['id']}").json()["match"]
    assert updated_final["player1Id"] == semi["player1Id"]
    assert updated_final["player1Name"] == semi["player1Name"]

    repeat = client.post(
        f"/api/matches/{semi['id']}/complete",
        json={"winnerId": semi["player1Id"]},
        headers=admin_headers,
    )
    assert repeat.status_code == 200
    assert repeat.json()["alreadyCompleted"] is True
    assert repeat.json()["advancedCount"] == 0

    other = client.post(
        f"/api/matches/{semi['id']}/complete",
        json={"winnerId": semi["player2Id"]},
        headers=admin_headers,
    )
    assert other.status_code == 409
    assert other.json()["success"] is False


def test_complete_requires_admin_and_valid_winner(client: TestClient, admin_headers, player_headers, bracket):
    semis, final = bracket
    url = f"/api/matches/{semis[0]['id']}/complete"

    assert client.post(url, json={"winnerId": semis[0]["player1Id"]}, headers=player_headers).status_code == 403
    assert client.post(url, json={"winnerId": "stranger"}, headers=admin_headers).status_code == 400
    assert client.post(url, json={}, headers=admin_headers).status_code == 422

    tbd = client.post(f"/api/matches/{final['id']}/complete", json={"winnerId": "x"}, headers=admin_headers)
    assert tbd.status_code == 400

    assert client.post("/api/matches/9999/complete", json={"winnerId": "x"}, headers=admin_headers).status_code == 404


def test_declare_winner(client: TestClient, admin_headers, bracket):
    semis, _ = bracket
    semi = semis[1]
    response = client.post(
        f"/api/matches/{semi['id']}/declare-winner",
        json={"winnerId": semi["player1Id"], "reason": "disqualification"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    match = response.json()["match"]
    assert match["isWalkover"] is True
    assert match["walkoverReason"] == "disqualification"
    assert match["player1Score"] == [21, 0, 0]
    assert match["player2Score"] == [0, 0, 0]

    bad_reason = client.post(
        f"/api/matches/{semis[0]['id']}/declare-winner",
        json={"winnerId": semis[0]["player1Id"], "reason": "rain"},
        headers=admin_headers,
    )
    assert bad_reason.status_code == 422


def test_status_updates(client: TestClient, admin_headers, bracket):
    semis, _ = bracket
    url = f"/api/matches/{semis[0]['id']}/status"

    started = client.patch(url, json={"status": "in_progress"}, headers=admin_headers)
    assert started.status_code == 200
    assert started.json()["match"]["status"] == "in_progress"
    assert started.json()["match"]["startedAt"] is not None

    assert client.patch(url, json={"status": "scheduled"}, headers=admin_headers).status_code == 400

    cancelled = client.patch(url, json={"status": "cancelled"}, headers=admin_headers)
    assert cancelled.json()["match"]["status"] == "cancelled"

    terminal = client.patch(url, json={"status": "in_progress"}, headers=admin_headers)
    assert terminal.status_code == 409
    assert terminal.json()["error"] == "Match is cancelled; status cannot change"


def test_schedule_match(client: TestClient, admin_headers, bracket):
    semis, _ = bracket
    response = client.post(
        f"/api/matches/{semis[0]['id']}/schedule",
        json={"scheduledAt": "2026-09-12T18:00:00", "court": "Court 2"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    match = response.json()["match"]
    assert match["scheduledAt"] == "2026-09-12T18:00:00"
    assert match["court"] == "Court 2"


def test_get_missing_match(client: TestClient):
    response = client.get("/api/matches/12345")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Match 12345 not found"}
