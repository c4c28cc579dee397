from __future__ import annotations

from uuid import uuid4

import fakeredis
import pytest
from fastapi.testclient import TestClient

from wordle.words import WORDS_SET_KEY

ALICE = {"X-Username": "alice"}
BOB = {"X-Username": "bob"}
ADMIN = {"X-Username": "admin"}


@pytest.fixture()
def client(client_and_redis: tuple[TestClient, fakeredis.FakeRedis]) -> TestClient:
    c, r = client_and_redis
    # A single-word pool makes every target CRANE.
    r.delete(WORDS_SET_KEY)
    r.sadd(WORDS_SET_KEY, "CRANE")
    for name in ("alice", "bob"):
        assert c.post("/users", json={"username": name}).status_code == 201
    return c


def _start(client: TestClient, headers: dict[str, str] = ALICE) -> str:
    resp = client.post("/game/start", headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["session_id"]


def _guess(client: TestClient, session_id: str, word: str, headers: dict[str, str] = ALICE):
    return client.post("/game/guess", json={"session_id": session_id, "word": word}, headers=headers)


def test_startup_seeds_words_and_admin(client_and_redis: tuple[TestClient, fakeredis.FakeRedis]) -> None:
    c, r = client_and_redis
    assert r.scard(WORDS_SET_KEY) > 100
    assert c.get("/admin/system-stats", headers=ADMIN).status_code == 200
    assert c.get("/healthcheck").json() == {"status": "ok"}


def test_registration_errors(client: TestClient) -> None:
    assert client.post("/users", json={"username": "alice"}).status_code == 409
    assert client.post("/users", json={"username": "a!"}).status_code == 422


def test_identity_is_required(client: TestClient) -> None:
    assert client.post("/game/start").status_code == 401
    assert client.post("/game/start", headers={"X-Username": "stranger"}).status_code == 404


def test_play_a_game_to_a_win(client: TestClient) -> None:
    sid = _start(client)

    status = client.get(f"/game/{sid}/status", headers=ALICE).json()
    assert status["target_word"] == "[Hidden until first guess]"

    miss = _guess(client, sid, "earth")
    assert miss.status_code == 200
    body = miss.json()
    assert body["feedback"] == "OOORR"
    assert body["completed"] is False
    assert body["target_word"] is None
    assert body["message"] == "Try again! 4 guesses remaining."

    hit = _guess(client, sid, "crane").json()
    assert hit["correct"] is True
    assert hit["outcome"] == "won"
    assert hit["target_word"] == "CRANE"
    assert [g["sequence_number"] for g in hit["guesses"]] == [1, 2]

    status = client.get(f"/game/{sid}/status", headers=ALICE).json()
    assert status["target_word"] == "CRANE"
    assert status["completed"] is True

    stats = client.get("/player/stats", headers=ALICE).json()
    assert stats["total_games"] == 1
    assert stats["games_won"] == 1
    assert stats["win_rate"] == 100.0
    assert stats["average_guesses"] == 2.0

    history = client.get("/player/history", headers=ALICE).json()
    assert history["total_games"] == 1
    assert history["games"][0]["guesses"][0]["display_feedback"] == "YYYRR"


def test_guess_error_codes(client: TestClient) -> None:
    sid = _start(client)

    assert _guess(client, sid, "CRANE", headers=BOB).status_code == 403
    assert _guess(client, str(uuid4()), "CRANE").status_code == 404
    assert _guess(client, sid, "CRANES").status_code == 422
    assert client.get(f"/game/{sid}/status", headers=BOB).status_code == 403

    assert _guess(client, sid, "CRANE").status_code == 200
    again = _guess(client, sid, "CRANE")
    assert again.status_code == 409
    assert again.json()["detail"] == "This game is already completed"


def test_daily_limit_over_http(client: TestClient) -> None:
    for _ in range(3):
        _start(client)

    refused = client.post("/game/start", headers=ALICE)
    assert refused.status_code == 409

    status = client.get("/game/daily-status", headers=ALICE).json()
    assert status["games_played"] == 3
    assert status["can_start"] is False
    assert status["message"] == "Daily limit reached. Try again tomorrow!"


def test_empty_pool_is_service_unavailable(client_and_redis: tuple[TestClient, fakeredis.FakeRedis]) -> None:
    c, r = client_and_redis
    c.post("/users", json={"username": "alice"})
    r.delete(WORDS_SET_KEY)

    resp = c.post("/game/start", headers=ALICE)
    assert resp.status_code == 503


def test_admin_routes_require_admin(client: TestClient) -> None:
    for path in ("/admin/system-stats", "/admin/win-reports", "/admin/player-activities"):
        assert client.get(path, headers=ALICE).status_code == 403
    assert client.post("/admin/words", json={"word": "EARTH"}, headers=ALICE).status_code == 403


def test_admin_add_word(client: TestClient) -> None:
    resp = client.post("/admin/words", json={"word": "earth"}, headers=ADMIN)
    assert resp.status_code == 201
    assert resp.json()["word"] == "EARTH"

    assert client.post("/admin/words", json={"word": "EARTH"}, headers=ADMIN).status_code == 409
    assert client.post("/admin/words", json={"word": "toolong"}, headers=ADMIN).status_code == 422


def test_admin_reports(client: TestClient) -> None:
    won = _start(client)
    _guess(client, won, "EARTH")
    _guess(client, won, "CRANE")
    _start(client)  # never played
    lost = _start(client, headers=BOB)
    for w in ("EARTH", "PLANT", "GHOST", "HOUSE", "LEMON"):
        _guess(client, lost, w, headers=BOB)

    sys_stats = client.get("/admin/system-stats", headers=ADMIN).json()
    assert sys_stats["total_users"] == 3
    assert sys_stats["total_admins"] == 1
    assert sys_stats["total_games"] == 2
    assert sys_stats["won_games"] == 1
    assert sys_stats["overall_win_rate"] == 50.0
    assert sys_stats["games_today"] == 2

    daily = client.get("/admin/reports/daily", params={"date": "2024-03-01"}, headers=ADMIN).json()
    assert daily["total_games"] == 2
    assert daily["total_guesses"] == 7
    assert daily["average_guesses_per_completed_game"] == 3.5
    empty_day = client.get("/admin/reports/daily", params={"date": "2024-01-01"}, headers=ADMIN).json()
    assert empty_day["total_games"] == 0

    report = client.get("/admin/reports/user/alice", headers=ADMIN).json()
    assert report["days"][0]["words_attempted"] == 1
    assert report["days"][0]["games"][0]["target_word"] == "CRANE"
    assert client.get("/admin/reports/user/nobody", headers=ADMIN).status_code == 404

    bob_history = client.get("/admin/player-history/bob", headers=ADMIN).json()
    assert bob_history["lost_games"] == 1

    activities = client.get("/admin/player-activities", headers=ADMIN).json()
    assert {p["username"] for p in activities["players"]} == {"alice", "bob"}

    by_count = client.get("/admin/players-by-daily-count/1", headers=ADMIN).json()
    assert by_count["total"] == 2
    assert client.get("/admin/players-by-daily-count/4", headers=ADMIN).status_code == 422

    winners = client.get("/admin/winners-by-guess-count/2", headers=ADMIN).json()
    assert [w["username"] for w in winners["winners"]] == ["alice"]
    assert winners["winners"][0]["win_rate"] == 100.0
    assert client.get("/admin/winners-by-guess-count/6", headers=ADMIN).status_code == 422

    wins = client.get("/admin/win-reports", headers=ADMIN).json()
    assert wins["total_winners"] == 1
    assert wins["winners_by_guess_count"]["2"][0]["username"] == "alice"
    assert wins["winners_by_guess_count"]["1"] == []


def test_admin_comprehensive_reports(client: TestClient) -> None:
    played = _start(client)
    _guess(client, played, "CRANE")
    _start(client)  # never played

    assert client.get("/admin/comprehensive-reports", headers=ALICE).status_code == 403

    body = client.get("/admin/comprehensive-reports", headers=ADMIN).json()
    assert [g["session_id"] for g in body["game_reports"]] == [played]
    assert body["game_reports"][0]["won"] is True
    assert [p["username"] for p in body["player_reports"]] == ["alice"]
    assert body["system_statistics"]["total_games"] == 1
    assert set(body) == {"player_reports", "game_reports", "recent_registrations", "system_statistics"}
