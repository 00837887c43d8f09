"""
Testing API via TestClient
- Trick: temporarily replace main.fetch_code so the secret is predictable,
  and main.utcnow so timed games can be fast-forwarded.
- Tool: pytest's "monkeypatch" fixture does that for just one test at a time.
"""

import mastermind.main as app_main
from mastermind.errors import SecretUnavailable


def use_secret(monkeypatch, secret):
    def fake_fetch_code(length: int = 4):
        return list(secret)
    # Patch the bound symbol that main.py actually uses
    monkeypatch.setattr(app_main, "fetch_code", fake_fetch_code)


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_start_classic_and_win(client, monkeypatch):
    """
    Flow:
    1) Start a classic game (no body -> classic); secret is [1,2,3,4] due to patch.
    2) Wrong-length guess -> 400.
    3) Valid wrong guess -> 200 + feedback, secret still hidden.
    4) Winning guess -> 'won' and secret revealed.
    """
    use_secret(monkeypatch, [1, 2, 3, 4])

    response = client.post("/games")
    assert response.status_code == 201
    new_game = response.json()
    game_id = new_game["game_id"]
    assert new_game["mode"] == "classic"
    assert new_game["attempts_left"] == 10
    assert new_game["secret"] is None

    response = client.post(f"/games/{game_id}/guess", json={"guess": [0, 1, 2]})
    assert response.status_code == 400
    assert response.json()["error"] == "invalid_guess"

    response = client.post(f"/games/{game_id}/guess", json={"guess": [4, 3, 0, 0]})
    assert response.status_code == 200
    body = response.json()
    assert body["feedback"]["correct_numbers"] == 2
    assert body["feedback"]["correct_positions"] == 0
    assert body["game"]["attempts_left"] == 9
    assert body["game"]["secret"] is None
    assert body["note"] is None

    state = client.get(f"/games/{game_id}").json()
    assert state["secret"] is None
    assert len(state["history"]) == 1

    response = client.post(f"/games/{game_id}/guess", json={"guess": [1, 2, 3, 4]})
    assert response.status_code == 200
    final = response.json()
    assert final["game"]["status"] == "won"
    assert final["game"]["is_win"] is True
    assert final["game"]["secret"] == [1, 2, 3, 4]
    assert "No more guesses" in final["note"]


def test_out_of_range_digit_is_422(client, monkeypatch):
    use_secret(monkeypatch, [1, 2, 3, 4])
    game_id = client.post("/games").json()["game_id"]

    response = client.post(f"/games/{game_id}/guess", json={"guess": [0, 1, 2, 8]})
    assert response.status_code == 422


def test_coercible_non_integers_are_rejected(client, monkeypatch):
    # true, "0" and 0.0 would all pass as ints in lax mode and win this game
    use_secret(monkeypatch, [1, 0, 0, 0])
    game_id = client.post("/games").json()["game_id"]

    response = client.post(f"/games/{game_id}/guess", json={"guess": [True, "0", 0.0, 0]})
    assert response.status_code == 422

    state = client.get(f"/games/{game_id}").json()
    assert state["is_over"] is False
    assert state["history"] == []


def test_cannot_guess_after_game_finished(client, monkeypatch):
    use_secret(monkeypatch, [0, 1, 2, 3])
    game_id = client.post("/games", json={"mode": "classic"}).json()["game_id"]

    first = client.post(f"/games/{game_id}/guess", json={"guess": [0, 1, 2, 3]})
    assert first.json()["game"]["status"] == "won"

    second = client.post(f"/games/{game_id}/guess", json={"guess": [0, 1, 2, 3]})
    assert second.status_code == 409
    assert second.json()["error"] == "game_over"

    state = client.get(f"/games/{game_id}").json()
    assert len(state["history"]) == 1
    assert state["attempts_left"] == 9


def test_classic_loss_after_ten_misses(client, monkeypatch):
    use_secret(monkeypatch, [0, 1, 2, 3])
    game_id = client.post("/games").json()["game_id"]

    for _ in range(10):
        r = client.post(f"/games/{game_id}/guess", json={"guess": [4, 4, 4, 4]})
        assert r.status_code == 200

    assert r.json()["game"]["status"] == "lost"
    assert r.json()["game"]["secret"] == [0, 1, 2, 3]

    r = client.post(f"/games/{game_id}/guess", json={"guess": [0, 1, 2, 3]})
    assert r.status_code == 409
    assert r.json()["error"] == "no_attempts"
    assert len(client.get(f"/games/{game_id}").json()["history"]) == 10


def test_timed_game_expires_on_next_guess(client, monkeypatch, clock):
    use_secret(monkeypatch, [5, 6, 7, 0])
    monkeypatch.setattr(app_main, "utcnow", clock)

    response = client.post("/games", json={"mode": "timed", "time_limit": 60})
    assert response.status_code == 201
    game = response.json()
    assert game["mode"] == "timed"
    assert game["attempts_left"] is None
    assert game["time_limit"] == 60
    assert game["seconds_left"] == 60

    clock.advance(20)
    state = client.get(f"/games/{game['game_id']}").json()
    assert state["seconds_left"] == 40

    clock.advance(41)
    # Lazy: reading does not end the game
    assert client.get(f"/games/{game['game_id']}").json()["is_over"] is False

    response = client.post(f"/games/{game['game_id']}/guess", json={"guess": [5, 6, 7, 0]})
    assert response.status_code == 409
    body = response.json()
    assert body["error"] == "time_expired"
    assert body["game"]["is_over"] is True
    assert body["game"]["is_win"] is False
    assert body["game"]["secret"] == [5, 6, 7, 0]

    state = client.get(f"/games/{game['game_id']}").json()
    assert state["status"] == "lost"
    assert state["history"] == []


def test_expire_endpoint_is_idempotent(client, monkeypatch, clock):
    use_secret(monkeypatch, [2, 2, 2, 2])
    monkeypatch.setattr(app_main, "utcnow", clock)
    game_id = client.post("/games", json={"mode": "timed"}).json()["game_id"]

    clock.advance(120)
    first = client.post(f"/games/{game_id}/expire")
    second = client.post(f"/games/{game_id}/expire")
    assert first.status_code == 200
    assert first.json() == second.json()
    assert first.json()["status"] == "lost"
    assert first.json()["secret"] == [2, 2, 2, 2]


def test_list_games_hides_running_secrets(client, monkeypatch):
    use_secret(monkeypatch, [3, 1, 4, 1])
    client.post("/games")
    client.post("/games", json={"mode": "timed"})

    games = client.get("/games").json()
    assert len(games) == 2
    assert all(g["secret"] is None for g in games)


def test_secret_unavailable_is_503(client, monkeypatch):
    def broken(length: int = 4):
        raise SecretUnavailable("Random number service is unavailable.")
    monkeypatch.setattr(app_main, "fetch_code", broken)

    response = client.post("/games")
    assert response.status_code == 503
    assert response.json()["error"] == "secret_unavailable"
    assert client.get("/games").json() == []


def test_unknown_game_is_404(client):
    assert client.get("/games/nope").status_code == 404
    assert client.post("/games/nope/guess", json={"guess": [0, 0, 0, 0]}).status_code == 404
    assert client.post("/games/nope/expire").status_code == 404
