"""HTTP tests for the BitWord blueprints using the Flask test client."""
import pytest

from bitword.services import game_service as game_service_module


def _start(client, **body):
    body.setdefault("difficulty", "beginner")
    response = client.post("/api/session", json=body)
    assert response.status_code == 200
    return response.get_json()


def _guess(client, game_id, letter):
    return client.post(f"/api/session/{game_id}/guess", json={"letter": letter})


# -------------------------
# Words
# -------------------------

def test_todays_word(client):
    response = client.get("/api/bitword/beginner")
    assert response.status_code == 200
    data = response.get_json()
    assert data["success"] is True
    assert data["term"]["word"] == "HODL"
    assert data["difficulty_description"].startswith("Basic Bitcoin terms")


def test_todays_word_is_case_insensitive(client):
    assert client.get("/api/bitword/Beginner").status_code == 200


def test_todays_word_unknown_difficulty(client):
    response = client.get("/api/bitword/expert")
    assert response.status_code == 400
    assert response.get_json()["success"] is False


def test_todays_word_empty_catalog(client):
    response = client.get("/api/bitword/advanced")
    assert response.status_code == 404
    assert "No word available" in response.get_json()["error"]


def test_list_words_includes_inactive(client):
    data = client.get("/api/bitwords/beginner").get_json()
    assert [term["word"] for term in data["terms"]] == ["HODL", "FIAT"]


# -------------------------
# Sessions
# -------------------------

def test_start_session_hides_word(client):
    data = _start(client)
    state = data["state"]
    assert data["started"] == "new"
    assert state["status"] == "playing"
    assert "word" not in state["term"]
    assert state["term"]["length"] == 4
    assert state["masked_word"] == [None, None, None, None]
    assert state["score"] is None


def test_start_session_bad_difficulty(client):
    response = client.post("/api/session", json={"difficulty": "hard"})
    assert response.status_code == 400


def test_start_session_bad_user_id(client):
    response = client.post("/api/session", json={"difficulty": "beginner", "user_id": "abc"})
    assert response.status_code == 400


def test_full_game_through_api(client):
    game_id = _start(client)["game_id"]

    response = _guess(client, game_id, "x")
    data = response.get_json()
    assert response.status_code == 200
    assert data["correct"] is False
    assert data["state"]["remaining_attempts"] == 2

    for letter in "HOD":
        data = _guess(client, game_id, letter).get_json()
        assert data["complete"] is False

    data = _guess(client, game_id, "L").get_json()
    assert data["complete"] is True
    assert data["won"] is True
    assert data["state"]["term"]["word"] == "HODL"
    assert data["state"]["score"] is not None
    assert data["completion"]["game"]["completed"] is True
    assert data["completion"]["stats"]["total_games"] == 1

    replay = _start(client)
    assert replay["game_id"] == game_id
    assert replay["started"] == "replayed"


def test_guess_validation(client):
    game_id = _start(client)["game_id"]
    assert _guess(client, game_id, "12").status_code == 400
    assert client.post(f"/api/session/{game_id}/guess", json={}).status_code == 400


def test_guess_unknown_session(client):
    assert _guess(client, "404", "A").status_code == 404
    assert client.get("/api/session/404").status_code == 404


def test_get_session(client):
    game_id = _start(client)["game_id"]
    _guess(client, game_id, "H")
    data = client.get(f"/api/session/{game_id}").get_json()
    assert data["state"]["masked_word"] == ["H", None, None, None]


def test_hint_then_rejection(client):
    game_id = _start(client)["game_id"]
    first = client.post(f"/api/session/{game_id}/hint").get_json()
    assert first["rejected"] is False
    assert first["hint"] == "Hold on for dear life"

    second = client.post(f"/api/session/{game_id}/hint")
    assert second.status_code == 200
    assert second.get_json()["rejected"] is True


def test_complete_session_while_playing(client):
    game_id = _start(client)["game_id"]
    response = client.post(f"/api/session/{game_id}/complete")
    assert response.status_code == 400


def test_complete_session_twice(client):
    game_id = _start(client)["game_id"]
    for letter in "XYZ":
        _guess(client, game_id, letter)
    response = client.post(f"/api/session/{game_id}/complete")
    assert response.status_code == 409


def test_reset_session(client):
    game_id = _start(client)["game_id"]
    assert client.delete(f"/api/session/{game_id}").status_code == 200
    assert client.delete(f"/api/session/{game_id}").status_code == 404


# -------------------------
# Game records
# -------------------------

def test_create_game_is_find_or_create(client):
    body = {"difficulty": "beginner", "word": "HODL", "user_id": 7}
    first = client.post("/api/games", json=body).get_json()["game"]
    second = client.post("/api/games", json=body).get_json()["game"]
    assert first["id"] == second["id"]
    assert first["user_id"] == 7

    today = client.get("/api/games/today/beginner?user_id=7").get_json()
    assert today["game"]["id"] == first["id"]
    assert client.get("/api/games/today/beginner").get_json()["game"] is None


def test_create_game_requires_word(client):
    response = client.post("/api/games", json={"difficulty": "beginner"})
    assert response.status_code == 400


def test_patch_progress(client):
    game = client.post("/api/games", json={"difficulty": "beginner", "word": "HODL"}).get_json()["game"]

    response = client.patch(f"/api/games/{game['id']}", json={"guessed_letters": ["h"], "attempts": 0})
    assert response.status_code == 200
    assert response.get_json()["game"]["guessed_letters"] == ["H"]

    assert client.patch(f"/api/games/{game['id']}", json={"completed": True}).status_code == 400
    assert client.patch(f"/api/games/{game['id']}", json={"attempts": -1}).status_code == 400
    assert client.patch("/api/games/999", json={"attempts": 1}).status_code == 404


def test_patch_rejects_inconsistent_progress(client):
    game = client.post("/api/games", json={"difficulty": "beginner", "word": "HODL"}).get_json()["game"]

    response = client.patch(f"/api/games/{game['id']}", json={"wrong_letters": ["X", "Y"], "attempts": 0})
    assert response.status_code == 400
    assert response.get_json()["success"] is False

    response = client.patch(f"/api/games/{game['id']}",
                            json={"guessed_letters": ["x"], "wrong_letters": ["x"], "attempts": 1})
    assert response.status_code == 200
    assert response.get_json()["game"]["wrong_letters"] == ["X"]


def test_complete_game_and_stats(client):
    game = client.post("/api/games", json={"difficulty": "beginner", "word": "HODL", "user_id": 7}).get_json()["game"]
    result = {"won": True, "time_seconds": 95, "attempts": 1, "hints_used": 0}

    response = client.post(f"/api/games/{game['id']}/complete", json=result)
    assert response.status_code == 200
    data = response.get_json()
    assert data["game"]["completed"] is True
    assert data["stats"]["user_id"] == 7
    assert data["stats"]["total_games"] == 1

    assert client.post(f"/api/games/{game['id']}/complete", json=result).status_code == 409
    assert client.patch(f"/api/games/{game['id']}", json={"attempts": 2}).status_code == 409

    stats = client.get("/api/stats?difficulty=beginner&user_id=7").get_json()["stats"]
    assert stats["total_wins"] == 1
    assert stats["average_time"] == 95
    assert stats["win_rate"] == 100
    assert len(client.get("/api/stats?user_id=7").get_json()["stats"]) == 1
    assert client.get("/api/stats?difficulty=beginner").get_json()["stats"] is None


def test_complete_game_validation(client):
    game = client.post("/api/games", json={"difficulty": "beginner", "word": "HODL"}).get_json()["game"]
    response = client.post(f"/api/games/{game['id']}/complete", json={"won": "yes", "time_seconds": 10})
    assert response.status_code == 400
    response = client.post("/api/games/999/complete", json={"won": True, "time_seconds": 10})
    assert response.status_code == 404


def test_stats_validation(client):
    assert client.get("/api/stats?user_id=abc").status_code == 400
    assert client.get("/api/stats?difficulty=legendary").status_code == 400


# -------------------------
# Health and wiring
# -------------------------

def test_health(client):
    _start(client)
    data = client.get("/api/health").get_json()
    assert data["status"] == "healthy"
    assert data["live_sessions"] == 1
    assert data["catalog"] == {"beginner": 2, "intermediate": 1, "advanced": 1}
    assert data["next_word_in"].endswith("m")


@pytest.mark.parametrize("path", ["/api/bitword/beginner", "/api/stats", "/api/health"])
def test_service_unavailable(client, monkeypatch, path):
    monkeypatch.setattr(game_service_module, "_game_service", None)
    response = client.get(path)
    assert response.status_code == 500
    assert response.get_json()["error"] == "Game service unavailable"
