import pytest

from tests.conftest import ORGANIZER_TOKEN, OTHER_ORGANIZER_TOKEN, PARTICIPANT_TOKEN, auth_header


def create_game(client, **overrides):
    payload = {"title": "  Friday Trivia ", "type": "trivia", **overrides}
    return client.post("/api/v1/games", json=payload, headers=auth_header(ORGANIZER_TOKEN))


def test_create_game_starts_as_draft(client, supabase):
    response = create_game(client, description="Bring a pen")
    assert response.status_code == 201
    body = response.json()
    assert body["title"] == "Friday Trivia"
    assert body["status"] == "draft"
    assert body["organizer_id"] == "organizer-1"
    assert body["join_code"] is None
    assert supabase.game(body["id"])["description"] == "Bring a pen"


@pytest.mark.parametrize("payload", [
    {"title": "", "type": "trivia"},
    {"title": "x" * 101, "type": "trivia"},
    {"title": "Quiz", "type": "chess"},
    {"title": "Quiz", "type": "trivia", "image": "ftp://example.com/a.png"},
])
def test_create_game_validation(client, payload):
    response = client.post("/api/v1/games", json=payload, headers=auth_header(ORGANIZER_TOKEN))
    assert response.status_code == 422


def test_create_game_accepts_data_url_image(client):
    response = create_game(client, image="data:image/png;base64,iVBORw0KGgo=")
    assert response.status_code == 201


def test_participants_cannot_create_games(client):
    response = client.post("/api/v1/games", json={"title": "Quiz", "type": "trivia"}, headers=auth_header(PARTICIPANT_TOKEN))
    assert response.status_code == 403


def test_list_only_own_games(client, supabase):
    supabase.add_game(organizer_id="organizer-1", title="Mine", type="hangman")
    supabase.add_game(organizer_id="organizer-1", title="Mine too", status="active")
    supabase.add_game(organizer_id="organizer-2", title="Theirs")

    response = client.get("/api/v1/games", headers=auth_header(ORGANIZER_TOKEN))
    assert response.status_code == 200
    assert {g["title"] for g in response.json()} == {"Mine", "Mine too"}

    response = client.get("/api/v1/games?status=active", headers=auth_header(ORGANIZER_TOKEN))
    assert [g["title"] for g in response.json()] == ["Mine too"]

    response = client.get("/api/v1/games?type=hangman", headers=auth_header(ORGANIZER_TOKEN))
    assert [g["title"] for g in response.json()] == ["Mine"]


def test_get_update_delete_owned_game(client, supabase):
    game = supabase.add_game(organizer_id="organizer-1")
    headers = auth_header(ORGANIZER_TOKEN)

    assert client.get(f"/api/v1/games/{game['id']}", headers=headers).json()["id"] == game["id"]

    response = client.put(f"/api/v1/games/{game['id']}", json={"title": "Renamed", "max_participants": 12}, headers=headers)
    assert response.status_code == 200
    assert response.json()["title"] == "Renamed"
    assert supabase.game(game["id"])["max_participants"] == 12

    assert client.delete(f"/api/v1/games/{game['id']}", headers=headers).status_code == 204
    assert client.get(f"/api/v1/games/{game['id']}", headers=headers).status_code == 404


def test_other_organizer_is_denied(client, supabase):
    game = supabase.add_game(organizer_id="organizer-1")
    headers = auth_header(OTHER_ORGANIZER_TOKEN)
    assert client.get(f"/api/v1/games/{game['id']}", headers=headers).status_code == 403
    assert client.delete(f"/api/v1/games/{game['id']}", headers=headers).status_code == 403
    assert supabase.game(game["id"])


class TestLifecycle:
    def post(self, client, game, action):
        return client.post(f"/api/v1/games/{game['id']}/{action}", headers=auth_header(ORGANIZER_TOKEN))

    def test_full_lifecycle_keeps_join_code(self, client, supabase):
        game = supabase.add_game(organizer_id="organizer-1", join_code="AB23CD")

        assert client.get("/api/v1/games/join/AB23CD").status_code == 404
        assert self.post(client, game, "start").json()["status"] == "active"
        assert client.get("/api/v1/games/join/AB23CD").status_code == 200
        assert self.post(client, game, "pause").json()["status"] == "paused"
        assert client.get("/api/v1/games/join/AB23CD").status_code == 404
        assert self.post(client, game, "resume").json()["status"] == "active"
        response = self.post(client, game, "complete")
        assert response.json()["status"] == "completed"
        assert response.json()["join_code"] == "AB23CD"
        assert client.get("/api/v1/games/join/AB23CD").status_code == 404

    @pytest.mark.parametrize("status,action", [
        ("active", "start"),
        ("draft", "pause"),
        ("active", "resume"),
        ("completed", "complete"),
        ("completed", "cancel"),
        ("cancelled", "cancel"),
    ])
    def test_invalid_transitions(self, client, supabase, status, action):
        game = supabase.add_game(organizer_id="organizer-1", status=status)
        response = self.post(client, game, action)
        assert response.status_code == 400
        assert status in response.json()["detail"]
        assert supabase.game(game["id"])["status"] == status

    def test_cancel_active_game(self, client, supabase):
        game = supabase.add_game(organizer_id="organizer-1", status="active", join_code="AB23CD")
        assert self.post(client, game, "cancel").json()["status"] == "cancelled"
        assert client.get("/api/v1/games/join/AB23CD").status_code == 404


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}
    assert client.get("/ready").json() == {"status": "ready"}


@pytest.mark.parametrize("query", ["limit=0", "limit=101", "offset=-1"])
def test_list_rejects_out_of_range_paging(client, supabase, query):
    response = client.get(f"/api/v1/games?{query}", headers=auth_header(ORGANIZER_TOKEN))
    assert response.status_code == 422
    assert supabase.queries("games") == []


def test_list_paging(client, supabase):
    for i in range(3):
        supabase.add_game(organizer_id="organizer-1", title=f"Game {i}", created_at=f"2026-01-0{i + 1}T00:00:00")
    response = client.get("/api/v1/games?limit=1&offset=1", headers=auth_header(ORGANIZER_TOKEN))
    assert [g["title"] for g in response.json()] == ["Game 1"]
