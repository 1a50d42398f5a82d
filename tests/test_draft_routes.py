"""Tests for draft room API routes."""

from unittest.mock import AsyncMock

import httpx
import pytest

from conftest import FULL_DRAFT
from draft_desk.api.routes.draft import _room_locks, _room_locks_lock
from draft_desk.main import app
from draft_desk.repositories.room_store import RoomStore
from draft_desk.services.draft_machine import DraftStateMachine

pytestmark = pytest.mark.anyio

ROLES = ["top", "jungle", "mid", "bot", "support"]


def roster_body(names: list[str], pools: dict | None = None) -> list[dict]:
    pools = pools or {}
    return [
        {"id": name.lower(), "name": name, "role": role, "champion_pool": pools.get(name, [])}
        for name, role in zip(names, ROLES)
    ]


CREATE_BODY = {
    "blue_team_name": "T1",
    "red_team_name": "Gen.G",
    "blue_players": roster_body(
        ["Zeus", "Oner", "Faker", "Gumayusi", "Keria"],
        {"Faker": [{"champion_id": "Azir", "games": 12, "win_rate": 66.7, "priority": 9}]},
    ),
    "red_players": roster_body(
        ["Kiin", "Canyon", "Chovy", "Peyz", "Lehends"],
        {"Kiin": [{"champion_id": "K'Sante", "games": 15, "win_rate": 60.0, "priority": 9}]},
    ),
}


@pytest.fixture
def machine(catalog):
    return DraftStateMachine(RoomStore(), catalog)


@pytest.fixture
async def client(machine):
    """Async test client with a fresh state machine on app.state."""
    with _room_locks_lock:
        _room_locks.clear()

    # Mimics lifespan startup
    app.state.machine = machine
    app.state.enricher = None

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
async def room_id(client):
    response = await client.post("/api/draft/rooms", json=CREATE_BODY)
    assert response.status_code == 201
    return response.json()["room_id"]


async def select_and_lock(client, room_id, champion, **params):
    response = await client.post(f"/api/draft/rooms/{room_id}/select", json={"champion": champion})
    assert response.status_code == 200, response.text
    return await client.post(f"/api/draft/rooms/{room_id}/lock-in", params=params)


class TestRooms:
    async def test_health(self, client):
        response = await client.get("/health")
        assert response.json() == {"status": "healthy", "service": "draft-desk"}

    async def test_create_room(self, client):
        response = await client.post("/api/draft/rooms", json=CREATE_BODY)
        assert response.status_code == 201
        data = response.json()
        assert data["current_action"] == {"team": "blue", "type": "ban"}
        assert data["selected_champion"] is None
        state = data["draft_state"]
        assert state["phase"] == "ban1"
        assert state["current_step"] == 0
        assert [p["role"] for p in state["blue_team"]["players"]] == ROLES

    async def test_create_room_rejects_duplicate_roles(self, client):
        body = {**CREATE_BODY, "red_players": roster_body(["A", "B", "C", "D", "E"])}
        body["red_players"][4]["role"] = "mid"
        response = await client.post("/api/draft/rooms", json=body)
        assert response.status_code == 400

    async def test_create_room_validates_body(self, client):
        response = await client.post("/api/draft/rooms", json={"blue_team_name": "T1"})
        assert response.status_code == 422

    async def test_get_and_list(self, client, room_id):
        response = await client.get(f"/api/draft/rooms/{room_id}")
        assert response.status_code == 200
        assert response.json()["room_id"] == room_id

        rooms = (await client.get("/api/draft/rooms")).json()["rooms"]
        assert [r["id"] for r in rooms] == [room_id]

    async def test_unknown_room(self, client):
        assert (await client.get("/api/draft/rooms/missing")).status_code == 404
        assert (await client.post("/api/draft/rooms/missing/undo")).status_code == 404
        response = await client.post("/api/draft/rooms/missing/select", json={"champion": "Azir"})
        assert response.status_code == 404

    async def test_unknown_rooms_do_not_register_locks(self, client, room_id):
        with _room_locks_lock:
            before = dict(_room_locks)

        for i in range(20):
            assert (await client.get(f"/api/draft/rooms/nope{i}")).status_code == 404
            assert (await client.post(f"/api/draft/rooms/nope{i}/undo")).status_code == 404
            assert (await client.delete(f"/api/draft/rooms/nope{i}")).status_code == 404

        with _room_locks_lock:
            assert _room_locks == before
        assert room_id in _room_locks

    async def test_delete(self, client, room_id):
        response = await client.delete(f"/api/draft/rooms/{room_id}")
        assert response.json() == {"status": "deleted"}
        assert (await client.delete(f"/api/draft/rooms/{room_id}")).status_code == 404


class TestDraftFlow:
    async def test_select_and_lock_in(self, client, room_id):
        response = await select_and_lock(client, room_id, "azir")
        assert response.status_code == 200
        data = response.json()
        assert data["locked"]["champion"]["name"] == "Azir"
        assert data["locked"]["action"] == {"team": "blue", "type": "ban"}
        assert data["draft_state"]["blue_team"]["bans"][0]["name"] == "Azir"
        assert data["current_action"] == {"team": "red", "type": "ban"}
        assert "recommendations" not in data

    async def test_lock_in_with_recommendations(self, client, room_id):
        response = await select_and_lock(client, room_id, "Azir", include_recommendations=True)
        recs = response.json()["recommendations"]
        assert recs["for_team"] == "red"
        assert "azir" not in [r["champion"]["id"] for r in recs["recommendations"]]

    async def test_select_unknown_champion(self, client, room_id):
        response = await client.post(
            f"/api/draft/rooms/{room_id}/select", json={"champion": "Nobody"}
        )
        assert response.status_code == 400

    async def test_select_taken_champion(self, client, room_id):
        await select_and_lock(client, room_id, "Azir")
        response = await client.post(
            f"/api/draft/rooms/{room_id}/select", json={"champion": "Azir"}
        )
        assert response.status_code == 409

    async def test_lock_in_without_selection(self, client, room_id):
        response = await client.post(f"/api/draft/rooms/{room_id}/lock-in")
        assert response.status_code == 400

    async def test_full_draft_then_locked(self, client, room_id):
        for champion in FULL_DRAFT:
            assert (await select_and_lock(client, room_id, champion)).status_code == 200

        data = (await client.get(f"/api/draft/rooms/{room_id}")).json()
        assert data["draft_state"]["is_complete"] is True
        assert data["draft_state"]["phase"] == "complete"
        assert data["current_action"] is None

        response = await client.post(f"/api/draft/rooms/{room_id}/lock-in")
        assert response.status_code == 409
        response = await client.post(
            f"/api/draft/rooms/{room_id}/select", json={"champion": "Ornn"}
        )
        assert response.status_code == 409

    async def test_undo_and_reset(self, client, room_id):
        response = await client.post(f"/api/draft/rooms/{room_id}/undo")
        assert response.json()["status"] == "noop"

        await select_and_lock(client, room_id, "Azir")
        await select_and_lock(client, room_id, "Jinx")
        response = await client.post(f"/api/draft/rooms/{room_id}/undo")
        data = response.json()
        assert data["status"] == "undone"
        assert data["draft_state"]["current_step"] == 1
        assert data["draft_state"]["red_team"]["bans"][0] is None

        response = await client.post(f"/api/draft/rooms/{room_id}/reset")
        state = response.json()["draft_state"]
        assert state["current_step"] == 0
        assert state["blue_team"]["bans"] == [None] * 5


class TestAnalytics:
    async def test_recommendations_default_to_acting_team(self, client, room_id):
        response = await client.get(f"/api/draft/rooms/{room_id}/recommendations")
        data = response.json()
        assert data["for_team"] == "blue"
        assert data["recommendations"][0]["champion"]["id"] == "ksante"
        assert data["recommendations"][0]["type"] == "deny"
        assert data["analysis"] == ""

    async def test_recommendations_for_other_team(self, client, room_id):
        response = await client.get(
            f"/api/draft/rooms/{room_id}/recommendations", params={"team": "red"}
        )
        data = response.json()
        assert data["for_team"] == "red"
        assert data["recommendations"][0]["champion"]["id"] == "azir"

    async def test_recommendations_reject_bad_team(self, client, room_id):
        response = await client.get(
            f"/api/draft/rooms/{room_id}/recommendations", params={"team": "green"}
        )
        assert response.status_code == 422

    async def test_enriched_recommendations(self, client, room_id):
        enricher = AsyncMock()
        enricher.enrich.side_effect = lambda state, team, result: result
        app.state.enricher = enricher

        response = await client.get(
            f"/api/draft/rooms/{room_id}/recommendations", params={"enrich": True}
        )

        assert response.status_code == 200
        enricher.enrich.assert_awaited_once()
        snapshot, team, _ = enricher.enrich.await_args.args
        assert team == "blue"
        assert snapshot is not app.state.machine.get_room(room_id)

    async def test_analysis(self, client, room_id):
        for champion in FULL_DRAFT[:8]:
            await select_and_lock(client, room_id, champion)

        data = (await client.get(f"/api/draft/rooms/{room_id}/analysis")).json()
        assert data["team"] == "blue"
        assert "engage_delta" in data
        assert data["our_analysis"]["damage_profile"]
        assert isinstance(data["team_needs"], list)

    async def test_champions(self, client):
        data = (await client.get("/api/draft/champions")).json()
        assert len(data["champions"]) > 50

        mids = (await client.get("/api/draft/champions", params={"role": "MID"})).json()
        threats = [c["threat_level"] for c in mids["champions"]]
        assert threats == sorted(threats, reverse=True)
