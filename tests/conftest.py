"""Shared fixtures: rosters, catalog and a state machine with an open room."""

import pytest

from draft_desk.models.team import ChampionPoolEntry, Player
from draft_desk.repositories.room_store import RoomStore
from draft_desk.services.champion_catalog import ChampionMetaCatalog
from draft_desk.services.draft_machine import DraftStateMachine


def make_roster(names: list[str], team: str, pools: dict | None = None) -> list[Player]:
    """Five players in roster order top, jungle, mid, bot, support."""
    pools = pools or {}
    roles = ["top", "jungle", "mid", "bot", "support"]
    return [
        Player(
            id=f"{team.lower()}-{role}",
            name=name,
            role=role,
            team=team,
            champion_pool=pools.get(name, []),
        )
        for name, role in zip(names, roles)
    ]


@pytest.fixture(scope="session")
def catalog():
    return ChampionMetaCatalog()


@pytest.fixture
def blue_players():
    return make_roster(
        ["Zeus", "Oner", "Faker", "Gumayusi", "Keria"],
        "T1",
        pools={
            "Oner": [
                ChampionPoolEntry("Lee Sin", games=10, win_rate=70.0, priority=8, wins=7),
                ChampionPoolEntry("Viego", games=6, win_rate=50.0, priority=5, wins=3),
            ],
            "Faker": [
                ChampionPoolEntry("Azir", games=12, win_rate=66.7, priority=9, wins=8),
                ChampionPoolEntry("Orianna", games=8, win_rate=62.5, priority=7, wins=5),
            ],
        },
    )


@pytest.fixture
def red_players():
    return make_roster(
        ["Kiin", "Canyon", "Chovy", "Peyz", "Lehends"],
        "Gen.G",
        pools={
            "Kiin": [
                ChampionPoolEntry("K'Sante", games=15, win_rate=60.0, priority=9, wins=9),
                ChampionPoolEntry("Rumble", games=7, win_rate=57.1, priority=6, wins=4),
            ],
            "Chovy": [
                ChampionPoolEntry("Syndra", games=11, win_rate=72.7, priority=8, wins=8),
            ],
        },
    )


@pytest.fixture
def machine(catalog):
    return DraftStateMachine(RoomStore(), catalog)


@pytest.fixture
def room_id(machine, blue_players, red_players):
    state = machine.create_room("T1", "Gen.G", blue_players, red_players)
    return state.room_id


def lock(machine: DraftStateMachine, room_id: str, champion: str):
    """Select and lock in one champion."""
    assert machine.select_champion(room_id, champion), champion
    return machine.lock_in(room_id)


# Twenty distinct champions, in sequence order
FULL_DRAFT = [
    "Azir", "Jinx", "K'Sante", "Rakan", "Viego", "Orianna",
    "Lee Sin", "Ahri", "Kai'Sa", "Thresh", "Aatrox", "Vi",
    "Syndra", "Zeri", "Lulu", "Renekton",
    "Xayah", "Sejuani", "Nautilus", "Gnar",
]


@pytest.fixture
def anyio_backend():
    return "asyncio"
