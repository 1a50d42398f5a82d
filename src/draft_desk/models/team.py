"""Team, player and champion pool models."""

from dataclasses import dataclass, field, replace
from typing import Optional

from draft_desk.errors import InvalidRosterError
from draft_desk.models.champion import Champion
from draft_desk.utils.champion_ids import normalize_champion_id
from draft_desk.utils.role_normalizer import CANONICAL_ROLES, normalize_role

TEAM_SIZE = 5
SLOT_COUNT = 5


@dataclass
class ChampionPoolEntry:
    """One champion in a player's pool."""

    champion_id: str
    games: int = 0
    win_rate: float = 0.0  # percent, 0-100
    priority: int = 5  # 1-10, how important this pick is for the player
    champion_name: str = ""
    wins: int = 0

    def __post_init__(self):
        if not 1 <= self.priority <= 10:
            raise ValueError(f"Pool priority must be 1-10, got {self.priority}")
        if self.games < 0:
            raise ValueError(f"Games played cannot be negative, got {self.games}")

    @property
    def normalized_id(self) -> str:
        return normalize_champion_id(self.champion_id)


@dataclass
class Player:
    """A rostered player."""

    id: str
    name: str
    role: str  # top, jungle, mid, bot, support
    team: str = ""
    champion_pool: list[ChampionPoolEntry] = field(default_factory=list)

    def pool_entry(self, champion_id: str) -> Optional[ChampionPoolEntry]:
        """First pool entry matching the champion, if any."""
        target = normalize_champion_id(champion_id)
        for entry in self.champion_pool:
            if entry.normalized_id == target:
                return entry
        return None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "role": self.role,
            "team": self.team,
            "champion_pool": [
                {
                    "champion_id": e.champion_id,
                    "champion_name": e.champion_name,
                    "games": e.games,
                    "wins": e.wins,
                    "win_rate": e.win_rate,
                    "priority": e.priority,
                }
                for e in self.champion_pool
            ],
        }


def _empty_slots() -> list[Optional[Champion]]:
    return [None] * SLOT_COUNT


@dataclass
class TeamDraft:
    """One side of a draft: roster plus ban and pick slots.

    Slots are always filled front to back, so the filled slots are a prefix
    of each list.
    """

    name: str
    side: str  # "blue" or "red"
    players: list[Player]
    bans: list[Optional[Champion]] = field(default_factory=_empty_slots)
    picks: list[Optional[Champion]] = field(default_factory=_empty_slots)

    @property
    def filled_bans(self) -> list[Champion]:
        return [c for c in self.bans if c is not None]

    @property
    def filled_picks(self) -> list[Champion]:
        return [c for c in self.picks if c is not None]

    @property
    def filled_roles(self) -> list[str]:
        """Roles that already have a pick, by roster position."""
        return [
            self.players[i].role
            for i, pick in enumerate(self.picks)
            if pick is not None and i < len(self.players)
        ]

    def next_pick_role(self) -> Optional[str]:
        """Role of the roster player at the next empty pick slot."""
        filled = len(self.filled_picks)
        if filled < len(self.players):
            return self.players[filled].role
        return None

    def player_for_role(self, role: Optional[str]) -> Optional[Player]:
        if role is None:
            return None
        return next((p for p in self.players if p.role == role), None)

    def clear_slots(self) -> None:
        self.bans = _empty_slots()
        self.picks = _empty_slots()

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "side": self.side,
            "players": [p.to_dict() for p in self.players],
            "bans": [c.to_dict() if c else None for c in self.bans],
            "picks": [c.to_dict() if c else None for c in self.picks],
        }


def validate_roster(players: list[Player], team_name: str = "") -> list[Player]:
    """Check a roster has exactly one player per role.

    Returns copies of the players with canonical roles, in the given order.

    Raises:
        InvalidRosterError: On wrong size, unknown roles or duplicate roles
    """
    label = team_name or "team"
    if len(players) != TEAM_SIZE:
        raise InvalidRosterError(
            f"{label} roster must have {TEAM_SIZE} players, got {len(players)}"
        )

    validated: list[Player] = []
    for player in players:
        role = normalize_role(player.role)
        if role is None:
            raise InvalidRosterError(f"{label}: unknown role {player.role!r} for {player.name}")
        validated.append(replace(player, role=role, champion_pool=list(player.champion_pool)))

    roles = {p.role for p in validated}
    if roles != CANONICAL_ROLES:
        missing = sorted(CANONICAL_ROLES - roles)
        raise InvalidRosterError(f"{label} roster needs one player per role, missing: {missing}")

    return validated
