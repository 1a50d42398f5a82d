"""Champion identity and static meta records."""

from dataclasses import dataclass, field
from enum import Enum


class DamageType(str, Enum):
    """Primary damage type a champion deals."""

    AP = "ap"
    AD = "ad"
    TRUE = "true"
    MIXED = "mixed"


@dataclass(frozen=True)
class Champion:
    """A champion as it appears in a ban or pick slot."""

    id: str  # normalized, see utils.champion_ids
    name: str
    roles: tuple[str, ...] = ()  # canonical lowercase roles
    damage_type: DamageType = DamageType.MIXED
    tags: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "roles": list(self.roles),
            "damage_type": self.damage_type.value,
            "tags": list(self.tags),
        }


@dataclass(frozen=True)
class ChampionMeta:
    """Static attributes of a champion, constant for the process lifetime.

    Ratings are on a 1-10 scale. ``counters`` lists champions that are strong
    answers to this one; ``synergies`` lists strong partners. Both are ordered
    strongest first.
    """

    id: str
    name: str
    roles: tuple[str, ...]
    damage_type: DamageType
    tags: tuple[str, ...] = ()
    engage: int = 5
    peel: int = 5
    waveclear: int = 5
    early_game: int = 5
    mid_game: int = 5
    late_game: int = 5
    threat_level: int = 5
    counters: tuple[str, ...] = field(default=(), repr=False)
    synergies: tuple[str, ...] = field(default=(), repr=False)

    def to_champion(self) -> Champion:
        """Slot-level view of this record."""
        return Champion(
            id=self.id,
            name=self.name,
            roles=self.roles,
            damage_type=self.damage_type,
            tags=self.tags,
        )

    def plays(self, role: str) -> bool:
        return role in self.roles
