"""Static champion meta catalog backed by knowledge/champion_meta.json."""

import json
import logging
from pathlib import Path
from typing import Iterator, Optional, Union

from draft_desk.models.champion import Champion, ChampionMeta, DamageType
from draft_desk.utils.champion_ids import normalize_champion_id
from draft_desk.utils.role_normalizer import normalize_role

logger = logging.getLogger(__name__)

DEFAULT_KNOWLEDGE_DIR = Path(__file__).parents[3] / "knowledge"
META_FILE = "champion_meta.json"


class ChampionMetaCatalog:
    """Read-only lookup of champion attributes, counters and synergies.

    Loaded once; every accessor is a pure read, so a single instance can be
    shared by all rooms without synchronization.
    """

    def __init__(self, knowledge_dir: Optional[Path] = None):
        if knowledge_dir is None:
            knowledge_dir = DEFAULT_KNOWLEDGE_DIR
        self.knowledge_dir = Path(knowledge_dir)
        self._champions: dict[str, ChampionMeta] = {}
        self._by_role: dict[str, tuple[ChampionMeta, ...]] = {}
        self._load_data()

    @classmethod
    def from_records(cls, records: dict[str, dict]) -> "ChampionMetaCatalog":
        """Build a catalog from in-memory records shaped like the JSON file."""
        catalog = cls.__new__(cls)
        catalog.knowledge_dir = None
        catalog._champions = {}
        catalog._by_role = {}
        catalog._index(records)
        return catalog

    def _load_data(self):
        """Load champion meta records."""
        path = self.knowledge_dir / META_FILE
        if not path.exists():
            logger.warning(f"{META_FILE} not found at {path}, catalog is empty")
            return
        with open(path) as f:
            data = json.load(f)
        self._index(data.get("champions", {}))
        logger.info(f"Loaded {len(self._champions)} champions from {path}")

    def _index(self, records: dict[str, dict]) -> None:
        for raw_id, record in records.items():
            meta = self._parse_record(raw_id, record)
            self._champions[meta.id] = meta

        by_role: dict[str, list[ChampionMeta]] = {}
        for meta in self._champions.values():
            for role in meta.roles:
                by_role.setdefault(role, []).append(meta)
        # sorted() is stable, so equal threat levels keep file order
        self._by_role = {
            role: tuple(sorted(metas, key=lambda m: -m.threat_level))
            for role, metas in by_role.items()
        }

    @staticmethod
    def _parse_record(raw_id: str, record: dict) -> ChampionMeta:
        ratings = record.get("ratings", {})
        roles = tuple(
            role for role in (normalize_role(r) for r in record.get("roles", [])) if role
        )
        return ChampionMeta(
            id=normalize_champion_id(raw_id),
            name=record.get("name", raw_id),
            roles=roles,
            damage_type=DamageType(record.get("damage_type", "mixed")),
            tags=tuple(record.get("tags", [])),
            engage=ratings.get("engage", 5),
            peel=ratings.get("peel", 5),
            waveclear=ratings.get("waveclear", 5),
            early_game=ratings.get("early", 5),
            mid_game=ratings.get("mid", 5),
            late_game=ratings.get("late", 5),
            threat_level=ratings.get("threat", 5),
            counters=tuple(normalize_champion_id(c) for c in record.get("counters", [])),
            synergies=tuple(normalize_champion_id(c) for c in record.get("synergies", [])),
        )

    def get_meta(self, champion_id: Optional[str]) -> Optional[ChampionMeta]:
        """Meta record for a champion id or display name."""
        return self._champions.get(normalize_champion_id(champion_id))

    def get_counter_picks(self, champion_id: str) -> list[str]:
        """Champion ids rated as strong answers to the given champion."""
        meta = self.get_meta(champion_id)
        return list(meta.counters) if meta else []

    def get_synergy_picks(self, champion_id: str) -> list[str]:
        """Champion ids with strong combination value alongside the given champion."""
        meta = self.get_meta(champion_id)
        return list(meta.synergies) if meta else []

    def get_meta_picks_for_role(self, role: str) -> list[ChampionMeta]:
        """Champions eligible for a role, highest threat level first."""
        canonical = normalize_role(role)
        if canonical is None:
            return []
        return list(self._by_role.get(canonical, ()))

    def resolve(self, champion: Union[Champion, str, None]) -> Optional[Champion]:
        """Resolve a Champion or an id/name string to a catalog Champion.

        A Champion not present in the catalog is returned as-is with its id
        normalized, so callers can still draft champions the catalog lacks.
        """
        if champion is None:
            return None
        if isinstance(champion, Champion):
            meta = self.get_meta(champion.id)
            if meta:
                return meta.to_champion()
            return Champion(
                id=normalize_champion_id(champion.id),
                name=champion.name,
                roles=champion.roles,
                damage_type=champion.damage_type,
                tags=champion.tags,
            )
        meta = self.get_meta(champion)
        return meta.to_champion() if meta else None

    def all_champions(self) -> list[ChampionMeta]:
        return sorted(self._champions.values(), key=lambda m: m.name)

    def __len__(self) -> int:
        return len(self._champions)

    def __contains__(self, champion_id: object) -> bool:
        return isinstance(champion_id, str) and normalize_champion_id(champion_id) in self._champions

    def __iter__(self) -> Iterator[ChampionMeta]:
        return iter(self._champions.values())


# Module-level shared instance
_default_catalog: Optional[ChampionMetaCatalog] = None


def get_default_catalog() -> ChampionMetaCatalog:
    """Process-wide catalog loaded from the default knowledge directory."""
    global _default_catalog
    if _default_catalog is None:
        _default_catalog = ChampionMetaCatalog()
    return _default_catalog
