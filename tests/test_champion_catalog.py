"""Tests for the champion meta catalog."""

import json

import pytest

from draft_desk.models.champion import Champion, DamageType
from draft_desk.services.champion_catalog import ChampionMetaCatalog
from draft_desk.utils.role_normalizer import ROLE_ORDER


def test_loads_bundled_knowledge(catalog):
    assert len(catalog) > 50
    for role in ROLE_ORDER:
        assert catalog.get_meta_picks_for_role(role), role


@pytest.mark.parametrize("name", ["Lee Sin", "leesin", "LeeSin", "lee sin"])
def test_get_meta_normalizes_ids(catalog, name):
    meta = catalog.get_meta(name)
    assert meta is not None
    assert meta.id == "leesin"
    assert meta.name == "Lee Sin"
    assert "jungle" in meta.roles


def test_apostrophes_and_dots(catalog):
    assert catalog.get_meta("Kai'Sa").id == "kaisa"
    assert "K'Sante" in catalog
    assert "Unknown Champ" not in catalog


def test_unknown_champion(catalog):
    assert catalog.get_meta("NotAChampion") is None
    assert catalog.get_counter_picks("NotAChampion") == []
    assert catalog.get_synergy_picks("NotAChampion") == []


def test_counters_and_synergies_resolve(catalog):
    """Every referenced champion is itself in the catalog."""
    for meta in catalog:
        for other in (*meta.counters, *meta.synergies):
            assert other in catalog, f"{meta.id} -> {other}"


def test_meta_picks_sorted_by_threat(catalog):
    for role in ROLE_ORDER:
        threats = [m.threat_level for m in catalog.get_meta_picks_for_role(role)]
        assert threats == sorted(threats, reverse=True)


def test_meta_picks_accept_role_aliases(catalog):
    assert catalog.get_meta_picks_for_role("ADC") == catalog.get_meta_picks_for_role("bot")
    assert catalog.get_meta_picks_for_role("coach") == []


def test_ties_keep_data_order():
    catalog = ChampionMetaCatalog.from_records({
        "First": {"roles": ["mid"], "damage_type": "ap", "ratings": {"threat": 7}},
        "Strong": {"roles": ["mid"], "damage_type": "ap", "ratings": {"threat": 9}},
        "Second": {"roles": ["mid"], "damage_type": "ad", "ratings": {"threat": 7}},
    })
    assert [m.id for m in catalog.get_meta_picks_for_role("mid")] == [
        "strong", "first", "second"
    ]


def test_resolve(catalog):
    assert catalog.resolve("Azir") == catalog.get_meta("azir").to_champion()
    assert catalog.resolve("nope") is None
    assert catalog.resolve(None) is None

    custom = Champion(id="New Champ", name="New Champ", damage_type=DamageType.AP)
    resolved = catalog.resolve(custom)
    assert resolved.id == "newchamp"
    assert resolved.damage_type == DamageType.AP


def test_missing_knowledge_dir(tmp_path):
    catalog = ChampionMetaCatalog(tmp_path)
    assert len(catalog) == 0
    assert catalog.get_meta_picks_for_role("mid") == []


def test_custom_knowledge_dir(tmp_path):
    data = {
        "champions": {
            "Ahri": {
                "name": "Ahri",
                "roles": ["MID"],
                "damage_type": "ap",
                "ratings": {"engage": 6, "threat": 8},
                "counters": ["Galio"],
            }
        }
    }
    (tmp_path / "champion_meta.json").write_text(json.dumps(data))
    catalog = ChampionMetaCatalog(tmp_path)
    meta = catalog.get_meta("ahri")
    assert meta.roles == ("mid",)
    assert meta.engage == 6
    assert meta.peel == 5  # default rating
    assert catalog.get_counter_picks("Ahri") == ["galio"]
