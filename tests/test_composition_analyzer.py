"""Tests for composition analysis."""

import pytest

from draft_desk.models.champion import Champion, DamageType
from draft_desk.models.recommendations import CompositionType
from draft_desk.services.champion_catalog import ChampionMetaCatalog
from draft_desk.services.composition_analyzer import CompositionAnalyzer

RECORDS = {
    "Malphite": {
        "roles": ["top"], "damage_type": "ap", "tags": ["engage", "teamfight", "aoe"],
        "ratings": {"engage": 10, "peel": 5, "waveclear": 5, "early": 4, "mid": 7, "late": 8},
    },
    "Orianna": {
        "roles": ["mid"], "damage_type": "ap", "tags": ["teamfight", "aoe", "wombo-combo"],
        "ratings": {"engage": 6, "peel": 6, "waveclear": 9, "early": 5, "mid": 8, "late": 9},
    },
    "Jarvan IV": {
        "roles": ["jungle"], "damage_type": "ad", "tags": ["engage", "teamfight"],
        "ratings": {"engage": 9, "peel": 5, "waveclear": 3, "early": 8, "mid": 8, "late": 5},
    },
    "Ezreal": {
        "roles": ["bot"], "damage_type": "ad", "tags": ["poke", "ranged"],
        "ratings": {"engage": 2, "peel": 3, "waveclear": 7, "early": 8, "mid": 7, "late": 6},
    },
    "Caitlyn": {
        "roles": ["bot"], "damage_type": "ad", "tags": ["poke", "siege", "ranged"],
        "ratings": {"engage": 2, "peel": 3, "waveclear": 7, "early": 9, "mid": 7, "late": 6},
    },
    "Kai'Sa": {
        "roles": ["bot"], "damage_type": "mixed", "tags": ["pick"],
        "ratings": {"engage": 5, "peel": 1, "waveclear": 5, "early": 5, "mid": 8, "late": 9},
    },
    "Fiora": {
        "roles": ["top"], "damage_type": "true", "tags": ["splitpush", "duelist"],
        "ratings": {"engage": 1, "peel": 1, "waveclear": 5, "early": 6, "mid": 7, "late": 9},
    },
}


@pytest.fixture
def catalog():
    return ChampionMetaCatalog.from_records(RECORDS)


@pytest.fixture
def analyzer(catalog):
    return CompositionAnalyzer(catalog)


def picks(catalog, *names):
    return [catalog.resolve(n) for n in names]


class TestAnalyze:
    def test_no_picks_is_neutral(self, analyzer):
        for empty in ([], [None, None, None]):
            result = analyzer.analyze(empty)
            assert result.type == CompositionType.MIXED
            assert result.strengths == []
            assert result.weaknesses == []
            assert result.damage_profile.total == 0
            assert result.engage_level == 0
            assert result.power_spikes == []

    def test_teamfight_composition(self, analyzer, catalog):
        result = analyzer.analyze(picks(catalog, "Malphite", "Orianna", "Jarvan IV"))
        assert result.type == CompositionType.TEAMFIGHT
        assert (result.damage_profile.ap, result.damage_profile.ad) == (67, 33)
        assert result.engage_level == 83
        assert result.peel_level == 53
        assert result.waveclear_level == 57
        assert result.power_spikes == ["mid", "late"]
        assert result.strengths == [
            "Strong engage tools",
            "Excellent scaling",
            "Strong 5v5 teamfighting",
            "Good AoE damage",
        ]
        assert result.weaknesses == [
            "Heavy AP - vulnerable to MR stacking",
            "Weak early game",
            "Weak to split push",
        ]

    def test_ignores_empty_slots(self, analyzer, catalog):
        with_gaps = [*picks(catalog, "Malphite", "Orianna"), None, None, None]
        assert analyzer.analyze(with_gaps) == analyzer.analyze(picks(catalog, "Malphite", "Orianna"))

    def test_does_not_mutate_picks(self, analyzer, catalog):
        team = picks(catalog, "Ezreal", "Caitlyn")
        snapshot = list(team)
        analyzer.analyze(team)
        assert team == snapshot

    @pytest.mark.parametrize("names, expected", [
        (("Malphite", "Jarvan IV"), (50, 50, 0)),
        (("Kai'Sa", "Fiora"), (25, 25, 50)),
        (("Orianna", "Ezreal", "Fiora"), (33, 33, 33)),
        (("Malphite", "Orianna", "Kai'Sa"), (83, 17, 0)),
    ])
    def test_damage_profile(self, analyzer, catalog, names, expected):
        damage = analyzer.damage_profile(picks(catalog, *names))
        assert (damage.ap, damage.ad, damage.true) == expected
        assert 99 <= damage.total <= 101

    def test_unknown_champions_are_not_counted(self, analyzer, catalog):
        mystery = Champion(id="mystery", name="Mystery", damage_type=DamageType.AP, tags=("poke",))
        assert analyzer.damage_profile([mystery, *picks(catalog, "Jarvan IV")]).ad == 100

        result = analyzer.analyze([mystery])
        assert result.damage_profile.total == 0
        assert result.type == CompositionType.MIXED
        assert result.engage_level == 0
        assert "Lacks reliable engage" in result.weaknesses

    def test_caps_and_dedupes(self, analyzer, catalog):
        result = analyzer.analyze(picks(catalog, "Ezreal", "Caitlyn", "Fiora"))
        assert len(result.strengths) <= 4
        assert len(result.weaknesses) <= 3
        assert len(set(result.weaknesses)) == len(result.weaknesses)


class TestClassify:
    def test_strict_winner(self):
        assert CompositionAnalyzer.classify({"poke", "siege", "ranged"}) == CompositionType.POKE

    def test_tie_is_mixed(self):
        assert CompositionAnalyzer.classify({"teamfight", "poke"}) == CompositionType.MIXED

    def test_no_matches_is_mixed(self):
        assert CompositionAnalyzer.classify({"tank"}) == CompositionType.MIXED
        assert CompositionAnalyzer.classify(set()) == CompositionType.MIXED


class TestTeamNeeds:
    def test_needs_two_known_picks(self, analyzer, catalog):
        assert analyzer.get_team_needs(picks(catalog, "Ezreal")) == []
        mystery = Champion(id="mystery", name="Mystery")
        assert analyzer.get_team_needs([*picks(catalog, "Ezreal"), mystery]) == []

    def test_poke_duo_needs(self, analyzer, catalog):
        needs = analyzer.get_team_needs(picks(catalog, "Ezreal", "Caitlyn"))
        assert needs == ["engage", "peel", "ap-damage"]

    def test_mixed_damage_counts_as_neither(self, analyzer, catalog):
        needs = analyzer.get_team_needs(picks(catalog, "Kai'Sa", "Fiora"))
        assert "ap-damage" in needs
        assert "ad-damage" in needs


def test_compare(analyzer, catalog):
    summary = analyzer.compare(
        picks(catalog, "Malphite", "Orianna", "Jarvan IV"),
        picks(catalog, "Ezreal", "Caitlyn"),
    )
    assert summary["engage_delta"] == 63
    assert summary["notes"] == ["You have the stronger engage"]
    assert summary["our_analysis"]["composition_type"] == "teamfight"
    assert summary["enemy_analysis"]["composition_type"] == "poke"


def test_bundled_catalog_analysis():
    """Smoke test against the shipped knowledge file."""
    catalog = ChampionMetaCatalog()
    analyzer = CompositionAnalyzer(catalog)
    result = analyzer.analyze(picks(catalog, "Malphite", "Jarvan IV", "Orianna", "Jinx", "Thresh"))
    assert 99 <= result.damage_profile.total <= 101
    assert 0 <= result.engage_level <= 100
