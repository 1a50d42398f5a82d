"""Team composition classification, damage profile and power spikes."""

import math
from dataclasses import dataclass
from typing import Optional, Sequence

from draft_desk.models.champion import Champion, ChampionMeta, DamageType
from draft_desk.models.recommendations import (
    CompositionAnalysis,
    CompositionType,
    DamageProfile,
)
from draft_desk.services.champion_catalog import ChampionMetaCatalog, get_default_catalog


@dataclass(frozen=True)
class CompositionTemplate:
    required_tags: tuple[str, ...]
    optional_tags: tuple[str, ...]
    strength_keywords: tuple[str, ...]
    weakness_keywords: tuple[str, ...]


COMPOSITION_TEMPLATES: dict[CompositionType, CompositionTemplate] = {
    CompositionType.TEAMFIGHT: CompositionTemplate(
        required_tags=("teamfight", "engage", "aoe"),
        optional_tags=("wombo-combo", "zone-control"),
        strength_keywords=("Strong 5v5 teamfighting", "Good AoE damage", "Multiple engage tools"),
        weakness_keywords=("Weak to split push", "Needs to group", "Can be outmaneuvered"),
    ),
    CompositionType.POKE: CompositionTemplate(
        required_tags=("poke", "siege", "ranged"),
        optional_tags=("waveclear", "disengage"),
        strength_keywords=("Strong siege potential", "Can chunk before fights", "Good objective control"),
        weakness_keywords=("Weak to hard engage", "Struggles vs sustain", "Needs good spacing"),
    ),
    CompositionType.PICK: CompositionTemplate(
        required_tags=("pick", "assassin", "catch"),
        optional_tags=("burst", "mobility"),
        strength_keywords=("Can catch isolated targets", "Strong skirmishing", "Good vision control"),
        weakness_keywords=("Weak 5v5 teamfighting", "Needs picks to win", "Falls behind if no picks"),
    ),
    CompositionType.SPLIT: CompositionTemplate(
        required_tags=("splitpush", "duelist", "1v1"),
        optional_tags=("tower-taking", "waveclear"),
        strength_keywords=("Strong 1-3-1 or 1-4", "Creates map pressure", "Strong sidelane duelists"),
        weakness_keywords=("Requires coordination", "Weak if grouped 5v5", "Can lose objectives"),
    ),
    CompositionType.MIXED: CompositionTemplate(
        required_tags=(),
        optional_tags=(),
        strength_keywords=("Flexible win conditions", "Well-rounded composition"),
        weakness_keywords=("Jack of all trades", "May lack identity"),
    ),
}

MAX_STRENGTHS = 4
MAX_WEAKNESSES = 3
SPIKE_THRESHOLD = 7
NEED_THRESHOLD = 5
MIN_PICKS_FOR_NEEDS = 2


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _level(values: list[int]) -> int:
    """Mean of 1-10 ratings scaled to 0-100."""
    if not values:
        return 0
    return max(0, min(100, _round_half_up(sum(values) / len(values) * 10)))


def _dedupe(items: list[str]) -> list[str]:
    return list(dict.fromkeys(items))


class CompositionAnalyzer:
    """Derives a composition read from one side's picks.

    Stateless apart from the shared catalog; never mutates its inputs.
    """

    def __init__(self, catalog: Optional[ChampionMetaCatalog] = None):
        self.catalog = catalog if catalog is not None else get_default_catalog()

    def _metas(self, picks: Sequence[Champion]) -> list[ChampionMeta]:
        metas = (self.catalog.get_meta(p.id) for p in picks)
        return [m for m in metas if m is not None]

    def damage_profile(self, picks: Sequence[Champion]) -> DamageProfile:
        """Percent of damage by type over picks known to the catalog.

        Mixed champions split evenly AP/AD. Unknown picks are not counted.
        """
        counts = {"ap": 0.0, "ad": 0.0, "true": 0.0}
        for meta in self._metas(picks):
            damage_type = meta.damage_type
            if damage_type is DamageType.MIXED:
                counts["ap"] += 0.5
                counts["ad"] += 0.5
            else:
                counts[damage_type.value] += 1

        total = sum(counts.values()) or 1
        return DamageProfile(
            ap=_round_half_up(counts["ap"] / total * 100),
            ad=_round_half_up(counts["ad"] / total * 100),
            true=_round_half_up(counts["true"] / total * 100),
        )

    @staticmethod
    def power_spikes(metas: list[ChampionMeta]) -> list[str]:
        if not metas:
            return []
        averages = {
            "early": sum(m.early_game for m in metas) / len(metas),
            "mid": sum(m.mid_game for m in metas) / len(metas),
            "late": sum(m.late_game for m in metas) / len(metas),
        }
        return [phase for phase, avg in averages.items() if avg >= SPIKE_THRESHOLD]

    @staticmethod
    def classify(tags: set[str]) -> CompositionType:
        """Best-matching archetype; ties and zero matches fall back to mixed."""
        scores: dict[CompositionType, int] = {}
        for comp_type, template in COMPOSITION_TEMPLATES.items():
            if comp_type is CompositionType.MIXED:
                continue
            required = sum(1 for t in template.required_tags if t in tags)
            optional = sum(1 for t in template.optional_tags if t in tags)
            scores[comp_type] = required * 2 + optional

        best = max(scores.values(), default=0)
        leaders = [t for t, s in scores.items() if s == best]
        if best == 0 or len(leaders) > 1:
            return CompositionType.MIXED
        return leaders[0]

    def analyze(self, picks: Sequence[Optional[Champion]]) -> CompositionAnalysis:
        """Classify a side's composition from its picks (empty slots ignored)."""
        valid = [p for p in picks if p is not None]
        if not valid:
            return CompositionAnalysis()

        metas = self._metas(valid)
        damage = self.damage_profile(valid)
        engage = _level([m.engage for m in metas])
        peel = _level([m.peel for m in metas])
        waveclear = _level([m.waveclear for m in metas])
        spikes = self.power_spikes(metas)

        tags: set[str] = set()
        for meta in metas:
            tags.update(meta.tags)
        comp_type = self.classify(tags)

        strengths: list[str] = []
        weaknesses: list[str] = []

        if damage.ap >= 60:
            weaknesses.append("Heavy AP - vulnerable to MR stacking")
        elif damage.ad >= 60:
            weaknesses.append("Heavy AD - vulnerable to armor stacking")
        else:
            strengths.append("Balanced damage profile")

        if engage >= 70:
            strengths.append("Strong engage tools")
        elif engage <= 30:
            weaknesses.append("Lacks reliable engage")

        if peel >= 70:
            strengths.append("Excellent peel for carries")
        elif peel <= 30:
            weaknesses.append("Limited peel - carries vulnerable")

        if waveclear >= 70:
            strengths.append("Good waveclear")
        elif waveclear <= 40:
            weaknesses.append("Weak waveclear - can be sieged")

        if "early" in spikes and "late" not in spikes:
            strengths.append("Strong early game pressure")
            weaknesses.append("Falls off late game")
        elif "late" in spikes and "early" not in spikes:
            strengths.append("Excellent scaling")
            weaknesses.append("Weak early game")

        template = COMPOSITION_TEMPLATES[comp_type]
        strengths.extend(template.strength_keywords[:2])
        weaknesses.extend(template.weakness_keywords[:1])

        return CompositionAnalysis(
            type=comp_type,
            strengths=_dedupe(strengths)[:MAX_STRENGTHS],
            weaknesses=_dedupe(weaknesses)[:MAX_WEAKNESSES],
            damage_profile=damage,
            power_spikes=spikes,
            engage_level=engage,
            peel_level=peel,
            waveclear_level=waveclear,
        )

    def get_team_needs(self, picks: Sequence[Optional[Champion]]) -> list[str]:
        """What the side still lacks: engage, peel, ap-damage, ad-damage.

        Nothing is flagged until at least two picks with known meta exist.
        """
        metas = self._metas([p for p in picks if p is not None])
        if len(metas) < MIN_PICKS_FOR_NEEDS:
            return []

        needs: list[str] = []
        if sum(m.engage for m in metas) / len(metas) < NEED_THRESHOLD:
            needs.append("engage")
        if sum(m.peel for m in metas) / len(metas) < NEED_THRESHOLD:
            needs.append("peel")
        if not any(m.damage_type is DamageType.AP for m in metas):
            needs.append("ap-damage")
        if not any(m.damage_type is DamageType.AD for m in metas):
            needs.append("ad-damage")
        return needs

    def compare(
        self,
        our_picks: Sequence[Optional[Champion]],
        enemy_picks: Sequence[Optional[Champion]],
    ) -> dict:
        """Head-to-head summary of two sides' compositions."""
        ours = self.analyze(our_picks)
        theirs = self.analyze(enemy_picks)
        engage_delta = ours.engage_level - theirs.engage_level
        peel_delta = ours.peel_level - theirs.peel_level

        notes: list[str] = []
        if engage_delta >= 20:
            notes.append("You have the stronger engage")
        elif engage_delta <= -20:
            notes.append("They have the stronger engage")
        if "early" in ours.power_spikes and "early" not in theirs.power_spikes:
            notes.append("Your early game is stronger - play proactively")
        if "late" in theirs.power_spikes and "late" not in ours.power_spikes:
            notes.append("They outscale - close the game before late")

        return {
            "our_analysis": ours.to_dict(),
            "enemy_analysis": theirs.to_dict(),
            "engage_delta": engage_delta,
            "peel_delta": peel_delta,
            "notes": notes,
        }
