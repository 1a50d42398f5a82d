"""Recommendation and composition analysis models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from draft_desk.models.champion import Champion


class RecommendationType(str, Enum):
    COMFORT = "comfort"
    COUNTER = "counter"
    META = "meta"
    SYNERGY = "synergy"
    DENY = "deny"


class CompositionType(str, Enum):
    TEAMFIGHT = "teamfight"
    POKE = "poke"
    PICK = "pick"
    SPLIT = "split"
    MIXED = "mixed"


@dataclass
class Recommendation:
    """A suggested ban or pick for the acting team."""

    champion: Champion
    score: float  # 0-100
    type: RecommendationType
    reasons: list[str] = field(default_factory=list)
    player_affinity: Optional[int] = None  # Games played on this champion
    counter_to: Optional[str] = None  # Enemy champion this counters
    synergy_with: Optional[str] = None  # Ally champion this synergizes with
    for_role: Optional[str] = None  # Pick: our role; ban: targeted enemy role
    for_player: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "champion": self.champion.to_dict(),
            "score": self.score,
            "type": self.type.value,
            "reasons": list(self.reasons),
            "player_affinity": self.player_affinity,
            "counter_to": self.counter_to,
            "synergy_with": self.synergy_with,
            "for_role": self.for_role,
            "for_player": self.for_player,
        }


@dataclass
class DamageProfile:
    """Share of team damage by type, in percent."""

    ap: int = 0
    ad: int = 0
    true: int = 0

    @property
    def total(self) -> int:
        return self.ap + self.ad + self.true


@dataclass
class CompositionAnalysis:
    """Aggregate read of one side's picks."""

    type: CompositionType = CompositionType.MIXED
    strengths: list[str] = field(default_factory=list)
    weaknesses: list[str] = field(default_factory=list)
    damage_profile: DamageProfile = field(default_factory=DamageProfile)
    power_spikes: list[str] = field(default_factory=list)  # early/mid/late
    engage_level: int = 0  # 0-100
    peel_level: int = 0
    waveclear_level: int = 0

    def to_dict(self) -> dict:
        return {
            "composition_type": self.type.value,
            "strengths": list(self.strengths),
            "weaknesses": list(self.weaknesses),
            "damage_profile": {
                "ap": self.damage_profile.ap,
                "ad": self.damage_profile.ad,
                "true": self.damage_profile.true,
            },
            "power_spikes": list(self.power_spikes),
            "engage_level": self.engage_level,
            "peel_level": self.peel_level,
            "waveclear_level": self.waveclear_level,
        }


@dataclass
class TeamAnalysis:
    """Composition analysis tagged with the side it describes."""

    team: str
    analysis: CompositionAnalysis

    def to_dict(self) -> dict:
        return {"team": self.team, **self.analysis.to_dict()}


@dataclass
class DraftContext:
    """Snapshot of a draft from which recommendations are computed."""

    phase: str
    current_team: Optional[str]
    current_step: int
    role_needed: Optional[str]
    blue_filled_roles: list[str]
    red_filled_roles: list[str]
    blue_picks: list[Champion]
    red_picks: list[Champion]
    blue_bans: list[Champion]
    red_bans: list[Champion]
    unavailable_ids: frozenset[str]  # Exclusion set: picked or banned anywhere

    def to_dict(self) -> dict:
        return {
            "phase": self.phase,
            "current_team": self.current_team,
            "current_step": self.current_step,
            "role_needed": self.role_needed,
            "blue_filled_roles": list(self.blue_filled_roles),
            "red_filled_roles": list(self.red_filled_roles),
            "blue_picks": [c.id for c in self.blue_picks],
            "red_picks": [c.id for c in self.red_picks],
            "blue_bans": [c.id for c in self.blue_bans],
            "red_bans": [c.id for c in self.red_bans],
            "unavailable_ids": sorted(self.unavailable_ids),
        }


@dataclass
class AnalyticsResult:
    """Ranked recommendations plus both sides' composition analysis."""

    for_team: str
    recommendations: list[Recommendation] = field(default_factory=list)
    blue_team_analysis: Optional[TeamAnalysis] = None
    red_team_analysis: Optional[TeamAnalysis] = None
    context: Optional[DraftContext] = None
    analysis: str = ""  # Free-text from the optional enrichment layer

    def to_dict(self) -> dict:
        return {
            "for_team": self.for_team,
            "recommendations": [r.to_dict() for r in self.recommendations],
            "blue_team_analysis": (
                self.blue_team_analysis.to_dict() if self.blue_team_analysis else None
            ),
            "red_team_analysis": (
                self.red_team_analysis.to_dict() if self.red_team_analysis else None
            ),
            "context": self.context.to_dict() if self.context else None,
            "analysis": self.analysis,
        }
