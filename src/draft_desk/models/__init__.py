"""Data models for the draft assistant."""

from draft_desk.models.champion import Champion, ChampionMeta, DamageType
from draft_desk.models.draft import (
    DRAFT_SEQUENCE,
    ActionType,
    DraftPhase,
    DraftState,
    DraftStep,
    Side,
)
from draft_desk.models.performance import ChampionPerformance
from draft_desk.models.recommendations import (
    AnalyticsResult,
    CompositionAnalysis,
    CompositionType,
    DamageProfile,
    DraftContext,
    Recommendation,
    RecommendationType,
    TeamAnalysis,
)
from draft_desk.models.team import ChampionPoolEntry, Player, TeamDraft

__all__ = [
    "DRAFT_SEQUENCE",
    "ActionType",
    "AnalyticsResult",
    "Champion",
    "ChampionMeta",
    "ChampionPerformance",
    "ChampionPoolEntry",
    "CompositionAnalysis",
    "CompositionType",
    "DamageProfile",
    "DamageType",
    "DraftContext",
    "DraftPhase",
    "DraftState",
    "DraftStep",
    "Player",
    "Recommendation",
    "RecommendationType",
    "Side",
    "TeamAnalysis",
    "TeamDraft",
]
