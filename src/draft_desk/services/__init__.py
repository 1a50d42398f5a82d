"""Business logic services."""

from draft_desk.services.champion_catalog import ChampionMetaCatalog, get_default_catalog
from draft_desk.services.composition_analyzer import CompositionAnalyzer
from draft_desk.services.draft_machine import DraftStateMachine, LockInResult
from draft_desk.services.llm_enricher import LLMEnricher
from draft_desk.services.recommendation_engine import RecommendationEngine

__all__ = [
    "ChampionMetaCatalog",
    "CompositionAnalyzer",
    "DraftStateMachine",
    "LLMEnricher",
    "LockInResult",
    "RecommendationEngine",
    "get_default_catalog",
]
