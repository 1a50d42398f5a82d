"""Historical per-player champion performance."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class ChampionPerformance:
    """Aggregated match history for one player on one champion."""

    champion: str
    games: int
    win_rate: float  # percent
    avg_kda: float = 0.0
    avg_gold_earned: float = 0.0
    avg_first_tower: float = 0.0  # share of games with first tower, 0-1
    avg_game_duration: float = 0.0  # seconds
    first_dragon_pct: Optional[float] = None
