"""DuckDB-based read access to historical per-player match statistics."""

import logging
from pathlib import Path
from typing import Optional, Protocol

import duckdb
import pandas as pd

from draft_desk.models.performance import ChampionPerformance
from draft_desk.utils.role_normalizer import ROLE_ALIASES, normalize_role

logger = logging.getLogger(__name__)


class PerformanceLookup(Protocol):
    """Read-only historical performance surface used by the engine."""

    def top_champions_for_player(
        self,
        team_name: str,
        player_name: str,
        role: Optional[str] = None,
        limit: int = 5,
    ) -> list[ChampionPerformance]:
        ...


class NullPerformanceLookup:
    """Lookup used when no historical data is configured."""

    def top_champions_for_player(
        self,
        team_name: str,
        player_name: str,
        role: Optional[str] = None,
        limit: int = 5,
    ) -> list[ChampionPerformance]:
        return []


class MatchStatsRepository:
    """Aggregates a CSV export of player match rows with DuckDB.

    The CSV is copied into an in-memory DuckDB table once at construction,
    so lookups never touch the file. Expected columns: team_name,
    player_name, role, champion, win, kda, total_money_earned, first_tower,
    first_dragon, game_duration. Every query failure degrades to an empty
    result.
    """

    TABLE = "match_stats"

    def __init__(self, csv_path: str | Path):
        """Load the match stats CSV into memory.

        Args:
            csv_path: Path to a CSV with one row per player per game
        """
        self._csv_path = Path(csv_path)
        self._conn: Optional[duckdb.DuckDBPyConnection] = None

        if not self._csv_path.exists():
            logger.warning(f"Match stats not found: {self._csv_path}, historical lookups disabled")
            return

        escaped = str(self._csv_path).replace("'", "''")
        conn = duckdb.connect()
        try:
            conn.execute(
                f"CREATE TABLE {self.TABLE} AS SELECT * FROM "
                f"read_csv_auto('{escaped}', header=true, all_varchar=true)"
            )
            rows = conn.execute(f"SELECT COUNT(*) FROM {self.TABLE}").fetchone()[0]
        except duckdb.Error as e:
            conn.close()
            logger.warning(f"Could not load match stats from {self._csv_path}: {e}")
            return

        self._conn = conn
        logger.info(f"Loaded {rows} match stat rows from {self._csv_path}")

    @property
    def available(self) -> bool:
        return self._conn is not None

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def _query(self, sql: str, params: list) -> list[dict]:
        """Execute SQL and return results as list of dicts."""
        # A cursor per query; the shared connection is not safe across threads
        with self._conn.cursor() as cursor:
            df = cursor.execute(sql, params).df()
        df = df.astype(object).where(pd.notna(df), None)
        return df.to_dict(orient="records")

    def top_champions_for_player(
        self,
        team_name: str,
        player_name: str,
        role: Optional[str] = None,
        limit: int = 5,
    ) -> list[ChampionPerformance]:
        """Most-played champions for a player, most games first.

        Args:
            team_name: Team name as it appears in the export
            player_name: Player name (surrounding whitespace ignored)
            role: Optional role filter in any known format
            limit: Maximum champions to return

        Returns:
            List of ChampionPerformance, empty when data is unavailable
        """
        if not self.available:
            return []

        params: list = [team_name, player_name.strip()]
        role_filter = ""
        canonical = normalize_role(role) if role else None
        if canonical:
            aliases = [alias for alias, target in ROLE_ALIASES.items() if target == canonical]
            role_filter = f"AND lower(trim(role)) IN ({', '.join('?' for _ in aliases)})"
            params.extend(aliases)
        params.append(limit)

        sql = f"""
            SELECT
                champion,
                COUNT(*) AS games,
                AVG(CASE WHEN lower(win) IN ('true', '1', 'win') THEN 100.0 ELSE 0.0 END) AS win_rate,
                AVG(TRY_CAST(kda AS DOUBLE)) AS avg_kda,
                AVG(TRY_CAST(total_money_earned AS DOUBLE)) AS avg_gold_earned,
                AVG(CASE WHEN lower(first_tower) IN ('true', '1') THEN 1.0 ELSE 0.0 END) AS avg_first_tower,
                AVG(TRY_CAST(game_duration AS DOUBLE)) AS avg_game_duration,
                AVG(CASE WHEN lower(first_dragon) IN ('true', '1') THEN 100.0 ELSE 0.0 END) AS first_dragon_pct
            FROM {self.TABLE}
            WHERE team_name = ?
              AND trim(player_name) = ?
              {role_filter}
            GROUP BY champion
            ORDER BY games DESC, win_rate DESC, champion
            LIMIT ?
        """
        try:
            rows = self._query(sql, params)
        except duckdb.Error as e:
            logger.warning(f"Match stats query failed for {player_name}: {e}")
            return []

        return [
            ChampionPerformance(
                champion=row["champion"],
                games=int(row["games"]),
                win_rate=round(float(row["win_rate"] or 0.0), 1),
                avg_kda=round(float(row["avg_kda"] or 0.0), 2),
                avg_gold_earned=round(float(row["avg_gold_earned"] or 0.0), 1),
                avg_first_tower=round(float(row["avg_first_tower"] or 0.0), 3),
                avg_game_duration=round(float(row["avg_game_duration"] or 0.0), 1),
                first_dragon_pct=(
                    round(float(row["first_dragon_pct"]), 1)
                    if row["first_dragon_pct"] is not None
                    else None
                ),
            )
            for row in rows
        ]
