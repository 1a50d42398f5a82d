"""Rule-based ban and pick recommendations for the acting team."""

import logging
from dataclasses import replace
from typing import Iterable, Optional

from draft_desk.models.champion import ChampionMeta, DamageType
from draft_desk.models.draft import DraftState, Side
from draft_desk.models.performance import ChampionPerformance
from draft_desk.models.recommendations import (
    AnalyticsResult,
    DraftContext,
    Recommendation,
    RecommendationType,
    TeamAnalysis,
)
from draft_desk.models.team import ChampionPoolEntry, Player, TeamDraft
from draft_desk.repositories.match_stats_repository import (
    NullPerformanceLookup,
    PerformanceLookup,
)
from draft_desk.services.champion_catalog import ChampionMetaCatalog, get_default_catalog
from draft_desk.services.composition_analyzer import CompositionAnalyzer
from draft_desk.utils.champion_ids import normalize_champion_id, normalize_id_set
from draft_desk.utils.role_normalizer import normalize_role, unfilled_roles

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 8

# Ban phase
DENY_BASE, DENY_DECAY, DENY_POOL_SIZE = 90, 10, 3
META_THREAT_BASE, META_THREAT_DECAY, META_THREAT_PER_ROLE = 70, 5, 2
OWN_COMP_COUNTER_SCORE, OWN_COMP_COUNTERS_PER_PICK = 60, 2

# Pick phase
COUNTER_BASE, COUNTER_DECAY, COMFORT_COUNTER_BONUS = 85, 5, 10
COMFORT_BASE, COMFORT_DECAY = 80, 3
SYNERGY_BASE, SYNERGY_DECAY = 65, 5
FILL_BASE, FILL_DECAY = 55, 3

HISTORY_LOOKUP_LIMIT = 10
ENGAGE_FILL_THRESHOLD = 7


def _clamp(score: float) -> float:
    return max(0.0, min(100.0, float(score)))


def _ranked_pool(player: Player) -> list[ChampionPoolEntry]:
    """Pool ordered by priority, keeping roster order between equal priorities."""
    return sorted(player.champion_pool, key=lambda e: -e.priority)


def _pool_reason(entry: ChampionPoolEntry) -> str:
    return f"{entry.games} games, {entry.win_rate:.0f}% WR"


class _Candidates:
    """Collects recommendations keyed by champion id.

    Across tiers the first writer wins. Within one tier a repeated champion
    keeps its highest score.
    """

    def __init__(self, excluded: frozenset[str]):
        self.excluded = excluded
        self._recs: dict[str, Recommendation] = {}
        self._tiers: dict[str, str] = {}

    def add(self, tier: str, rec: Recommendation) -> None:
        cid = rec.champion.id
        if cid in self.excluded:
            return
        rec.score = _clamp(rec.score)
        existing = self._recs.get(cid)
        if existing is None:
            self._recs[cid] = rec
            self._tiers[cid] = tier
        elif self._tiers[cid] == tier and rec.score > existing.score:
            self._recs[cid] = rec

    def ranked(self, limit: int) -> list[Recommendation]:
        # sorted() is stable, so equal scores keep insertion order
        return sorted(self._recs.values(), key=lambda r: -r.score)[:limit]


class RecommendationEngine:
    """Scores candidate bans and picks for one side of a draft.

    Ban phase tiers, highest first: deny the enemy's signature picks, ban
    high-threat meta picks for the enemy's open roles, and ban answers to
    our own picks. Pick phase tiers: counter an enemy pick, play a comfort
    pick, synergize with an ally, and fill with meta picks for the role.

    Stateless: every call reads the draft state and shared catalog only.
    """

    def __init__(
        self,
        catalog: Optional[ChampionMetaCatalog] = None,
        analyzer: Optional[CompositionAnalyzer] = None,
        performance: Optional[PerformanceLookup] = None,
        limit: int = DEFAULT_LIMIT,
    ):
        self.catalog = catalog if catalog is not None else get_default_catalog()
        self.analyzer = analyzer if analyzer is not None else CompositionAnalyzer(self.catalog)
        self.performance = performance if performance is not None else NullPerformanceLookup()
        self.limit = limit

    def build_context(self, state: DraftState) -> DraftContext:
        """Snapshot of the draft used for scoring."""
        phase = state.phase
        current_team = state.current_team
        role_needed = None
        if current_team is not None and phase.is_pick:
            role_needed = state.team(current_team).next_pick_role()

        return DraftContext(
            phase=phase.value,
            current_team=current_team.value if current_team else None,
            current_step=state.current_step,
            role_needed=role_needed,
            blue_filled_roles=state.blue_team.filled_roles,
            red_filled_roles=state.red_team.filled_roles,
            blue_picks=state.blue_team.filled_picks,
            red_picks=state.red_team.filled_picks,
            blue_bans=state.blue_team.filled_bans,
            red_bans=state.red_team.filled_bans,
            unavailable_ids=frozenset(normalize_id_set(c.id for c in state.all_slots())),
        )

    def recommend(self, state: DraftState, for_team: Optional[Side | str] = None) -> AnalyticsResult:
        """Ranked recommendations for a side plus both sides' composition reads.

        Args:
            state: Current draft state (not modified)
            for_team: Side to recommend for; defaults to the acting team

        Returns:
            AnalyticsResult; recommendations are empty once the draft is complete
        """
        context = self.build_context(state)
        side = Side(for_team) if for_team is not None else state.current_team

        recommendations: list[Recommendation] = []
        if side is not None and not state.is_complete:
            if state.phase.is_ban:
                recommendations = self._ban_recommendations(state, side, context)
            elif state.phase.is_pick:
                recommendations = self._pick_recommendations(state, side, context)

        return AnalyticsResult(
            for_team=side.value if side else (context.current_team or ""),
            recommendations=recommendations,
            blue_team_analysis=self._team_analysis(state.blue_team, Side.BLUE),
            red_team_analysis=self._team_analysis(state.red_team, Side.RED),
            context=context,
        )

    def _team_analysis(self, team: TeamDraft, side: Side) -> Optional[TeamAnalysis]:
        picks = team.filled_picks
        if not picks:
            return None
        return TeamAnalysis(team=side.value, analysis=self.analyzer.analyze(picks))

    def _metas(self, champion_ids: Iterable[str]) -> list[ChampionMeta]:
        metas = (self.catalog.get_meta(cid) for cid in champion_ids)
        return [m for m in metas if m is not None]

    def _ban_recommendations(
        self, state: DraftState, side: Side, context: DraftContext
    ) -> list[Recommendation]:
        ours = state.team(side)
        enemy = state.team(side.opponent)
        open_enemy_roles = unfilled_roles(enemy.filled_roles)
        candidates = _Candidates(context.unavailable_ids)

        # Deny: signature picks of enemy players who have not picked yet
        for player in enemy.players:
            if player.role not in open_enemy_roles:
                continue
            for idx, entry in enumerate(_ranked_pool(player)[:DENY_POOL_SIZE]):
                meta = self.catalog.get_meta(entry.champion_id)
                if meta is None:
                    continue
                candidates.add("deny", Recommendation(
                    champion=meta.to_champion(),
                    score=DENY_BASE - DENY_DECAY * idx + entry.priority,
                    type=RecommendationType.DENY,
                    reasons=[f"{player.name}'s signature pick", _pool_reason(entry)],
                    player_affinity=entry.games,
                    for_role=player.role,
                    for_player=player.name,
                ))

        # Meta threats for the enemy's open roles
        for role in open_enemy_roles:
            top_picks = self.catalog.get_meta_picks_for_role(role)[:META_THREAT_PER_ROLE]
            for idx, meta in enumerate(top_picks):
                candidates.add("meta", Recommendation(
                    champion=meta.to_champion(),
                    score=META_THREAT_BASE - META_THREAT_DECAY * idx,
                    type=RecommendationType.META,
                    reasons=[f"High priority {role} pick", f"Threat level: {meta.threat_level}/10"],
                    for_role=role,
                ))

        # Answers to our own picks that the enemy could still play
        for pick in ours.filled_picks:
            counters = self._metas(self.catalog.get_counter_picks(pick.id))
            for meta in counters[:OWN_COMP_COUNTERS_PER_PICK]:
                target_role = next((r for r in meta.roles if r in open_enemy_roles), None)
                if target_role is None:
                    continue
                candidates.add("own-comp", Recommendation(
                    champion=meta.to_champion(),
                    score=OWN_COMP_COUNTER_SCORE,
                    type=RecommendationType.DENY,
                    reasons=[f"Counters your {pick.name}"],
                    counter_to=pick.name,
                    for_role=target_role,
                ))

        return candidates.ranked(self.limit)

    def _pick_recommendations(
        self, state: DraftState, side: Side, context: DraftContext
    ) -> list[Recommendation]:
        ours = state.team(side)
        enemy = state.team(side.opponent)
        role = ours.next_pick_role()
        if role is None:
            return []

        player = ours.player_for_role(role)
        player_name = player.name if player else None
        candidates = _Candidates(context.unavailable_ids)

        # Counters to enemy picks, boosted when also in the player's pool
        for enemy_pick in enemy.filled_picks:
            eligible = [
                m for m in self._metas(self.catalog.get_counter_picks(enemy_pick.id))
                if m.plays(role)
            ]
            for idx, meta in enumerate(eligible):
                entry = player.pool_entry(meta.id) if player else None
                reasons = [f"Counters {enemy_pick.name}"]
                score = COUNTER_BASE - COUNTER_DECAY * idx
                if entry is not None:
                    score += COMFORT_COUNTER_BONUS
                    reasons.append("Also a comfort pick!")
                candidates.add("counter", Recommendation(
                    champion=meta.to_champion(),
                    score=score,
                    type=RecommendationType.COUNTER,
                    reasons=reasons,
                    player_affinity=entry.games if entry else None,
                    counter_to=enemy_pick.name,
                    for_role=role,
                    for_player=player_name,
                ))

        # Comfort picks for the player filling the role
        if player is not None:
            history = self._history(ours, player, role)
            for idx, entry in enumerate(_ranked_pool(player)):
                meta = self.catalog.get_meta(entry.champion_id)
                if meta is None:
                    continue
                reasons = [f"{player.name}'s comfort pick", _pool_reason(entry)]
                perf = history.get(meta.id)
                if perf is not None:
                    reasons.append(
                        f"Recent form: {perf.games} games, {perf.win_rate:.0f}% WR, "
                        f"{perf.avg_kda:.1f} KDA"
                    )
                candidates.add("comfort", Recommendation(
                    champion=meta.to_champion(),
                    score=COMFORT_BASE - COMFORT_DECAY * idx + entry.priority,
                    type=RecommendationType.COMFORT,
                    reasons=reasons,
                    player_affinity=entry.games,
                    for_role=role,
                    for_player=player.name,
                ))

        # Synergies with our picks
        for ally in ours.filled_picks:
            eligible = [
                m for m in self._metas(self.catalog.get_synergy_picks(ally.id))
                if m.plays(role)
            ]
            for idx, meta in enumerate(eligible):
                candidates.add("synergy", Recommendation(
                    champion=meta.to_champion(),
                    score=SYNERGY_BASE - SYNERGY_DECAY * idx,
                    type=RecommendationType.SYNERGY,
                    reasons=[f"Synergizes with {ally.name}"],
                    synergy_with=ally.name,
                    for_role=role,
                    for_player=player_name,
                ))

        # Fill with meta picks for the role, noting what the team lacks
        needs = self.analyzer.get_team_needs(ours.filled_picks)
        for idx, meta in enumerate(self.catalog.get_meta_picks_for_role(role)):
            reasons = [f"Strong {role} pick"]
            if "engage" in needs and meta.engage >= ENGAGE_FILL_THRESHOLD:
                reasons.append("Provides needed engage")
            if "ap-damage" in needs and meta.damage_type is DamageType.AP:
                reasons.append("Adds AP damage")
            if "ad-damage" in needs and meta.damage_type is DamageType.AD:
                reasons.append("Adds AD damage")
            candidates.add("fill", Recommendation(
                champion=meta.to_champion(),
                score=FILL_BASE - FILL_DECAY * idx,
                type=RecommendationType.META,
                reasons=reasons,
                for_role=role,
                for_player=player_name,
            ))

        return candidates.ranked(self.limit)

    def _history(
        self, team: TeamDraft, player: Player, role: str
    ) -> dict[str, ChampionPerformance]:
        performances = self.performance.top_champions_for_player(
            team.name, player.name, role, HISTORY_LOOKUP_LIMIT
        )
        return {normalize_champion_id(p.champion): p for p in performances}

    def filter_external(
        self,
        state: DraftState,
        for_team: Side | str,
        recommendations: Iterable[Recommendation],
    ) -> list[Recommendation]:
        """Drop externally supplied recommendations that break draft rules.

        Removes unavailable champions and duplicates. In a pick phase,
        ``for_role`` must be one of the side's unfilled roles; in a ban
        phase it must be one of the enemy's unfilled roles.
        """
        side = Side(for_team)
        context = self.build_context(state)
        if state.phase.is_pick:
            allowed_roles = set(unfilled_roles(state.team(side).filled_roles))
        elif state.phase.is_ban:
            allowed_roles = set(unfilled_roles(state.team(side.opponent).filled_roles))
        else:
            return []

        kept: list[Recommendation] = []
        seen: set[str] = set()
        for rec in recommendations:
            cid = normalize_champion_id(rec.champion.id)
            if not cid or cid in context.unavailable_ids or cid in seen:
                logger.debug(f"Dropping external recommendation {rec.champion.name}: unavailable")
                continue
            if rec.for_role is not None:
                role = normalize_role(rec.for_role)
                if role not in allowed_roles:
                    logger.debug(
                        f"Dropping external recommendation {rec.champion.name}: "
                        f"role {rec.for_role} not open"
                    )
                    continue
                rec = replace(rec, for_role=role)
            seen.add(cid)
            kept.append(replace(rec, score=_clamp(rec.score)))
        return kept
