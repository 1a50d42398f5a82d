"""LLM-based enrichment for draft recommendations.

Sends the draft context and the rule-based recommendations to an
OpenAI-compatible chat completions endpoint, and surfaces what comes back
only after it passes the same availability and open-role rules the engine
applies. Any provider failure falls back to the rule-based result.
"""

import json
import logging
from dataclasses import replace
from typing import Optional

import httpx

from draft_desk.models.draft import DraftState, Side
from draft_desk.models.recommendations import (
    AnalyticsResult,
    Recommendation,
    RecommendationType,
)
from draft_desk.services.recommendation_engine import RecommendationEngine
from draft_desk.utils.champion_ids import normalize_champion_id
from draft_desk.utils.role_normalizer import unfilled_roles

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a League of Legends esports draft analyst. Respond only with valid JSON."
)


class LLMEnricher:
    """Reorders and annotates recommendations using LLM reasoning."""

    DEFAULT_API_URL = "https://api.tokenfactory.us-central1.nebius.com/v1/chat/completions"
    DEFAULT_MODEL = "deepseek-ai/DeepSeek-V3-0324-fast"

    def __init__(
        self,
        api_key: str,
        engine: RecommendationEngine,
        api_url: str = DEFAULT_API_URL,
        model: str = DEFAULT_MODEL,
        timeout: float = 15.0,
    ):
        """Initialize the enricher.

        Args:
            api_key: Provider API key; empty disables enrichment
            engine: Engine whose catalog and filtering rules are applied
            api_url: Chat completions endpoint
            model: Model id sent to the provider
            timeout: Request timeout in seconds
        """
        self.api_key = api_key
        self.engine = engine
        self.api_url = api_url
        self.model = model
        self.timeout = timeout
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def enrich(
        self,
        state: DraftState,
        for_team: Side | str,
        baseline: AnalyticsResult,
    ) -> AnalyticsResult:
        """Return the baseline with LLM-ordered recommendations and analysis.

        Args:
            state: Current draft state
            for_team: Side the recommendations are for
            baseline: Rule-based result from RecommendationEngine

        Returns:
            Enriched AnalyticsResult, or the baseline if the provider fails
        """
        if not self.enabled or state.is_complete:
            return baseline

        side = Side(for_team)
        prompt = self._build_prompt(state, side, baseline)
        try:
            response = await self._call_llm(prompt)
            return self._parse_response(response, state, side, baseline)
        except (httpx.HTTPError, KeyError, IndexError, TypeError, ValueError) as e:
            logger.error(f"LLM enrichment failed: {e}")
            return replace(baseline, analysis="")

    def _build_prompt(self, state: DraftState, side: Side, baseline: AnalyticsResult) -> str:
        ours = state.team(side)
        enemy = state.team(side.opponent)
        action = "ban" if state.phase.is_ban else "pick"
        if state.phase.is_ban:
            open_roles = unfilled_roles(enemy.filled_roles)
        else:
            open_roles = unfilled_roles(ours.filled_roles)

        def names(champions) -> str:
            return ", ".join(c.name for c in champions) or "none"

        def roster(team) -> str:
            return "\n".join(f"- {p.name} ({p.role})" for p in team.players)

        candidates = "\n".join(
            f"{i}. {r.champion.name} [{r.type.value}, score {r.score:.0f}"
            f"{', ' + r.for_role if r.for_role else ''}] - {'; '.join(r.reasons)}"
            for i, r in enumerate(baseline.recommendations, start=1)
        ) or "none"

        return f"""You are advising {ours.name} ({side.value} side) on their next {action}.

Draft phase: {state.phase.value} (step {state.current_step + 1} of 20)

Our roster:
{roster(ours)}

Enemy roster ({enemy.name}):
{roster(enemy)}

Our picks: {names(ours.filled_picks)}
Enemy picks: {names(enemy.filled_picks)}
All bans: {names([*ours.filled_bans, *enemy.filled_bans])}

Open roles for this {action}: {", ".join(open_roles) or "none"}

Algorithm candidates:
{candidates}

Rank the best options for this {action}. Only use champions that are not
already picked or banned, and only roles from the open roles above.

Respond with JSON:
{{
  "recommendations": [
    {{"champion": "Name", "role": "top|jungle|mid|bot|support", "for_player": "Player", "confidence": 0.0-1.0, "reasoning": "One sentence"}}
  ],
  "draft_analysis": "Two or three sentences on the state of the draft"
}}"""

    async def _call_llm(self, prompt: str) -> dict:
        """Call the chat completions API."""
        client = await self._get_client()

        response = await client.post(
            self.api_url,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            json={
                "model": self.model,
                "messages": [
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                "temperature": 0.3,
                "max_tokens": 1500,
            },
        )

        response.raise_for_status()
        return response.json()

    @staticmethod
    def _extract_json_from_response(content: str) -> dict:
        """Extract a JSON object from an LLM reply.

        Handles pure JSON, ```json fenced blocks, <think> reasoning blocks and
        leading or trailing prose.
        """
        content = content.strip()

        if "<think>" in content:
            think_end = content.rfind("</think>")
            if think_end != -1:
                content = content[think_end + len("</think>"):].strip()

        if "```" in content:
            for part in content.split("```"):
                part = part.strip()
                if part.startswith("json"):
                    part = part[4:].strip()
                if part.startswith("{"):
                    content = part
                    break

        start = content.find("{")
        if start == -1:
            raise ValueError("No JSON object found in response")

        # raw_decode stops at the end of the first complete object
        data, _ = json.JSONDecoder().raw_decode(content[start:])
        if not isinstance(data, dict):
            raise ValueError(f"Expected JSON object, got {type(data).__name__}")
        return data

    def _parse_response(
        self,
        response: dict,
        state: DraftState,
        side: Side,
        baseline: AnalyticsResult,
    ) -> AnalyticsResult:
        content = response["choices"][0]["message"]["content"]
        data = self._extract_json_from_response(content)

        baseline_by_id = {r.champion.id: r for r in baseline.recommendations}
        default_type = RecommendationType.DENY if state.phase.is_ban else RecommendationType.META

        suggested: list[Recommendation] = []
        for item in data.get("recommendations", []) or []:
            if not isinstance(item, dict):
                continue
            champion = self.engine.catalog.resolve(str(item.get("champion", "")))
            if champion is None:
                logger.debug(f"Ignoring unknown champion from LLM: {item.get('champion')}")
                continue

            original = baseline_by_id.get(normalize_champion_id(champion.id))
            role = item.get("role")
            player = item.get("for_player")
            confidence = float(item.get("confidence", 0.5))
            reasoning = str(item.get("reasoning", "")).strip()
            reasons = [reasoning] if reasoning else []
            if original is not None:
                reasons.extend(r for r in original.reasons if r not in reasons)

            suggested.append(Recommendation(
                champion=champion,
                score=confidence * 100,
                type=original.type if original else default_type,
                reasons=reasons,
                player_affinity=original.player_affinity if original else None,
                counter_to=original.counter_to if original else None,
                synergy_with=original.synergy_with if original else None,
                for_role=str(role) if role else (original.for_role if original else None),
                for_player=str(player) if player else (original.for_player if original else None),
            ))

        kept = self.engine.filter_external(state, side, suggested)
        if len(kept) < len(suggested):
            logger.info(f"Filtered {len(suggested) - len(kept)} LLM suggestions breaking draft rules")

        return replace(
            baseline,
            recommendations=kept[: self.engine.limit] or baseline.recommendations,
            analysis=str(data.get("draft_analysis", "")),
        )
