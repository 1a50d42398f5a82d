"""Draft room state machine: turn order, lock-in, undo and reset."""

import logging
from dataclasses import dataclass
from typing import Optional, Union

from draft_desk.errors import (
    ChampionUnavailableError,
    NoPendingSelectionError,
    RoomCompleteError,
    RoomNotFoundError,
    SequenceExhaustedError,
)
from draft_desk.models.champion import Champion
from draft_desk.models.draft import (
    DRAFT_SEQUENCE,
    TOTAL_STEPS,
    ActionType,
    DraftState,
    DraftStep,
    Side,
)
from draft_desk.models.recommendations import AnalyticsResult
from draft_desk.models.team import Player, TeamDraft, validate_roster
from draft_desk.repositories.room_store import DraftRoom, RoomStore
from draft_desk.services.champion_catalog import ChampionMetaCatalog, get_default_catalog
from draft_desk.services.recommendation_engine import RecommendationEngine
from draft_desk.utils.champion_ids import normalize_champion_id, normalize_id_set

logger = logging.getLogger(__name__)


@dataclass
class LockInResult:
    """Outcome of a committed selection."""

    success: bool
    state: DraftState
    champion: Optional[Champion] = None
    step: Optional[DraftStep] = None  # The action that was just completed


class DraftStateMachine:
    """Owns every room's draft state and advances it one action at a time.

    Not thread-safe; callers serialize operations on the same room.
    """

    def __init__(
        self,
        store: Optional[RoomStore] = None,
        catalog: Optional[ChampionMetaCatalog] = None,
        engine: Optional[RecommendationEngine] = None,
    ):
        self.store = store if store is not None else RoomStore()
        self.catalog = catalog if catalog is not None else get_default_catalog()
        self.engine = engine if engine is not None else RecommendationEngine(self.catalog)

    def create_room(
        self,
        blue_name: str,
        red_name: str,
        blue_players: list[Player],
        red_players: list[Player],
    ) -> DraftState:
        """Start a new draft.

        Args:
            blue_name: Blue side team name
            red_name: Red side team name
            blue_players: Blue roster, five players with one per role
            red_players: Red roster, five players with one per role

        Returns:
            Fresh DraftState at step 0 (blue to ban)

        Raises:
            InvalidRosterError: If either roster is malformed
        """
        blue = validate_roster(blue_players, blue_name)
        red = validate_roster(red_players, red_name)

        state = DraftState(
            room_id=self.store.new_room_id(),
            blue_team=TeamDraft(name=blue_name, side=Side.BLUE.value, players=blue),
            red_team=TeamDraft(name=red_name, side=Side.RED.value, players=red),
        )
        self.store.create(state)
        logger.info(f"Created draft room {state.room_id}: {blue_name} vs {red_name}")
        return state

    def get_room(self, room_id: str) -> Optional[DraftState]:
        room = self.store.get(room_id)
        return room.state if room else None

    def _require(self, room_id: str) -> DraftRoom:
        room = self.store.get(room_id)
        if room is None:
            raise RoomNotFoundError(room_id)
        return room

    def require_room(self, room_id: str) -> DraftState:
        """Get a room's state, raising RoomNotFoundError if it does not exist."""
        return self._require(room_id).state

    def delete_room(self, room_id: str) -> bool:
        deleted = self.store.delete(room_id)
        if deleted:
            logger.info(f"Deleted draft room {room_id}")
        return deleted

    def is_champion_available(self, room_id: str, champion_id: str) -> bool:
        """True if the champion is in no ban or pick slot of either team."""
        state = self.require_room(room_id)
        taken = normalize_id_set(c.id for c in state.all_slots())
        return normalize_champion_id(champion_id) not in taken

    def get_current_action(self, room_id: str) -> Optional[DraftStep]:
        return self.require_room(room_id).current_action

    def get_role_needed(self, room_id: str, side: Union[Side, str]) -> Optional[str]:
        """Role of the side's next picker, only while that side is picking."""
        state = self.require_room(room_id)
        action = state.current_action
        if action is None or action.action_type is not ActionType.PICK:
            return None
        if action.team is not Side(side):
            return None
        return state.team(side).next_pick_role()

    def get_filled_roles(self, room_id: str, side: Union[Side, str]) -> list[str]:
        return self.require_room(room_id).team(side).filled_roles

    def get_selected_champion(self, room_id: str) -> Optional[Champion]:
        return self._require(room_id).pending

    def select_champion(self, room_id: str, champion: Union[Champion, str]) -> bool:
        """Tentatively select a champion for the current action.

        Args:
            room_id: Room to select in
            champion: Champion, or a champion id/name known to the catalog

        Returns:
            True if the selection was stored; False if the champion is
            unknown or unavailable, or the draft is complete
        """
        room = self._require(room_id)
        if room.state.is_complete:
            logger.warning(f"Room {room_id}: selection rejected, draft is complete")
            return False

        resolved = self.catalog.resolve(champion)
        if resolved is None:
            logger.warning(f"Room {room_id}: unknown champion {champion!r}")
            return False

        if not self.is_champion_available(room_id, resolved.id):
            logger.warning(f"Room {room_id}: {resolved.name} is already picked or banned")
            return False

        self.store.set_pending(room_id, resolved)
        return True

    def lock_in(self, room_id: str) -> LockInResult:
        """Commit the pending selection to the acting team's next slot.

        Raises:
            RoomCompleteError: If the draft has finished
            SequenceExhaustedError: If the step is outside the draft sequence
            NoPendingSelectionError: If nothing is selected
            ChampionUnavailableError: If the selection was taken meanwhile
        """
        room = self._require(room_id)
        state = room.state

        if state.is_complete:
            raise RoomCompleteError(f"Room {room_id} draft is complete")
        if not 0 <= state.current_step < TOTAL_STEPS:
            raise SequenceExhaustedError(f"Room {room_id} is at step {state.current_step}")

        champion = room.pending
        if champion is None:
            raise NoPendingSelectionError(f"Room {room_id} has no selected champion")
        if not self.is_champion_available(room_id, champion.id):
            self.store.clear_pending(room_id)
            raise ChampionUnavailableError(champion.id)

        step = DRAFT_SEQUENCE[state.current_step]
        team = state.team(step.team)
        slots = team.bans if step.action_type is ActionType.BAN else team.picks
        try:
            slot = slots.index(None)
        except ValueError:
            raise SequenceExhaustedError(
                f"Room {room_id}: no empty {step.action_type.value} slot for {step.team.value}"
            ) from None

        slots[slot] = champion
        state.current_step += 1
        state.is_complete = state.current_step >= TOTAL_STEPS
        self.store.clear_pending(room_id)

        logger.info(
            f"Room {room_id}: {step.team.value} {step.action_type.value} {champion.name} "
            f"(step {state.current_step}/{TOTAL_STEPS})"
        )
        if state.is_complete:
            logger.info(f"Room {room_id}: draft complete")
        return LockInResult(success=True, state=state, champion=champion, step=step)

    def undo(self, room_id: str) -> Optional[DraftState]:
        """Revert the last committed action. Returns None at step 0."""
        room = self._require(room_id)
        state = room.state
        if state.current_step <= 0:
            return None

        step = DRAFT_SEQUENCE[state.current_step - 1]
        team = state.team(step.team)
        slots = team.bans if step.action_type is ActionType.BAN else team.picks
        # Slots fill front to back, so the last filled one is the latest action
        for i in range(len(slots) - 1, -1, -1):
            if slots[i] is not None:
                slots[i] = None
                break

        state.current_step -= 1
        state.is_complete = False
        self.store.clear_pending(room_id)
        logger.info(f"Room {room_id}: undid {step.team.value} {step.action_type.value}")
        return state

    def reset(self, room_id: str) -> DraftState:
        """Clear every slot and return to step 0, keeping rosters."""
        room = self._require(room_id)
        state = room.state
        state.blue_team.clear_slots()
        state.red_team.clear_slots()
        state.current_step = 0
        state.is_complete = False
        self.store.clear_pending(room_id)
        logger.info(f"Room {room_id}: draft reset")
        return state

    def get_recommendations(
        self, room_id: str, for_team: Optional[Union[Side, str]] = None
    ) -> AnalyticsResult:
        """Recommendations for a side, defaulting to the acting team."""
        state = self.require_room(room_id)
        return self.engine.recommend(state, for_team)
