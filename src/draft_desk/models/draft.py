"""Draft sequence, phase and state models."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from draft_desk.models.team import TeamDraft


class Side(str, Enum):
    BLUE = "blue"
    RED = "red"

    @property
    def opponent(self) -> "Side":
        return Side.RED if self is Side.BLUE else Side.BLUE


class ActionType(str, Enum):
    BAN = "ban"
    PICK = "pick"


class DraftPhase(str, Enum):
    """Phases of a professional LoL draft."""

    BAN_1 = "ban1"  # Bans 1-6
    PICK_1 = "pick1"  # Picks 1-6
    BAN_2 = "ban2"  # Bans 7-10
    PICK_2 = "pick2"  # Picks 7-10
    COMPLETE = "complete"

    @property
    def is_ban(self) -> bool:
        return self in (DraftPhase.BAN_1, DraftPhase.BAN_2)

    @property
    def is_pick(self) -> bool:
        return self in (DraftPhase.PICK_1, DraftPhase.PICK_2)


@dataclass(frozen=True)
class DraftStep:
    """Which team acts and what it does at one step of the sequence."""

    team: Side
    action_type: ActionType

    def to_dict(self) -> dict:
        return {"team": self.team.value, "type": self.action_type.value}


_B, _R = Side.BLUE, Side.RED
_BAN, _PICK = ActionType.BAN, ActionType.PICK

# Standard tournament draft order, shared by every room
DRAFT_SEQUENCE: tuple[DraftStep, ...] = (
    # Ban Phase 1: 6 bans alternating, blue first
    DraftStep(_B, _BAN), DraftStep(_R, _BAN), DraftStep(_B, _BAN),
    DraftStep(_R, _BAN), DraftStep(_B, _BAN), DraftStep(_R, _BAN),
    # Pick Phase 1: B1, R1-R2, B2-B3, R3
    DraftStep(_B, _PICK), DraftStep(_R, _PICK), DraftStep(_R, _PICK),
    DraftStep(_B, _PICK), DraftStep(_B, _PICK), DraftStep(_R, _PICK),
    # Ban Phase 2: 4 bans alternating, red first
    DraftStep(_R, _BAN), DraftStep(_B, _BAN), DraftStep(_R, _BAN), DraftStep(_B, _BAN),
    # Pick Phase 2: R4, B4-B5, R5
    DraftStep(_R, _PICK), DraftStep(_B, _PICK), DraftStep(_B, _PICK), DraftStep(_R, _PICK),
)

TOTAL_STEPS = len(DRAFT_SEQUENCE)


def compute_phase(step: int) -> DraftPhase:
    """Compute draft phase from the number of committed actions (0-20)."""
    if step >= TOTAL_STEPS:
        return DraftPhase.COMPLETE
    elif step < 6:
        return DraftPhase.BAN_1
    elif step < 12:
        return DraftPhase.PICK_1
    elif step < 16:
        return DraftPhase.BAN_2
    else:
        return DraftPhase.PICK_2


@dataclass
class DraftState:
    """Complete state of one room's draft."""

    room_id: str
    blue_team: TeamDraft
    red_team: TeamDraft
    current_step: int = 0
    is_complete: bool = False

    @property
    def phase(self) -> DraftPhase:
        return compute_phase(self.current_step)

    @property
    def current_action(self) -> Optional[DraftStep]:
        if self.is_complete or not 0 <= self.current_step < TOTAL_STEPS:
            return None
        return DRAFT_SEQUENCE[self.current_step]

    @property
    def current_team(self) -> Optional[Side]:
        action = self.current_action
        return action.team if action else None

    def team(self, side: Side | str) -> TeamDraft:
        return self.blue_team if Side(side) is Side.BLUE else self.red_team

    def all_slots(self) -> list:
        """Every filled ban and pick slot across both teams."""
        return [
            champ
            for team in (self.blue_team, self.red_team)
            for champ in (*team.bans, *team.picks)
            if champ is not None
        ]

    def to_dict(self) -> dict:
        current_team = self.current_team
        return {
            "room_id": self.room_id,
            "blue_team": self.blue_team.to_dict(),
            "red_team": self.red_team.to_dict(),
            "current_step": self.current_step,
            "phase": self.phase.value,
            "current_team": current_team.value if current_team else None,
            "is_complete": self.is_complete,
        }
