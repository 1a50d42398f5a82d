"""Draft room registry."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from draft_desk.models.champion import Champion
from draft_desk.models.draft import DraftState


@dataclass
class DraftRoom:
    """An active draft room."""

    id: str
    state: DraftState

    # Tentatively selected champion, not yet committed
    pending: Optional[Champion] = None

    created_at: datetime = field(default_factory=datetime.now)


class RoomStore:
    """In-memory store for active draft rooms.

    Rooms are independent; callers serialize mutations per room.
    """

    def __init__(self):
        self.rooms: dict[str, DraftRoom] = {}

    @staticmethod
    def new_room_id() -> str:
        """Short unique id for URLs."""
        return uuid.uuid4().hex[:12]

    def create(self, state: DraftState) -> DraftRoom:
        """Register a room under its state's room_id.

        Args:
            state: Initial draft state for the room

        Returns:
            The created DraftRoom
        """
        room = DraftRoom(id=state.room_id, state=state)
        self.rooms[room.id] = room
        return room

    def get(self, room_id: str) -> Optional[DraftRoom]:
        """Get a room by ID."""
        return self.rooms.get(room_id)

    def delete(self, room_id: str) -> bool:
        """Remove a room. Returns whether it existed."""
        return self.rooms.pop(room_id, None) is not None

    def set_pending(self, room_id: str, champion: Champion) -> None:
        self.rooms[room_id].pending = champion

    def get_pending(self, room_id: str) -> Optional[Champion]:
        room = self.rooms.get(room_id)
        return room.pending if room else None

    def clear_pending(self, room_id: str) -> None:
        room = self.rooms.get(room_id)
        if room:
            room.pending = None

    def list_rooms(self) -> list[dict]:
        """List all active rooms (for debugging)."""
        return [
            {
                "id": r.id,
                "blue_team": r.state.blue_team.name,
                "red_team": r.state.red_team.name,
                "current_step": r.state.current_step,
                "phase": r.state.phase.value,
                "is_complete": r.state.is_complete,
                "created_at": r.created_at.isoformat(),
            }
            for r in self.rooms.values()
        ]

    def __len__(self) -> int:
        return len(self.rooms)

    def __contains__(self, room_id: object) -> bool:
        return room_id in self.rooms
