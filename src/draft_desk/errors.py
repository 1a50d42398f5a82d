"""Typed failures raised by the draft state machine.

All of these are local, recoverable conditions; the API layer turns them
into HTTP or WebSocket error responses.
"""


class DraftError(Exception):
    """Base class for draft state machine failures."""


class InvalidRosterError(DraftError, ValueError):
    """A roster does not have exactly five players, one per role."""


class ChampionUnavailableError(DraftError):
    """The champion is already picked or banned in this room."""

    def __init__(self, champion_id: str):
        super().__init__(f"Champion {champion_id} is not available")
        self.champion_id = champion_id


class NoPendingSelectionError(DraftError):
    """Lock-in was requested with nothing selected."""


class RoomCompleteError(DraftError):
    """The draft is complete and accepts only undo or reset."""


class SequenceExhaustedError(DraftError):
    """The current step is outside the draft sequence."""


class RoomNotFoundError(DraftError, LookupError):
    """No room exists for the given id."""

    def __init__(self, room_id: str):
        super().__init__(f"Room not found: {room_id}")
        self.room_id = room_id
