"""REST endpoints for draft rooms."""

import copy
import threading
from typing import Literal, Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field

from draft_desk.errors import (
    ChampionUnavailableError,
    DraftError,
    InvalidRosterError,
    NoPendingSelectionError,
    RoomCompleteError,
    RoomNotFoundError,
    SequenceExhaustedError,
)
from draft_desk.models.team import ChampionPoolEntry, Player
from draft_desk.services.draft_machine import DraftStateMachine

router = APIRouter(prefix="/api/draft", tags=["draft"])

# Per-room locks; the state machine itself does no locking
_room_locks: dict[str, threading.Lock] = {}
_room_locks_lock = threading.Lock()

_ERROR_STATUS: dict[type[DraftError], int] = {
    RoomNotFoundError: 404,
    InvalidRosterError: 400,
    NoPendingSelectionError: 400,
    ChampionUnavailableError: 409,
    RoomCompleteError: 409,
    SequenceExhaustedError: 409,
}


def http_error(error: DraftError) -> HTTPException:
    """Translate a draft failure into an HTTP error."""
    status = next(
        (code for cls, code in _ERROR_STATUS.items() if isinstance(error, cls)), 400
    )
    return HTTPException(status_code=status, detail=str(error))


def room_lock(machine: DraftStateMachine, room_id: str) -> threading.Lock:
    """Fetch the lock for an existing room, creating it if needed.

    Raises:
        RoomNotFoundError: If the room does not exist; no lock is created
    """
    if machine.get_room(room_id) is None:
        raise RoomNotFoundError(room_id)
    with _room_locks_lock:
        lock = _room_locks.get(room_id)
        if lock is None:
            lock = threading.Lock()
            _room_locks[room_id] = lock
    return lock


def _machine(request: Request) -> DraftStateMachine:
    return request.app.state.machine


def _locked(machine: DraftStateMachine, room_id: str) -> threading.Lock:
    """Room lock for a route; unknown rooms become a 404."""
    try:
        return room_lock(machine, room_id)
    except RoomNotFoundError as e:
        raise http_error(e)


class PoolEntryBody(BaseModel):
    champion_id: str
    champion_name: str = ""
    games: int = Field(0, ge=0)
    wins: int = Field(0, ge=0)
    win_rate: float = Field(0.0, ge=0, le=100)
    priority: int = Field(5, ge=1, le=10)


class PlayerBody(BaseModel):
    id: str
    name: str
    role: str
    champion_pool: list[PoolEntryBody] = []


class CreateRoomRequest(BaseModel):
    blue_team_name: str
    red_team_name: str
    blue_players: list[PlayerBody]
    red_players: list[PlayerBody]


class SelectRequest(BaseModel):
    champion: str


def _to_players(players: list[PlayerBody], team_name: str) -> list[Player]:
    return [
        Player(
            id=p.id,
            name=p.name,
            role=p.role,
            team=team_name,
            champion_pool=[ChampionPoolEntry(**e.model_dump()) for e in p.champion_pool],
        )
        for p in players
    ]


def _room_payload(machine: DraftStateMachine, room_id: str) -> dict:
    state = machine.require_room(room_id)
    action = state.current_action
    selected = machine.get_selected_champion(room_id)
    return {
        "room_id": room_id,
        "draft_state": state.to_dict(),
        "current_action": action.to_dict() if action else None,
        "selected_champion": selected.to_dict() if selected else None,
    }


@router.post("/rooms", status_code=201)
async def create_room(request: Request, body: CreateRoomRequest):
    """Create a new draft room."""
    machine = _machine(request)
    try:
        state = machine.create_room(
            body.blue_team_name,
            body.red_team_name,
            _to_players(body.blue_players, body.blue_team_name),
            _to_players(body.red_players, body.red_team_name),
        )
    except DraftError as e:
        raise http_error(e)
    room_lock(machine, state.room_id)
    return _room_payload(machine, state.room_id)


@router.get("/rooms")
async def list_rooms(request: Request):
    """List active rooms."""
    return {"rooms": _machine(request).store.list_rooms()}


@router.get("/rooms/{room_id}")
async def get_room(request: Request, room_id: str):
    """Current state of a room."""
    machine = _machine(request)
    with _locked(machine, room_id):
        try:
            return _room_payload(machine, room_id)
        except DraftError as e:
            raise http_error(e)


@router.delete("/rooms/{room_id}")
async def delete_room(request: Request, room_id: str):
    """Close a room."""
    machine = _machine(request)
    with _locked(machine, room_id):
        deleted = machine.delete_room(room_id)
    with _room_locks_lock:
        _room_locks.pop(room_id, None)
    if not deleted:
        raise HTTPException(status_code=404, detail="Room not found")
    return {"status": "deleted"}


@router.post("/rooms/{room_id}/select")
async def select_champion(request: Request, room_id: str, body: SelectRequest):
    """Tentatively select a champion for the current action."""
    machine = _machine(request)
    with _locked(machine, room_id):
        try:
            if machine.catalog.resolve(body.champion) is None:
                raise HTTPException(status_code=400, detail=f"Unknown champion '{body.champion}'")
            if not machine.select_champion(room_id, body.champion):
                raise HTTPException(
                    status_code=409,
                    detail=f"Champion '{body.champion}' is not available",
                )
            return _room_payload(machine, room_id)
        except DraftError as e:
            raise http_error(e)


@router.post("/rooms/{room_id}/lock-in")
async def lock_in(request: Request, room_id: str, include_recommendations: bool = False):
    """Commit the selected champion and advance the draft."""
    machine = _machine(request)
    with _locked(machine, room_id):
        try:
            result = machine.lock_in(room_id)
            response = _room_payload(machine, room_id)
            response["locked"] = {
                "champion": result.champion.to_dict() if result.champion else None,
                "action": result.step.to_dict() if result.step else None,
            }
            if include_recommendations and not result.state.is_complete:
                response["recommendations"] = machine.get_recommendations(room_id).to_dict()
            return response
        except DraftError as e:
            raise http_error(e)


@router.post("/rooms/{room_id}/undo")
async def undo(request: Request, room_id: str):
    """Revert the last committed action."""
    machine = _machine(request)
    with _locked(machine, room_id):
        try:
            state = machine.undo(room_id)
            response = _room_payload(machine, room_id)
        except DraftError as e:
            raise http_error(e)
    response["status"] = "undone" if state is not None else "noop"
    return response


@router.post("/rooms/{room_id}/reset")
async def reset(request: Request, room_id: str):
    """Clear every slot and return to the first ban."""
    machine = _machine(request)
    with _locked(machine, room_id):
        try:
            machine.reset(room_id)
            return _room_payload(machine, room_id)
        except DraftError as e:
            raise http_error(e)


@router.get("/rooms/{room_id}/recommendations")
async def get_recommendations(
    request: Request,
    room_id: str,
    team: Optional[Literal["blue", "red"]] = None,
    enrich: bool = False,
):
    """Ranked recommendations for a side (defaults to the acting team).

    With ``enrich=true`` and an LLM provider configured, the result is
    reordered and annotated by the provider; on failure the rule-based
    result is returned.
    """
    machine = _machine(request)
    with _locked(machine, room_id):
        try:
            result = machine.get_recommendations(room_id, team)
        except DraftError as e:
            raise http_error(e)
        snapshot = copy.deepcopy(machine.require_room(room_id))

    enricher = getattr(request.app.state, "enricher", None)
    if enrich and enricher is not None and result.for_team:
        result = await enricher.enrich(snapshot, result.for_team, result)

    return result.to_dict()


@router.get("/rooms/{room_id}/analysis")
async def get_analysis(request: Request, room_id: str, team: Literal["blue", "red"] = "blue"):
    """Head-to-head composition summary from one side's perspective."""
    machine = _machine(request)
    with _locked(machine, room_id):
        try:
            state = machine.require_room(room_id)
        except DraftError as e:
            raise http_error(e)
        ours = state.team(team).filled_picks
        theirs = state.team("red" if team == "blue" else "blue").filled_picks

    analyzer = machine.engine.analyzer
    return {
        "team": team,
        **analyzer.compare(ours, theirs),
        "team_needs": analyzer.get_team_needs(ours),
    }


@router.get("/champions")
async def list_champions(request: Request, role: Optional[str] = None):
    """Champions in the catalog, optionally for one role by threat level."""
    catalog = _machine(request).catalog
    metas = catalog.get_meta_picks_for_role(role) if role else catalog.all_champions()
    return {
        "champions": [
            {**m.to_champion().to_dict(), "threat_level": m.threat_level}
            for m in metas
        ]
    }
