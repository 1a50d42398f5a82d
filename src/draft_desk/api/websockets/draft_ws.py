"""WebSocket handler for interactive draft rooms."""

import copy
import json
import logging
from typing import Optional

from fastapi import WebSocket, WebSocketDisconnect

from draft_desk.api.routes.draft import room_lock
from draft_desk.errors import DraftError
from draft_desk.services.draft_machine import DraftStateMachine
from draft_desk.services.llm_enricher import LLMEnricher

logger = logging.getLogger(__name__)

# Commands after which the client gets fresh recommendations
TRANSITIONS = frozenset({"lock_in", "undo", "reset"})


def _state_message(machine: DraftStateMachine, room_id: str) -> dict:
    state = machine.require_room(room_id)
    action = state.current_action
    selected = machine.get_selected_champion(room_id)
    return {
        "type": "draft_state",
        "draft_state": state.to_dict(),
        "current_action": action.to_dict() if action else None,
        "selected_champion": selected.to_dict() if selected else None,
    }


def _error_message(message: str) -> dict:
    return {"type": "error", "message": message}


async def _recommendations_message(
    machine: DraftStateMachine,
    room_id: str,
    team: Optional[str],
    enricher: Optional[LLMEnricher],
) -> dict:
    with room_lock(machine, room_id):
        result = machine.get_recommendations(room_id, team)
        state = copy.deepcopy(machine.require_room(room_id))
    if enricher is not None and result.for_team and not state.is_complete:
        result = await enricher.enrich(state, result.for_team, result)
    return {"type": "recommendations", **result.to_dict()}


def _handle_command(machine: DraftStateMachine, room_id: str, msg: dict) -> list[dict]:
    """Apply one state-changing command and return the replies to send."""
    msg_type = msg.get("type")
    with room_lock(machine, room_id):
        if msg_type == "select":
            champion = msg.get("champion")
            if not isinstance(champion, str) or not champion:
                return [_error_message("select requires a champion")]
            if not machine.select_champion(room_id, champion):
                return [_error_message(f"Champion '{champion}' cannot be selected")]
            return [_state_message(machine, room_id)]

        if msg_type == "lock_in":
            result = machine.lock_in(room_id)
            replies = [_state_message(machine, room_id)]
            if result.state.is_complete:
                replies.append({
                    "type": "draft_complete",
                    "blue_team": result.state.blue_team.to_dict(),
                    "red_team": result.state.red_team.to_dict(),
                })
            return replies

        if msg_type == "undo":
            machine.undo(room_id)
            return [_state_message(machine, room_id)]

        if msg_type == "reset":
            machine.reset(room_id)
            return [_state_message(machine, room_id)]

    return [_error_message(f"Unknown message type: {msg_type}")]


async def draft_websocket(
    websocket: WebSocket,
    room_id: str,
    machine: DraftStateMachine,
    enricher: Optional[LLMEnricher] = None,
):
    """Handle a WebSocket connection for one draft room.

    Client messages: select, lock_in, undo, reset, request_analytics.
    Server messages: draft_state, recommendations, draft_complete, error.

    Args:
        websocket: The WebSocket connection
        room_id: ID of the draft room
        machine: DraftStateMachine instance
        enricher: Optional LLM enricher applied to recommendations
    """
    if machine.get_room(room_id) is None:
        await websocket.close(code=4004, reason="Room not found")
        return

    await websocket.accept()
    logger.info(f"WebSocket connected to room {room_id}")

    try:
        await websocket.send_json(_state_message(machine, room_id))

        while True:
            data = await websocket.receive_text()
            try:
                msg = json.loads(data)
            except json.JSONDecodeError:
                logger.warning(f"Invalid JSON received: {data}")
                await websocket.send_json(_error_message("Invalid JSON"))
                continue
            if not isinstance(msg, dict):
                await websocket.send_json(_error_message("Expected a JSON object"))
                continue

            try:
                if msg.get("type") == "request_analytics":
                    reply = await _recommendations_message(
                        machine, room_id, msg.get("team"), enricher
                    )
                    await websocket.send_json(reply)
                    continue

                replies = _handle_command(machine, room_id, msg)
                for reply in replies:
                    await websocket.send_json(reply)

                if msg.get("type") in TRANSITIONS and replies[-1]["type"] == "draft_state":
                    await websocket.send_json(
                        await _recommendations_message(machine, room_id, None, enricher)
                    )
            except (DraftError, ValueError) as e:
                await websocket.send_json(_error_message(str(e)))

    except WebSocketDisconnect:
        logger.info(f"WebSocket disconnected from room {room_id}")
