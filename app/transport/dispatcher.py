# app/transport/dispatcher.py
from __future__ import annotations

from typing import Any, Dict, List, Tuple

from app.transport.protocols import (
    parse_incoming,
    dump_events,
    OutError,
    InCreateRoom,
    InJoin,
    InLeave,
    InSnapshot,
    InStartGame,
    InSubmitClue,
    InVote,
    InAdvancePhase,
    InNewGame,
)
from app.domain.lifecycle.handlers import (
    handle_create_room,
    handle_join,
    handle_leave,
    handle_snapshot,
)
from app.domain.game.handlers import (
    handle_start_game,
    handle_submit_clue,
    handle_submit_vote,
    handle_advance_phase,
    handle_new_game,
)

DispatchResult = Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]
# (to_sender_events, to_room_events), each event is JSON dict

_HANDLERS = {
    InJoin: handle_join,
    InLeave: handle_leave,
    InSnapshot: handle_snapshot,
    InStartGame: handle_start_game,
    InSubmitClue: handle_submit_clue,
    InVote: handle_submit_vote,
    InAdvancePhase: handle_advance_phase,
    InNewGame: handle_new_game,
}


async def dispatch_message(*, app, raw: Dict[str, Any]) -> DispatchResult:
    """
    Transport layer calls this.
    - Parses + validates raw JSON
    - Routes to the correct domain handler (room code and pid come from the message)
    - Returns (to_sender, to_room) events as JSON dicts

    NOTE: This file contains NO storage access and NO game rules.
    """
    try:
        msg = parse_incoming(raw)
    except ValueError as e:
        err = OutError(code="BAD_MESSAGE", message=str(e))
        return dump_events([err]), []

    if isinstance(msg, InCreateRoom):
        to_sender, to_room = await handle_create_room(app=app, room_code="", pid=msg.player_id, msg=msg)
        return dump_events(to_sender), dump_events(to_room)

    handler = _HANDLERS[type(msg)]
    to_sender, to_room = await handler(app=app, room_code=msg.room_id, pid=msg.player_id, msg=msg)
    return dump_events(to_sender), dump_events(to_room)
