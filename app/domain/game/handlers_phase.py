# app/domain/game/handlers_phase.py
from __future__ import annotations

from typing import List, Optional, Tuple

from app.domain.common.errors import RoomError
from app.domain.common.session import error_event, phase_events, room_session
from app.domain.game.engine import advance_phase, new_game
from app.domain.lifecycle.snapshot import build_snapshot
from app.transport.protocols import InAdvancePhase, InNewGame, OutError
from app.util.timeutil import now_ts

Outgoing = List[object]
Result = Tuple[Outgoing, Outgoing]


async def handle_advance_phase(*, app, room_code: str, pid: Optional[str], msg: InAdvancePhase) -> Result:
    if not pid:
        return [OutError(code="NO_PID", message="Missing pid")], []

    repo = app.state.repo
    rules = app.state.rules
    ts = now_ts()

    try:
        async with room_session(repo, room_code, rules=rules, ts=ts) as room:
            seq = room.phase_seq
            advance_phase(room, pid, ts=ts, rules=rules)
    except RoomError as e:
        return [error_event(e)], []

    return [build_snapshot(room, viewer_pid=pid)], phase_events(room, since_seq=seq)


async def handle_new_game(*, app, room_code: str, pid: Optional[str], msg: InNewGame) -> Result:
    if not pid:
        return [OutError(code="NO_PID", message="Missing pid")], []

    repo = app.state.repo
    rules = app.state.rules
    ts = now_ts()

    try:
        async with room_session(repo, room_code, rules=rules, ts=ts) as room:
            seq = room.phase_seq
            new_game(room, pid, ts=ts)
    except RoomError as e:
        return [error_event(e)], []

    return [build_snapshot(room, viewer_pid=pid)], phase_events(room, since_seq=seq)
