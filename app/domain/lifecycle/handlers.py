# app/domain/lifecycle/handlers.py
from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from app.util.timeutil import now_ts
from app.domain.common.errors import NoRoomCode, RoomError, RoomNotFound
from app.domain.common.session import error_event, phase_events, room_session
from app.domain.game.engine import expire_phase
from app.domain.lifecycle.rules import join_room, leave_room, new_room
from app.domain.lifecycle.snapshot import build_snapshot
from app.transport.protocols import (
    OutgoingEvent,
    OutError,
    OutRoomCreated,
    OutRoomClosed,
    OutPlayerJoined,
    OutPlayerLeft,
    InCreateRoom,
    InJoin,
    InLeave,
    InSnapshot,
)

logger = logging.getLogger(__name__)

# Returns: (to_sender, to_room)
Result = Tuple[List[OutgoingEvent], List[OutgoingEvent]]

# SET NX races on the generated code before giving up
_CREATE_ATTEMPTS = 5


async def handle_create_room(*, app, room_code: str, pid: Optional[str], msg: InCreateRoom) -> Result:
    """
    create_room ignores `room_code`: the registry always hands out a fresh one.
    The creator becomes host.
    """
    repo = app.state.repo
    rules = app.state.rules
    ts = now_ts()

    try:
        for _ in range(_CREATE_ATTEMPTS):
            code = await repo.generate_unique_code()
            room = new_room(code, msg.player_id, msg.player_name, ts=ts, rules=rules)
            if await repo.create_room(room):
                break
        else:
            raise NoRoomCode()
    except NoRoomCode as e:
        logger.warning("room create by %s failed: %s", msg.player_id, e.message)
        return [error_event(e)], []

    logger.info("room %s created by %s", code, msg.player_id)
    return [OutRoomCreated(room_id=code), build_snapshot(room, viewer_pid=msg.player_id)], []


async def handle_join(*, app, room_code: str, pid: Optional[str], msg: InJoin) -> Result:
    """
    Join:
    - room must exist and still be in the lobby (rejoin by a known pid always works)
    - send snapshot to joiner
    - player_joined to room
    """
    if not pid:
        return [OutError(code="NO_PID", message="Missing pid")], []

    repo = app.state.repo
    rules = app.state.rules
    ts = now_ts()

    try:
        async with room_session(repo, room_code, rules=rules, ts=ts) as room:
            join_room(room, pid, msg.player_name, ts=ts, rules=rules)
    except RoomError as e:
        return [error_event(e)], []

    return [build_snapshot(room, viewer_pid=pid)], [OutPlayerJoined(player_id=pid, name=msg.player_name)]


async def handle_leave(*, app, room_code: str, pid: Optional[str], msg: InLeave) -> Result:
    """
    Leave: remove the player for good.
    Empty rooms are deleted; a missing room is reported as closed, not as an error.
    """
    if not pid:
        return [OutError(code="NO_PID", message="Missing pid")], []

    repo = app.state.repo
    rules = app.state.rules
    ts = now_ts()

    async with repo.lock(room_code):
        room = await repo.get_room(room_code)
        if room is None:
            return [OutRoomClosed(room_id=room_code)], []

        expire_phase(room, ts, rules=rules)
        seq = room.phase_seq
        if leave_room(room, pid, ts=ts, rules=rules):
            await repo.delete_room(room_code)
            logger.info("room %s deleted (last player left)", room_code)
            return [OutRoomClosed(room_id=room_code)], [OutPlayerLeft(player_id=pid)]

        room.last_activity = ts
        await repo.save_room(room)

    return [build_snapshot(room, viewer_pid=pid)], [OutPlayerLeft(player_id=pid), *phase_events(room, since_seq=seq)]


async def handle_snapshot(*, app, room_code: str, pid: Optional[str], msg: InSnapshot) -> Result:
    """
    Polling read. Applies a due timed advance first, then returns the view
    for `pid` (anonymous when pid is None).
    """
    repo = app.state.repo
    rules = app.state.rules
    ts = now_ts()

    async with repo.lock(room_code):
        room = await repo.get_room(room_code)
        if room is None:
            return [error_event(RoomNotFound(f"Room {room_code} not found"))], []
        # reads only write when a due timed advance moved the room
        if expire_phase(room, ts, rules=rules):
            await repo.save_room(room)

    return [build_snapshot(room, viewer_pid=pid)], []
