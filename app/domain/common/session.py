# app/domain/common/session.py
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, List

from app.domain.common.errors import RoomError, RoomNotFound
from app.domain.common.game_rules import GameRules
from app.domain.game.engine import expire_phase
from app.store.models import RoomStore
from app.transport.protocols import OutError, OutGameEnd, OutgoingEvent, OutPhaseChanged


@asynccontextmanager
async def room_session(repo, room_code: str, *, rules: GameRules, ts: int) -> AsyncIterator[RoomStore]:
    """
    Single-writer access to one room:
      - holds the room lock for the whole body
      - yields a private copy with any due timed advance already applied
      - saves only if the body finishes; an exception discards every change
    """
    async with repo.lock(room_code):
        room = await repo.get_room(room_code)
        if room is None:
            raise RoomNotFound(f"Room {room_code} not found")
        expire_phase(room, ts, rules=rules)
        yield room
        room.last_activity = ts
        await repo.save_room(room)


def error_event(err: RoomError) -> OutError:
    return OutError(code=err.code, message=err.message)


def phase_events(room: RoomStore, *, since_seq: int) -> List[OutgoingEvent]:
    """phase_changed (+ game_end) if the room moved since `since_seq`."""
    if room.phase_seq == since_seq:
        return []
    events: List[OutgoingEvent] = [OutPhaseChanged(phase=room.phase, round_no=room.current_round)]
    if room.phase == "gameOver":
        events.append(
            OutGameEnd(
                winner=room.winner,
                reason=room.end_reason,
                imposter_id=room.imposter_id,
                word_pair=room.word_pair.model_dump() if room.word_pair else None,
                round_no=room.current_round,
            )
        )
    return events
