# app/domain/common/fsm.py
from __future__ import annotations

import logging

from app.domain.common.errors import InvalidPhase
from app.domain.common.types import Phase
from app.store.models import RoomStore

logger = logging.getLogger(__name__)

# "lobby" is reachable from everywhere: NewGame is a forced reset.
PHASE_TRANSITIONS: dict[Phase, tuple[Phase, ...]] = {
    "lobby": ("words", "lobby"),
    "words": ("clues", "gameOver", "lobby"),
    "clues": ("voting", "gameOver", "lobby"),
    "voting": ("results", "gameOver", "lobby"),
    "results": ("words", "gameOver", "lobby"),
    "gameOver": ("lobby",),
}


def can_transition_phase(current: Phase, target: Phase) -> bool:
    """
    Validate phase transitions.
    """
    return target in PHASE_TRANSITIONS.get(current, ())


def set_phase(room: RoomStore, target: Phase, *, ts: int, duration_sec: int = 0) -> None:
    """
    Move the room to `target`, bump phase_seq and arm (or clear) the phase deadline.
    """
    if not can_transition_phase(room.phase, target):
        raise InvalidPhase(f"Cannot move from {room.phase} to {target}")

    logger.debug("room %s: %s -> %s (round %s)", room.code, room.phase, target, room.current_round)
    room.phase = target
    room.phase_seq += 1
    room.phase_ends_at = ts + duration_sec if duration_sec > 0 else 0
    room.game_ended = target == "gameOver"
