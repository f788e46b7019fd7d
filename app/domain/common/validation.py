# app/domain/common/validation.py
from __future__ import annotations

from typing import Optional

from app.domain.common.errors import Forbidden, InvalidPhase, PlayerNotFound
from app.domain.common.types import Phase
from app.store.models import PlayerStore, RoomStore


def is_host(player: Optional[PlayerStore]) -> bool:
    """Check if player is the room host."""
    return player is not None and player.is_host


def require_player(room: RoomStore, pid: Optional[str]) -> PlayerStore:
    """Return the player or raise PlayerNotFound."""
    player = room.get_player(pid)
    if player is None:
        raise PlayerNotFound(f"Player {pid} is not in room {room.code}")
    return player


def require_host(room: RoomStore, pid: Optional[str]) -> PlayerStore:
    # Strangers get Forbidden as well: the action is host-only either way.
    player = room.get_player(pid)
    if not is_host(player):
        raise Forbidden()
    return player


def require_phase(room: RoomStore, *phases: Phase) -> None:
    if room.phase not in phases:
        raise InvalidPhase(f"Not allowed in phase {room.phase}")
