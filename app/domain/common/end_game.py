from __future__ import annotations

import logging
from typing import Optional

from app.domain.common.fsm import set_phase
from app.domain.common.types import Winner
from app.store.models import RoomStore

logger = logging.getLogger(__name__)


def end_game(room: RoomStore, *, winner: Winner, reason: str, ts: int) -> None:
    """
    Close the game: phase -> gameOver with a winner.
    Player words are cleared; imposter_id and word_pair stay so the final
    snapshot can rebuild the reveal.
    """
    set_phase(room, "gameOver", ts=ts)
    for p in room.players:
        p.word = None
    room.winner = winner
    room.end_reason = reason
    logger.info("room %s: game over, %s win (%s, round %s)", room.code, winner, reason, room.current_round)


def reset_to_lobby(room: RoomStore, *, ts: int, reason: Optional[str] = None) -> None:
    """
    Forced reset back to the lobby. Safe from any phase.
    Players, host and join order are kept; everything game-scoped is cleared.
    """
    set_phase(room, "lobby", ts=ts)
    room.current_round = 1
    room.votes = {}
    room.winner = None
    room.imposter_id = None
    room.word_pair = None
    room.game_started = False
    room.game_ended = False
    room.end_reason = reason or ""
    room.last_result = None
    room.round_results = []
    for p in room.players:
        p.word = None
        p.clue = None
        p.vote = None
        p.is_imposter = False
