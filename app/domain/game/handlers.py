# app/domain/game/handlers.py
from __future__ import annotations

from app.domain.game.handlers_start import handle_start_game
from app.domain.game.handlers_clue import handle_submit_clue
from app.domain.game.handlers_vote import handle_submit_vote
from app.domain.game.handlers_phase import handle_advance_phase, handle_new_game

__all__ = [
    "handle_start_game",
    "handle_submit_clue",
    "handle_submit_vote",
    "handle_advance_phase",
    "handle_new_game",
]
