# app/domain/game/engine.py
"""
Room engine: the game-phase operations.

Every function takes the room it mutates. Preconditions are checked before
anything is touched, so a raised RoomError leaves the room as it was.
"""
from __future__ import annotations

import logging
import random
from typing import Optional

from app.domain.common.end_game import reset_to_lobby
from app.domain.common.end_round import close_voting, reset_round_fields, start_next_round
from app.domain.common.errors import InsufficientPlayers, InvalidPhase
from app.domain.common.fsm import set_phase
from app.domain.common.game_rules import DEFAULT_RULES, GameRules
from app.domain.common.validation import require_host, require_phase, require_player
from app.domain.helpers.role_pick import assign_imposter_and_words
from app.domain.helpers.voting import all_clues_in, all_voted, record_vote
from app.store.models import RoomStore

logger = logging.getLogger(__name__)


def start_game(
    room: RoomStore,
    pid: str,
    *,
    ts: int,
    rules: GameRules = DEFAULT_RULES,
    rng: Optional[random.Random] = None,
) -> None:
    """lobby -> words. Host only, needs rules.min_players players."""
    require_host(room, pid)
    require_phase(room, "lobby")
    if len(room.players) < rules.min_players:
        raise InsufficientPlayers(f"Need at least {rules.min_players} players to start")

    reset_round_fields(room)
    room.last_result = None
    room.round_results = []
    imposter = assign_imposter_and_words(room, rules.word_pairs, rng=rng)

    room.current_round = 1
    room.max_rounds = rules.max_rounds
    room.winner = None
    room.end_reason = ""
    room.game_started = True
    set_phase(room, "words", ts=ts, duration_sec=rules.words_reveal_sec)
    logger.info("room %s: game started with %d players", room.code, len(room.players))
    logger.debug("room %s: imposter is %s", room.code, imposter.pid)


def submit_clue(room: RoomStore, pid: str, clue: str, *, ts: int) -> None:
    """
    Store the player's clue (resubmitting overwrites it).
    The last missing clue moves the room to voting.
    """
    player = require_player(room, pid)
    require_phase(room, "clues")

    player.clue = clue
    if all_clues_in(room):
        set_phase(room, "voting", ts=ts)


def submit_vote(
    room: RoomStore,
    pid: str,
    target_pid: str,
    *,
    ts: int,
    rules: GameRules = DEFAULT_RULES,
) -> None:
    """
    Count a vote. Once every player has voted, voting closes and the round
    is evaluated.
    """
    voter = require_player(room, pid)
    require_player(room, target_pid)
    require_phase(room, "voting")

    record_vote(room, voter, target_pid)
    if all_voted(room):
        close_voting(room, rules=rules, ts=ts)


def advance_phase(room: RoomStore, pid: str, *, ts: int, rules: GameRules = DEFAULT_RULES) -> None:
    """
    Host override: push the room one step forward without waiting for the
    reveal window, missing clues or missing votes.
    """
    require_host(room, pid)

    if room.phase == "words":
        set_phase(room, "clues", ts=ts)
    elif room.phase == "clues":
        set_phase(room, "voting", ts=ts)
    elif room.phase == "voting":
        close_voting(room, rules=rules, ts=ts)
    elif room.phase == "results":
        start_next_round(room, rules=rules, ts=ts)
    else:
        raise InvalidPhase(f"Cannot advance from phase {room.phase}")


def new_game(room: RoomStore, pid: str, *, ts: int) -> None:
    """Back to the lobby from any phase. Host only."""
    require_host(room, pid)
    reset_to_lobby(room, ts=ts)


def expire_phase(
    room: RoomStore,
    ts: int,
    *,
    rules: GameRules = DEFAULT_RULES,
    phase_seq: Optional[int] = None,
) -> bool:
    """
    Apply a due timed advance (words -> clues, results -> next round).

    Stale calls are no-ops: the deadline is cleared by every phase change, and
    a caller that pinned `phase_seq` is ignored once the room has moved on.
    Returns True if the room changed.
    """
    if phase_seq is not None and phase_seq != room.phase_seq:
        return False
    if not room.phase_ends_at or ts < room.phase_ends_at:
        return False

    if room.phase == "words":
        set_phase(room, "clues", ts=ts)
        return True
    if room.phase == "results":
        start_next_round(room, rules=rules, ts=ts)
        return True
    return False
