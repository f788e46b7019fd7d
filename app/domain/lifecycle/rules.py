# app/domain/lifecycle/rules.py
from __future__ import annotations

import logging

from app.domain.common.end_game import end_game, reset_to_lobby
from app.domain.common.end_round import close_voting
from app.domain.common.errors import GameInProgress, RoomFull
from app.domain.common.fsm import set_phase
from app.domain.common.game_rules import DEFAULT_RULES, GameRules
from app.domain.common.types import LIVE_PHASES
from app.domain.helpers.voting import all_clues_in, all_voted, withdraw_player_votes
from app.store.models import PlayerStore, RoomStore

logger = logging.getLogger(__name__)


def new_room(code: str, host_pid: str, host_name: str, *, ts: int, rules: GameRules = DEFAULT_RULES) -> RoomStore:
    """A fresh lobby holding only its host."""
    return RoomStore(
        code=code,
        players=[PlayerStore(pid=host_pid, name=host_name, is_host=True, joined_at=ts)],
        max_rounds=rules.max_rounds,
        created_at=ts,
        last_activity=ts,
    )


def join_room(room: RoomStore, pid: str, name: str, *, ts: int, rules: GameRules = DEFAULT_RULES) -> PlayerStore:
    """
    Add a player to the lobby.
    A pid already in the room is a rejoin: allowed in any phase, only the name changes.
    """
    existing = room.get_player(pid)
    if existing is not None:
        existing.name = name
        return existing

    if room.phase != "lobby":
        raise GameInProgress(f"Room {room.code} is in phase {room.phase}")
    if len(room.players) >= rules.room_cap:
        raise RoomFull(f"Room {room.code} already has {len(room.players)} players")

    player = PlayerStore(pid=pid, name=name, is_host=not room.players, joined_at=ts)
    room.players.append(player)
    return player


def leave_room(room: RoomStore, pid: str, *, ts: int, rules: GameRules = DEFAULT_RULES) -> bool:
    """
    Remove a player. Returns True when the room is now empty (caller deletes it).

    Mid-game consequences:
      - the imposter leaving ends the game, civilians win
      - dropping below rules.min_players sends the room back to the lobby
      - otherwise the clue/vote completion checks run again
    """
    player = room.get_player(pid)
    if player is None:
        return not room.players

    withdraw_player_votes(room, pid)
    room.players = [p for p in room.players if p.pid != pid]
    if not room.players:
        return True

    if player.is_host:
        room.players[0].is_host = True
        logger.info("room %s: host passed from %s to %s", room.code, pid, room.players[0].pid)

    if room.phase in LIVE_PHASES:
        if pid == room.imposter_id:
            end_game(room, winner="civilians", reason="IMPOSTER_LEFT", ts=ts)
        elif len(room.players) < rules.min_players:
            reset_to_lobby(room, ts=ts, reason="NOT_ENOUGH_PLAYERS")
        elif room.phase == "clues" and all_clues_in(room):
            set_phase(room, "voting", ts=ts)
        elif room.phase == "voting" and all_voted(room):
            close_voting(room, rules=rules, ts=ts)
    return False
