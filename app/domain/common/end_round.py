from __future__ import annotations

from app.domain.common.end_game import end_game
from app.domain.common.fsm import set_phase
from app.domain.common.game_rules import GameRules
from app.domain.helpers.voting import most_voted
from app.store.models import RoomStore, RoundResult


def reset_round_fields(room: RoomStore) -> None:
    room.votes = {}
    for p in room.players:
        p.clue = None
        p.vote = None


def close_voting(room: RoomStore, *, rules: GameRules, ts: int) -> RoundResult:
    """
    Tally the round and decide what happens next:
      - imposter is the plurality pick     -> gameOver, civilians win
      - otherwise, last round was played   -> gameOver, imposter wins
      - otherwise                          -> results (next round after the pause)
    """
    target = most_voted(room.votes)
    caught = target is not None and target == room.imposter_id

    result = RoundResult(
        round_no=room.current_round,
        votes=dict(room.votes),
        most_voted_id=target,
        imposter_caught=caught,
    )
    room.last_result = result
    room.round_results.append(result)

    if caught:
        end_game(room, winner="civilians", reason="IMPOSTER_CAUGHT", ts=ts)
    elif room.current_round >= room.max_rounds:
        end_game(room, winner="imposter", reason="ROUNDS_EXHAUSTED", ts=ts)
    else:
        set_phase(room, "results", ts=ts, duration_sec=rules.results_display_sec)
    return result


def start_next_round(room: RoomStore, *, rules: GameRules, ts: int) -> None:
    """
    results -> words. Same imposter and word pair; clues and votes start over.
    """
    room.current_round = min(room.current_round + 1, room.max_rounds)
    reset_round_fields(room)
    set_phase(room, "words", ts=ts, duration_sec=rules.words_reveal_sec)
