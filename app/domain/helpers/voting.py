from __future__ import annotations

from typing import Dict, Mapping, Optional

from app.store.models import PlayerStore, RoomStore


def _decrement(votes: Dict[str, int], target: str) -> None:
    count = votes.get(target, 0) - 1
    if count > 0:
        votes[target] = count
    else:
        votes.pop(target, None)


def record_vote(room: RoomStore, voter: PlayerStore, target_pid: str) -> None:
    """
    Count `voter`'s vote for `target_pid`.
    A repeated vote moves the voter's single vote instead of adding a second one.
    """
    if voter.vote is not None:
        _decrement(room.votes, voter.vote)
    voter.vote = target_pid
    room.votes[target_pid] = room.votes.get(target_pid, 0) + 1


def withdraw_player_votes(room: RoomStore, pid: str) -> None:
    """
    Remove every trace of `pid` from the tally (used when a player leaves):
    their own vote is taken back and votes cast against them are voided.
    """
    player = room.get_player(pid)
    if player is not None and player.vote is not None:
        _decrement(room.votes, player.vote)
        player.vote = None

    room.votes.pop(pid, None)
    for p in room.players:
        if p.vote == pid:
            p.vote = None


def most_voted(votes: Mapping[str, int]) -> Optional[str]:
    """
    Plurality target. Ties go to the first id holding the top count in
    iteration order (insertion order of the first vote each target got).
    No votes -> None.
    """
    best: Optional[str] = None
    best_count = 0
    for pid, count in votes.items():
        if count > best_count:
            best, best_count = pid, count
    return best


def all_voted(room: RoomStore) -> bool:
    return bool(room.players) and all(p.vote is not None for p in room.players)


def all_clues_in(room: RoomStore) -> bool:
    return bool(room.players) and all(p.clue is not None for p in room.players)
