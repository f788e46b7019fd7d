# app/domain/lifecycle/snapshot.py
from __future__ import annotations

from typing import Any, Dict, Optional

from app.store.models import RoomStore, RoundResult
from app.transport.protocols import OutRoomSnapshot

# From here on the tally and individual votes are public.
_VOTES_PUBLIC = ("results", "gameOver")


def _result_view(result: RoundResult) -> Dict[str, Any]:
    return {
        "roundNo": result.round_no,
        "votes": dict(result.votes),
        "mostVotedId": result.most_voted_id,
        "imposterCaught": result.imposter_caught,
    }


def _revealed_word(room: RoomStore, pid: str) -> Optional[str]:
    if room.word_pair is None:
        return None
    return room.word_pair.imposter if pid == room.imposter_id else room.word_pair.civilian


def room_view(room: RoomStore, viewer_pid: Optional[str] = None) -> Dict[str, Any]:
    """
    What `viewer_pid` is allowed to see.

    - own word only; at gameOver every word (rebuilt from the pair), the imposter and the pair
    - clues as soon as they are submitted
    - during voting only who has voted; targets and tally from results on
    """
    reveal = room.phase == "gameOver"
    votes_public = room.phase in _VOTES_PUBLIC

    players = []
    for p in room.players:
        own = p.pid == viewer_pid
        players.append(
            {
                "id": p.pid,
                "name": p.name,
                "isHost": p.is_host,
                "word": _revealed_word(room, p.pid) if reveal else (p.word if own else None),
                "clue": p.clue,
                "vote": p.vote if (own or votes_public) else None,
                "hasVoted": p.vote is not None,
                "isImposter": p.is_imposter if reveal else None,
            }
        )

    host = room.host()
    return {
        "id": room.code,
        "hostId": host.pid if host else None,
        "players": players,
        "phase": room.phase,
        "currentRound": room.current_round,
        "maxRounds": room.max_rounds,
        "gameStarted": room.game_started,
        "gameEnded": room.game_ended,
        "winner": room.winner,
        "endReason": room.end_reason or None,
        "imposterId": room.imposter_id if reveal else None,
        "wordPair": room.word_pair.model_dump() if (reveal and room.word_pair) else None,
        "votes": dict(room.votes) if votes_public else {},
        "phaseEndsAt": room.phase_ends_at or None,
        "lastResult": _result_view(room.last_result) if room.last_result else None,
        "rounds": [_result_view(r) for r in room.round_results],
        "createdAt": room.created_at,
    }


def build_snapshot(room: RoomStore, viewer_pid: Optional[str] = None) -> OutRoomSnapshot:
    return OutRoomSnapshot(room=room_view(room, viewer_pid))
