# app/store/models.py
from __future__ import annotations

from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from app.domain.common.types import Phase, Winner


class PlayerStore(BaseModel):
    pid: str
    name: str
    is_host: bool = False
    word: Optional[str] = None          # secret word for the current game
    clue: Optional[str] = None          # reset every round
    vote: Optional[str] = None          # pid of the accused, reset every round
    is_imposter: bool = False
    joined_at: int = 0


class WordPair(BaseModel):
    civilian: str
    imposter: str


class RoundResult(BaseModel):
    round_no: int
    votes: Dict[str, int] = Field(default_factory=dict)
    most_voted_id: Optional[str] = None
    imposter_caught: bool = False


class RoomStore(BaseModel):
    """
    Full room state. Stored as one JSON blob per room (Redis) or one object (memory).
    players keeps join order; the first player is host until they leave.
    """
    code: str
    players: List[PlayerStore] = Field(default_factory=list)
    phase: Phase = "lobby"
    current_round: int = 1
    max_rounds: int = 3
    word_pair: Optional[WordPair] = None
    imposter_id: Optional[str] = None
    votes: Dict[str, int] = Field(default_factory=dict)  # target pid -> count
    game_started: bool = False
    game_ended: bool = False
    winner: Optional[Winner] = None
    end_reason: str = ""
    created_at: int
    last_activity: int
    # bumped on every phase change; a deferred advance pinned to an old value is stale
    phase_seq: int = 0
    # deadline for the timed phases (words, results), 0 when none
    phase_ends_at: int = 0
    last_result: Optional[RoundResult] = None
    round_results: List[RoundResult] = Field(default_factory=list)

    def get_player(self, pid: Optional[str]) -> Optional[PlayerStore]:
        for p in self.players:
            if p.pid == pid:
                return p
        return None

    def host(self) -> Optional[PlayerStore]:
        for p in self.players:
            if p.is_host:
                return p
        return None
