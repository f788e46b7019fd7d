# app/domain/common/game_rules.py
from __future__ import annotations

from dataclasses import dataclass

from app.domain.common.words import DEFAULT_WORD_PAIRS, WordPairTuple, load_word_pairs

MIN_PLAYERS = 3
MAX_ROUNDS = 3
WORDS_REVEAL_SEC = 5
RESULTS_DISPLAY_SEC = 5
ROOM_CAP = 12


@dataclass(frozen=True)
class GameRules:
    """
    Knobs the engine reads. Timed values of 0 mean "no automatic advance".
    """
    min_players: int = MIN_PLAYERS
    max_rounds: int = MAX_ROUNDS
    words_reveal_sec: int = WORDS_REVEAL_SEC
    results_display_sec: int = RESULTS_DISPLAY_SEC
    room_cap: int = ROOM_CAP
    word_pairs: tuple[WordPairTuple, ...] = DEFAULT_WORD_PAIRS


DEFAULT_RULES = GameRules()


def rules_from_settings(settings) -> GameRules:
    pairs = load_word_pairs(settings.WORD_PAIRS_FILE) if settings.WORD_PAIRS_FILE else DEFAULT_WORD_PAIRS
    return GameRules(
        words_reveal_sec=max(0, settings.WORDS_REVEAL_SEC),
        results_display_sec=max(0, settings.RESULTS_DISPLAY_SEC),
        room_cap=max(MIN_PLAYERS, settings.ROOM_CAP),
        word_pairs=pairs,
    )
