from __future__ import annotations

from .role_pick import assign_imposter_and_words
from .voting import all_clues_in, all_voted, most_voted, record_vote, withdraw_player_votes

__all__ = [
    "assign_imposter_and_words",
    "all_clues_in",
    "all_voted",
    "most_voted",
    "record_vote",
    "withdraw_player_votes",
]
