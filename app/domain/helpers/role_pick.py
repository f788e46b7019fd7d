from __future__ import annotations

import random
from typing import Optional, Sequence

from app.domain.common.words import WordPairTuple
from app.store.models import PlayerStore, RoomStore, WordPair


def _pick_random(items: Sequence, rng: random.Random):
    return rng.choice(list(items))


def assign_imposter_and_words(
    room: RoomStore,
    word_pairs: Sequence[WordPairTuple],
    *,
    rng: Optional[random.Random] = None,
    seed: Optional[str] = None,
) -> PlayerStore:
    """
    Pick one word pair and one imposter uniformly at random:
      - imposter gets the imposter word
      - everyone else gets the civilian word

    Called once per game; later rounds keep the same imposter and pair.
    An empty room or a catalog of fewer than 2 pairs is a caller bug (ValueError).
    Returns the imposter.
    """
    if not room.players:
        raise ValueError("Cannot assign roles in an empty room")
    if len(word_pairs) < 2:
        raise ValueError("Word catalog needs at least 2 pairs")

    rng = rng or random.Random(seed)
    civilian_word, imposter_word = _pick_random(word_pairs, rng)
    imposter = _pick_random(room.players, rng)

    room.word_pair = WordPair(civilian=civilian_word, imposter=imposter_word)
    room.imposter_id = imposter.pid
    for p in room.players:
        p.is_imposter = p.pid == imposter.pid
        p.word = imposter_word if p.is_imposter else civilian_word

    return imposter
