# app/domain/common/words.py
from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, Tuple

WordPairTuple = Tuple[str, str]

# (civilian word, imposter word)
DEFAULT_WORD_PAIRS: tuple[WordPairTuple, ...] = (
    ("CAT", "DOG"),
    ("APPLE", "ORANGE"),
    ("CAR", "BIKE"),
    ("COFFEE", "TEA"),
    ("BEACH", "DESERT"),
    ("PIANO", "GUITAR"),
    ("PIZZA", "BURGER"),
    ("SUN", "MOON"),
    ("TRAIN", "BUS"),
    ("RIVER", "LAKE"),
)


def validate_word_pairs(pairs: Iterable[object]) -> tuple[WordPairTuple, ...]:
    """
    Normalise a catalog to upper-case (civilian, imposter) tuples.
    Raises ValueError on malformed entries or a catalog of fewer than 2 pairs.
    """
    out: list[WordPairTuple] = []
    for entry in pairs:
        if not isinstance(entry, (list, tuple)) or len(entry) != 2:
            raise ValueError(f"Word pair must have exactly two words: {entry!r}")
        civilian, imposter = entry
        if not isinstance(civilian, str) or not isinstance(imposter, str):
            raise ValueError(f"Word pair entries must be strings: {entry!r}")
        civilian, imposter = civilian.strip().upper(), imposter.strip().upper()
        if not civilian or not imposter or civilian == imposter:
            raise ValueError(f"Word pair needs two different non-empty words: {entry!r}")
        out.append((civilian, imposter))

    if len(out) < 2:
        raise ValueError("Word catalog needs at least 2 pairs")
    return tuple(out)


def load_word_pairs(path: str | Path) -> tuple[WordPairTuple, ...]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError("Word pairs file must contain a JSON list")
    return validate_word_pairs(data)
