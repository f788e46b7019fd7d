# app/domain/common/types.py
from __future__ import annotations

from typing import Literal

Phase = Literal["lobby", "words", "clues", "voting", "results", "gameOver"]
Winner = Literal["civilians", "imposter"]

# Phases in which a game is running and roles are live
LIVE_PHASES: tuple[Phase, ...] = ("words", "clues", "voting", "results")
