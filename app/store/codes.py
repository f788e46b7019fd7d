# app/store/codes.py
from __future__ import annotations

import random
import string

# Attempts before giving up on finding a free room code.
CODE_ATTEMPTS = 50

_rng = random.SystemRandom()


def gen_room_code(n: int = 4) -> str:
    alphabet = string.ascii_uppercase
    return "".join(_rng.choice(alphabet) for _ in range(n))
