# app/store/redis_keys.py
from __future__ import annotations

from dataclasses import dataclass

ROOM_KEY_PATTERN = "room:*"


@dataclass(frozen=True)
class RK:
    """
    Redis Key builder for room-scoped keys.
    """
    room_code: str

    def room(self) -> str:
        return f"room:{self.room_code}"  # STRING: RoomStore JSON

    def lock(self) -> str:
        return f"room:{self.room_code}:lock"  # redis-py Lock

    @staticmethod
    def code_from_key(key: str) -> str | None:
        """room:<code> -> <code>; anything else (locks etc.) -> None."""
        if key.count(":") != 1 or not key.startswith("room:"):
            return None
        return key.split(":", 1)[1]
