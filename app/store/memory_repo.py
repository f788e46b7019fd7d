# app/store/memory_repo.py
from __future__ import annotations

import asyncio
import logging
from typing import Dict, List, Optional

from app.domain.common.errors import NoRoomCode
from app.store.codes import CODE_ATTEMPTS, gen_room_code
from app.store.models import RoomStore
from app.util.timeutil import now_ts

logger = logging.getLogger(__name__)


class MemoryRepo:
    """
    In-process room registry.
    - room_code -> RoomStore, plus one asyncio.Lock per room
    - get/save hand out copies, so a handler that fails never leaks half a change
    """
    def __init__(self, code_length: int = 4) -> None:
        self.code_length = code_length
        self._rooms: Dict[str, RoomStore] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    def lock(self, room_code: str) -> asyncio.Lock:
        lk = self._locks.get(room_code)
        if lk is None:
            lk = self._locks[room_code] = asyncio.Lock()
        return lk

    async def generate_unique_code(self) -> str:
        for _ in range(CODE_ATTEMPTS):
            code = gen_room_code(self.code_length)
            if code not in self._rooms:
                return code
        raise NoRoomCode(f"No free room code after {CODE_ATTEMPTS} attempts")

    async def create_room(self, room: RoomStore) -> bool:
        """Store a new room; False if the code is taken."""
        if room.code in self._rooms:
            return False
        self._rooms[room.code] = room.model_copy(deep=True)
        return True

    async def room_exists(self, room_code: str) -> bool:
        return room_code in self._rooms

    async def get_room(self, room_code: str) -> Optional[RoomStore]:
        room = self._rooms.get(room_code)
        if room is None:
            # lookups of unknown codes must not leave a lock behind
            self._locks.pop(room_code, None)
            return None
        return room.model_copy(deep=True)

    async def save_room(self, room: RoomStore) -> None:
        self._rooms[room.code] = room.model_copy(deep=True)

    async def delete_room(self, room_code: str) -> bool:
        self._locks.pop(room_code, None)
        return self._rooms.pop(room_code, None) is not None

    async def list_codes(self) -> List[str]:
        return sorted(self._rooms)

    async def evict_stale(self, max_age_sec: int, ts: Optional[int] = None) -> List[str]:
        """Delete rooms created at least `max_age_sec` ago. Returns evicted codes."""
        ts = now_ts() if ts is None else ts
        stale = [code for code, room in self._rooms.items() if ts - room.created_at >= max_age_sec]
        for code in stale:
            await self.delete_room(code)
            logger.info("room %s evicted (age >= %ss)", code, max_age_sec)
        return stale
