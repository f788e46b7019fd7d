# app/store/redis_repo.py
from __future__ import annotations

import logging
from typing import List, Optional

from redis.asyncio import Redis
from redis.asyncio.lock import Lock

from app.domain.common.errors import NoRoomCode
from app.store.codes import CODE_ATTEMPTS, gen_room_code
from app.store.models import RoomStore
from app.store.redis_keys import RK, ROOM_KEY_PATTERN
from app.util.timeutil import now_ts

logger = logging.getLogger(__name__)


class RedisRepo:
    """
    Redis-backed room registry. One JSON string per room; the key expires at
    created_at + room_ttl_sec, so Redis does the age-based eviction itself.
    """
    def __init__(self, r: Redis, room_ttl_sec: int = 1800, code_length: int = 4, lock_timeout_sec: int = 10):
        self.r = r
        self.room_ttl_sec = room_ttl_sec
        self.code_length = code_length
        self.lock_timeout_sec = lock_timeout_sec

    def _dec(self, x):
        """Decode redis bytes -> str; pass through str/None safely."""
        if x is None:
            return None
        if isinstance(x, bytes):
            return x.decode("utf-8")
        return x

    def _expire_at(self, room: RoomStore) -> int:
        return room.created_at + self.room_ttl_sec

    # ----------------------------
    # Locking
    # ----------------------------
    def lock(self, room_code: str) -> Lock:
        return self.r.lock(
            RK(room_code).lock(),
            timeout=self.lock_timeout_sec,
            blocking_timeout=self.lock_timeout_sec,
        )

    # ----------------------------
    # Rooms
    # ----------------------------
    async def generate_unique_code(self) -> str:
        for _ in range(CODE_ATTEMPTS):
            code = gen_room_code(self.code_length)
            if not await self.room_exists(code):
                return code
        raise NoRoomCode(f"No free room code after {CODE_ATTEMPTS} attempts")

    async def create_room(self, room: RoomStore) -> bool:
        """SET NX: False if another room grabbed the code first."""
        ok = await self.r.set(RK(room.code).room(), room.model_dump_json(), nx=True, exat=self._expire_at(room))
        return bool(ok)

    async def room_exists(self, room_code: str) -> bool:
        return bool(await self.r.exists(RK(room_code).room()))

    async def get_room(self, room_code: str) -> Optional[RoomStore]:
        raw = await self.r.get(RK(room_code).room())
        if not raw:
            return None
        return RoomStore.model_validate_json(self._dec(raw))

    async def save_room(self, room: RoomStore) -> None:
        key = RK(room.code).room()
        expire_at = self._expire_at(room)
        if expire_at <= now_ts():
            await self.r.delete(key)
            return
        await self.r.set(key, room.model_dump_json(), exat=expire_at)

    async def delete_room(self, room_code: str) -> bool:
        return bool(await self.r.delete(RK(room_code).room()))

    async def list_codes(self) -> List[str]:
        codes = set()
        async for k in self.r.scan_iter(match=ROOM_KEY_PATTERN, count=200):
            code = RK.code_from_key(self._dec(k))
            if code:
                codes.add(code)
        return sorted(codes)

    async def evict_stale(self, max_age_sec: int, ts: Optional[int] = None) -> List[str]:
        """
        Key expiry already covers room_ttl_sec; this handles a shorter max_age
        and keeps the contract identical to MemoryRepo.
        """
        ts = now_ts() if ts is None else ts
        evicted: List[str] = []
        for code in await self.list_codes():
            room = await self.get_room(code)
            if room is None:
                continue
            if ts - room.created_at >= max_age_sec:
                await self.delete_room(code)
                evicted.append(code)
                logger.info("room %s evicted (age >= %ss)", code, max_age_sec)
        return evicted
