# app/domain/lifecycle/sweep.py
from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from app.domain.game.engine import expire_phase
from app.util.timeutil import now_ts

logger = logging.getLogger(__name__)


async def sweep_rooms(app, *, max_age_sec: int, ts: Optional[int] = None) -> Tuple[List[str], List[str]]:
    """
    One pass of the background sweep:
      - apply due timed advances (same stale-checked path the handlers use)
      - evict rooms older than max_age_sec
    Returns (advanced_codes, evicted_codes).
    """
    repo = app.state.repo
    rules = app.state.rules
    ts = now_ts() if ts is None else ts

    advanced: List[str] = []
    for code in await repo.list_codes():
        async with repo.lock(code):
            room = await repo.get_room(code)
            if room is None:
                continue
            if expire_phase(room, ts, rules=rules):
                await repo.save_room(room)
                advanced.append(code)

    evicted = await repo.evict_stale(max_age_sec, ts=ts)
    if advanced or evicted:
        logger.debug("sweep: advanced=%s evicted=%s", advanced, evicted)
    return advanced, evicted
