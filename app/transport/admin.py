from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request

from app.util.timeutil import now_ts

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/rooms")
async def list_rooms(request: Request):
    """
    List all live rooms (debug/admin). No words, no roles.
    """
    repo = request.app.state.repo
    ts = now_ts()

    rooms = []
    for code in await repo.list_codes():
        room = await repo.get_room(code)
        if room is None:
            continue
        rooms.append(
            {
                "room_code": code,
                "phase": room.phase,
                "round_no": room.current_round,
                "players": len(room.players),
                "age_sec": ts - room.created_at,
                "last_activity": room.last_activity,
                "created_at": room.created_at,
            }
        )

    return {"rooms": rooms}


@router.post("/rooms/{room_code}/close")
async def close_room(room_code: str, request: Request):
    """
    Force close a room (debug/admin).
    """
    repo = request.app.state.repo
    code = room_code.upper()

    async with repo.lock(code):
        if not await repo.delete_room(code):
            raise HTTPException(status_code=404, detail="Room not found")

    logger.info("room %s closed by admin", code)
    return {"ok": True, "room_code": code}
