# app/transport/http.py
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from app.transport.dispatcher import dispatch_message

router = APIRouter(tags=["game"])

_STATUS_BY_CODE = {
    "BAD_MESSAGE": 422,
    "NO_PID": 400,
    "ROOM_NOT_FOUND": 404,
    "PLAYER_NOT_FOUND": 404,
    "FORBIDDEN": 403,
    "BAD_PHASE": 409,
    "GAME_IN_PROGRESS": 409,
    "ROOM_FULL": 409,
    "NOT_ENOUGH_PLAYERS": 409,
    "NO_ROOM_CODE": 503,
}


async def _read_body(request: Request) -> Dict[str, Any]:
    """JSON object body, or {} (validation then reports the missing fields)."""
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return {}
    return body if isinstance(body, dict) else {}


def _respond(to_sender: List[Dict[str, Any]], to_room: List[Dict[str, Any]]) -> JSONResponse:
    """
    Flatten handler events into one HTTP response:
      - error          -> {"error": code, "message": ...} with a mapped status
      - room_created   -> roomId
      - room_snapshot  -> room
      - room_closed    -> roomClosed
    Room-wide events ride along under "events" (clients poll, there is no push).
    """
    for e in to_sender:
        if e.get("type") == "error":
            status = _STATUS_BY_CODE.get(e["code"], 400)
            return JSONResponse(status_code=status, content={"error": e["code"], "message": e["message"]})

    payload: Dict[str, Any] = {"success": True, "events": to_room}
    for e in to_sender:
        if e["type"] == "room_created":
            payload["roomId"] = e["roomId"]
        elif e["type"] == "room_snapshot":
            payload["room"] = e["room"]
        elif e["type"] == "room_closed":
            payload["roomClosed"] = True
    return JSONResponse(content=payload)


async def _dispatch(request: Request, msg_type: str, body: Optional[Dict[str, Any]] = None) -> JSONResponse:
    if body is None:
        body = await _read_body(request)
    to_sender, to_room = await dispatch_message(app=request.app, raw={**body, "type": msg_type})
    return _respond(to_sender, to_room)


@router.post("/create-lobby")
async def create_lobby(request: Request):
    return await _dispatch(request, "create_room")


@router.post("/join-lobby")
async def join_lobby(request: Request):
    return await _dispatch(request, "join")


@router.post("/leave-lobby")
async def leave_lobby(request: Request):
    return await _dispatch(request, "leave")


@router.post("/start-game")
async def start_game(request: Request):
    return await _dispatch(request, "start_game")


@router.post("/submit-clue")
async def submit_clue(request: Request):
    return await _dispatch(request, "submit_clue")


@router.post("/vote")
async def vote(request: Request):
    return await _dispatch(request, "vote")


@router.post("/advance-phase")
async def advance_phase(request: Request):
    return await _dispatch(request, "advance_phase")


@router.post("/new-game")
async def new_game(request: Request):
    return await _dispatch(request, "new_game")


@router.get("/room/{room_id}")
async def get_room(room_id: str, request: Request, playerId: Optional[str] = None):
    """
    Polling endpoint. Pass ?playerId= to see your own word.
    """
    raw: Dict[str, Any] = {"roomId": room_id}
    if playerId:
        raw["playerId"] = playerId
    return await _dispatch(request, "snapshot", raw)
