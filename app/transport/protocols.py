# app/transport/protocols.py
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app.domain.common.types import Phase, Winner


# =========================
# Incoming (Client -> Server)
# =========================
# Wire names are camelCase (playerId, roomId, ...); snake_case is accepted too.

class InBase(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True)

    type: str


class InRoomAction(InBase):
    """Anything addressed at an existing room by a known player."""
    room_id: str = Field(min_length=1, max_length=16)
    player_id: str = Field(min_length=1, max_length=64)

    @field_validator("room_id")
    @classmethod
    def _upper_room_id(cls, v: str) -> str:
        return v.upper()


# ---- Lifecycle ----

class InCreateRoom(InBase):
    type: Literal["create_room"] = "create_room"
    player_id: str = Field(min_length=1, max_length=64)
    player_name: str = Field(min_length=1, max_length=20)


class InJoin(InRoomAction):
    type: Literal["join"] = "join"
    player_name: str = Field(min_length=1, max_length=20)


class InLeave(InRoomAction):
    type: Literal["leave"] = "leave"


class InSnapshot(InBase):
    type: Literal["snapshot"] = "snapshot"
    room_id: str = Field(min_length=1, max_length=16)
    # Anonymous viewers see no words at all.
    player_id: Optional[str] = Field(default=None, max_length=64)

    @field_validator("room_id")
    @classmethod
    def _upper_room_id(cls, v: str) -> str:
        return v.upper()


# ---- Game ----

class InStartGame(InRoomAction):
    type: Literal["start_game"] = "start_game"


class InSubmitClue(InRoomAction):
    type: Literal["submit_clue"] = "submit_clue"
    clue: str = Field(min_length=1, max_length=100)


class InVote(InRoomAction):
    type: Literal["vote"] = "vote"
    target_player_id: str = Field(min_length=1, max_length=64)


class InAdvancePhase(InRoomAction):
    type: Literal["advance_phase"] = "advance_phase"


class InNewGame(InRoomAction):
    type: Literal["new_game"] = "new_game"


IncomingMessage = Union[
    InCreateRoom,
    InJoin,
    InLeave,
    InSnapshot,
    InStartGame,
    InSubmitClue,
    InVote,
    InAdvancePhase,
    InNewGame,
]


# =========================
# Outgoing (Server -> Client)
# =========================

class OutBase(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    type: str


class OutError(OutBase):
    type: Literal["error"] = "error"
    code: str
    message: str


class OutRoomSnapshot(OutBase):
    type: Literal["room_snapshot"] = "room_snapshot"
    room: Dict[str, Any]


class OutRoomCreated(OutBase):
    type: Literal["room_created"] = "room_created"
    room_id: str


class OutRoomClosed(OutBase):
    type: Literal["room_closed"] = "room_closed"
    room_id: str


class OutPlayerJoined(OutBase):
    type: Literal["player_joined"] = "player_joined"
    player_id: str
    name: str


class OutPlayerLeft(OutBase):
    type: Literal["player_left"] = "player_left"
    player_id: str


class OutPhaseChanged(OutBase):
    type: Literal["phase_changed"] = "phase_changed"
    phase: Phase
    round_no: int


class OutGameEnd(OutBase):
    type: Literal["game_end"] = "game_end"
    winner: Optional[Winner] = None
    reason: str = ""
    imposter_id: Optional[str] = None
    word_pair: Optional[Dict[str, str]] = None
    round_no: int


OutgoingEvent = Union[
    OutError,
    OutRoomSnapshot,
    OutRoomCreated,
    OutRoomClosed,
    OutPlayerJoined,
    OutPlayerLeft,
    OutPhaseChanged,
    OutGameEnd,
]


# =========================
# Parser helpers
# =========================

_INCOMING_BY_TYPE = {
    "create_room": InCreateRoom,
    "join": InJoin,
    "leave": InLeave,
    "snapshot": InSnapshot,
    "start_game": InStartGame,
    "submit_clue": InSubmitClue,
    "vote": InVote,
    "advance_phase": InAdvancePhase,
    "new_game": InNewGame,
}


def parse_incoming(payload: Dict[str, Any]) -> IncomingMessage:
    """
    Convert raw dict -> validated message model.
    Raises ValueError (ValidationError included) if invalid.
    """
    t = payload.get("type")
    if not isinstance(t, str):
        raise ValueError("Missing/invalid type")

    cls = _INCOMING_BY_TYPE.get(t)
    if cls is None:
        raise ValueError(f"Unknown message type: {t}")

    return cls.model_validate(payload)


def dump_events(events: List[BaseModel]) -> List[Dict[str, Any]]:
    """
    Convert pydantic events -> JSON dicts (camelCase keys).
    """
    return [e.model_dump(by_alias=True) for e in events]
