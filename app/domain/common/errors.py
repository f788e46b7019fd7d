# app/domain/common/errors.py
from __future__ import annotations


class RoomError(Exception):
    """
    Base for every rejection the room engine can produce.
    `code` is stable and travels to the client inside OutError.
    """
    code = "ROOM_ERROR"
    default_message = "Room operation failed"

    def __init__(self, message: str = "") -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class RoomNotFound(RoomError):
    code = "ROOM_NOT_FOUND"
    default_message = "Room not found"


class PlayerNotFound(RoomError):
    code = "PLAYER_NOT_FOUND"
    default_message = "Player not found"


class Forbidden(RoomError):
    code = "FORBIDDEN"
    default_message = "Only the host can do that"


class InsufficientPlayers(RoomError):
    code = "NOT_ENOUGH_PLAYERS"
    default_message = "Not enough players"


class InvalidPhase(RoomError):
    code = "BAD_PHASE"
    default_message = "Action not allowed in the current phase"


class GameInProgress(RoomError):
    code = "GAME_IN_PROGRESS"
    default_message = "Game already in progress"


class RoomFull(RoomError):
    code = "ROOM_FULL"
    default_message = "Room is full"


class NoRoomCode(RoomError):
    code = "NO_ROOM_CODE"
    default_message = "Could not allocate a room code"
