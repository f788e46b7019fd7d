# app/settings.py
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel
import os


class Settings(BaseModel):
    APP_NAME: str = "imposter-server"

    # Room storage: in-process dict or Redis
    STORE_BACKEND: Literal["memory", "redis"] = "memory"
    REDIS_URL: str = "redis://localhost:6379/0"
    ROOM_TTL_SEC: int = 1800
    ROOM_CODE_LENGTH: int = 4

    # Game timing (0 disables the timed advance; host must advance by hand)
    WORDS_REVEAL_SEC: int = 5
    RESULTS_DISPLAY_SEC: int = 5
    ROOM_CAP: int = 12
    # Optional JSON file: [["CAT", "DOG"], ...]
    WORD_PAIRS_FILE: str = ""

    # Background sweep (deadlines + eviction)
    SWEEP_INTERVAL_SEC: float = 1.0

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # Dev
    LOG_LEVEL: str = "INFO"

    # CORS (comma-separated)
    CORS_ORIGINS: str = "http://localhost:5173,http://127.0.0.1:5173"


def get_settings() -> Settings:
    return Settings(
        APP_NAME=os.getenv("APP_NAME", "imposter-server"),
        STORE_BACKEND=os.getenv("STORE_BACKEND", "memory").lower(),
        REDIS_URL=os.getenv("REDIS_URL", "redis://localhost:6379/0"),
        ROOM_TTL_SEC=int(os.getenv("ROOM_TTL_SEC", "1800")),
        ROOM_CODE_LENGTH=int(os.getenv("ROOM_CODE_LENGTH", "4")),
        WORDS_REVEAL_SEC=int(os.getenv("WORDS_REVEAL_SEC", "5")),
        RESULTS_DISPLAY_SEC=int(os.getenv("RESULTS_DISPLAY_SEC", "5")),
        ROOM_CAP=int(os.getenv("ROOM_CAP", "12")),
        WORD_PAIRS_FILE=os.getenv("WORD_PAIRS_FILE", ""),
        SWEEP_INTERVAL_SEC=float(os.getenv("SWEEP_INTERVAL_SEC", "1")),
        HOST=os.getenv("HOST", "0.0.0.0"),
        PORT=int(os.getenv("PORT", "3000")),
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
        CORS_ORIGINS=os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173"),
    )
