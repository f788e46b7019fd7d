# app/main.py
from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from redis.asyncio import Redis

from app.domain.common.game_rules import rules_from_settings
from app.domain.lifecycle.sweep import sweep_rooms
from app.settings import Settings, get_settings
from app.store.memory_repo import MemoryRepo
from app.store.redis_repo import RedisRepo
from app.transport.admin import router as admin_router
from app.transport.http import router as game_router

logger = logging.getLogger(__name__)


async def _sweep_forever(app: FastAPI, settings: Settings) -> None:
    while True:
        await asyncio.sleep(settings.SWEEP_INTERVAL_SEC)
        try:
            await sweep_rooms(app, max_age_sec=settings.ROOM_TTL_SEC)
        except Exception:
            # keep the loop alive; the next pass retries
            logger.exception("room sweep failed")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title=settings.APP_NAME)
    allowed_origins = [o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    app.state.settings = settings
    app.state.rules = rules_from_settings(settings)
    app.state.redis = None
    if settings.STORE_BACKEND == "redis":
        # from_url does not connect; startup pings
        r = Redis.from_url(settings.REDIS_URL, decode_responses=False)
        app.state.redis = r
        app.state.repo = RedisRepo(r, room_ttl_sec=settings.ROOM_TTL_SEC, code_length=settings.ROOM_CODE_LENGTH)
    else:
        app.state.repo = MemoryRepo(code_length=settings.ROOM_CODE_LENGTH)

    @app.on_event("startup")
    async def _startup() -> None:
        r: Optional[Redis] = app.state.redis
        if r is not None:
            await r.ping()
        app.state.sweeper = asyncio.create_task(_sweep_forever(app, settings))
        logger.info("%s started (store=%s)", settings.APP_NAME, settings.STORE_BACKEND)

    @app.on_event("shutdown")
    async def _shutdown() -> None:
        sweeper = getattr(app.state, "sweeper", None)
        if sweeper is not None:
            sweeper.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await sweeper
        r: Optional[Redis] = app.state.redis
        if r is not None:
            await r.aclose()

    @app.get("/health")
    async def health():
        r: Optional[Redis] = app.state.redis
        if r is None:
            return {"ok": True, "store": "memory"}
        pong = await r.ping()
        return {"ok": True, "store": "redis", "redis": str(pong)}

    app.include_router(game_router)
    app.include_router(admin_router)
    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
