from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

import redis
from fastapi import FastAPI

from wordle.api.deps import get_redis
from wordle.api.routes import router
from wordle.assets.startup import seed_words_if_empty
from wordle.settings import get_settings
from wordle.users import ensure_admins

app = FastAPI(title="wordle", version="0.1.0")
app.include_router(router)
# Configure logging
logging.basicConfig(level=get_settings().log_level)
logger = logging.getLogger(__name__)


@contextmanager
def _startup_redis() -> Iterator[redis.Redis]:
    # Honour dependency overrides so tests seed their fake Redis, not a live one.
    provider = app.dependency_overrides.get(get_redis, get_redis)
    gen = provider()
    try:
        yield next(gen)
    finally:
        gen.close()


@app.on_event("startup")
async def _startup() -> None:
    settings = get_settings()
    with _startup_redis() as r:
        seed_words_if_empty(r=r)
        ensure_admins(r=r, usernames=sorted(settings.admin_usernames))
    logger.info("wordle server ready; daily limit=%d", settings.daily_game_limit)


@app.get("/info")
async def info() -> dict[str, str]:
    return {"name": "wordle", "version": "0.1.0"}
