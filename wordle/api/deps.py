from __future__ import annotations

from collections.abc import Generator
from datetime import date

import redis
from fastapi import Depends, Header, HTTPException, status

from wordle.api.http_errors import http_error
from wordle.errors import GameError
from wordle.infra.redis_client import create_redis
from wordle.users import require_admin


def get_redis() -> Generator[redis.Redis, None, None]:
    client = create_redis()
    try:
        yield client
    finally:
        try:
            client.close()
        except Exception:
            # Some redis client versions don't require explicit close.
            pass


def get_today() -> date:
    """Calendar date used for daily-limit bucketing; overridden in tests."""

    return date.today()


def get_username(x_username: str | None = Header(default=None)) -> str:
    """Authenticated username, as verified upstream and forwarded in `X-Username`."""

    if not x_username or not x_username.strip():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing X-Username header")
    return x_username.strip()


def get_admin_username(
    username: str = Depends(get_username),
    r: redis.Redis = Depends(get_redis),
) -> str:
    try:
        require_admin(r=r, username=username)
    except GameError as e:
        raise http_error(e) from e
    return username
