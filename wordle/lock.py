from __future__ import annotations

import secrets
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date
from uuid import UUID

import redis

from wordle.errors import SessionBusy

LOCK_KEY_PREFIX = "wordle:lock:"


@contextmanager
def redis_lock(*, r: redis.Redis, key: str, ttl_ms: int = 5_000, busy_message: str = "Resource is busy") -> Iterator[None]:
    """Non-blocking Redis lock (`SET NX PX`).

    A second holder fails fast with SessionBusy instead of waiting. The token
    guards release so an expired holder cannot delete a newer holder's lock;
    the check-then-delete is not atomic but the window is one round trip.
    """

    token = secrets.token_hex(8)
    acquired = r.set(key, token, nx=True, px=ttl_ms)
    if not acquired:
        raise SessionBusy(busy_message)
    try:
        yield
    finally:
        if r.get(key) == token:
            r.delete(key)


def session_lock_key(session_id: UUID) -> str:
    return f"{LOCK_KEY_PREFIX}session:{session_id}"


def daily_lock_key(owner: str, day: date) -> str:
    return f"{LOCK_KEY_PREFIX}daily:{owner}:{day.isoformat()}"


@contextmanager
def session_lock(*, r: redis.Redis, session_id: UUID, ttl_ms: int = 5_000) -> Iterator[None]:
    with redis_lock(
        r=r,
        key=session_lock_key(session_id),
        ttl_ms=ttl_ms,
        busy_message="Another guess for this game is being processed",
    ):
        yield


@contextmanager
def daily_quota_lock(*, r: redis.Redis, owner: str, day: date, ttl_ms: int = 5_000) -> Iterator[None]:
    with redis_lock(
        r=r,
        key=daily_lock_key(owner, day),
        ttl_ms=ttl_ms,
        busy_message="Another game start is being processed",
    ):
        yield
