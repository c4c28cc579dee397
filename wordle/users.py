from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from datetime import UTC, datetime

import redis

from wordle.api.models import Role, UserRecord
from wordle.errors import Forbidden, InvalidInput, NotFound, RuleViolation

logger = logging.getLogger(__name__)

USERS_HASH_KEY = "wordle:users"

_USERNAME_RE = re.compile(r"^[A-Za-z0-9_]{3,32}$")


def _now() -> datetime:
    return datetime.now(tz=UTC)


def register_user(*, r: redis.Redis, username: str, role: Role = Role.player) -> UserRecord:
    if not _USERNAME_RE.match(username or ""):
        raise InvalidInput("Username must be 3-32 characters of letters, digits or underscore")

    record = UserRecord(username=username, role=role, created_at=_now())
    # HSETNX keeps registration atomic against concurrent duplicates.
    if not r.hsetnx(USERS_HASH_KEY, username, record.model_dump_json()):
        raise RuleViolation(f"Username already exists: {username}")

    logger.info("user registered username=%s role=%s", username, role.value)
    return record


def get_user(*, r: redis.Redis, username: str) -> UserRecord | None:
    raw = r.hget(USERS_HASH_KEY, username)
    if not raw:
        return None
    return UserRecord.model_validate_json(raw)


def require_user(*, r: redis.Redis, username: str) -> UserRecord:
    user = get_user(r=r, username=username)
    if user is None:
        raise NotFound(f"User not found: {username}")
    return user


def require_admin(*, r: redis.Redis, username: str) -> UserRecord:
    user = require_user(r=r, username=username)
    if user.role != Role.admin:
        raise Forbidden("Admin role required")
    return user


def list_users(*, r: redis.Redis) -> list[UserRecord]:
    out = [UserRecord.model_validate_json(raw) for raw in r.hvals(USERS_HASH_KEY)]
    out.sort(key=lambda u: u.username)
    return out


def ensure_admins(*, r: redis.Redis, usernames: Iterable[str]) -> None:
    """Create or promote the configured admin accounts.

    Malformed names are logged and skipped so a bad entry in
    WORDLE_ADMIN_USERS cannot keep the server from starting.
    """

    for name in usernames:
        existing = get_user(r=r, username=name)
        if existing is None:
            try:
                register_user(r=r, username=name, role=Role.admin)
            except InvalidInput as e:
                logger.warning("skipping configured admin %r: %s", name, e)
        elif existing.role != Role.admin:
            existing.role = Role.admin
            r.hset(USERS_HASH_KEY, name, existing.model_dump_json())
            logger.info("user promoted to admin username=%s", name)
