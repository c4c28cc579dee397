from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv


DEFAULT_REDIS_URL = "redis://localhost:6379/0"


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


@dataclass(frozen=True, slots=True)
class Settings:
    redis_url: str = DEFAULT_REDIS_URL
    daily_game_limit: int = 3
    lock_ttl_ms: int = 5_000
    admin_usernames: frozenset[str] = field(default_factory=frozenset)
    require_dictionary_words: bool = False
    log_level: str = "INFO"


def load_settings() -> Settings:
    """Build settings from the process environment.

    A `.env` file at the project root is honoured but never overrides variables
    that are already exported.
    """

    env_path = Path(__file__).resolve().parents[1] / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path, override=False)

    admins = frozenset(
        name.strip() for name in os.getenv("WORDLE_ADMIN_USERS", "").split(",") if name.strip()
    )
    limit = _env_int("WORDLE_DAILY_GAME_LIMIT", 3)
    if limit < 1:
        raise ValueError("WORDLE_DAILY_GAME_LIMIT must be >= 1")

    return Settings(
        redis_url=os.getenv("REDIS_URL", DEFAULT_REDIS_URL),
        daily_game_limit=limit,
        lock_ttl_ms=_env_int("WORDLE_LOCK_TTL_MS", 5_000),
        admin_usernames=admins,
        require_dictionary_words=_env_bool("WORDLE_REQUIRE_DICTIONARY_WORDS"),
        log_level=os.getenv("WORDLE_LOG_LEVEL", "INFO").strip().upper() or "INFO",
    )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = load_settings()
    return _SETTINGS


def reset_settings_for_tests(settings: Settings | None = None) -> None:
    """Drop the cached settings, optionally pinning a replacement."""

    global _SETTINGS
    _SETTINGS = settings
