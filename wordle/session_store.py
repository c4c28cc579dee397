from __future__ import annotations

from datetime import date
from uuid import UUID

import redis

from wordle.api.models import GameSession, GuessRecord
from wordle.errors import NotFound


SESSIONS_SET_KEY = "wordle:sessions"
SESSION_KEY_PREFIX = "wordle:session:"  # + {uuid}
OWNER_SESSIONS_KEY_PREFIX = "wordle:owner:"  # + {owner}:sessions


def _session_key(session_id: UUID) -> str:
    return f"{SESSION_KEY_PREFIX}{session_id}"


def _guesses_key(session_id: UUID) -> str:
    return f"{SESSION_KEY_PREFIX}{session_id}:guesses"


def _owner_key(owner: str) -> str:
    return f"{OWNER_SESSIONS_KEY_PREFIX}{owner}:sessions"


class SessionRepository:
    """GameSession records stored as JSON strings, indexed globally and per owner."""

    def __init__(self, r: redis.Redis) -> None:
        self._r = r

    def create(self, session: GameSession) -> GameSession:
        pipe = self._r.pipeline(transaction=True)
        pipe.set(_session_key(session.session_id), session.model_dump_json())
        pipe.sadd(SESSIONS_SET_KEY, str(session.session_id))
        pipe.sadd(_owner_key(session.owner), str(session.session_id))
        pipe.execute()
        return session

    def get(self, session_id: UUID) -> GameSession | None:
        raw = self._r.get(_session_key(session_id))
        if not raw:
            return None
        return GameSession.model_validate_json(raw)

    def require(self, session_id: UUID) -> GameSession:
        session = self.get(session_id)
        if session is None:
            raise NotFound("Game not found")
        return session

    def save(self, session: GameSession, *, pipe: redis.client.Pipeline | None = None) -> None:
        """Persist the session, optionally as part of a caller's transaction."""

        target = pipe if pipe is not None else self._r
        target.set(_session_key(session.session_id), session.model_dump_json())

    def _load_many(self, ids: list[str]) -> list[GameSession]:
        if not ids:
            return []
        raws = self._r.mget([_session_key(UUID(sid)) for sid in ids])
        return [GameSession.model_validate_json(raw) for raw in raws if raw]

    def list_by_owner(self, owner: str) -> list[GameSession]:
        out = self._load_many(sorted(self._r.smembers(_owner_key(owner))))
        out.sort(key=lambda s: (s.date_played, s.created_at), reverse=True)
        return out

    def list_all(self) -> list[GameSession]:
        out = self._load_many(sorted(self._r.smembers(SESSIONS_SET_KEY)))
        out.sort(key=lambda s: (s.date_played, s.created_at), reverse=True)
        return out

    def count_started_on(self, owner: str, day: date) -> int:
        return sum(1 for s in self.list_by_owner(owner) if s.date_played == day)


class GuessRepository:
    """Append-only guess lists, one Redis list per session in sequence order."""

    def __init__(self, r: redis.Redis) -> None:
        self._r = r

    def append(self, guess: GuessRecord, *, pipe: redis.client.Pipeline | None = None) -> None:
        target = pipe if pipe is not None else self._r
        target.rpush(_guesses_key(guess.session_id), guess.model_dump_json())

    def list_by_session(self, session_id: UUID) -> list[GuessRecord]:
        raws = self._r.lrange(_guesses_key(session_id), 0, -1)
        out = [GuessRecord.model_validate_json(raw) for raw in raws]
        out.sort(key=lambda g: g.sequence_number)
        return out

    def count_by_session(self, session_id: UUID) -> int:
        return int(self._r.llen(_guesses_key(session_id)))
