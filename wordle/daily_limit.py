from __future__ import annotations

from datetime import date

import redis

from wordle.api.models import DailyStatusResponse
from wordle.session_store import SessionRepository
from wordle.settings import get_settings


class DailyLimiter:
    """Per-user quota of game starts per calendar date.

    `day` is always supplied by the caller; nothing here reads the wall clock.
    Callers that go on to create a session must hold `daily_quota_lock` for the
    same (user, day) across the check and the create.
    """

    def __init__(self, r: redis.Redis, *, limit: int | None = None) -> None:
        self._sessions = SessionRepository(r)
        self.limit = limit if limit is not None else get_settings().daily_game_limit

    def games_played_on(self, user: str, day: date) -> int:
        return self._sessions.count_started_on(user, day)

    def remaining(self, user: str, day: date) -> int:
        return max(0, self.limit - self.games_played_on(user, day))

    def can_start(self, user: str, day: date) -> bool:
        return self.games_played_on(user, day) < self.limit

    def daily_status(self, user: str, day: date) -> DailyStatusResponse:
        played = self.games_played_on(user, day)
        remaining = max(0, self.limit - played)
        can_start = played < self.limit

        if not can_start:
            message = "Daily limit reached. Try again tomorrow!"
        elif played == 0:
            message = "Ready to start your first game today!"
        else:
            message = f"You have {remaining} game{'' if remaining == 1 else 's'} remaining today."

        return DailyStatusResponse(
            username=user,
            date=day,
            games_played=played,
            daily_limit=self.limit,
            games_remaining=remaining,
            can_start=can_start,
            message=message,
        )
