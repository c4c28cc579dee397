"""Read-side statistics over a snapshot of session history.

Everything here is a pure function of the `PlayedSession` list it is given.
Sessions without a single recorded guess are abandoned slots and are dropped
from every aggregate before anything is counted.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from wordle.api.models import (
    DailyReportResponse,
    GameSession,
    Outcome,
    PlayerStatsResponse,
    WinsByGuessCount,
)

MAX_GUESSES = 5


@dataclass(frozen=True, slots=True)
class PlayedSession:
    session_id: UUID
    owner: str
    date_played: date
    created_at: datetime
    outcome: Outcome | None
    guess_count: int
    target_word: str | None = None

    @property
    def won(self) -> bool:
        return self.outcome == Outcome.won

    @property
    def lost(self) -> bool:
        return self.outcome == Outcome.lost

    @property
    def completed(self) -> bool:
        return self.outcome is not None

    @staticmethod
    def from_session(session: GameSession, *, guess_count: int) -> "PlayedSession":
        return PlayedSession(
            session_id=session.session_id,
            owner=session.owner,
            date_played=session.date_played,
            created_at=session.created_at,
            outcome=session.outcome,
            guess_count=guess_count,
            target_word=session.target_word,
        )


def with_guesses(sessions: Iterable[PlayedSession]) -> list[PlayedSession]:
    return [s for s in sessions if s.guess_count > 0]


def percentage(part: int, whole: int) -> float:
    if whole <= 0:
        return 0.0
    return round(part / whole * 100, 2)


def _chronological(sessions: Iterable[PlayedSession], *, reverse: bool = False) -> list[PlayedSession]:
    # created_at breaks ties between games played on the same date.
    return sorted(sessions, key=lambda s: (s.date_played, s.created_at), reverse=reverse)


def current_streak(sessions: Iterable[PlayedSession]) -> int:
    streak = 0
    for s in _chronological(with_guesses(sessions), reverse=True):
        if not s.won:
            break
        streak += 1
    return streak


def longest_streak(sessions: Iterable[PlayedSession]) -> int:
    best = 0
    running = 0
    for s in _chronological(with_guesses(sessions)):
        if s.won:
            running += 1
            best = max(best, running)
        else:
            running = 0
    return best


def average_guesses_per_win(sessions: Iterable[PlayedSession]) -> float:
    wins = [s.guess_count for s in with_guesses(sessions) if s.won]
    if not wins:
        return 0.0
    return round(sum(wins) / len(wins), 2)


def player_stats(sessions: Iterable[PlayedSession]) -> PlayerStatsResponse:
    """Stats for one player, over completed sessions that have guesses."""

    completed = [s for s in with_guesses(sessions) if s.completed]
    won = sum(1 for s in completed if s.won)

    return PlayerStatsResponse(
        total_games=len(completed),
        games_won=won,
        games_lost=len(completed) - won,
        win_rate=percentage(won, len(completed)),
        current_streak=current_streak(completed),
        longest_streak=longest_streak(completed),
        average_guesses=average_guesses_per_win(completed),
    )


def wins_by_guess_count(sessions: Iterable[PlayedSession], *, max_guesses: int = MAX_GUESSES) -> list[WinsByGuessCount]:
    counts = {n: 0 for n in range(1, max_guesses + 1)}
    for s in with_guesses(sessions):
        if s.won and s.guess_count in counts:
            counts[s.guess_count] += 1
    return [WinsByGuessCount(guess_count=n, wins=c) for n, c in counts.items()]


def distinct_winners(sessions: Iterable[PlayedSession]) -> int:
    return len({s.owner for s in with_guesses(sessions) if s.won})


def winners_with_guess_count(sessions: Iterable[PlayedSession], guess_count: int) -> list[str]:
    """Owners with at least one win in exactly `guess_count` guesses, sorted."""

    return sorted({s.owner for s in with_guesses(sessions) if s.won and s.guess_count == guess_count})


def daily_totals(sessions: Iterable[PlayedSession], day: date) -> DailyReportResponse:
    on_day = [s for s in with_guesses(sessions) if s.date_played == day]
    won = sum(1 for s in on_day if s.won)
    lost = sum(1 for s in on_day if s.lost)
    total_guesses = sum(s.guess_count for s in on_day)
    completed = won + lost

    return DailyReportResponse(
        date=day,
        total_users=len({s.owner for s in on_day}),
        total_games=len(on_day),
        games_won=won,
        games_lost=lost,
        games_in_progress=len(on_day) - completed,
        win_rate=percentage(won, len(on_day)),
        total_guesses=total_guesses,
        average_guesses_per_completed_game=round(total_guesses / completed, 2) if completed else 0.0,
    )


def group_by_date(sessions: Iterable[PlayedSession]) -> dict[date, list[PlayedSession]]:
    """Played sessions grouped by date, newest date first."""

    out: dict[date, list[PlayedSession]] = {}
    for s in _chronological(with_guesses(sessions), reverse=True):
        out.setdefault(s.date_played, []).append(s)
    return out
