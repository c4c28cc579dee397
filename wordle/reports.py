from __future__ import annotations

from datetime import date, timedelta

import redis

from wordle.api.models import (
    HIDDEN_TARGET,
    ComprehensiveReportsResponse,
    DailyReportResponse,
    GameReport,
    PlayerReport,
    PlayerReportList,
    PlayerStatsResponse,
    Role,
    SystemStatsResponse,
    UserRecord,
    UserRegistration,
    UserReportDay,
    UserReportGame,
    UserReportResponse,
    WinnerReport,
    WinnerReportList,
    WinReportsResponse,
)
from wordle.errors import InvalidInput
from wordle.session_store import GuessRepository, SessionRepository
from wordle.settings import get_settings
from wordle.stats import (
    MAX_GUESSES,
    PlayedSession,
    daily_totals,
    distinct_winners,
    group_by_date,
    percentage,
    player_stats,
    wins_by_guess_count,
    winners_with_guess_count,
    with_guesses,
)
from wordle.users import list_users, require_user
from wordle.words import WordStore

REGISTRATION_WINDOW_DAYS = 30


def load_played_sessions(*, r: redis.Redis, owner: str | None = None) -> list[PlayedSession]:
    """Snapshot sessions (one owner, or everyone) together with their guess counts."""

    repo = SessionRepository(r)
    sessions = repo.list_by_owner(owner) if owner is not None else repo.list_all()
    guesses = GuessRepository(r)
    return [PlayedSession.from_session(s, guess_count=guesses.count_by_session(s.session_id)) for s in sessions]


def get_player_stats(*, r: redis.Redis, username: str) -> PlayerStatsResponse:
    require_user(r=r, username=username)
    return player_stats(load_played_sessions(r=r, owner=username))


def get_system_stats(*, r: redis.Redis, today: date) -> SystemStatsResponse:
    users = list_users(r=r)
    played = with_guesses(load_played_sessions(r=r))

    completed = [s for s in played if s.completed]
    won = sum(1 for s in completed if s.won)

    return SystemStatsResponse(
        total_users=len(users),
        total_players=sum(1 for u in users if u.role == Role.player),
        total_admins=sum(1 for u in users if u.role == Role.admin),
        total_games=len(played),
        completed_games=len(completed),
        won_games=won,
        lost_games=len(completed) - won,
        overall_win_rate=percentage(won, len(completed)),
        games_today=sum(1 for s in played if s.date_played == today),
        total_words=WordStore(r).count(),
        distinct_winners=distinct_winners(played),
        wins_by_guess_count=wins_by_guess_count(played),
    )


def get_daily_report(*, r: redis.Redis, day: date) -> DailyReportResponse:
    return daily_totals(load_played_sessions(r=r), day)


def get_user_report(*, r: redis.Redis, username: str) -> UserReportResponse:
    require_user(r=r, username=username)

    days: list[UserReportDay] = []
    for day, sessions in group_by_date(load_played_sessions(r=r, owner=username)).items():
        days.append(
            UserReportDay(
                date=day,
                words_attempted=len(sessions),
                correct_guesses=sum(1 for s in sessions if s.won),
                total_guesses=sum(s.guess_count for s in sessions),
                games=[
                    UserReportGame(
                        session_id=s.session_id,
                        target_word=s.target_word,
                        won=s.won,
                        guesses=s.guess_count,
                        date_played=s.date_played,
                    )
                    for s in sessions
                ],
            )
        )
    return UserReportResponse(username=username, days=days)


def _player_report(user: UserRecord, sessions: list[PlayedSession]) -> PlayerReport:
    played = with_guesses(sessions)
    return PlayerReport(
        username=user.username,
        role=user.role,
        registered_at=user.created_at,
        total_games=len(played),
        won_games=sum(1 for s in played if s.won),
        last_played=max((s.date_played for s in played), default=None),
    )


def _group_by_owner(sessions: list[PlayedSession]) -> dict[str, list[PlayedSession]]:
    out: dict[str, list[PlayedSession]] = {}
    for s in sessions:
        out.setdefault(s.owner, []).append(s)
    return out


def _sessions_by_owner(r: redis.Redis) -> dict[str, list[PlayedSession]]:
    return _group_by_owner(load_played_sessions(r=r))


def get_player_activities(*, r: redis.Redis) -> PlayerReportList:
    """Players who have made at least one guess in any game."""

    by_owner = _sessions_by_owner(r)
    players = [
        _player_report(u, by_owner.get(u.username, []))
        for u in list_users(r=r)
        if u.role == Role.player and with_guesses(by_owner.get(u.username, []))
    ]
    return PlayerReportList(total=len(players), players=players)


def get_players_by_daily_count(*, r: redis.Redis, game_count: int, today: date) -> PlayerReportList:
    """Players whose number of played games on `today` equals `game_count`."""

    limit = get_settings().daily_game_limit
    if game_count < 1 or game_count > limit:
        raise InvalidInput(f"Game count must be between 1 and {limit}")

    by_owner = _sessions_by_owner(r)
    players: list[PlayerReport] = []
    for u in list_users(r=r):
        if u.role != Role.player:
            continue
        sessions = with_guesses(by_owner.get(u.username, []))
        if sum(1 for s in sessions if s.date_played == today) == game_count:
            players.append(_player_report(u, sessions))
    return PlayerReportList(total=len(players), players=players)


def _winner_reports(by_owner: dict[str, list[PlayedSession]], guess_count: int) -> list[WinnerReport]:
    everyone = [s for sessions in by_owner.values() for s in sessions]
    out: list[WinnerReport] = []
    for owner in winners_with_guess_count(everyone, guess_count):
        played = with_guesses(by_owner[owner])
        total_wins = sum(1 for s in played if s.won)
        out.append(
            WinnerReport(
                username=owner,
                total_games=len(played),
                total_wins=total_wins,
                wins_with_guess_count=sum(1 for s in played if s.won and s.guess_count == guess_count),
                win_rate=percentage(total_wins, len(played)),
            )
        )
    return out


def get_winners_by_guess_count(*, r: redis.Redis, guess_count: int) -> WinnerReportList:
    if guess_count < 1 or guess_count > MAX_GUESSES:
        raise InvalidInput(f"Guess count must be between 1 and {MAX_GUESSES}")

    winners = _winner_reports(_sessions_by_owner(r), guess_count)
    return WinnerReportList(guess_count=guess_count, total=len(winners), winners=winners)


def get_win_reports(*, r: redis.Redis) -> WinReportsResponse:
    by_owner = _sessions_by_owner(r)
    everyone = [s for sessions in by_owner.values() for s in sessions]

    return WinReportsResponse(
        total_users=len(list_users(r=r)),
        total_winners=distinct_winners(everyone),
        wins_by_guess_count=wins_by_guess_count(everyone),
        winners_by_guess_count={n: _winner_reports(by_owner, n) for n in range(1, MAX_GUESSES + 1)},
    )


def _game_report(s: PlayedSession) -> GameReport:
    return GameReport(
        session_id=s.session_id,
        username=s.owner,
        target_word=s.target_word if s.guess_count and s.target_word else HIDDEN_TARGET,
        date_played=s.date_played,
        completed=s.completed,
        won=s.won if s.completed else None,
        guesses_used=s.guess_count,
    )


def get_comprehensive_reports(*, r: redis.Redis, today: date) -> ComprehensiveReportsResponse:
    """Everything an admin dashboard needs in one snapshot.

    Player and game rows only cover play with at least one guess. Registrations
    list every account created in the last REGISTRATION_WINDOW_DAYS days,
    whether or not it has played, with a count of all games it started.
    """

    everyone = load_played_sessions(r=r)
    by_owner = _group_by_owner(everyone)
    users = list_users(r=r)
    since = today - timedelta(days=REGISTRATION_WINDOW_DAYS)

    return ComprehensiveReportsResponse(
        player_reports=[
            _player_report(u, by_owner[u.username]) for u in users if with_guesses(by_owner.get(u.username, []))
        ],
        game_reports=[_game_report(s) for s in with_guesses(everyone)],
        recent_registrations=[
            UserRegistration(
                username=u.username,
                role=u.role,
                created_at=u.created_at,
                games_played=len(by_owner.get(u.username, [])),
            )
            for u in users
            if u.created_at.date() >= since
        ],
        system_statistics=get_system_stats(r=r, today=today),
    )
