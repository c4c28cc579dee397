from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
from uuid import uuid4

from wordle.api.models import Outcome
from wordle.stats import (
    PlayedSession,
    average_guesses_per_win,
    current_streak,
    daily_totals,
    distinct_winners,
    group_by_date,
    longest_streak,
    percentage,
    player_stats,
    winners_with_guess_count,
    wins_by_guess_count,
)

DAY0 = date(2024, 3, 1)


def _played(
    outcome: Outcome | None,
    guesses: int,
    *,
    day: int = 0,
    minute: int = 0,
    owner: str = "alice",
) -> PlayedSession:
    return PlayedSession(
        session_id=uuid4(),
        owner=owner,
        date_played=DAY0 + timedelta(days=day),
        created_at=datetime(2024, 3, 1, 9, minute, tzinfo=UTC) + timedelta(days=day),
        outcome=outcome,
        guess_count=guesses,
        target_word="CRANE" if guesses else None,
    )


W, L = Outcome.won, Outcome.lost


def test_percentage_rounds_to_two_places() -> None:
    assert percentage(1, 3) == 33.33
    assert percentage(2, 3) == 66.67
    assert percentage(0, 0) == 0.0


def test_streaks_follow_play_order() -> None:
    sessions = [
        _played(W, 2, day=0),
        _played(W, 3, day=1),
        _played(W, 4, day=2),
        _played(L, 5, day=3),
        _played(L, 5, day=4),
    ]

    assert current_streak(sessions) == 0
    assert longest_streak(sessions) == 3


def test_same_day_ties_break_on_creation_time() -> None:
    sessions = [
        _played(W, 2, minute=30),
        _played(L, 5, minute=10),
    ]
    assert current_streak(sessions) == 1


def test_player_stats_ignore_unplayed_and_unfinished_sessions() -> None:
    sessions = [
        _played(W, 2, day=0),
        _played(L, 5, day=1),
        _played(W, 3, day=2),
        _played(None, 2, day=3),
        _played(None, 0, day=3, minute=5),
    ]

    stats = player_stats(sessions)

    assert stats.total_games == 3
    assert stats.games_won == 2
    assert stats.games_lost == 1
    assert stats.win_rate == 66.67
    assert stats.current_streak == 1
    assert stats.longest_streak == 1
    assert stats.average_guesses == 2.5


def test_player_stats_empty() -> None:
    stats = player_stats([])
    assert stats.total_games == 0
    assert stats.win_rate == 0.0
    assert stats.average_guesses == 0.0


def test_average_guesses_only_counts_wins() -> None:
    assert average_guesses_per_win([_played(W, 1), _played(W, 4), _played(L, 5)]) == 2.5
    assert average_guesses_per_win([_played(L, 5)]) == 0.0


def test_wins_by_guess_count_lists_every_count() -> None:
    sessions = [_played(W, 2), _played(W, 2, owner="bob"), _played(W, 5), _played(L, 5)]

    counts = {row.guess_count: row.wins for row in wins_by_guess_count(sessions)}

    assert counts == {1: 0, 2: 2, 3: 0, 4: 0, 5: 1}


def test_winners() -> None:
    sessions = [
        _played(W, 2, owner="carol"),
        _played(W, 2, owner="alice"),
        _played(W, 3, owner="alice"),
        _played(L, 5, owner="bob"),
    ]

    assert distinct_winners(sessions) == 2
    assert winners_with_guess_count(sessions, 2) == ["alice", "carol"]
    assert winners_with_guess_count(sessions, 4) == []


def test_daily_totals() -> None:
    sessions = [
        _played(W, 3),
        _played(L, 5, owner="bob"),
        _played(None, 2, owner="bob"),
        _played(None, 0, owner="carol"),
        _played(W, 1, day=1),
    ]

    report = daily_totals(sessions, DAY0)

    assert report.total_users == 2
    assert report.total_games == 3
    assert report.games_won == 1
    assert report.games_lost == 1
    assert report.games_in_progress == 1
    assert report.win_rate == 33.33
    assert report.total_guesses == 10
    assert report.average_guesses_per_completed_game == 5.0


def test_daily_totals_for_a_quiet_day() -> None:
    report = daily_totals([_played(W, 3)], DAY0 + timedelta(days=7))
    assert report.total_games == 0
    assert report.average_guesses_per_completed_game == 0.0


def test_grouping_is_newest_first() -> None:
    sessions = [_played(W, 2, day=0), _played(L, 5, day=2), _played(None, 0, day=5)]

    assert list(group_by_date(sessions)) == [DAY0 + timedelta(days=2), DAY0]
