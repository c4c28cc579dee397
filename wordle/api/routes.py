from __future__ import annotations

from datetime import date
from uuid import UUID

import redis
from fastapi import APIRouter, Depends, Query, status

from wordle import game_engine, reports
from wordle.api.deps import get_admin_username, get_redis, get_today, get_username
from wordle.api.http_errors import http_error, unavailable
from wordle.api.models import (
    AddWordRequest,
    AddWordResponse,
    ComprehensiveReportsResponse,
    DailyReportResponse,
    DailyStatusResponse,
    GameHistoryResponse,
    GameStartResponse,
    GameStatusResponse,
    GuessRequest,
    GuessResult,
    PlayerReportList,
    PlayerStatsResponse,
    RegisterRequest,
    SystemStatsResponse,
    UserRecord,
    UserReportResponse,
    WinnerReportList,
    WinReportsResponse,
)
from wordle.daily_limit import DailyLimiter
from wordle.errors import GameError, ResourceExhausted
from wordle.users import register_user, require_user
from wordle.words import WordStore

router = APIRouter()


@router.get("/healthcheck")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.post("/users", response_model=UserRecord, status_code=status.HTTP_201_CREATED)
async def register_route(payload: RegisterRequest, r: redis.Redis = Depends(get_redis)) -> UserRecord:
    try:
        return register_user(r=r, username=payload.username)
    except GameError as e:
        raise http_error(e) from e


# --- player ---


@router.get("/game/daily-status", response_model=DailyStatusResponse)
async def daily_status_route(
    username: str = Depends(get_username),
    today: date = Depends(get_today),
    r: redis.Redis = Depends(get_redis),
) -> DailyStatusResponse:
    try:
        require_user(r=r, username=username)
    except GameError as e:
        raise http_error(e) from e
    return DailyLimiter(r).daily_status(username, today)


@router.post("/game/start", response_model=GameStartResponse, status_code=status.HTTP_201_CREATED)
async def start_game_route(
    username: str = Depends(get_username),
    today: date = Depends(get_today),
    r: redis.Redis = Depends(get_redis),
) -> GameStartResponse:
    try:
        return game_engine.start_game(r=r, owner=username, today=today)
    except GameError as e:
        raise http_error(e) from e
    except ResourceExhausted as e:
        raise unavailable(e) from e


@router.post("/game/guess", response_model=GuessResult)
async def guess_route(
    payload: GuessRequest,
    username: str = Depends(get_username),
    r: redis.Redis = Depends(get_redis),
) -> GuessResult:
    try:
        return game_engine.submit_guess(r=r, owner=username, session_id=payload.session_id, word=payload.word)
    except GameError as e:
        raise http_error(e) from e
    except ResourceExhausted as e:
        raise unavailable(e) from e


@router.get("/game/{session_id}/status", response_model=GameStatusResponse)
async def game_status_route(
    session_id: UUID,
    username: str = Depends(get_username),
    r: redis.Redis = Depends(get_redis),
) -> GameStatusResponse:
    try:
        return game_engine.get_status(r=r, owner=username, session_id=session_id)
    except GameError as e:
        raise http_error(e) from e


@router.get("/player/stats", response_model=PlayerStatsResponse)
async def player_stats_route(
    username: str = Depends(get_username),
    r: redis.Redis = Depends(get_redis),
) -> PlayerStatsResponse:
    try:
        return reports.get_player_stats(r=r, username=username)
    except GameError as e:
        raise http_error(e) from e


@router.get("/player/history", response_model=GameHistoryResponse)
async def player_history_route(
    username: str = Depends(get_username),
    r: redis.Redis = Depends(get_redis),
) -> GameHistoryResponse:
    try:
        return game_engine.get_history(r=r, owner=username)
    except GameError as e:
        raise http_error(e) from e


# --- admin ---


@router.post("/admin/words", response_model=AddWordResponse, status_code=status.HTTP_201_CREATED)
async def add_word_route(
    payload: AddWordRequest,
    _admin: str = Depends(get_admin_username),
    r: redis.Redis = Depends(get_redis),
) -> AddWordResponse:
    try:
        word = WordStore(r).add_word(payload.word)
    except GameError as e:
        raise http_error(e) from e
    return AddWordResponse(word=word.text, message=f"Word '{word.text}' added successfully")


@router.get("/admin/system-stats", response_model=SystemStatsResponse)
async def system_stats_route(
    _admin: str = Depends(get_admin_username),
    today: date = Depends(get_today),
    r: redis.Redis = Depends(get_redis),
) -> SystemStatsResponse:
    return reports.get_system_stats(r=r, today=today)


@router.get("/admin/reports/daily", response_model=DailyReportResponse)
async def daily_report_route(
    day: date | None = Query(default=None, alias="date"),
    _admin: str = Depends(get_admin_username),
    today: date = Depends(get_today),
    r: redis.Redis = Depends(get_redis),
) -> DailyReportResponse:
    return reports.get_daily_report(r=r, day=day or today)


@router.get("/admin/reports/user/{username}", response_model=UserReportResponse)
async def user_report_route(
    username: str,
    _admin: str = Depends(get_admin_username),
    r: redis.Redis = Depends(get_redis),
) -> UserReportResponse:
    try:
        return reports.get_user_report(r=r, username=username)
    except GameError as e:
        raise http_error(e) from e


@router.get("/admin/player-history/{username}", response_model=GameHistoryResponse)
async def admin_player_history_route(
    username: str,
    _admin: str = Depends(get_admin_username),
    r: redis.Redis = Depends(get_redis),
) -> GameHistoryResponse:
    try:
        return game_engine.get_history(r=r, owner=username)
    except GameError as e:
        raise http_error(e) from e


@router.get("/admin/player-activities", response_model=PlayerReportList)
async def player_activities_route(
    _admin: str = Depends(get_admin_username),
    r: redis.Redis = Depends(get_redis),
) -> PlayerReportList:
    return reports.get_player_activities(r=r)


@router.get("/admin/players-by-daily-count/{game_count}", response_model=PlayerReportList)
async def players_by_daily_count_route(
    game_count: int,
    _admin: str = Depends(get_admin_username),
    today: date = Depends(get_today),
    r: redis.Redis = Depends(get_redis),
) -> PlayerReportList:
    try:
        return reports.get_players_by_daily_count(r=r, game_count=game_count, today=today)
    except GameError as e:
        raise http_error(e) from e


@router.get("/admin/winners-by-guess-count/{guess_count}", response_model=WinnerReportList)
async def winners_by_guess_count_route(
    guess_count: int,
    _admin: str = Depends(get_admin_username),
    r: redis.Redis = Depends(get_redis),
) -> WinnerReportList:
    try:
        return reports.get_winners_by_guess_count(r=r, guess_count=guess_count)
    except GameError as e:
        raise http_error(e) from e


@router.get("/admin/win-reports", response_model=WinReportsResponse)
async def win_reports_route(
    _admin: str = Depends(get_admin_username),
    r: redis.Redis = Depends(get_redis),
) -> WinReportsResponse:
    return reports.get_win_reports(r=r)


@router.get("/admin/comprehensive-reports", response_model=ComprehensiveReportsResponse)
async def comprehensive_reports_route(
    _admin: str = Depends(get_admin_username),
    today: date = Depends(get_today),
    r: redis.Redis = Depends(get_redis),
) -> ComprehensiveReportsResponse:
    return reports.get_comprehensive_reports(r=r, today=today)
