from __future__ import annotations

from datetime import date, datetime
from enum import StrEnum
from typing import Annotated, Literal
from uuid import UUID

from pydantic import BaseModel, Field

HIDDEN_TARGET = "[Hidden until first guess]"


class Role(StrEnum):
    player = "player"
    admin = "admin"


class UserRecord(BaseModel):
    username: str
    role: Role = Role.player
    created_at: datetime


class Word(BaseModel):
    id: str
    text: str


class UnboundTarget(BaseModel):
    """Target not drawn yet; the placeholder only fills the slot and is never shown."""

    kind: Literal["unbound"] = "unbound"
    placeholder: Word


class BoundTarget(BaseModel):
    kind: Literal["bound"] = "bound"
    word: Word


TargetBinding = Annotated[UnboundTarget | BoundTarget, Field(discriminator="kind")]


class SessionPhase(StrEnum):
    created = "created"
    in_progress = "in_progress"
    won = "won"
    lost = "lost"


class Outcome(StrEnum):
    won = "won"
    lost = "lost"


class GameSession(BaseModel):
    session_id: UUID
    owner: str
    date_played: date
    created_at: datetime
    target: TargetBinding
    remaining_guesses: int = Field(..., ge=0)
    phase: SessionPhase = SessionPhase.created

    @property
    def is_completed(self) -> bool:
        return self.phase in (SessionPhase.won, SessionPhase.lost)

    @property
    def outcome(self) -> Outcome | None:
        if self.phase == SessionPhase.won:
            return Outcome.won
        if self.phase == SessionPhase.lost:
            return Outcome.lost
        return None

    @property
    def target_word(self) -> str | None:
        if isinstance(self.target, BoundTarget):
            return self.target.word.text
        return None


class GuessRecord(BaseModel):
    session_id: UUID
    sequence_number: int = Field(..., ge=1)
    word: str
    feedback: str
    created_at: datetime


# --- requests ---


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=32, pattern=r"^[A-Za-z0-9_]+$")


class GuessRequest(BaseModel):
    session_id: UUID
    word: str


class AddWordRequest(BaseModel):
    word: str


# --- responses ---


class PreviousGuess(BaseModel):
    sequence_number: int
    word: str
    feedback: str


class GameStartResponse(BaseModel):
    session_id: UUID
    remaining_guesses: int
    games_remaining_today: int
    message: str


class GuessResult(BaseModel):
    session_id: UUID
    correct: bool
    completed: bool
    outcome: Outcome | None
    remaining_guesses: int
    feedback: str
    current_guess: str
    # Only disclosed once the session is over.
    target_word: str | None = None
    guesses: list[PreviousGuess]
    message: str


class GameStatusResponse(BaseModel):
    session_id: UUID
    target_word: str | None
    remaining_guesses: int
    completed: bool
    outcome: Outcome | None
    message: str
    guesses: list[PreviousGuess]


class DailyStatusResponse(BaseModel):
    username: str
    date: date
    games_played: int
    daily_limit: int
    games_remaining: int
    can_start: bool
    message: str


class PlayerStatsResponse(BaseModel):
    total_games: int
    games_won: int
    games_lost: int
    win_rate: float
    current_streak: int
    longest_streak: int
    average_guesses: float


class HistoryGuess(BaseModel):
    sequence_number: int
    word: str
    feedback: str
    display_feedback: str


class HistoryGame(BaseModel):
    session_id: UUID
    date_played: date
    target_word: str | None
    completed: bool
    outcome: Outcome | None
    remaining_guesses: int
    guesses_used: int
    guesses: list[HistoryGuess]


class GameHistoryResponse(BaseModel):
    username: str
    total_games: int
    completed_games: int
    won_games: int
    lost_games: int
    games: list[HistoryGame]


class WinsByGuessCount(BaseModel):
    guess_count: int
    wins: int


class DailyReportResponse(BaseModel):
    date: date
    total_users: int
    total_games: int
    games_won: int
    games_lost: int
    games_in_progress: int
    win_rate: float
    total_guesses: int
    average_guesses_per_completed_game: float


class UserReportGame(BaseModel):
    session_id: UUID
    target_word: str | None
    won: bool
    guesses: int
    date_played: date


class UserReportDay(BaseModel):
    date: date
    words_attempted: int
    correct_guesses: int
    total_guesses: int
    games: list[UserReportGame]


class UserReportResponse(BaseModel):
    username: str
    days: list[UserReportDay]


class PlayerReport(BaseModel):
    username: str
    role: Role
    registered_at: datetime
    total_games: int
    won_games: int
    last_played: date | None


class PlayerReportList(BaseModel):
    total: int
    players: list[PlayerReport]


class WinnerReport(BaseModel):
    username: str
    total_games: int
    total_wins: int
    wins_with_guess_count: int
    win_rate: float


class WinnerReportList(BaseModel):
    guess_count: int
    total: int
    winners: list[WinnerReport]


class WinReportsResponse(BaseModel):
    total_users: int
    total_winners: int
    wins_by_guess_count: list[WinsByGuessCount]
    winners_by_guess_count: dict[int, list[WinnerReport]]


class SystemStatsResponse(BaseModel):
    total_users: int
    total_players: int
    total_admins: int
    total_games: int
    completed_games: int
    won_games: int
    lost_games: int
    overall_win_rate: float
    games_today: int
    total_words: int
    distinct_winners: int
    wins_by_guess_count: list[WinsByGuessCount]


class AddWordResponse(BaseModel):
    word: str
    message: str


class GameReport(BaseModel):
    session_id: UUID
    username: str
    target_word: str
    date_played: date
    completed: bool
    # Unset while the game is still in progress.
    won: bool | None
    guesses_used: int


class UserRegistration(BaseModel):
    username: str
    role: Role
    created_at: datetime
    games_played: int


class ComprehensiveReportsResponse(BaseModel):
    player_reports: list[PlayerReport]
    game_reports: list[GameReport]
    recent_registrations: list[UserRegistration]
    system_statistics: SystemStatsResponse
