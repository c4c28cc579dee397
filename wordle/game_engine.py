from __future__ import annotations

import logging
from datetime import UTC, date, datetime
from uuid import UUID, uuid4

import redis

from wordle.api.models import (
    HIDDEN_TARGET,
    BoundTarget,
    GameHistoryResponse,
    GameSession,
    GameStartResponse,
    GameStatusResponse,
    GuessRecord,
    GuessResult,
    HistoryGame,
    HistoryGuess,
    Outcome,
    PreviousGuess,
    UnboundTarget,
    Word,
)
from wordle.daily_limit import DailyLimiter
from wordle.errors import Forbidden, GameError, ResourceExhausted, RuleViolation
from wordle.feedback import compute_feedback, feedback_for_display, is_solved
from wordle.fsm import SessionFSM
from wordle.guess_processing.validators import GuessContext, guess_pipeline
from wordle.lock import daily_quota_lock, session_lock
from wordle.session_store import GuessRepository, SessionRepository
from wordle.settings import Settings, get_settings
from wordle.users import require_user
from wordle.words import WordStore, normalize_word

logger = logging.getLogger(__name__)

INITIAL_GUESSES = 5
TARGET_REDRAW_ATTEMPTS = 5


def _now() -> datetime:
    return datetime.now(tz=UTC)


def _draw_word(words: WordStore) -> Word:
    word = words.random_word()
    if word is None:
        logger.error("word pool is empty; an administrator must add words before games can be played")
        raise ResourceExhausted("No words available in the word pool")
    return word


def _draw_target(*, words: WordStore, placeholder: Word) -> Word:
    """Draw the real target, preferring a word other than the placeholder.

    Distinctness is best effort: after TARGET_REDRAW_ATTEMPTS redraws the last
    draw is accepted even if it still equals the placeholder.
    """

    drawn = _draw_word(words)
    attempts = 0
    while drawn.id == placeholder.id and attempts < TARGET_REDRAW_ATTEMPTS:
        drawn = _draw_word(words)
        attempts += 1
    return drawn


def _previous(guesses: list[GuessRecord]) -> list[PreviousGuess]:
    return [PreviousGuess(sequence_number=g.sequence_number, word=g.word, feedback=g.feedback) for g in guesses]


def start_game(
    *,
    r: redis.Redis,
    owner: str,
    today: date,
    words: WordStore | None = None,
    settings: Settings | None = None,
) -> GameStartResponse:
    settings = settings or get_settings()
    words = words or WordStore(r)
    require_user(r=r, username=owner)

    limiter = DailyLimiter(r, limit=settings.daily_game_limit)
    sessions = SessionRepository(r)

    with daily_quota_lock(r=r, owner=owner, day=today, ttl_ms=settings.lock_ttl_ms):
        played = limiter.games_played_on(owner, today)
        if played >= limiter.limit:
            logger.info("daily limit reached user=%s date=%s played=%d", owner, today, played)
            raise RuleViolation(
                f"You have reached the daily limit of {limiter.limit} games today. Please try again tomorrow."
            )

        # The placeholder only fills the target slot; the real word is drawn on the first guess.
        placeholder = _draw_word(words)
        session = GameSession(
            session_id=uuid4(),
            owner=owner,
            date_played=today,
            created_at=_now(),
            target=UnboundTarget(placeholder=placeholder),
            remaining_guesses=INITIAL_GUESSES,
        )
        sessions.create(session)

    logger.info("game started session=%s user=%s date=%s", session.session_id, owner, today)
    return GameStartResponse(
        session_id=session.session_id,
        remaining_guesses=session.remaining_guesses,
        games_remaining_today=max(0, limiter.limit - played - 1),
        message=f"New Game Started! You have {INITIAL_GUESSES} chances.",
    )


def submit_guess(
    *,
    r: redis.Redis,
    owner: str,
    session_id: UUID,
    word: str,
    words: WordStore | None = None,
    settings: Settings | None = None,
) -> GuessResult:
    """Score one guess and advance the session.

    Runs under the per-session lock. Every check, and the first-guess target
    draw, happens before anything is written; the guess append and the session
    update are committed together in one MULTI/EXEC, so a failed call leaves
    the session and its guesses untouched.
    """

    settings = settings or get_settings()
    words = words or WordStore(r)
    sessions = SessionRepository(r)
    guesses = GuessRepository(r)
    pipeline = guess_pipeline(words=words if settings.require_dictionary_words else None)

    with session_lock(r=r, session_id=session_id, ttl_ms=settings.lock_ttl_ms):
        session = sessions.require(session_id)
        ctx = GuessContext(session_id=str(session_id), username=owner, word=word)
        try:
            pipeline.validate(ctx=ctx, session=session)
        except GameError as e:
            logger.info("guess rejected session=%s user=%s reason=%s", session_id, owner, e)
            raise

        guess_word = normalize_word(word)
        history = guesses.list_by_session(session_id)
        fsm = SessionFSM(session)

        if isinstance(session.target, UnboundTarget):
            target = _draw_target(words=words, placeholder=session.target.placeholder)
            session.target = BoundTarget(word=target)
            fsm.bind_target()
            logger.debug("target bound session=%s", session_id)

        if not isinstance(session.target, BoundTarget):
            raise RuntimeError("Target must be bound before a guess is scored")
        target_word = session.target.word.text

        feedback = compute_feedback(guess_word, target_word)
        record = GuessRecord(
            session_id=session_id,
            sequence_number=len(history) + 1,
            word=guess_word,
            feedback=feedback,
            created_at=_now(),
        )

        session.remaining_guesses -= 1
        correct = is_solved(feedback)
        if correct:
            fsm.win()
        elif session.remaining_guesses == 0:
            fsm.lose()
        fsm.sync_phase_to_model()

        pipe = r.pipeline(transaction=True)
        guesses.append(record, pipe=pipe)
        sessions.save(session, pipe=pipe)
        pipe.execute()

    history.append(record)
    completed = fsm.is_terminal

    if correct:
        message = f"Congratulations! You guessed the word correctly! The word was: {target_word}"
    elif completed:
        message = f"Better luck next time! The word was: {target_word}"
    else:
        message = f"Try again! {session.remaining_guesses} guesses remaining."

    if completed:
        logger.info(
            "game finished session=%s user=%s outcome=%s guesses=%d",
            session_id,
            owner,
            session.phase.value,
            record.sequence_number,
        )

    return GuessResult(
        session_id=session_id,
        correct=correct,
        completed=completed,
        outcome=session.outcome,
        remaining_guesses=session.remaining_guesses,
        feedback=feedback,
        current_guess=guess_word,
        target_word=target_word if completed else None,
        guesses=_previous(history),
        message=message,
    )


def get_status(*, r: redis.Redis, owner: str, session_id: UUID) -> GameStatusResponse:
    session = SessionRepository(r).require(session_id)
    if session.owner != owner:
        raise Forbidden("You can only view your own games")

    history = GuessRepository(r).list_by_session(session_id)

    target_word: str | None
    if not history:
        # Never expose the placeholder.
        target_word = HIDDEN_TARGET
        message = f"Game ready. {session.remaining_guesses} guesses available."
    elif session.is_completed:
        target_word = session.target_word
        if session.outcome == Outcome.won:
            message = "Congratulations! You won this game!"
        else:
            message = "Game over. Better luck next time!"
    else:
        target_word = None
        message = f"Game in progress. {session.remaining_guesses} guesses remaining."

    return GameStatusResponse(
        session_id=session.session_id,
        target_word=target_word,
        remaining_guesses=session.remaining_guesses,
        completed=session.is_completed,
        outcome=session.outcome,
        message=message,
        guesses=_previous(history),
    )


def get_history(*, r: redis.Redis, owner: str) -> GameHistoryResponse:
    """All of a user's sessions that received at least one guess, newest first."""

    require_user(r=r, username=owner)
    guess_repo = GuessRepository(r)

    games: list[HistoryGame] = []
    for session in SessionRepository(r).list_by_owner(owner):
        history = guess_repo.list_by_session(session.session_id)
        if not history:
            continue
        games.append(
            HistoryGame(
                session_id=session.session_id,
                date_played=session.date_played,
                target_word=session.target_word if session.is_completed else None,
                completed=session.is_completed,
                outcome=session.outcome,
                remaining_guesses=session.remaining_guesses,
                guesses_used=INITIAL_GUESSES - session.remaining_guesses,
                guesses=[
                    HistoryGuess(
                        sequence_number=g.sequence_number,
                        word=g.word,
                        feedback=g.feedback,
                        display_feedback=feedback_for_display(g.feedback),
                    )
                    for g in history
                ],
            )
        )

    return GameHistoryResponse(
        username=owner,
        total_games=len(games),
        completed_games=sum(1 for g in games if g.completed),
        won_games=sum(1 for g in games if g.outcome == Outcome.won),
        lost_games=sum(1 for g in games if g.outcome == Outcome.lost),
        games=games,
    )
