from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from wordle.api.models import GameSession
from wordle.errors import Forbidden, InvalidInput, RuleViolation
from wordle.words import WordStore, normalize_word


@dataclass(frozen=True, slots=True)
class GuessContext:
    """Inputs available to validators.

    Keep this tight and serializable-ish so we can safely log it.
    """

    session_id: str
    username: str
    word: str


class GuessValidator(ABC):
    """A small, composable precondition check for an incoming guess."""

    @abstractmethod
    def validate(self, *, ctx: GuessContext, session: GameSession) -> None:
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class OwnerValidator(GuessValidator):
    def validate(self, *, ctx: GuessContext, session: GameSession) -> None:
        if session.owner != ctx.username:
            raise Forbidden("You can only play your own games")


@dataclass(frozen=True, slots=True)
class CompletedSessionValidator(GuessValidator):
    def validate(self, *, ctx: GuessContext, session: GameSession) -> None:
        if session.is_completed:
            raise RuleViolation("This game is already completed")


@dataclass(frozen=True, slots=True)
class RemainingGuessesValidator(GuessValidator):
    def validate(self, *, ctx: GuessContext, session: GameSession) -> None:
        if session.remaining_guesses <= 0:
            raise RuleViolation("No remaining guesses for this game")


@dataclass(frozen=True, slots=True)
class WordFormatValidator(GuessValidator):
    def validate(self, *, ctx: GuessContext, session: GameSession) -> None:
        normalize_word(ctx.word)


@dataclass(frozen=True, slots=True)
class DictionaryWordValidator(GuessValidator):
    """Reject guesses that are not in the word pool."""

    words: WordStore

    def validate(self, *, ctx: GuessContext, session: GameSession) -> None:
        if not self.words.exists(ctx.word):
            raise InvalidInput(f"'{ctx.word.strip().upper()}' is not in the word list")


@dataclass(frozen=True, slots=True)
class ValidatorPipeline:
    validators: tuple[GuessValidator, ...]

    def validate(self, *, ctx: GuessContext, session: GameSession) -> None:
        for v in self.validators:
            v.validate(ctx=ctx, session=session)


# Order decides which error a caller sees when several preconditions fail.
DEFAULT_GUESS_VALIDATORS: tuple[GuessValidator, ...] = (
    OwnerValidator(),
    CompletedSessionValidator(),
    RemainingGuessesValidator(),
    WordFormatValidator(),
)


def guess_pipeline(*, words: WordStore | None = None) -> ValidatorPipeline:
    """Default pipeline; pass `words` to also require dictionary words."""

    if words is None:
        return ValidatorPipeline(validators=DEFAULT_GUESS_VALIDATORS)
    return ValidatorPipeline(validators=(*DEFAULT_GUESS_VALIDATORS, DictionaryWordValidator(words=words)))
