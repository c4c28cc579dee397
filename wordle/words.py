from __future__ import annotations

import logging
import re
from collections.abc import Iterable

import redis

from wordle.api.models import Word
from wordle.errors import InvalidInput, RuleViolation
from wordle.feedback import WORD_LENGTH

logger = logging.getLogger(__name__)

WORDS_SET_KEY = "wordle:words"

_WORD_RE = re.compile(rf"^[A-Z]{{{WORD_LENGTH}}}$")


def normalize_word(text: str) -> str:
    """Upper-case and validate a candidate word; raises InvalidInput."""

    if not isinstance(text, str):
        raise InvalidInput("Word must be a string")
    word = text.strip().upper()
    if len(word) != WORD_LENGTH:
        raise InvalidInput(f"Word must be exactly {WORD_LENGTH} letters")
    if not _WORD_RE.match(word):
        raise InvalidInput("Word must contain only letters A-Z")
    return word


def _as_word(text: str) -> Word:
    return Word(id=text, text=text)


class WordStore:
    """Pool of playable words kept in a Redis set."""

    def __init__(self, r: redis.Redis) -> None:
        self._r = r

    def random_word(self) -> Word | None:
        raw = self._r.srandmember(WORDS_SET_KEY)
        if not raw:
            return None
        return _as_word(str(raw))

    def exists(self, text: str) -> bool:
        return bool(self._r.sismember(WORDS_SET_KEY, text.strip().upper()))

    def count(self) -> int:
        return int(self._r.scard(WORDS_SET_KEY))

    def add_word(self, text: str) -> Word:
        word = normalize_word(text)
        added = self._r.sadd(WORDS_SET_KEY, word)
        if not added:
            raise RuleViolation(f"Word '{word}' already exists")
        logger.info("word added word=%s", word)
        return _as_word(word)

    def seed(self, words: Iterable[str]) -> int:
        """Bulk-load words, skipping malformed entries. Returns how many were new."""

        clean: list[str] = []
        for w in words:
            try:
                clean.append(normalize_word(w))
            except InvalidInput:
                logger.debug("skipping malformed word %r", w)
        if not clean:
            return 0
        return int(self._r.sadd(WORDS_SET_KEY, *clean))
