from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from wordle.errors import InvalidInput
from wordle.words import normalize_word

logger = logging.getLogger(__name__)


class AssetLoadError(RuntimeError):
    pass


@dataclass(frozen=True, slots=True)
class WordList:
    """Deduplicated, upper-cased playable words in file order."""

    words: tuple[str, ...]

    def __len__(self) -> int:
        return len(self.words)

    def __contains__(self, item: object) -> bool:
        return isinstance(item, str) and item.strip().upper() in self.words


def _read_lines(path: Path) -> list[str]:
    try:
        raw = path.read_text(encoding="utf-8-sig")
    except FileNotFoundError as e:
        raise AssetLoadError(f"Asset file not found: {path}") from e
    return [line.strip() for line in raw.splitlines()]


def load_word_list_file(path: Path) -> WordList:
    seen: dict[str, None] = {}
    for line in _read_lines(path):
        if not line or line.startswith("#"):
            continue
        try:
            seen.setdefault(normalize_word(line), None)
        except InvalidInput:
            continue

    if not seen:
        raise AssetLoadError(f"Empty word list: {path}")
    return WordList(words=tuple(seen))


def _fallback_word_list() -> WordList:
    """Small built-in list for tests/CI when `assets/words.txt` is missing."""

    return WordList(
        words=(
            "APPLE",
            "BRAVE",
            "CRANE",
            "DRINK",
            "EARTH",
            "FLAME",
            "GHOST",
            "HOUSE",
            "JOLLY",
            "LEMON",
            "PLANT",
            "STORM",
        )
    )


def load_word_list(*, root: Path) -> WordList:
    path = root / "assets" / "words.txt"

    # Fall back to the built-in list when the file is missing or empty.
    # Force strict behaviour with WORDLE_STRICT_ASSETS=1.
    strict = os.getenv("WORDLE_STRICT_ASSETS", "").strip().lower() in {"1", "true", "yes"}

    try:
        return load_word_list_file(path)
    except AssetLoadError as e:
        if strict:
            raise
        logger.warning("%s; using the built-in word list instead", e)
        return _fallback_word_list()
