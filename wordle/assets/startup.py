from __future__ import annotations

import logging
from pathlib import Path

import redis

from wordle.assets.registry import load_word_list
from wordle.words import WordStore

logger = logging.getLogger(__name__)


def seed_words_if_empty(*, r: redis.Redis, project_root: Path | None = None) -> int:
    """Load the bundled word list into Redis when the pool is empty.

    Returns the number of words added (0 when the pool was already stocked).
    """

    store = WordStore(r)
    if store.count() > 0:
        return 0

    # project root is two levels up from this file: wordle/assets/startup.py
    root = project_root or Path(__file__).resolve().parents[2]
    added = store.seed(load_word_list(root=root).words)
    logger.info("seeded word pool with %d words", added)
    return added
