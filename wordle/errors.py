"""Error kinds raised by the game engine.

Caller-facing kinds derive from `GameError` (a `ValueError`) and are mapped to
4xx responses by the HTTP layer. `ResourceExhausted` is an operational failure
(the word pool is empty) and needs an administrator to restock words.
"""

from __future__ import annotations


class GameError(ValueError):
    pass


class NotFound(GameError):
    pass


class Forbidden(GameError):
    pass


class InvalidInput(GameError):
    pass


class RuleViolation(GameError):
    pass


class SessionBusy(RuleViolation):
    """Another request currently holds the lock for this session or quota."""


class ResourceExhausted(RuntimeError):
    pass
