from __future__ import annotations

import logging

from fastapi import HTTPException, status

from wordle.errors import Forbidden, GameError, InvalidInput, NotFound, ResourceExhausted, RuleViolation

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: tuple[tuple[type[GameError], int], ...] = (
    (NotFound, status.HTTP_404_NOT_FOUND),
    (Forbidden, status.HTTP_403_FORBIDDEN),
    (InvalidInput, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (RuleViolation, status.HTTP_409_CONFLICT),
)


def http_error(e: GameError) -> HTTPException:
    for kind, code in _STATUS_BY_ERROR:
        if isinstance(e, kind):
            return HTTPException(status_code=code, detail=str(e))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


def unavailable(e: ResourceExhausted) -> HTTPException:
    logger.error("operation failed, resource exhausted: %s", e)
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
