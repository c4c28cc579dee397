from __future__ import annotations

from collections.abc import Generator
from datetime import date

import fakeredis
import pytest
from fastapi.testclient import TestClient

from wordle.settings import Settings, reset_settings_for_tests

TODAY = date(2024, 3, 1)
ADMIN = "admin"


@pytest.fixture(autouse=True)
def _pinned_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[Settings, None, None]:
    """Pin settings so a developer's `.env` never leaks into test runs."""

    monkeypatch.delenv("WORDLE_STRICT_ASSETS", raising=False)
    settings = Settings(admin_usernames=frozenset({ADMIN}))
    reset_settings_for_tests(settings)
    yield settings
    reset_settings_for_tests()


@pytest.fixture()
def r() -> fakeredis.FakeRedis:
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture()
def client_and_redis(
    _pinned_settings: Settings, r: fakeredis.FakeRedis
) -> Generator[tuple[TestClient, fakeredis.FakeRedis], None, None]:
    """TestClient wired to fakeredis with the calendar frozen at TODAY.

    Startup seeds the bundled word list and creates the `admin` account.
    """

    from wordle.api.deps import get_redis, get_today
    from wordle.main import app

    def _override() -> Generator[fakeredis.FakeRedis, None, None]:
        yield r

    app.dependency_overrides[get_redis] = _override
    app.dependency_overrides[get_today] = lambda: TODAY
    with TestClient(app) as c:
        yield c, r
    app.dependency_overrides.clear()