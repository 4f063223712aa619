from __future__ import annotations

import os
from collections.abc import Generator
from pathlib import Path

import pytest

from condstore.store import ConditionsStore


@pytest.fixture(scope="session", autouse=True)
def _load_dotenv_for_tests() -> None:
    """Load repo .env for local runs (PyCharm/CLI).

    In CI, we *don't* auto-load `.env` by default so a developer's REDIS_URL or strict
    prefix setting can't leak into the suite. Opt in with CONDSTORE_LOAD_DOTENV_FOR_TESTS=1.
    """

    if os.environ.get("CI") and os.environ.get("CONDSTORE_LOAD_DOTENV_FOR_TESTS") != "1":
        return

    env_path = Path(__file__).resolve().parents[1] / ".env"
    if env_path.exists():
        from dotenv import load_dotenv

        load_dotenv(dotenv_path=env_path, override=False)


@pytest.fixture()
def store() -> ConditionsStore:
    return ConditionsStore(strict_prefixes=False)


@pytest.fixture()
def strict_store() -> ConditionsStore:
    return ConditionsStore(strict_prefixes=True)


@pytest.fixture()
def client_and_redis():
    """FastAPI TestClient wired to fakeredis and a fresh process store."""

    import fakeredis
    from fastapi.testclient import TestClient

    from condstore.api.deps import get_redis
    from condstore.main import app
    from condstore.singleton import init_store, reset_store_for_tests

    r = fakeredis.FakeRedis(decode_responses=True)

    def _override() -> Generator[fakeredis.FakeRedis, None, None]:
        yield r

    reset_store_for_tests()
    init_store(store=ConditionsStore(strict_prefixes=False))

    app.dependency_overrides[get_redis] = _override
    with TestClient(app) as c:
        yield c, r
    app.dependency_overrides.clear()
    reset_store_for_tests()
