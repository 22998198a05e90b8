"""Shared fixtures: cache doubles, settings bound to a temporary database, and an API client."""

import pytest
from fastapi.testclient import TestClient

from discapi.cache import MemoryCacheStore, PaginatedCollectionCache
from discapi.config import Settings
from discapi.main import create_app

USER_HEADERS = {"Authorization": "Bearer user-token"}
ADMIN_HEADERS = {"Authorization": "Bearer admin-token"}


class FakeClock:
    """Monotonic clock the tests move by hand."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class CountingCompute:
    """Compute coroutine returning a fixed payload and counting its calls."""

    def __init__(self, payload: str):
        self.payload = payload
        self.calls = 0

    async def __call__(self) -> str:
        self.calls += 1
        return self.payload


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return MemoryCacheStore(clock=clock)


@pytest.fixture
def cache(store):
    return PaginatedCollectionCache(store, ttl=60)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}",
        cache_backend="memory",
        api_tokens="user-token:ROLE_USER,admin-token:ROLE_ADMIN",
    )


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client
