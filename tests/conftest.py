from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from signup_service.main import create_app
from signup_service.settings import Settings
from signup_service.user_store import InMemoryUserStore

SECRET = "s3cr3t-value"


class FakeClock:
    """Each call returns a timestamp one second after the previous one."""

    def __init__(self, start: datetime | None = None):
        self.current = start or datetime(2024, 5, 1, 10, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        value = self.current
        self.current = self.current + timedelta(seconds=1)
        return value


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> InMemoryUserStore:
    return InMemoryUserStore(clock=clock)


@pytest.fixture
def secret() -> str:
    return SECRET


@pytest.fixture
def settings() -> Settings:
    return Settings(SECRET_PROVIDER="none", IDENTIFIER_FIELD="email")


@pytest.fixture
def client(settings: Settings, store: InMemoryUserStore, secret: str) -> TestClient:
    return TestClient(create_app(settings, store=store, secret=secret))
