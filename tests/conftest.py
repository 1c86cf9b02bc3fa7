"""Shared pytest fixtures."""

from datetime import UTC, datetime, timedelta
from uuid import UUID

import pytest

from sessiongate.config import Config
from sessiongate.core.core import Core
from sessiongate.core.modules.session.backend import KeyValueBackend
from sessiongate.core.modules.user.models import User
from sessiongate.core.modules.user.repository import UserRepository
from sessiongate.errors import DuplicateUserError, StoreUnavailableError

class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, delta: timedelta) -> None:
        self.current += delta


class InMemoryBackend(KeyValueBackend):
    """Key-value backend keeping data in a dict.

    With `evict_expired=False` expired keys stay readable, like a store whose
    TTL sweep lags behind the clock.
    """

    def __init__(self, clock: FakeClock, evict_expired: bool = True) -> None:
        self.clock = clock
        self.evict_expired = evict_expired
        self.available = True
        self.data: dict[str, str] = {}
        self.expiry: dict[str, datetime] = {}
        self.ttls: dict[str, timedelta] = {}

    def _check_available(self) -> None:
        if not self.available:
            raise StoreUnavailableError("backend down")

    async def set(self, key: str, value: str, ttl: timedelta) -> None:
        self._check_available()
        self.data[key] = value
        self.expiry[key] = self.clock() + ttl
        self.ttls[key] = ttl

    async def get(self, key: str) -> str | None:
        self._check_available()
        if key not in self.data:
            return None
        if self.evict_expired and self.clock() >= self.expiry[key]:
            self._remove(key)
            return None
        return self.data[key]

    async def delete(self, key: str) -> None:
        self._check_available()
        self._remove(key)

    async def ping(self) -> None:
        self._check_available()

    def _remove(self, key: str) -> None:
        self.data.pop(key, None)
        self.expiry.pop(key, None)
        self.ttls.pop(key, None)


class InMemoryUserRepository(UserRepository):
    """User repository keeping users in a dict keyed by email."""

    def __init__(self) -> None:
        self.available = True
        self.users: dict[str, User] = {}

    def _check_available(self) -> None:
        if not self.available:
            raise StoreUnavailableError("user store down")

    async def create(self, user: User) -> None:
        self._check_available()
        if user.email in self.users:
            raise DuplicateUserError("User already exists")
        self.users[user.email] = user

    async def find_by_email(self, email: str) -> User | None:
        self._check_available()
        return self.users.get(email)

    async def ping(self) -> None:
        self._check_available()


@pytest.fixture
def user_id():
    return UUID("87654321-4321-8765-4321-876543218765")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def backend(clock):
    return InMemoryBackend(clock)


@pytest.fixture
def users():
    return InMemoryUserRepository()


@pytest.fixture
def config():
    return Config(
        _env_file=None,
        database_url="mongodb://localhost:27017/sessiongate_test",
        redis_url="redis://localhost:6379/15",
        host="127.0.0.1",
        port=8000,
        debug=True,
        bcrypt_rounds=4,
        store_timeout_seconds=0.2,
    )


@pytest.fixture
def core(config, users, backend, clock):
    return Core(config, users, backend, clock=clock)
