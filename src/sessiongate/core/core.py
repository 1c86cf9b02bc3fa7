from __future__ import annotations

import asyncio
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager
from datetime import datetime
from typing import TYPE_CHECKING
from urllib.parse import urlparse

import redis.asyncio as redis
import structlog
from pymongo import AsyncMongoClient

from sessiongate.config import Config
from sessiongate.core.modules.health.models import ComponentHealth, HealthReport
from sessiongate.errors import StoreUnavailableError
from sessiongate.utils import now

if TYPE_CHECKING:
    from sessiongate.core.modules.access.service import AccessService
    from sessiongate.core.modules.auth.service import AuthService
    from sessiongate.core.modules.session.backend import KeyValueBackend
    from sessiongate.core.modules.session.service import SessionService
    from sessiongate.core.modules.user.repository import UserRepository

logger = structlog.get_logger(__name__)


class Service:
    """Base class for services and stores with lifecycle hooks."""

    async def on_start(self) -> None:
        """Initialize service on application startup."""

    async def on_stop(self) -> None:
        """Cleanup service on application shutdown."""


class Services:
    """Service registry. Every dependency is passed in explicitly."""

    session: SessionService
    access: AccessService
    auth: AuthService

    def __init__(
        self,
        config: Config,
        user_repository: UserRepository,
        session_backend: KeyValueBackend,
        clock: Callable[[], datetime] = now,
    ) -> None:
        from sessiongate.core.modules.access.service import AccessService  # noqa: PLC0415
        from sessiongate.core.modules.auth.service import AuthService  # noqa: PLC0415
        from sessiongate.core.modules.session.service import SessionService  # noqa: PLC0415

        self.session = SessionService(session_backend, lifetime=config.session_lifetime, clock=clock)
        self.access = AccessService(self.session)
        self.auth = AuthService(user_repository, self.session, bcrypt_rounds=config.bcrypt_rounds)
        # Stores start first and stop last
        self._services: list[Service] = [user_repository, session_backend, self.session, self.access, self.auth]

    async def start_all(self) -> None:
        for service in self._services:
            await service.on_start()

    async def stop_all(self) -> None:
        for service in reversed(self._services):
            await service.on_stop()


class Core:
    """Container providing config, stores, and all service instances."""

    config: Config
    user_repository: UserRepository
    session_backend: KeyValueBackend
    services: Services

    def __init__(
        self,
        config: Config,
        user_repository: UserRepository,
        session_backend: KeyValueBackend,
        clock: Callable[[], datetime] = now,
    ) -> None:
        self.config = config
        self.user_repository = user_repository
        self.session_backend = session_backend
        self.services = Services(config, user_repository, session_backend, clock)
        self._closers: list[Callable[[], Awaitable[None]]] = []

    @classmethod
    def from_config(cls, config: Config) -> Core:
        """Build the MongoDB and Redis clients once and inject them into the stores."""
        from sessiongate.core.modules.session.backend import RedisBackend  # noqa: PLC0415
        from sessiongate.core.modules.user.repository import MongoUserRepository  # noqa: PLC0415

        timeout_ms = int(config.store_timeout_seconds * 1000)
        mongo_client = AsyncMongoClient(
            config.database_url, uuidRepresentation="standard", timeoutMS=timeout_ms
        )
        redis_client = redis.from_url(
            config.redis_url,
            decode_responses=True,
            socket_timeout=config.store_timeout_seconds,
            socket_connect_timeout=config.store_timeout_seconds,
        )

        core = cls(
            config,
            MongoUserRepository(mongo_client, urlparse(config.database_url).path[1:]),
            RedisBackend(redis_client, timeout=config.store_timeout_seconds),
        )
        core._closers = [mongo_client.aclose, redis_client.aclose]
        return core

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Manage application lifecycle - startup and shutdown."""
        await self.on_start()
        try:
            yield
        finally:
            await self.on_stop()

    async def on_start(self) -> None:
        await self.services.start_all()
        logger.info("core_started")

    async def on_stop(self) -> None:
        """Stop services and close client connections on shutdown."""
        try:
            await self.services.stop_all()
        finally:
            for close in self._closers:
                await close()

    async def health(self) -> HealthReport:
        """Ping every store. Failures are reported, never raised."""
        components: dict[str, ComponentHealth] = {}
        for name, store, label in (
            ("user_store", self.user_repository, "User store"),
            ("session_store", self.session_backend, "Session store"),
        ):
            try:
                async with asyncio.timeout(self.config.store_timeout_seconds):
                    await store.ping()
            except (StoreUnavailableError, TimeoutError) as e:
                logger.warning("health_check_failed", component=name, error_type=type(e).__name__)
                components[name] = ComponentHealth(status="down", message=f"{label} connection error")
            else:
                components[name] = ComponentHealth(status="up", message=f"{label} connection is healthy")

        return HealthReport.from_components(components)
