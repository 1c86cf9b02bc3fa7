from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import timedelta

from sessiongate.core.core import Core
from sessiongate.core.modules.health.models import HealthReport
from sessiongate.core.modules.session.models import AuthToken, Session
from sessiongate.core.modules.user.models import UserView


class App:
    """Facade for all application operations, checks authentication before delegating to Core."""

    def __init__(self, core: Core) -> None:
        self._core = core

    @property
    def session_lifetime(self) -> timedelta:
        return self._core.services.session.lifetime

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    async def authenticate(self, auth_token: AuthToken | None) -> Session:
        """Resolve the request's token to a live session or raise AuthenticationError."""
        return await self._core.services.access.ensure_authenticated(auth_token)

    async def register(self, email: str, password: str) -> UserView:
        """Create a new account."""
        user = await self._core.services.auth.register(email, password)
        return UserView.from_domain(user)

    async def login(self, email: str, password: str) -> AuthToken:
        """Authenticate user and create session."""
        return await self._core.services.auth.login(email, password)

    async def logout(self, auth_token: AuthToken | None) -> None:
        """Invalidate user session."""
        session = await self._core.services.access.ensure_authenticated(auth_token)
        await self._core.services.auth.logout(AuthToken(session.token))

    async def health(self) -> HealthReport:
        return await self._core.health()
