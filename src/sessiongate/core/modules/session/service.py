import secrets
from collections.abc import Callable
from datetime import datetime, timedelta
from uuid import UUID

import pydantic
import structlog

from sessiongate.core.core import Service
from sessiongate.core.modules.session.backend import KeyValueBackend
from sessiongate.core.modules.session.models import AuthToken, Session
from sessiongate.errors import CorruptSessionError
from sessiongate.utils import now

logger = structlog.get_logger(__name__)

DEFAULT_LIFETIME = timedelta(hours=24)
TOKEN_BYTES = 32
TOKEN_LENGTH = 32


def generate_token() -> AuthToken:
    """Return 32 URL-safe characters drawn from 32 bytes of OS randomness."""
    return AuthToken(secrets.token_urlsafe(TOKEN_BYTES)[:TOKEN_LENGTH])


def session_key(auth_token: str) -> str:
    return f"session:{auth_token}"


class SessionService(Service):
    """Creates, resolves and invalidates sessions in a key-value backend.

    Expiry is checked against `expires_at` on every read, independently of the
    backend TTL, so a session is dead as soon as its lifetime has passed even if
    the backend has not evicted it yet.
    """

    def __init__(
        self,
        backend: KeyValueBackend,
        lifetime: timedelta = DEFAULT_LIFETIME,
        clock: Callable[[], datetime] = now,
    ) -> None:
        if lifetime <= timedelta(0):
            raise ValueError("Session lifetime must be positive")
        self._backend = backend
        self._lifetime = lifetime
        self._clock = clock

    @property
    def lifetime(self) -> timedelta:
        return self._lifetime

    async def create_session(self, user_id: UUID) -> AuthToken:
        auth_token = generate_token()
        created_at = self._clock()
        session = Session(
            token=auth_token,
            user_id=user_id,
            created_at=created_at,
            expires_at=created_at + self._lifetime,
        )
        await self._backend.set(session_key(auth_token), session.model_dump_json(), self._lifetime)
        logger.debug("session_created", user_id=str(user_id), expires_at=session.expires_at.isoformat())
        return auth_token

    async def resolve_session(self, auth_token: AuthToken) -> Session | None:
        """Return the live session for a token, or None if missing or expired.

        Raises:
            CorruptSessionError: If the stored value cannot be decoded
            StoreUnavailableError: If the backend fails
        """
        key = session_key(auth_token)
        data = await self._backend.get(key)
        if data is None:
            return None

        try:
            session = Session.model_validate_json(data)
        except pydantic.ValidationError as e:
            raise CorruptSessionError("Stored session could not be decoded") from e
        if session.token != auth_token:
            raise CorruptSessionError("Stored session belongs to a different token")

        if not session.is_live(self._clock()):
            await self._backend.delete(key)
            logger.debug("session_expired", user_id=str(session.user_id))
            return None

        return session

    async def invalidate_session(self, auth_token: AuthToken) -> None:
        """Invalidate a session by removing it from the backend."""
        await self._backend.delete(session_key(auth_token))
