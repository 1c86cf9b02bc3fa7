import structlog

from sessiongate.core.core import Service
from sessiongate.core.modules.session.models import AuthToken, Session
from sessiongate.core.modules.session.service import SessionService
from sessiongate.errors import AuthenticationError, CorruptSessionError, StoreUnavailableError

logger = structlog.get_logger(__name__)


class AccessService(Service):
    """Admits requests that carry a live session token."""

    def __init__(self, sessions: SessionService) -> None:
        self._sessions = sessions

    async def ensure_authenticated(self, auth_token: AuthToken | None) -> Session:
        """Return the live session for the token.

        Missing, unknown, expired and unreadable sessions are indistinguishable
        to the caller: all raise AuthenticationError.
        """
        if not auth_token:
            raise AuthenticationError

        try:
            session = await self._sessions.resolve_session(auth_token)
        except (StoreUnavailableError, CorruptSessionError) as e:
            logger.warning("session_resolution_failed", error_type=type(e).__name__)
            raise AuthenticationError from e

        if session is None:
            raise AuthenticationError
        return session
