import asyncio

import structlog

from sessiongate.core.core import Service
from sessiongate.core.modules.credential.hashing import DEFAULT_ROUNDS, hash_password, verify_password
from sessiongate.core.modules.credential.validators import normalize_email, validate_registration
from sessiongate.core.modules.session.models import AuthToken
from sessiongate.core.modules.session.service import SessionService
from sessiongate.core.modules.user.models import User
from sessiongate.core.modules.user.repository import UserRepository
from sessiongate.errors import DuplicateUserError, InvalidCredentialsError, RegistrationError, StoreUnavailableError

logger = structlog.get_logger(__name__)


class AuthService(Service):
    """Registration, login and logout."""

    def __init__(self, users: UserRepository, sessions: SessionService, bcrypt_rounds: int = DEFAULT_ROUNDS) -> None:
        self._users = users
        self._sessions = sessions
        self._bcrypt_rounds = bcrypt_rounds

    async def register(self, email: str, password: str) -> User:
        """Create user with hashed password.

        Format problems raise a specific ValidationError. Anything that goes
        wrong after validation, including a duplicate email, raises the same
        RegistrationError.
        """
        validate_registration(email, password)

        password_hash = await asyncio.to_thread(hash_password, password, self._bcrypt_rounds)
        user = User(email=normalize_email(email), password_hash=password_hash)
        try:
            await self._users.create(user)
        except (DuplicateUserError, StoreUnavailableError) as e:
            logger.info("registration_failed", error_type=type(e).__name__)
            raise RegistrationError from e

        logger.info("user_registered", user_id=str(user.id))
        return user

    async def login(self, email: str, password: str) -> AuthToken:
        """Verify credentials and create a session."""
        user = await self._users.find_by_email(normalize_email(email))
        if user is None or not await asyncio.to_thread(verify_password, user.password_hash, password):
            logger.info("login_failed")
            raise InvalidCredentialsError

        auth_token = await self._sessions.create_session(user.id)
        logger.info("user_logged_in", user_id=str(user.id))
        return auth_token

    async def logout(self, auth_token: AuthToken) -> None:
        await self._sessions.invalidate_session(auth_token)
