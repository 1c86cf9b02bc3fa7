from abc import ABC, abstractmethod
from typing import Any

import structlog
from pymongo import AsyncMongoClient
from pymongo.errors import DuplicateKeyError, PyMongoError

from sessiongate.core.core import Service
from sessiongate.core.modules.user.models import User
from sessiongate.errors import DuplicateUserError, StoreUnavailableError

logger = structlog.get_logger(__name__)


class UserRepository(Service, ABC):
    """Durable user records keyed by normalized email."""

    @abstractmethod
    async def create(self, user: User) -> None:
        """Persist a new user.

        Raises:
            DuplicateUserError: If a user with the same email exists
            StoreUnavailableError: If the store cannot acknowledge the write
        """

    @abstractmethod
    async def find_by_email(self, email: str) -> User | None:
        """Return the user with this normalized email, or None."""

    @abstractmethod
    async def ping(self) -> None:
        """Check connectivity, raising StoreUnavailableError if the store is down."""


class MongoUserRepository(UserRepository):
    """User repository backed by the `users` collection."""

    def __init__(self, client: AsyncMongoClient[dict[str, Any]], database_name: str) -> None:
        self._client = client
        self._collection = client.get_database(database_name).get_collection("users")

    async def create(self, user: User) -> None:
        try:
            await self._collection.insert_one(user.to_mongo())
        except DuplicateKeyError as e:
            raise DuplicateUserError("User already exists") from e
        except PyMongoError as e:
            raise StoreUnavailableError(f"User store write failed: {e}") from e

    async def find_by_email(self, email: str) -> User | None:
        try:
            doc = await self._collection.find_one({"email": email})
        except PyMongoError as e:
            raise StoreUnavailableError(f"User store read failed: {e}") from e
        if doc is None:
            return None
        return User.model_validate(doc)

    async def ping(self) -> None:
        try:
            await self._client.admin.command("ping")
        except PyMongoError as e:
            raise StoreUnavailableError(f"MongoDB connection error: {e}") from e

    async def on_start(self) -> None:
        """Create the unique email index."""
        await self._collection.create_index([("email", 1)], unique=True)
        logger.debug("user_repository_started")
