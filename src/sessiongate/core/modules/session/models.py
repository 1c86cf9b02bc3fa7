"""Session management models."""

from datetime import datetime
from typing import NewType, Self
from uuid import UUID

from pydantic import BaseModel, ConfigDict, model_validator

AuthToken = NewType("AuthToken", str)


class Session(BaseModel):
    """User authentication session.

    Stored as JSON under `session:<token>` with a backend TTL equal to its lifetime.
    """

    token: str
    user_id: UUID
    created_at: datetime
    expires_at: datetime

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def check_expiry_after_creation(self) -> Self:
        if self.expires_at <= self.created_at:
            raise ValueError("expires_at must be after created_at")
        return self

    def is_live(self, at: datetime) -> bool:
        return at < self.expires_at
