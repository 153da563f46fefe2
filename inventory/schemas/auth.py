"""Schemas for the authenticated user and the server-side session payload."""

from datetime import UTC, datetime

from pydantic import BaseModel, Field

from inventory.models.user import ROLE_ADMINISTRATOR, ROLE_MANAGER, ROLE_STANDARD_USER


class CurrentUser(BaseModel):
    """Authenticated user (id, username, role) for dependency injection and templates."""

    id: int
    username: str
    role_id: int
    role_name: str

    class Config:
        from_attributes = True

    @property
    def is_admin(self) -> bool:
        return self.role_name == ROLE_ADMINISTRATOR

    @property
    def is_manager(self) -> bool:
        return self.role_name == ROLE_MANAGER

    @property
    def is_user(self) -> bool:
        return self.role_name == ROLE_STANDARD_USER


class SessionData(BaseModel):
    """
    Server-held state behind one session token.

    username and role are a cache for display; the authorization gate
    re-reads both from the users table on every request.
    """

    user_id: int
    username: str
    role_id: int
    role_name: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def for_user(cls, user: CurrentUser) -> "SessionData":
        return cls(
            user_id=user.id,
            username=user.username,
            role_id=user.role_id,
            role_name=user.role_name,
        )

    def refreshed(self, user: CurrentUser) -> "SessionData":
        """Copy with username/role replaced by freshly fetched values."""
        return self.model_copy(
            update={
                "username": user.username,
                "role_id": user.role_id,
                "role_name": user.role_name,
            }
        )
