"""Token payload models."""

from pydantic import BaseModel, Field

from src.storefront.entities.core.user.entity import Avatar, UserRole


class PendingUser(BaseModel):
    """Account data carried inside an activation token until it is activated."""

    name: str = Field(description="Display name")
    email: str = Field(description="Login e-mail")
    password_hash: str = Field(description="Argon2 hash of the chosen password")
    avatar: Avatar | None = Field(default=None, description="Uploaded avatar, if any")


class SessionClaims(BaseModel):
    """Verified claims of a session token."""

    subject: str = Field(description="User id (sub)")
    role: UserRole = Field(default=UserRole.USER)
    issued_at: int = Field(description="iat timestamp")
    expires_at: int = Field(description="exp timestamp")
    jti: str | None = Field(default=None, description="Unique token id")
