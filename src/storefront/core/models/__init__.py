"""Token payload models."""

from .tokens import PendingUser, SessionClaims

__all__ = ["PendingUser", "SessionClaims"]
