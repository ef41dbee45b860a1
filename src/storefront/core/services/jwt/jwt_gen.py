import time
from typing import Any

from authlib.jose import JoseError, jwt
from loguru import logger

from src.storefront.core.errors import AppError
from src.storefront.core.models.tokens import PendingUser
from src.storefront.core.security import generate_secure_token
from src.storefront.entities.core.user.entity import User
from src.storefront.runtime.config.config_data import ConfigData
from src.storefront.runtime.context import get_config

SESSION_TOKEN_USE = "session"
ACTIVATION_TOKEN_USE = "activation"

_RESERVED_CLAIMS = {"iss", "sub", "exp", "iat", "nbf", "jti", "token_use"}


class JwtGeneratorService:
    """Service for generating signed session and activation tokens."""

    def generate_jwt(
        self,
        subject: str,
        secret: str,
        token_use: str,
        claims: dict[str, Any] | None = None,
        expires_in_seconds: int = 3600,
        algorithm: str | None = None,
        include_jti: bool = True,
    ) -> str:
        """Generate a signed JWT using authlib.

        Args:
            subject: Subject (sub) claim
            secret: HMAC secret used for signing
            token_use: Marks what the token is for, checked on verification
            claims: Additional claims to include in the token
            expires_in_seconds: Token lifetime in seconds (default: 1 hour)
            algorithm: Signing algorithm (defaults to config)
            include_jti: Whether to include a unique JWT ID claim

        Returns:
            Signed JWT token string

        Raises:
            AppError: If the algorithm is not allowed or encoding fails
        """
        config: ConfigData = get_config()
        algorithm = algorithm or config.jwt.algorithm

        if algorithm not in config.jwt.allowed_algorithms:
            logger.debug(
                f"Attempted to use disallowed algorithm: {algorithm}, only {config.jwt.allowed_algorithms} are allowed"
            )
            raise AppError(f"Algorithm {algorithm} not allowed", 500)

        now = int(time.time())
        payload: dict[str, Any] = {
            "iss": config.jwt.issuer,
            "sub": subject,
            "iat": now,
            "nbf": now,
            "exp": now + expires_in_seconds,
            "token_use": token_use,
        }
        if include_jti:
            payload["jti"] = generate_secure_token(16)

        if claims:
            payload.update({k: v for k, v in claims.items() if k not in _RESERVED_CLAIMS})

        try:
            token = jwt.encode({"alg": algorithm, "typ": "JWT"}, payload, secret)
        except JoseError as e:
            raise AppError(f"JWT encoding failed: {e}", 500) from e

        return token.decode() if isinstance(token, bytes) else token

    def generate_session_token(self, user: User) -> str:
        """Issue the session token identifying ``user`` on later requests."""
        config = get_config()
        return self.generate_jwt(
            subject=user.id,
            secret=config.jwt.session_signing_secret,
            token_use=SESSION_TOKEN_USE,
            claims={"role": user.role.value},
            expires_in_seconds=config.jwt.session_token_ttl_seconds,
        )

    def generate_activation_token(self, pending: PendingUser) -> str:
        """Sign the pending account into a short-lived activation token."""
        config = get_config()
        return self.generate_jwt(
            subject=pending.email,
            secret=config.jwt.activation_signing_secret,
            token_use=ACTIVATION_TOKEN_USE,
            claims={"user": pending.model_dump(mode="json")},
            expires_in_seconds=config.jwt.activation_token_ttl_seconds,
            include_jti=False,
        )
