"""JWT verification service."""

from typing import Any

from authlib.jose import JoseError, JsonWebToken
from authlib.jose.errors import ExpiredTokenError
from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from src.storefront.core.errors import AuthenticationError, ValidationError
from src.storefront.core.models.tokens import PendingUser, SessionClaims
from src.storefront.core.services.jwt.jwt_gen import (
    ACTIVATION_TOKEN_USE,
    SESSION_TOKEN_USE,
)
from src.storefront.runtime.context import get_config


class TokenExpired(Exception):
    """Signature was valid but the token is past its ``exp``."""


class TokenInvalid(Exception):
    """Token is malformed, tampered with, or meant for another use."""


class JwtVerificationService:
    def verify_jwt(self, token: str, *, key: str, token_use: str) -> dict[str, Any]:
        """Verify signature and registered claims of a locally issued token.

        Raises:
            TokenExpired: the token expired
            TokenInvalid: any other verification failure
        """
        cfg = get_config()
        decoder = JsonWebToken(cfg.jwt.allowed_algorithms)
        claims_options = {
            "iss": {"essential": True, "value": cfg.jwt.issuer},
            "sub": {"essential": True},
            "exp": {"essential": True},
            "token_use": {"essential": True, "value": token_use},
        }

        try:
            claims = decoder.decode(token, key, claims_options=claims_options)
            claims.validate(leeway=cfg.jwt.clock_skew)
        except ExpiredTokenError as exc:
            raise TokenExpired(str(exc)) from exc
        except (JoseError, ValueError) as exc:
            logger.debug("Rejected {} token: {}", token_use, type(exc).__name__)
            raise TokenInvalid(str(exc)) from exc

        return dict(claims)

    def verify_session_token(self, token: str) -> SessionClaims:
        """Verify a session token.

        Raises:
            AuthenticationError: if the token is expired or invalid
        """
        secret = get_config().jwt.session_signing_secret
        try:
            claims = self.verify_jwt(token, key=secret, token_use=SESSION_TOKEN_USE)
            return SessionClaims(
                subject=claims["sub"],
                role=claims.get("role", "user"),
                issued_at=claims.get("iat", 0),
                expires_at=claims["exp"],
                jti=claims.get("jti"),
            )
        except (TokenExpired, TokenInvalid, PydanticValidationError) as exc:
            raise AuthenticationError("Invalid or expired session") from exc

    def verify_activation_token(self, token: str) -> PendingUser:
        """Verify an activation token and return the pending account it carries.

        Raises:
            ValidationError: if the token is expired, tampered with or malformed
        """
        secret = get_config().jwt.activation_signing_secret
        try:
            claims = self.verify_jwt(token, key=secret, token_use=ACTIVATION_TOKEN_USE)
            return PendingUser.model_validate(claims.get("user"))
        except TokenExpired as exc:
            raise ValidationError("Activation token has expired") from exc
        except (TokenInvalid, PydanticValidationError) as exc:
            raise ValidationError("Invalid activation token") from exc
