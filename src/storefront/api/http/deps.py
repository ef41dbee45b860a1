"""FastAPI dependency implementations."""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends, Request
from sqlmodel import Session

from src.storefront.api.http.app_data import ApplicationDependencies
from src.storefront.core.errors import (
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
)
from src.storefront.core.services import (
    ImageHost,
    JwtGeneratorService,
    JwtVerificationService,
    Mailer,
    UserAccountService,
)
from src.storefront.entities.core.user import User, UserRepository
from src.storefront.runtime.context import get_config


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    return request.app.state.app_dependencies


def get_db_session(request: Request) -> Iterator[Session]:
    """Yield a request-scoped session, committed when the handler succeeds."""
    app_deps = get_app_dependencies(request)
    with app_deps.database_service.session_scope() as session:
        yield session


def get_jwt_verify_service(request: Request) -> JwtVerificationService:
    """Get the JWT verification service instance."""
    return get_app_dependencies(request).jwt_verify_service


def get_jwt_generation_service(request: Request) -> JwtGeneratorService:
    """Get the JWT generation service instance."""
    return get_app_dependencies(request).jwt_generation_service


def get_image_host(request: Request) -> ImageHost:
    return get_app_dependencies(request).image_host


def get_mailer(request: Request) -> Mailer:
    return get_app_dependencies(request).mailer


def get_user_account_service(
    db_session: Session = Depends(get_db_session),
    jwt_generator: JwtGeneratorService = Depends(get_jwt_generation_service),
    jwt_verifier: JwtVerificationService = Depends(get_jwt_verify_service),
    image_host: ImageHost = Depends(get_image_host),
    mailer: Mailer = Depends(get_mailer),
) -> UserAccountService:
    """Get a User Account service bound to the request's database session."""
    return UserAccountService(db_session, jwt_generator, jwt_verifier, image_host, mailer)


def extract_session_token(request: Request) -> str | None:
    """Session token from the cookie, falling back to an ``Authorization: Bearer`` header."""
    token = request.cookies.get(get_config().security.cookie_name)
    if token:
        return token

    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header.split(" ", 1)[1].strip() or None
    return None


async def get_current_user(
    request: Request,
    db: Session = Depends(get_db_session),
    jwt_verify: JwtVerificationService = Depends(get_jwt_verify_service),
) -> User:
    """Authenticate the request and attach the principal to ``request.state``."""
    token = extract_session_token(request)
    if not token:
        raise AuthenticationError("Please login to continue")

    claims = jwt_verify.verify_session_token(token)

    user = UserRepository(db).get(claims.subject)
    if user is None:
        raise NotFoundError("User not found")

    request.state.user = user
    request.state.claims = claims
    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    """Allow only principals with the admin role."""
    if not user.is_admin:
        raise AuthorizationError(f"{user.role.value} can not access this resource")
    return user
