import asyncio
from dataclasses import dataclass

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from src.storefront.core.errors import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from src.storefront.core.models.tokens import PendingUser
from src.storefront.core.security import hash_password, verify_password
from src.storefront.core.services.jwt.jwt_gen import JwtGeneratorService
from src.storefront.core.services.jwt.jwt_verify import JwtVerificationService
from src.storefront.core.services.mail.mail_service import Mailer
from src.storefront.core.services.media.image_host import ImageHost
from src.storefront.entities.core.user.entity import Address, User, UserRole
from src.storefront.entities.core.user.repository import UserRepository
from src.storefront.runtime.context import get_config

INVALID_CREDENTIALS = "Invalid credentials"


@dataclass
class AuthResult:
    """A user together with a freshly issued session token."""

    user: User
    token: str


class UserAccountService:
    """Account lifecycle operations for storefront users."""

    def __init__(
        self,
        db_session: Session,
        jwt_generator: JwtGeneratorService,
        jwt_verifier: JwtVerificationService,
        image_host: ImageHost,
        mailer: Mailer,
    ):
        self._db_session = db_session
        self._user_repo = UserRepository(db_session)
        self._jwt_generator = jwt_generator
        self._jwt_verifier = jwt_verifier
        self._image_host = image_host
        self._mailer = mailer

    # --- registration -------------------------------------------------

    async def register(
        self, name: str, email: str, password: str, avatar: str | None = None
    ) -> str:
        """Start a registration: mail an activation link for a pending account.

        Nothing is stored; the pending account lives inside the token.

        Returns:
            The activation token that was mailed.
        """
        if self._user_repo.exists_by_email(email):
            raise ConflictError("User already exists")

        config = get_config()
        uploaded = None
        if avatar:
            uploaded = await self._image_host.upload(avatar, folder=config.media.avatar_folder)

        pending = PendingUser(
            name=name,
            email=email,
            password_hash=await asyncio.to_thread(hash_password, password),
            avatar=uploaded,
        )
        activation_token = self._jwt_generator.generate_activation_token(pending)

        activation_url = f"{config.app.frontend_url.rstrip('/')}/activation/{activation_token}"
        await self._mailer.send(
            to=email,
            subject="Activate your account",
            body=f"Hello {name}, please click on the link to activate your account: {activation_url}",
        )
        logger.info("user.registration_pending")
        return activation_token

    def activate(self, activation_token: str | None) -> AuthResult:
        """Materialize the account carried by ``activation_token``."""
        if not activation_token:
            raise ValidationError("Invalid activation token")

        pending = self._jwt_verifier.verify_activation_token(activation_token)
        if self._user_repo.exists_by_email(pending.email):
            raise ConflictError("User already activated")

        user = User(
            name=pending.name,
            email=pending.email,
            password_hash=pending.password_hash,
            avatar=pending.avatar,
        )
        try:
            created = self._user_repo.create(user)
        except IntegrityError as exc:
            # Lost a race against a concurrent activation of the same e-mail
            self._db_session.rollback()
            raise ConflictError("User already activated") from exc

        logger.info("user.activated user_id={}", created.id)
        return AuthResult(user=created, token=self._jwt_generator.generate_session_token(created))

    def login(self, email: str | None, password: str | None) -> AuthResult:
        if not email or not password:
            raise ValidationError("Please provide email and password")

        user = self._user_repo.get_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            logger.info("user.login_failed")
            raise AuthenticationError(INVALID_CREDENTIALS)

        logger.info("user.logged_in user_id={}", user.id)
        return AuthResult(user=user, token=self._jwt_generator.generate_session_token(user))

    # --- lookups ------------------------------------------------------

    def get_user(self, user_id: str) -> User:
        user = self._user_repo.get(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def list_users(self) -> list[User]:
        return self._user_repo.list_all()

    # --- profile ------------------------------------------------------

    def update_info(
        self,
        user: User,
        password: str | None,
        name: str | None = None,
        email: str | None = None,
        phone_number: str | None = None,
    ) -> User:
        """Update profile fields after re-checking the current password."""
        if not verify_password(password, user.password_hash):
            raise AuthenticationError(INVALID_CREDENTIALS)

        if email and email != user.email:
            if self._user_repo.exists_by_email(email):
                raise ConflictError("Email already in use")
            user.email = email
        if name:
            user.name = name
        if phone_number is not None:
            user.phone_number = phone_number

        try:
            return self._user_repo.update(user)
        except IntegrityError as exc:
            self._db_session.rollback()
            raise ConflictError("Email already in use") from exc

    async def update_avatar(self, user: User, avatar: str | None) -> User:
        """Replace the avatar; an empty payload leaves it untouched."""
        if not avatar:
            return user

        media = get_config().media
        if user.avatar is not None:
            await self._image_host.destroy(user.avatar.public_id)
        user.avatar = await self._image_host.upload(
            avatar, folder=media.avatar_folder, width=media.avatar_width
        )
        return self._user_repo.update(user)

    def update_password(
        self,
        user: User,
        old_password: str | None,
        new_password: str | None,
        confirm_password: str | None,
    ) -> None:
        if not verify_password(old_password, user.password_hash):
            raise ValidationError("Old password is incorrect")
        if not new_password or new_password != confirm_password:
            raise ValidationError("Passwords do not match")

        user.password_hash = hash_password(new_password)
        self._user_repo.update(user)
        logger.info("user.password_changed user_id={}", user.id)

    # --- address book -------------------------------------------------

    def upsert_address(self, user: User, address: Address) -> User:
        user.upsert_address(address)
        try:
            return self._user_repo.update(user)
        except IntegrityError as exc:
            self._db_session.rollback()
            raise ConflictError(f"{address.address_type} address already exists") from exc

    def delete_address(self, user: User, address_id: str) -> User:
        user.remove_address(address_id)
        return self._user_repo.update(user)

    # --- administration -----------------------------------------------

    async def delete_user(self, user_id: str) -> None:
        """Delete a user, removing their avatar from the image host first."""
        user = self.get_user(user_id)
        if user.avatar is not None:
            await self._image_host.destroy(user.avatar.public_id)
        self._user_repo.delete(user.id)
        logger.info("user.deleted user_id={}", user_id)

    def set_role(self, email: str, role: UserRole) -> User:
        user = self._user_repo.get_by_email(email)
        if user is None:
            raise NotFoundError("User not found")
        user.role = role
        return self._user_repo.update(user)
