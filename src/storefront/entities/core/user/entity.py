"""User domain entity."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from src.storefront.core.errors import ConflictError
from src.storefront.entities.core._base import Entity, new_id


class UserRole(str, Enum):
    USER = "user"
    ADMIN = "admin"


class Avatar(BaseModel):
    """Reference to an image stored on the image host."""

    public_id: str = Field(description="Image host identifier, used for deletion")
    url: str = Field(description="Public URL of the image")


class Address(BaseModel):
    """A postal address owned by a single user."""

    id: str = Field(default_factory=new_id)
    address_type: str = Field(description="Tag such as 'Home' or 'Office'; unique per user")
    country: str | None = None
    city: str | None = None
    address1: str | None = None
    address2: str | None = None
    zip_code: str | None = None


class User(Entity):
    """User entity representing a storefront account.

    This is the domain model that contains business logic and validation.
    It inherits from Entity to get auto-generated UUID identifiers.
    """

    name: str = Field(description="Display name")
    email: str = Field(description="Login e-mail, unique across users")
    password_hash: str = Field(description="Argon2 hash of the password", repr=False)
    phone_number: str | None = Field(default=None, description="Contact phone number")
    role: UserRole = Field(default=UserRole.USER)
    avatar: Avatar | None = Field(default=None)
    addresses: list[Address] = Field(default_factory=list)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def find_address(self, address_id: str | None) -> Address | None:
        if address_id is None:
            return None
        return next((a for a in self.addresses if a.id == address_id), None)

    def upsert_address(self, address: Address) -> Address:
        """Update the address with the same id in place, or append it under a fresh id.

        Raises:
            ConflictError: another address already uses ``address.address_type``
        """
        for existing in self.addresses:
            if existing.address_type == address.address_type and existing.id != address.id:
                raise ConflictError(f"{address.address_type} address already exists")

        for index, existing in enumerate(self.addresses):
            if existing.id == address.id:
                self.addresses[index] = address
                return address

        appended = address.model_copy(update={"id": new_id()})
        self.addresses.append(appended)
        return appended

    def remove_address(self, address_id: str) -> bool:
        """Drop the address with ``address_id``; returns whether one was removed."""
        remaining = [a for a in self.addresses if a.id != address_id]
        removed = len(remaining) != len(self.addresses)
        self.addresses = remaining
        return removed

    def __eq__(self, other: Any) -> bool:
        """Compare users by business attributes, ignoring timestamps."""
        if not isinstance(other, User):
            return False

        return (
            self.id == other.id
            and self.name == other.name
            and self.email == other.email
            and self.phone_number == other.phone_number
            and self.role == other.role
            and self.avatar == other.avatar
            and self.addresses == other.addresses
        )

    def __hash__(self) -> int:
        return hash((self.id, self.email))
