"""User database table models."""

import sqlalchemy as sa
from sqlmodel import Field, Relationship, SQLModel

from src.storefront.entities.core._base import EntityTable, new_id


class UserTable(EntityTable, table=True):
    """Database persistence model for users.

    This represents how the User entity is stored in the database.
    It's separate from the domain entity to maintain clean architecture
    while keeping related code together.
    """

    __tablename__ = "users"

    name: str
    email: str = Field(unique=True, index=True)
    password_hash: str
    phone_number: str | None = None
    role: str = Field(default="user")
    avatar_public_id: str | None = None
    avatar_url: str | None = None

    addresses: list["AddressTable"] = Relationship(
        back_populates="user",
        sa_relationship_kwargs={
            "cascade": "all, delete-orphan",
            "order_by": "AddressTable.position",
        },
    )


class AddressTable(SQLModel, table=True):
    """Database persistence model for a user's address book entries."""

    __tablename__ = "user_addresses"
    __table_args__ = (
        sa.UniqueConstraint("user_id", "address_type", name="uq_user_address_type"),
    )

    id: str = Field(primary_key=True, default_factory=new_id)
    user_id: str = Field(foreign_key="users.id", index=True, ondelete="CASCADE")
    position: int = Field(default=0)
    address_type: str
    country: str | None = None
    city: str | None = None
    address1: str | None = None
    address2: str | None = None
    zip_code: str | None = None

    user: UserTable | None = Relationship(back_populates="addresses")
