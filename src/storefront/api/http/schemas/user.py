"""Request and response bodies for the user endpoints.

The storefront frontend speaks camelCase and uses ``_id`` for identifiers;
both camelCase and snake_case keys are accepted on input.
"""

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from src.storefront.entities.core.user.entity import Address, User, UserRole


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- requests ---------------------------------------------------------


class CreateUserRequest(ApiModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    password: str = Field(min_length=1)
    avatar: str | None = None


class ActivationRequest(ApiModel):
    activation_token: str | None = Field(
        default=None,
        validation_alias=AliasChoices("activation_token", "activationToken"),
    )


class LoginRequest(ApiModel):
    email: str | None = None
    password: str | None = None


class UpdateUserInfoRequest(ApiModel):
    email: str | None = None
    password: str | None = None
    phone_number: str | None = None
    name: str | None = None

    @field_validator("phone_number", mode="before")
    @classmethod
    def _phone_as_text(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value


class UpdateAvatarRequest(ApiModel):
    avatar: str | None = ""


class UpdatePasswordRequest(ApiModel):
    old_password: str | None = None
    new_password: str | None = None
    confirm_password: str | None = None


class AddressRequest(ApiModel):
    id: str | None = Field(default=None, alias="_id")
    address_type: str = Field(min_length=1)
    country: str | None = None
    city: str | None = None
    address1: str | None = None
    address2: str | None = None
    zip_code: str | None = None

    @field_validator("zip_code", mode="before")
    @classmethod
    def _zip_as_text(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value

    def to_entity(self) -> Address:
        data = self.model_dump(exclude={"id"})
        if self.id:
            return Address(id=self.id, **data)
        return Address(**data)


# --- responses --------------------------------------------------------


class AvatarOut(BaseModel):
    public_id: str
    url: str


class AddressOut(ApiModel):
    id: str = Field(alias="_id")
    address_type: str
    country: str | None = None
    city: str | None = None
    address1: str | None = None
    address2: str | None = None
    zip_code: str | None = None


class UserOut(ApiModel):
    id: str = Field(alias="_id")
    name: str
    email: str
    phone_number: str | None = None
    role: UserRole
    avatar: AvatarOut | None = None
    addresses: list[AddressOut] = Field(default_factory=list)
    created_at: datetime

    @classmethod
    def from_entity(cls, user: User) -> "UserOut":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            phone_number=user.phone_number,
            role=user.role,
            avatar=AvatarOut(**user.avatar.model_dump()) if user.avatar else None,
            addresses=[AddressOut(**a.model_dump()) for a in user.addresses],
            created_at=user.created_at,
        )


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class UserResponse(BaseModel):
    success: bool = True
    user: UserOut


class AuthResponse(UserResponse):
    token: str


class UsersResponse(BaseModel):
    success: bool = True
    users: list[UserOut]
