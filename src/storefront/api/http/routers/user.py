"""User account endpoints: signup, activation, sessions, profile and admin."""

from fastapi import APIRouter, Depends, Response, status

from src.storefront.api.http.deps import (
    get_current_user,
    get_user_account_service,
    require_admin,
)
from src.storefront.api.http.schemas.user import (
    ActivationRequest,
    AddressRequest,
    AuthResponse,
    CreateUserRequest,
    LoginRequest,
    MessageResponse,
    UpdateAvatarRequest,
    UpdatePasswordRequest,
    UpdateUserInfoRequest,
    UserOut,
    UserResponse,
    UsersResponse,
)
from src.storefront.core.services import AuthResult, UserAccountService
from src.storefront.entities.core.user import User
from src.storefront.runtime.context import get_config

router = APIRouter(tags=["user"])


def set_session_cookie(response: Response, token: str) -> None:
    config = get_config()
    response.set_cookie(
        key=config.security.cookie_name,
        value=token,
        max_age=config.jwt.session_token_ttl_seconds,
        httponly=True,
        secure=config.security.secure_cookies,
        samesite=config.security.cookie_samesite,
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    config = get_config()
    response.delete_cookie(
        key=config.security.cookie_name,
        httponly=True,
        secure=config.security.secure_cookies,
        samesite=config.security.cookie_samesite,
        path="/",
    )


def _auth_response(response: Response, result: AuthResult) -> AuthResponse:
    set_session_cookie(response, result.token)
    return AuthResponse(user=UserOut.from_entity(result.user), token=result.token)


@router.post(
    "/create-user", response_model=MessageResponse, status_code=status.HTTP_201_CREATED
)
async def create_user(
    body: CreateUserRequest,
    accounts: UserAccountService = Depends(get_user_account_service),
) -> MessageResponse:
    """Start a signup; the account only exists once the mailed link is used."""
    await accounts.register(body.name, body.email, body.password, body.avatar)
    return MessageResponse(
        message=f"Please check your email ({body.email}) to activate your account!"
    )


@router.post(
    "/activation", response_model=AuthResponse, status_code=status.HTTP_201_CREATED
)
def activate_user(
    body: ActivationRequest,
    response: Response,
    accounts: UserAccountService = Depends(get_user_account_service),
) -> AuthResponse:
    result = accounts.activate(body.activation_token)
    return _auth_response(response, result)


@router.post("/login-user", response_model=AuthResponse)
def login_user(
    body: LoginRequest,
    response: Response,
    accounts: UserAccountService = Depends(get_user_account_service),
) -> AuthResponse:
    result = accounts.login(body.email, body.password)
    return _auth_response(response, result)


@router.get("/get-user", response_model=UserResponse)
def get_user(user: User = Depends(get_current_user)) -> UserResponse:
    return UserResponse(user=UserOut.from_entity(user))


@router.get("/logout", response_model=MessageResponse)
def logout(response: Response) -> MessageResponse:
    clear_session_cookie(response)
    return MessageResponse(message="Logged out successfully")


@router.put("/update-user-info", response_model=UserResponse)
def update_user_info(
    body: UpdateUserInfoRequest,
    user: User = Depends(get_current_user),
    accounts: UserAccountService = Depends(get_user_account_service),
) -> UserResponse:
    """Update the signed-in user's profile; requires the current password."""
    updated = accounts.update_info(
        user,
        body.password,
        name=body.name,
        email=body.email,
        phone_number=body.phone_number,
    )
    return UserResponse(user=UserOut.from_entity(updated))


@router.put("/update-avatar", response_model=UserResponse)
async def update_avatar(
    body: UpdateAvatarRequest,
    user: User = Depends(get_current_user),
    accounts: UserAccountService = Depends(get_user_account_service),
) -> UserResponse:
    updated = await accounts.update_avatar(user, body.avatar)
    return UserResponse(user=UserOut.from_entity(updated))


@router.put("/update-user-addresses", response_model=UserResponse)
def update_user_addresses(
    body: AddressRequest,
    user: User = Depends(get_current_user),
    accounts: UserAccountService = Depends(get_user_account_service),
) -> UserResponse:
    """Add an address, or update it in place when ``_id`` matches an existing one."""
    updated = accounts.upsert_address(user, body.to_entity())
    return UserResponse(user=UserOut.from_entity(updated))


@router.delete("/delete-user-address/{address_id}", response_model=UserResponse)
def delete_user_address(
    address_id: str,
    user: User = Depends(get_current_user),
    accounts: UserAccountService = Depends(get_user_account_service),
) -> UserResponse:
    updated = accounts.delete_address(user, address_id)
    return UserResponse(user=UserOut.from_entity(updated))


@router.put("/update-user-password", response_model=MessageResponse)
def update_user_password(
    body: UpdatePasswordRequest,
    user: User = Depends(get_current_user),
    accounts: UserAccountService = Depends(get_user_account_service),
) -> MessageResponse:
    accounts.update_password(
        user, body.old_password, body.new_password, body.confirm_password
    )
    return MessageResponse(message="Password updated successfully")


@router.get("/user-info/{user_id}", response_model=UserResponse)
def user_info(
    user_id: str,
    accounts: UserAccountService = Depends(get_user_account_service),
) -> UserResponse:
    """Public profile lookup."""
    return UserResponse(user=UserOut.from_entity(accounts.get_user(user_id)))


@router.get("/admin-all-users", response_model=UsersResponse)
def admin_all_users(
    _admin: User = Depends(require_admin),
    accounts: UserAccountService = Depends(get_user_account_service),
) -> UsersResponse:
    """All users, newest first."""
    return UsersResponse(users=[UserOut.from_entity(u) for u in accounts.list_users()])


@router.delete("/delete-user/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: str,
    _admin: User = Depends(require_admin),
    accounts: UserAccountService = Depends(get_user_account_service),
) -> MessageResponse:
    await accounts.delete_user(user_id)
    return MessageResponse(message="User deleted successfully")
