# =============================================================================
# REELSOCIAL BACKEND - USER ROUTES
# =============================================================================
# File: api/v1/user_routes.py
# Description: Registration, login, token session and profile endpoints
# =============================================================================

from typing import List

from fastapi import APIRouter, File, Query, UploadFile, status

from reelsocial.auth.schemas import (
    UserCreate,
    UserUpdate,
    UserResponse,
    ProfilePicResponse,
    LoginRequest,
    LoginResponse,
    GoogleLoginRequest,
    TokenPairResponse,
    MessageResponse,
)
from reelsocial.auth.dependencies import (
    AppContextDep,
    AuthContextDep,
    AuthServiceDep,
    PostServiceDep,
    RefreshTokenDep,
)
from reelsocial.content.schemas import PostResponse
from reelsocial.core.exceptions import AppException, NotOwnerError


router = APIRouter(prefix="/user", tags=["Users"])


# =============================================================================
# REGISTRATION & LOGIN
# =============================================================================

@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
)
async def register(
    user_data: UserCreate,
    auth_service: AuthServiceDep,
) -> UserResponse:
    """
    Register a new user account.

    - **email**: Valid email address (unique)
    - **username**: Unique username
    - **password**: 8-128 characters with upper, lower and digit
    """
    return await auth_service.register(user_data)


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Log in with email and password",
)
async def login(
    credentials: LoginRequest,
    auth_service: AuthServiceDep,
) -> LoginResponse:
    return await auth_service.login(credentials.email, credentials.password)


@router.post(
    "/login/google",
    response_model=LoginResponse,
    summary="Log in with a Google ID token",
)
async def google_login(
    data: GoogleLoginRequest,
    auth_service: AuthServiceDep,
) -> LoginResponse:
    """Creates the account on first sign-in."""
    return await auth_service.google_login(data.credential)


# =============================================================================
# TOKEN SESSION
# =============================================================================

@router.post(
    "/refresh",
    response_model=TokenPairResponse,
    summary="Rotate a refresh token",
)
async def refresh(
    refresh_token: RefreshTokenDep,
    auth_service: AuthServiceDep,
) -> TokenPairResponse:
    """
    Exchange a refresh token for a new pair.

    The presented token can never be used again. Presenting an already
    used token logs the user out everywhere.
    """
    return await auth_service.refresh(refresh_token)


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Revoke a refresh token",
)
async def logout(
    refresh_token: RefreshTokenDep,
    auth_service: AuthServiceDep,
) -> MessageResponse:
    await auth_service.logout(refresh_token)
    return MessageResponse(message="Logged out")


# =============================================================================
# READ
# =============================================================================

@router.get(
    "",
    response_model=List[UserResponse],
    summary="List users",
)
async def list_users(
    auth_service: AuthServiceDep,
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
) -> List[UserResponse]:
    return await auth_service.list_users(skip=skip, limit=limit)


@router.get(
    "/details",
    response_model=UserResponse,
    summary="Get the caller's profile",
)
async def get_details(
    caller: AuthContextDep,
    auth_service: AuthServiceDep,
) -> UserResponse:
    return await auth_service.get_user(caller.user_id)


@router.get(
    "/posts",
    response_model=List[PostResponse],
    summary="List the caller's posts",
)
async def get_my_posts(
    caller: AuthContextDep,
    auth_service: AuthServiceDep,
    post_service: PostServiceDep,
) -> List[PostResponse]:
    user = await auth_service.get_user(caller.user_id)
    return await post_service.list_by_sender(user.username)


@router.get(
    "/profilePic/{user_id}",
    response_model=ProfilePicResponse,
    summary="Get a user's profile picture reference",
)
async def get_profile_pic(
    user_id: str,
    auth_service: AuthServiceDep,
) -> ProfilePicResponse:
    return ProfilePicResponse(profile_pic=await auth_service.get_profile_pic(user_id))


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    summary="Get user by ID",
)
async def get_user(
    user_id: str,
    auth_service: AuthServiceDep,
) -> UserResponse:
    return await auth_service.get_user(user_id)


# =============================================================================
# UPDATE / DELETE
# =============================================================================

@router.put(
    "/{user_id}",
    response_model=UserResponse,
    summary="Update the caller's profile",
)
async def update_user(
    user_id: str,
    update_data: UserUpdate,
    caller: AuthContextDep,
    auth_service: AuthServiceDep,
) -> UserResponse:
    """
    Change username, email, description or profile picture.

    A new username is applied to all of the user's posts and comments.
    """
    return await auth_service.update_user(caller.user_id, user_id, update_data)


@router.put(
    "/{user_id}/picture",
    response_model=UserResponse,
    summary="Upload a new profile picture",
)
async def upload_profile_pic(
    user_id: str,
    caller: AuthContextDep,
    auth_service: AuthServiceDep,
    context: AppContextDep,
    file: UploadFile = File(...),
) -> UserResponse:
    if caller.user_id != user_id:
        raise NotOwnerError("account")

    stored_name = await context.storage.save(file)
    try:
        return await auth_service.update_profile_pic(caller.user_id, user_id, stored_name)
    except AppException:
        context.storage.discard(stored_name)
        raise


@router.delete(
    "/{user_id}",
    response_model=MessageResponse,
    summary="Delete the caller's account",
)
async def delete_user(
    user_id: str,
    caller: AuthContextDep,
    auth_service: AuthServiceDep,
) -> MessageResponse:
    """Removes the account together with all its posts and comments."""
    await auth_service.delete_user(caller.user_id, user_id)
    return MessageResponse(message="User deleted")
