"""Users API routes: registration, login and the current user."""

from fastapi import APIRouter, Depends

from api.dependencies.auth import CurrentUser
from api.dependencies.services import get_auth_service
from api.schemas.user import LoginRequest, RegisterRequest, TokenResponse, UserResponse
from domain.entities.user import User
from domain.services.auth_service import AuthService

router = APIRouter(prefix="/users", tags=["users"])


def _to_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        avatar=user.avatar,
        date=user.created_at,
    )


@router.post(
    "/register",
    response_model=UserResponse,
    summary="Register a user",
    responses={
        400: {"description": "Invalid form or email already registered"},
    },
)
async def register(
    body: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
) -> UserResponse:
    """Create an account. The avatar is derived from the email via Gravatar."""
    user = await service.register(body.model_dump())
    return _to_response(user)


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Log in and get a bearer token",
    responses={
        400: {"description": "Invalid form or wrong password"},
        404: {"description": "No user with that email"},
    },
)
async def login(
    body: LoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    """Exchange credentials for a token valid for one hour."""
    token = await service.login(body.model_dump())
    return TokenResponse(token=f"Bearer {token}")


@router.get(
    "/current",
    response_model=UserResponse,
    summary="Get the current user",
)
async def current(
    user: CurrentUser,
    service: AuthService = Depends(get_auth_service),
) -> UserResponse:
    """Return the account behind the bearer token."""
    account = await service.get_user(user.id)
    return _to_response(account)
