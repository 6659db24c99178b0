from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from link_library.api.deps import get_settings, get_user_service
from link_library.config import Settings
from link_library.errors import EmailAlreadyRegistered, InvalidCredentials
from link_library.models.user import User
from link_library.schemas import TokenResponse, UserCreate, UserLogin, UserRead
from link_library.services.users import UserService
from link_library.utils.security import create_access_token

router = APIRouter(prefix="/auth", tags=["auth"])


def _token_response(user: User, settings: Settings) -> TokenResponse:
    return TokenResponse(
        token=create_access_token(user.id, settings),
        user=UserRead.model_validate(user),
    )


@router.post("/signup", response_model=TokenResponse)
async def signup(
    payload: UserCreate,
    users: Annotated[UserService, Depends(get_user_service)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> TokenResponse:
    """Register a new user and log them straight in."""
    try:
        user = await users.signup(payload)
    except EmailAlreadyRegistered:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already exists",
        )
    return _token_response(user, settings)


@router.post("/login", response_model=TokenResponse)
async def login(
    payload: UserLogin,
    users: Annotated[UserService, Depends(get_user_service)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> TokenResponse:
    try:
        user = await users.authenticate(payload)
    except InvalidCredentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )
    return _token_response(user, settings)
