from typing import Annotated

from fastapi import APIRouter, Depends

from link_library.api.deps import get_current_user
from link_library.models.user import User
from link_library.schemas import UserDetail

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserDetail)
async def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
) -> UserDetail:
    """Get the current authenticated user."""
    return UserDetail.model_validate(current_user)
