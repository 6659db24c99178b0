from collections.abc import AsyncIterator
from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from link_library.config import Settings
from link_library.models.user import User
from link_library.services.links import LinkService
from link_library.services.metadata import MetadataScraper
from link_library.services.users import UserService
from link_library.utils.security import decode_access_token

bearer_scheme = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def get_session(request: Request) -> AsyncIterator[AsyncSession]:
    async with request.app.state.database.session_factory() as session:
        yield session


def get_scraper(settings: Annotated[Settings, Depends(get_settings)]) -> MetadataScraper:
    return MetadataScraper.from_settings(settings)


def get_user_service(
    db: Annotated[AsyncSession, Depends(get_session)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> UserService:
    return UserService(db, settings)


def get_link_service(
    db: Annotated[AsyncSession, Depends(get_session)],
    scraper: Annotated[MetadataScraper, Depends(get_scraper)],
) -> LinkService:
    return LinkService(db, scraper)


async def get_current_user(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
    users: Annotated[UserService, Depends(get_user_service)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> User:
    """Get the current user from the Authorization: Bearer header."""
    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise unauthorized

    user_id = decode_access_token(credentials.credentials, settings)
    if user_id is None:
        raise unauthorized

    user = await users.get(user_id)
    if user is None:
        raise unauthorized
    return user
