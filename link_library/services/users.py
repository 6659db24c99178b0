from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from link_library.common.logging import get_logger
from link_library.config import Settings
from link_library.errors import EmailAlreadyRegistered, InvalidCredentials
from link_library.models import User
from link_library.schemas import UserCreate, UserLogin
from link_library.utils.security import hash_password, verify_password

logger = get_logger(__name__)


class UserService:
    def __init__(self, db: AsyncSession, settings: Settings) -> None:
        self.db = db
        self.settings = settings

    async def get(self, user_id: UUID) -> Optional[User]:
        return await self.db.get(User, user_id)

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def signup(self, payload: UserCreate) -> User:
        """Create a new user; the email must not be registered yet."""
        if await self.get_by_email(payload.email) is not None:
            raise EmailAlreadyRegistered(payload.email)

        # bcrypt is CPU-bound; keep it off the event loop.
        hashed = await run_in_threadpool(
            hash_password, payload.password, rounds=self.settings.bcrypt_rounds
        )
        user = User(
            email=payload.email,
            password=hashed,
            name=payload.name,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent signup for the same email.
            await self.db.rollback()
            raise EmailAlreadyRegistered(payload.email)

        logger.info("Registered user %s", user.id)
        return user

    async def authenticate(self, payload: UserLogin) -> User:
        user = await self.get_by_email(payload.email)
        if user is None:
            raise InvalidCredentials()
        if not await run_in_threadpool(verify_password, payload.password, user.password):
            raise InvalidCredentials()
        return user
