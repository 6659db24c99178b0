from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserBase(BaseModel):
    email: EmailStr


class UserCreate(UserBase):
    password: str = Field(min_length=8)
    name: str = Field(min_length=1)


class UserLogin(UserBase):
    password: str


class UserRead(UserBase):
    id: UUID
    name: str

    model_config = ConfigDict(from_attributes=True)


class UserDetail(UserRead):
    created_at: datetime


class TokenResponse(BaseModel):
    token: str
    user: UserRead
