from datetime import datetime
from typing import Annotated, Optional
from uuid import UUID

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    TypeAdapter,
    ValidationError,
)

_http_url = TypeAdapter(HttpUrl)


def _check_http_url(value: str) -> str:
    """Validate as an http(s) URL but keep the text as the user typed it."""
    value = value.strip()
    try:
        _http_url.validate_python(value)
    except ValidationError as exc:
        raise ValueError(exc.errors()[0]["msg"]) from None
    return value


LinkUrl = Annotated[str, AfterValidator(_check_http_url)]


class TagRead(BaseModel):
    id: UUID
    name: str

    model_config = ConfigDict(from_attributes=True)


class LinkBase(BaseModel):
    url: LinkUrl
    title: str = Field(min_length=1)
    description: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    is_public: bool = False


class LinkCreate(LinkBase):
    fetch_metadata: bool = Field(
        default=False,
        description="Scrape the page to fill preview fields before saving",
    )


class LinkUpdate(LinkBase):
    """Full replacement of a link's editable fields."""

    id: UUID
    fetch_metadata: bool = False


class LinkRead(BaseModel):
    id: UUID
    user_id: UUID
    url: str
    title: str
    description: Optional[str] = None
    preview_image: Optional[str] = None
    site_name: Optional[str] = None
    favicon: Optional[str] = None
    is_public: bool
    tags: list[TagRead] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class LinkEnvelope(BaseModel):
    link: LinkRead


class LinkList(BaseModel):
    links: list[LinkRead]


class DeleteResult(BaseModel):
    success: bool = True
