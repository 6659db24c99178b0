from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import HttpUrl

from link_library.api.deps import get_current_user, get_link_service
from link_library.errors import LinkNotFound
from link_library.models import User
from link_library.schemas import (
    DeleteResult,
    LinkCreate,
    LinkEnvelope,
    LinkList,
    LinkRead,
    LinkUpdate,
    MetadataEnvelope,
)
from link_library.services.links import LinkService

router = APIRouter(prefix="/links", tags=["links"])


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Link not found")


@router.get("", response_model=LinkList)
async def list_links(
    current_user: Annotated[User, Depends(get_current_user)],
    links: Annotated[LinkService, Depends(get_link_service)],
    tag: Optional[str] = None,
) -> LinkList:
    """List the current user's links, newest first, optionally by tag."""
    rows = await links.list(current_user, tag=tag)
    return LinkList(links=[LinkRead.model_validate(link) for link in rows])


@router.post("", response_model=LinkEnvelope)
async def create_link(
    payload: LinkCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    links: Annotated[LinkService, Depends(get_link_service)],
) -> LinkEnvelope:
    """Create a new link for the current user."""
    link = await links.create(current_user, payload)
    return LinkEnvelope(link=LinkRead.model_validate(link))


@router.put("", response_model=LinkEnvelope)
async def update_link(
    payload: LinkUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    links: Annotated[LinkService, Depends(get_link_service)],
) -> LinkEnvelope:
    """Replace a link's fields and tags (must belong to current user)."""
    try:
        link = await links.update(current_user, payload)
    except LinkNotFound:
        raise _not_found()
    return LinkEnvelope(link=LinkRead.model_validate(link))


@router.delete("", response_model=DeleteResult)
async def delete_link(
    current_user: Annotated[User, Depends(get_current_user)],
    links: Annotated[LinkService, Depends(get_link_service)],
    link_id: Annotated[Optional[UUID], Query(alias="id")] = None,
) -> DeleteResult:
    if link_id is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Link id is required"
        )
    try:
        await links.delete(current_user, link_id)
    except LinkNotFound:
        raise _not_found()
    return DeleteResult(success=True)


@router.get("/preview", response_model=MetadataEnvelope)
async def preview_link(
    url: HttpUrl,
    current_user: Annotated[User, Depends(get_current_user)],
    links: Annotated[LinkService, Depends(get_link_service)],
) -> MetadataEnvelope:
    """Scrape page metadata for a URL without saving anything."""
    return MetadataEnvelope(metadata=await links.preview(str(url)))


@router.get("/{link_id}", response_model=LinkEnvelope)
async def get_link(
    link_id: UUID,
    current_user: Annotated[User, Depends(get_current_user)],
    links: Annotated[LinkService, Depends(get_link_service)],
) -> LinkEnvelope:
    """Get a specific link by ID (must belong to current user)."""
    try:
        link = await links.get(current_user, link_id)
    except LinkNotFound:
        raise _not_found()
    return LinkEnvelope(link=LinkRead.model_validate(link))
