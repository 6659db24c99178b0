from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from link_library.common.logging import get_logger
from link_library.errors import LinkNotFound
from link_library.models import Link, Tag, User
from link_library.schemas import LinkCreate, LinkUpdate, PageMetadata
from link_library.services.metadata import MetadataScraper
from link_library.services.tags import TagReconciler

logger = get_logger(__name__)


class LinkService:
    """Create, update, delete and list a user's links.

    No transaction is held open while waiting on the network: scraping
    happens before any write and after any read transaction is closed.
    """

    def __init__(self, db: AsyncSession, scraper: MetadataScraper) -> None:
        self.db = db
        self.scraper = scraper
        self.tags = TagReconciler(db)

    async def _get_owned(self, owner: User, link_id: UUID) -> Link:
        # One query for existence and ownership.
        result = await self.db.execute(
            select(Link).where(Link.id == link_id, Link.user_id == owner.id)
        )
        link = result.scalar_one_or_none()
        if link is None:
            raise LinkNotFound(str(link_id))
        return link

    async def _enrich(self, url: str, requested: bool) -> PageMetadata:
        if not requested:
            return PageMetadata()
        return await self.scraper.scrape(url)

    async def get(self, owner: User, link_id: UUID) -> Link:
        return await self._get_owned(owner, link_id)

    async def preview(self, url: str) -> PageMetadata:
        return await self.scraper.scrape(url)

    async def create(self, owner: User, payload: LinkCreate) -> Link:
        url = payload.url
        scraped = await self._enrich(url, payload.fetch_metadata)

        try:
            tags = await self.tags.reconcile(payload.tags)
            link = Link(
                user_id=owner.id,
                url=url,
                title=payload.title,
                description=payload.description or scraped.description,
                preview_image=scraped.image,
                site_name=scraped.site_name,
                favicon=scraped.favicon,
                is_public=payload.is_public,
                tags=tags,
            )
            self.db.add(link)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info("User %s created link %s (%d tags)", owner.id, link.id, len(tags))
        return link

    async def update(self, owner: User, payload: LinkUpdate) -> Link:
        url = payload.url
        # Ownership first, so a foreign id never triggers an outbound fetch.
        link = await self._get_owned(owner, payload.id)
        scraped = PageMetadata()
        if payload.fetch_metadata:
            # Close the read transaction before going to the network.
            await self.db.commit()
            scraped = await self.scraper.scrape(url)
            link = await self._get_owned(owner, payload.id)

        try:
            tags = await self.tags.reconcile(payload.tags)

            link.url = url
            link.title = payload.title
            link.description = payload.description
            link.is_public = payload.is_public
            if payload.fetch_metadata:
                if link.description is None:
                    link.description = scraped.description
                link.preview_image = scraped.image
                link.site_name = scraped.site_name
                link.favicon = scraped.favicon
            # Replace, never merge: dropped tags are only disassociated.
            link.tags = tags
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info("User %s updated link %s", owner.id, link.id)
        return link

    async def delete(self, owner: User, link_id: UUID) -> None:
        link = await self._get_owned(owner, link_id)
        try:
            await self.db.delete(link)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        logger.info("User %s deleted link %s", owner.id, link_id)

    async def list(self, owner: User, tag: Optional[str] = None) -> list[Link]:
        stmt = select(Link).where(Link.user_id == owner.id)
        if tag:
            stmt = stmt.where(Link.tags.any(Tag.name == tag))
        result = await self.db.execute(stmt.order_by(Link.created_at.desc()))
        return list(result.scalars().all())
