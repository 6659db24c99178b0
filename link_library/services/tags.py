from collections.abc import Iterable, Sequence
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from link_library.common.logging import get_logger
from link_library.errors import TagConflict
from link_library.models import Tag

logger = get_logger(__name__)


def normalize_labels(labels: Iterable[str]) -> list[str]:
    """Strip labels, drop blanks and repeats. Case is preserved."""
    seen: set[str] = set()
    out: list[str] = []
    for raw in labels:
        label = raw.strip()
        if not label or label in seen:
            continue
        seen.add(label)
        out.append(label)
    return out


class TagReconciler:
    """Turns free-text labels into shared Tag rows, creating missing ones."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_by_name(self, name: str) -> Optional[Tag]:
        result = await self.db.execute(select(Tag).where(Tag.name == name))
        return result.scalar_one_or_none()

    async def find_or_create(self, name: str) -> Tag:
        tag = await self.get_by_name(name)
        if tag is not None:
            return tag

        try:
            # SAVEPOINT so a lost race only rolls back this insert.
            async with self.db.begin_nested():
                tag = Tag(name=name)
                self.db.add(tag)
        except IntegrityError:
            logger.info("Tag %r created concurrently; re-reading", name)
            tag = await self.get_by_name(name)
            if tag is None:
                raise TagConflict(name)
            return tag

        logger.info("Created tag %r", name)
        return tag

    async def reconcile(self, labels: Sequence[str]) -> list[Tag]:
        return [await self.find_or_create(label) for label in normalize_labels(labels)]
