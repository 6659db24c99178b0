from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import Column, ForeignKey, Index, Table
from sqlalchemy.orm import Mapped, mapped_column, relationship

from link_library.models.base import Base

if TYPE_CHECKING:
    from link_library.models.link import Link


# Composite primary key keeps a link from referencing the same tag twice.
link_tags = Table(
    "link_tags",
    Base.metadata,
    Column("link_id", ForeignKey("links.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
    Index("ix_link_tags_tag_id", "tag_id"),
)


class Tag(Base):
    __tablename__ = "tags"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    # Exact, case-sensitive label; shared by every link that uses it.
    name: Mapped[str] = mapped_column(unique=True, index=True)

    # Relationships
    links: Mapped[list["Link"]] = relationship(
        "Link", secondary=link_tags, back_populates="tags", lazy="noload"
    )

    def __repr__(self) -> str:
        return f"Tag(name={self.name!r})"
