from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional
from uuid import UUID, uuid4

from sqlalchemy import ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from link_library.models.base import Base, utcnow
from link_library.models.tag import link_tags

if TYPE_CHECKING:
    from link_library.models.tag import Tag
    from link_library.models.user import User


class Link(Base):
    __tablename__ = "links"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    url: Mapped[str]
    title: Mapped[str]
    description: Mapped[Optional[str]]
    preview_image: Mapped[Optional[str]]
    site_name: Mapped[Optional[str]]
    favicon: Mapped[Optional[str]]
    is_public: Mapped[bool] = mapped_column(default=False)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow)

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="links")
    tags: Mapped[list["Tag"]] = relationship(
        "Tag",
        secondary=link_tags,
        back_populates="links",
        lazy="selectin",
        order_by="Tag.name",
    )
