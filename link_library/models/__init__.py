from link_library.models.base import Base
from link_library.models.link import Link
from link_library.models.tag import Tag, link_tags
from link_library.models.user import User

__all__ = ["Base", "Link", "Tag", "User", "link_tags"]
