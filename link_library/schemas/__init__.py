from link_library.schemas.link import (
    DeleteResult,
    LinkCreate,
    LinkEnvelope,
    LinkList,
    LinkRead,
    LinkUpdate,
    TagRead,
)
from link_library.schemas.metadata import MetadataEnvelope, PageMetadata
from link_library.schemas.user import (
    TokenResponse,
    UserCreate,
    UserDetail,
    UserLogin,
    UserRead,
)

__all__ = [
    "DeleteResult",
    "LinkCreate",
    "LinkEnvelope",
    "LinkList",
    "LinkRead",
    "LinkUpdate",
    "MetadataEnvelope",
    "PageMetadata",
    "TagRead",
    "TokenResponse",
    "UserCreate",
    "UserDetail",
    "UserLogin",
    "UserRead",
]
