from typing import Optional

from pydantic import BaseModel


class PageMetadata(BaseModel):
    """Best-effort page metadata. Every field is optional."""

    title: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    site_name: Optional[str] = None
    favicon: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not any(self.model_dump().values())


class MetadataEnvelope(BaseModel):
    metadata: PageMetadata
