from __future__ import annotations
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field


ContentType = Literal["video", "document", "image", "other"]


class Content(BaseModel):
    """A catalog item. The media itself lives elsewhere; `url` is an opaque link."""

    id: int
    title: str
    description: Optional[str] = None
    url: str
    thumbnail_url: Optional[str] = None
    type: ContentType = "video"
    is_public: bool = False
    created_at: datetime
    updated_at: datetime


class ContentCreate(BaseModel):
    """Request model for adding a catalog item."""

    title: str = Field(min_length=1, max_length=255)
    description: str = ""
    url: str = Field(min_length=1, max_length=512)
    thumbnail_url: Optional[str] = Field(default=None, max_length=512)
    type: ContentType = "video"
    is_public: bool = False


class ContentUpdate(BaseModel):
    """Request model for a partial update via PATCH. Omitted fields are left as-is."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    url: Optional[str] = Field(default=None, min_length=1, max_length=512)
    thumbnail_url: Optional[str] = Field(default=None, max_length=512)
    type: Optional[ContentType] = None
    is_public: Optional[bool] = None
