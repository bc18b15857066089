"""
Pydantic schemas for blog endpoints.
"""
import re
from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, Field, field_validator

from prospectflow.schemas.common import validate_optional_url, blank_to_none

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def validate_slug(value: str) -> str:
    if len(value) < 3:
        raise ValueError("Slug must be at least 3 characters")
    if len(value) > 250:
        raise ValueError("Slug too long")
    if not SLUG_PATTERN.match(value):
        raise ValueError("Invalid slug format")
    return value


class PostCreate(BaseModel):
    title: str = Field(..., min_length=3, max_length=200)
    slug: Optional[str] = Field(None, description="Derived from the title when omitted")
    content: str = Field(..., min_length=10, description="Markdown content")
    excerpt: Optional[str] = Field(None, max_length=300)
    cover_image_url: Optional[str] = None

    @field_validator("slug")
    @classmethod
    def check_slug(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return validate_slug(v.strip())

    @field_validator("cover_image_url")
    @classmethod
    def check_cover(cls, v: Optional[str]) -> Optional[str]:
        return validate_optional_url(v)

    @field_validator("excerpt")
    @classmethod
    def check_excerpt(cls, v: Optional[str]) -> Optional[str]:
        return blank_to_none(v)


class PostUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=3, max_length=200)
    slug: Optional[str] = None
    content: Optional[str] = Field(None, min_length=10)
    excerpt: Optional[str] = Field(None, max_length=300)
    cover_image_url: Optional[str] = None

    @field_validator("slug")
    @classmethod
    def check_slug(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else validate_slug(v.strip())

    @field_validator("cover_image_url")
    @classmethod
    def check_cover(cls, v: Optional[str]) -> Optional[str]:
        return validate_optional_url(v)


class TocItem(BaseModel):
    id: str
    level: int
    text: str


class PostResponse(BaseModel):
    id: int
    user_id: Optional[int] = None
    author_name_cache: Optional[str] = None
    title: str
    slug: str
    content: str
    excerpt: Optional[str] = None
    cover_image_url: Optional[str] = None
    status: str
    is_featured: bool
    published_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class PostDetailResponse(PostResponse):
    toc: List[TocItem] = Field(default_factory=list)


class PostListResponse(BaseModel):
    posts: list[PostResponse]
    total: int
