# app/schemas/blog/blog.py
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List, Dict
from datetime import datetime
import re

from ...db.models.blog.post import BlogCategory

_IMAGE_URL_RE = re.compile(r'\.(jpg|jpeg|png|gif|webp|svg)$', re.IGNORECASE)
_IMAGE_MIME_RE = re.compile(r'^image/(jpeg|jpg|png|gif|webp)$', re.IGNORECASE)


def _strip(v: Optional[str]) -> Optional[str]:
    return v.strip() if isinstance(v, str) else v


class BlogPostBase(BaseModel):
    model_config = ConfigDict(extra="forbid")

    excerpt: Optional[str] = Field(None, max_length=500)
    featured_image: Optional[str] = Field(None, max_length=2048, description="Public image URL")
    uploaded_image: Optional[str] = Field(None, description="Uploaded image as a data URL")
    uploaded_image_filename: Optional[str] = Field(None, max_length=255)
    uploaded_image_content_type: Optional[str] = None
    is_published: Optional[bool] = None
    is_featured: Optional[bool] = None
    categories: Optional[List[BlogCategory]] = Field(None, min_length=1, max_length=4)

    @field_validator('excerpt', mode='before')
    @classmethod
    def strip_excerpt(cls, v):
        v = _strip(v)
        return v or None

    @field_validator('featured_image')
    @classmethod
    def validate_featured_image(cls, v):
        if v is None:
            return v
        if not v.startswith(('http://', 'https://')):
            raise ValueError('Featured image must be a valid URL')
        if not _IMAGE_URL_RE.search(v):
            raise ValueError('Featured image must be a valid image URL')
        return v

    @field_validator('uploaded_image_content_type')
    @classmethod
    def validate_content_type(cls, v):
        if v is not None and not _IMAGE_MIME_RE.match(v):
            raise ValueError('Content type must be a valid image MIME type')
        return v

    @field_validator('categories', mode='before')
    @classmethod
    def wrap_single_category(cls, v):
        # A lone category string is accepted as a one element list
        if isinstance(v, str):
            return [v]
        return v


class CreateBlogPostRequest(BlogPostBase):
    title: str = Field(..., min_length=3, max_length=200)
    content: str = Field(..., min_length=10)

    @field_validator('title', 'content', mode='before')
    @classmethod
    def strip_text(cls, v):
        return _strip(v)


class UpdateBlogPostRequest(BlogPostBase):
    title: Optional[str] = Field(None, min_length=3, max_length=200)
    content: Optional[str] = Field(None, min_length=10)

    @field_validator('title', 'content', mode='before')
    @classmethod
    def strip_text(cls, v):
        return _strip(v)


class BlogAuthorResponse(BaseModel):
    id: str
    first_name: str
    last_name: str
    email: str


class BlogPostResponse(BaseModel):
    id: str
    title: str
    slug: str
    content: str
    excerpt: Optional[str] = None
    featured_image: Optional[str] = None
    uploaded_image: Optional[str] = None
    uploaded_image_filename: Optional[str] = None
    uploaded_image_content_type: Optional[str] = None
    is_published: bool
    is_featured: bool
    view_count: int
    categories: List[BlogCategory]
    author: Optional[BlogAuthorResponse] = None
    created_at: datetime
    updated_at: datetime
    published_at: Optional[datetime] = None


class BlogPostListResponse(BaseModel):
    status_code: int
    message: str
    data: List[BlogPostResponse]
    count: Optional[int] = None


class BlogPostSingleResponse(BaseModel):
    status_code: int
    message: str
    data: BlogPostResponse


class BlogStatistics(BaseModel):
    total: int = 0
    published: int = 0
    drafts: int = 0
    featured: int = 0
    recently_published: int = 0
    total_views: int = 0
    by_category: Dict[str, int] = Field(default_factory=dict)


class BlogStatisticsResponse(BaseModel):
    status_code: int
    message: str
    data: BlogStatistics


class ViewCountResponse(BaseModel):
    status_code: int
    message: str
    view_count: int
