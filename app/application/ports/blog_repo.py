from typing import Protocol, Optional, List, Dict, Any
from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class AuthorDto:
    id: str
    first_name: str
    last_name: str
    email: str


@dataclass
class BlogPostDto:
    id: str
    title: str
    slug: str
    content: str
    excerpt: Optional[str]
    featured_image: Optional[str]
    uploaded_image: Optional[str]
    uploaded_image_filename: Optional[str]
    uploaded_image_content_type: Optional[str]
    is_published: bool
    is_featured: bool
    view_count: int
    categories: List[str]
    author_id: str
    created_at: datetime
    updated_at: datetime
    published_at: Optional[datetime] = None
    author: Optional[AuthorDto] = None


@dataclass
class BlogPostFilter:
    search: Optional[str] = None
    is_published: Optional[bool] = None
    is_featured: Optional[bool] = None
    categories: List[str] = field(default_factory=list)
    author_id: Optional[str] = None
    published_since: Optional[datetime] = None


class BlogRepository(Protocol):
    def slug_exists(self, slug: str, exclude_id: Optional[str] = None) -> bool:
        ...

    def create(self, fields: Dict[str, Any]) -> BlogPostDto:
        ...

    def get_by_id(self, post_id: str) -> Optional[BlogPostDto]:
        ...

    def get_by_slug(self, slug: str, published_only: bool = True) -> Optional[BlogPostDto]:
        ...

    def update(self, post_id: str, fields: Dict[str, Any]) -> Optional[BlogPostDto]:
        ...

    def delete(self, post_id: str) -> bool:
        ...

    def increment_views(self, post_id: str) -> int:
        ...

    def list_posts(self, filters: BlogPostFilter, order_by: str = "created_at", offset: int = 0, limit: Optional[int] = None) -> List[BlogPostDto]:
        ...

    def count_posts(self, filters: BlogPostFilter) -> int:
        ...

    def total_views(self, published_only: bool = True) -> int:
        ...
