import re
import uuid
import logging
from dataclasses import dataclass, asdict
from datetime import datetime, timedelta, timezone
from typing import Optional, List, Dict, Any, Iterable
from fastapi import HTTPException

from ..ports.blog_repo import BlogRepository, BlogPostDto, BlogPostFilter
from ...db.models.blog.post import BlogCategory

logger = logging.getLogger(__name__)

VALID_CATEGORIES = [c.value for c in BlogCategory]
DEFAULT_CATEGORY = BlogCategory.NEWSROOM.value

MAX_LIST_LIMIT = 50
MIN_SEARCH_LENGTH = 2
RECENT_DAYS = 7
REQUIRED_FIELDS = ("title", "content", "is_published", "is_featured", "categories")


def generate_slug(title: str) -> str:
    if not title or not isinstance(title, str):
        raise ValueError("Title is required to generate slug")
    slug = title.lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"[\s_-]+", "-", slug)
    return slug.strip("-")


def normalize_categories(categories: Optional[Iterable[Any]]) -> List[str]:
    """De-duplicate, drop unknown values and fall back to the newsroom category."""
    if not categories:
        return [DEFAULT_CATEGORY]
    result: List[str] = []
    for category in categories:
        value = category.value if isinstance(category, BlogCategory) else category
        if value in VALID_CATEGORIES and value not in result:
            result.append(value)
    return result or [DEFAULT_CATEGORY]


def _clamp_limit(limit: int) -> int:
    return max(1, min(limit, MAX_LIST_LIMIT))


def _validate_uuid(value: Optional[str], detail: str) -> None:
    if not value:
        raise HTTPException(status_code=400, detail=detail)
    try:
        uuid.UUID(str(value))
    except ValueError:
        raise HTTPException(status_code=400, detail=detail)


def to_response(post: BlogPostDto) -> Dict[str, Any]:
    data = asdict(post)
    data.pop("author_id", None)
    data["categories"] = normalize_categories(post.categories)
    return data


@dataclass
class BlogService:
    blog_repo: BlogRepository

    def generate_unique_slug(self, title: str, exclude_id: Optional[str] = None) -> str:
        try:
            base_slug = generate_slug(title)
        except ValueError:
            raise HTTPException(status_code=400, detail="Failed to generate unique slug")
        if not base_slug:
            raise HTTPException(status_code=400, detail="Title must contain at least one letter or digit")
        slug = base_slug
        counter = 1
        while self.blog_repo.slug_exists(slug, exclude_id):
            slug = f"{base_slug}-{counter}"
            counter += 1
        return slug

    def create(self, data: Dict[str, Any], author_id: str) -> Dict[str, Any]:
        _validate_uuid(author_id, "Invalid author ID format")
        is_published = bool(data.get("is_published"))
        is_featured = bool(data.get("is_featured"))

        title = data["title"].strip()
        fields = {
            "title": title,
            "slug": self.generate_unique_slug(title),
            "content": data["content"].strip(),
            "excerpt": (data.get("excerpt") or "").strip() or None,
            "featured_image": data.get("featured_image") or None,
            "uploaded_image": data.get("uploaded_image") or None,
            "uploaded_image_filename": data.get("uploaded_image_filename") or None,
            "uploaded_image_content_type": data.get("uploaded_image_content_type") or None,
            "is_published": is_published,
            "is_featured": is_featured,
            "view_count": 0,
            "categories": normalize_categories(data.get("categories")),
            "author_id": author_id,
            "published_at": datetime.now(timezone.utc) if is_published else None,
        }
        post = self.blog_repo.create(fields)
        logger.info(f"Blog post created with ID: {post.id}, categories: {', '.join(post.categories)}")
        return to_response(post)

    def find_all(
        self,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        is_published: Optional[bool] = None,
        is_featured: Optional[bool] = None,
        categories: Optional[List[str]] = None,
        author_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        page = max(1, page)
        limit = _clamp_limit(limit)
        if author_id:
            _validate_uuid(author_id, "Invalid author ID format")
        filters = BlogPostFilter(
            search=search.strip() if search and search.strip() else None,
            is_published=is_published,
            is_featured=is_featured,
            categories=normalize_categories(categories) if categories else [],
            author_id=author_id,
        )
        total = self.blog_repo.count_posts(filters)
        posts = self.blog_repo.list_posts(filters, order_by="created_at", offset=(page - 1) * limit, limit=limit)
        return {
            "data": [to_response(p) for p in posts],
            "total": total,
            "page": page,
            "limit": limit,
            "total_pages": (total + limit - 1) // limit,
        }

    def find_by_category(self, category: str, published: bool = True) -> List[Dict[str, Any]]:
        if category not in VALID_CATEGORIES:
            raise HTTPException(status_code=400, detail="Invalid category")
        filters = BlogPostFilter(is_published=True if published else None, categories=[category])
        posts = self.blog_repo.list_posts(filters, order_by="published_at")
        # The text match on the JSON column can over-match, confirm membership
        matching = [p for p in posts if category in (p.categories or [])]
        logger.info(f"Found {len(matching)} posts for category {category}")
        return [to_response(p) for p in matching]

    def find_published(self) -> List[Dict[str, Any]]:
        posts = self.blog_repo.list_posts(BlogPostFilter(is_published=True), order_by="published_at")
        return [to_response(p) for p in posts]

    def find_featured(self, limit: int = 3) -> List[Dict[str, Any]]:
        posts = self.blog_repo.list_posts(
            BlogPostFilter(is_published=True, is_featured=True), order_by="published_at", limit=_clamp_limit(limit)
        )
        return [to_response(p) for p in posts]

    def find_recent(self, limit: int = 5) -> List[Dict[str, Any]]:
        posts = self.blog_repo.list_posts(
            BlogPostFilter(is_published=True), order_by="published_at", limit=_clamp_limit(limit)
        )
        return [to_response(p) for p in posts]

    def _get_or_404(self, post_id: str) -> BlogPostDto:
        _validate_uuid(post_id, "Invalid blog post ID format")
        post = self.blog_repo.get_by_id(post_id)
        if not post:
            raise HTTPException(status_code=404, detail=f"Blog post with ID {post_id} not found")
        return post

    def find_one(self, post_id: str) -> Dict[str, Any]:
        return to_response(self._get_or_404(post_id))

    def _get_published_by_slug(self, slug: str) -> BlogPostDto:
        if not slug or not slug.strip():
            raise HTTPException(status_code=400, detail="Valid slug is required")
        post = self.blog_repo.get_by_slug(slug.strip(), published_only=True)
        if not post:
            raise HTTPException(status_code=404, detail=f'Published blog post with slug "{slug}" not found')
        return post

    def find_by_slug(self, slug: str) -> Dict[str, Any]:
        return to_response(self._get_published_by_slug(slug))

    def increment_view_by_slug(self, slug: str) -> int:
        post = self._get_published_by_slug(slug)
        view_count = self.blog_repo.increment_views(post.id)
        logger.info(f"View count incremented for post {post.id}, new count: {view_count}")
        return view_count

    def update(self, post_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        post = self._get_or_404(post_id)
        # Explicit nulls clear optional columns, required ones are left untouched
        fields = {k: v for k, v in changes.items() if v is not None or k not in REQUIRED_FIELDS}

        if fields.get("title") and fields["title"] != post.title:
            fields["slug"] = self.generate_unique_slug(fields["title"], exclude_id=post_id)

        if "categories" in fields:
            fields["categories"] = normalize_categories(fields["categories"])

        if "is_published" in fields:
            if fields["is_published"] and not post.is_published:
                fields["published_at"] = datetime.now(timezone.utc)
            elif not fields["is_published"] and post.is_published:
                fields["published_at"] = None
                fields["is_featured"] = False

        will_be_published = fields.get("is_published", post.is_published)
        if changes.get("is_featured") and not will_be_published:
            raise HTTPException(status_code=400, detail="Cannot feature an unpublished post")

        updated = self.blog_repo.update(post_id, fields)
        if not updated:
            raise HTTPException(status_code=404, detail=f"Blog post with ID {post_id} not found")
        logger.info(f"Blog post updated with ID: {post_id}")
        return to_response(updated)

    def remove(self, post_id: str) -> Dict[str, str]:
        self._get_or_404(post_id)
        self.blog_repo.delete(post_id)
        logger.info(f"Blog post deleted with ID: {post_id}")
        return {"message": "Blog post deleted successfully"}

    def search(self, term: Optional[str], only_published: bool = True) -> List[Dict[str, Any]]:
        if not term or len(term.strip()) < MIN_SEARCH_LENGTH:
            return []
        filters = BlogPostFilter(search=term.strip(), is_published=True if only_published else None)
        posts = self.blog_repo.list_posts(filters, order_by="published_at", limit=MAX_LIST_LIMIT)
        return [to_response(p) for p in posts]

    def find_by_author(self, author_id: str, include_unpublished: bool = False) -> List[Dict[str, Any]]:
        _validate_uuid(author_id, "Invalid author ID format")
        filters = BlogPostFilter(author_id=author_id, is_published=None if include_unpublished else True)
        return [to_response(p) for p in self.blog_repo.list_posts(filters, order_by="created_at")]

    def count_published(self) -> int:
        return self.blog_repo.count_posts(BlogPostFilter(is_published=True))

    def statistics(self) -> Dict[str, Any]:
        since = datetime.now(timezone.utc) - timedelta(days=RECENT_DAYS)
        return {
            "total": self.blog_repo.count_posts(BlogPostFilter()),
            "published": self.count_published(),
            "drafts": self.blog_repo.count_posts(BlogPostFilter(is_published=False)),
            "featured": self.blog_repo.count_posts(BlogPostFilter(is_published=True, is_featured=True)),
            "recently_published": self.blog_repo.count_posts(BlogPostFilter(is_published=True, published_since=since)),
            "total_views": self.blog_repo.total_views(published_only=True),
            "by_category": {
                category: self.blog_repo.count_posts(BlogPostFilter(is_published=True, categories=[category]))
                for category in VALID_CATEGORIES
            },
        }
