from typing import Optional, List, Dict, Any
from datetime import datetime, timezone
from sqlmodel import Session, select, func, or_
from sqlalchemy import String, cast

from .....db.models import Administrator, BlogPost
from .....application.ports.blog_repo import BlogRepository, BlogPostDto, BlogPostFilter, AuthorDto


def _escape_like(term: str) -> str:
    """Make LIKE wildcards in a search term match literally (escape char is a backslash)."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SqlBlogRepository(BlogRepository):
    def __init__(self, session: Session):
        self.session = session

    def _to_dto(self, post: BlogPost, author: Optional[Administrator] = None) -> BlogPostDto:
        return BlogPostDto(
            id=post.id,
            title=post.title,
            slug=post.slug,
            content=post.content,
            excerpt=post.excerpt,
            featured_image=post.featured_image,
            uploaded_image=post.uploaded_image,
            uploaded_image_filename=post.uploaded_image_filename,
            uploaded_image_content_type=post.uploaded_image_content_type,
            is_published=post.is_published,
            is_featured=post.is_featured,
            view_count=post.view_count or 0,
            categories=list(post.categories or []),
            author_id=post.author_id,
            created_at=post.created_at,
            updated_at=post.updated_at,
            published_at=post.published_at,
            author=AuthorDto(
                id=author.id,
                first_name=author.first_name,
                last_name=author.last_name,
                email=author.email,
            ) if author else None,
        )

    def _select_with_author(self):
        return select(BlogPost, Administrator).join(
            Administrator, Administrator.id == BlogPost.author_id, isouter=True
        )

    def _apply_filters(self, statement, filters: BlogPostFilter):
        if filters.search:
            pattern = f"%{_escape_like(filters.search)}%"
            statement = statement.where(or_(
                BlogPost.title.ilike(pattern, escape="\\"),
                BlogPost.content.ilike(pattern, escape="\\"),
                BlogPost.excerpt.ilike(pattern, escape="\\"),
            ))
        if filters.is_published is not None:
            statement = statement.where(BlogPost.is_published == filters.is_published)
        if filters.is_featured is not None:
            statement = statement.where(BlogPost.is_featured == filters.is_featured)
        if filters.author_id:
            statement = statement.where(BlogPost.author_id == filters.author_id)
        if filters.published_since is not None:
            statement = statement.where(BlogPost.published_at > filters.published_since)
        if filters.categories:
            # Categories are stored as a JSON array; match on the quoted value
            statement = statement.where(or_(*[
                cast(BlogPost.categories, String).like(f'%"{category}"%')
                for category in filters.categories
            ]))
        return statement

    def _get(self, post_id: str) -> Optional[BlogPost]:
        return self.session.exec(select(BlogPost).where(BlogPost.id == post_id)).first()

    def _load(self, post: BlogPost) -> BlogPostDto:
        author = self.session.exec(select(Administrator).where(Administrator.id == post.author_id)).first()
        return self._to_dto(post, author)

    def slug_exists(self, slug: str, exclude_id: Optional[str] = None) -> bool:
        statement = select(BlogPost.id).where(BlogPost.slug == slug)
        if exclude_id:
            statement = statement.where(BlogPost.id != exclude_id)
        return self.session.exec(statement).first() is not None

    def create(self, fields: Dict[str, Any]) -> BlogPostDto:
        post = BlogPost(**fields)
        self.session.add(post)
        self.session.commit()
        self.session.refresh(post)
        return self._load(post)

    def get_by_id(self, post_id: str) -> Optional[BlogPostDto]:
        post = self._get(post_id)
        return self._load(post) if post else None

    def get_by_slug(self, slug: str, published_only: bool = True) -> Optional[BlogPostDto]:
        statement = select(BlogPost).where(BlogPost.slug == slug)
        if published_only:
            statement = statement.where(BlogPost.is_published == True)  # noqa: E712
        post = self.session.exec(statement).first()
        return self._load(post) if post else None

    def update(self, post_id: str, fields: Dict[str, Any]) -> Optional[BlogPostDto]:
        post = self._get(post_id)
        if not post:
            return None
        for key, value in fields.items():
            if hasattr(post, key):
                setattr(post, key, value)
        post.updated_at = datetime.now(timezone.utc)
        self.session.add(post)
        self.session.commit()
        self.session.refresh(post)
        return self._load(post)

    def delete(self, post_id: str) -> bool:
        post = self._get(post_id)
        if not post:
            return False
        self.session.delete(post)
        self.session.commit()
        return True

    def increment_views(self, post_id: str) -> int:
        post = self._get(post_id)
        if not post:
            return 0
        post.view_count = (post.view_count or 0) + 1
        self.session.add(post)
        self.session.commit()
        self.session.refresh(post)
        return post.view_count

    def list_posts(self, filters: BlogPostFilter, order_by: str = "created_at", offset: int = 0, limit: Optional[int] = None) -> List[BlogPostDto]:
        order_column = BlogPost.published_at if order_by == "published_at" else BlogPost.created_at
        statement = self._apply_filters(self._select_with_author(), filters)
        statement = statement.order_by(order_column.desc()).offset(offset)
        if limit is not None:
            statement = statement.limit(limit)
        rows = self.session.exec(statement).all()
        return [self._to_dto(post, author) for post, author in rows]

    def count_posts(self, filters: BlogPostFilter) -> int:
        statement = self._apply_filters(select(func.count(BlogPost.id)), filters)
        return self.session.exec(statement).one()

    def total_views(self, published_only: bool = True) -> int:
        statement = select(func.coalesce(func.sum(BlogPost.view_count), 0))
        if published_only:
            statement = statement.where(BlogPost.is_published == True)  # noqa: E712
        return int(self.session.exec(statement).one())
