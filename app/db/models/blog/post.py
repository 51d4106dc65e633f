# app/db/models/blog/post.py
from enum import Enum
from typing import List, Optional
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON, Text
from datetime import datetime, timezone
import uuid

class BlogCategory(str, Enum):
    NEWSROOM = "newsroom"
    THOUGHT_PIECES = "thought-pieces"
    ACHIEVEMENTS = "achievements"
    AWARDS_RECOGNITION = "awards-recognition"

class BlogPost(SQLModel, table=True):
    __tablename__ = "blog_posts"
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    title: str = Field(max_length=200)
    slug: str = Field(max_length=255, unique=True, index=True)
    content: str = Field(sa_column=Column(Text, nullable=False))
    excerpt: Optional[str] = Field(default=None, max_length=500)
    featured_image: Optional[str] = Field(default=None, max_length=2048)
    # Data URL of an image uploaded through the admin dashboard
    uploaded_image: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    uploaded_image_filename: Optional[str] = Field(default=None, max_length=255)
    uploaded_image_content_type: Optional[str] = Field(default=None, max_length=100)
    is_published: bool = Field(default=False, index=True)
    is_featured: bool = Field(default=False)
    view_count: int = Field(default=0)
    categories: List[str] = Field(
        default_factory=lambda: [BlogCategory.NEWSROOM.value],
        sa_column=Column(JSON, nullable=False),
    )
    author_id: str = Field(foreign_key="administrators.id", index=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    published_at: Optional[datetime] = Field(default=None)
