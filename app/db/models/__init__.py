# Models package (re-export feature modules for stable imports)
from .admin.administrator import Administrator
from .blog.post import BlogPost, BlogCategory

__all__ = [
    "Administrator",
    "BlogPost",
    "BlogCategory",
]
