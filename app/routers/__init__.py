# Routers package
from . import auth_router
from . import admin_router
from . import blog_router
from . import health_router

__all__ = [
    "auth_router",
    "admin_router",
    "blog_router",
    "health_router",
]
