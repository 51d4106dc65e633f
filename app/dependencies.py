# FastAPI dependency providers wiring services to their SQL repositories
from fastapi import Depends
from sqlmodel import Session

from .config import settings
from .database import get_session
from .application.services.admin_service import AdministratorService
from .application.services.auth_service import AuthService
from .application.services.blog_service import BlogService
from .application.services.image_service import ImageUploadService
from .infrastructure.audit.std_logger import StdAuditLogger
from .infrastructure.persistence.sqlalchemy.repositories.admin_repository_sql import SqlAdministratorRepository
from .infrastructure.persistence.sqlalchemy.repositories.blog_repository_sql import SqlBlogRepository


def get_admin_service(session: Session = Depends(get_session)) -> AdministratorService:
    return AdministratorService(admin_repo=SqlAdministratorRepository(session))


def get_auth_service(admin_service: AdministratorService = Depends(get_admin_service)) -> AuthService:
    return AuthService(admin_service=admin_service, audit_logger=StdAuditLogger())


def get_blog_service(session: Session = Depends(get_session)) -> BlogService:
    return BlogService(blog_repo=SqlBlogRepository(session))


def get_image_upload_service() -> ImageUploadService:
    return ImageUploadService(
        max_size_bytes=settings.MAX_IMAGE_SIZE,
        max_original_size_bytes=settings.MAX_ORIGINAL_IMAGE_SIZE,
        accepted_types=list(settings.ALLOWED_IMAGE_TYPES),
        max_width=settings.IMAGE_MAX_WIDTH,
        max_height=settings.IMAGE_MAX_HEIGHT,
        quality=settings.IMAGE_QUALITY,
    )
