import logging
import platform
import sys
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, Request
from sqlmodel import Session

from ..config import settings
from ..database import get_session, ping_database
from ..dependencies import get_blog_service
from ..application.services.blog_service import BlogService
from ..schemas import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/health", tags=["Health"])


def _database_status(session: Session) -> dict:
    try:
        ping_database(session)
        return {"status": "connected"}
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return {"status": "disconnected", "error": str(e)}


def _uptime_seconds(request: Request) -> float:
    started_at = getattr(request.app.state, "started_at", None)
    if started_at is None:
        return 0.0
    return round((datetime.now(timezone.utc) - started_at).total_seconds(), 3)


@router.get("", response_model=HealthResponse)
def health(request: Request, session: Session = Depends(get_session)):
    database = _database_status(session)
    healthy = database["status"] == "connected"
    return {
        "status_code": 200,
        "message": "Service is healthy" if healthy else "Service is degraded",
        "data": {
            "status": "healthy" if healthy else "degraded",
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptime_seconds": _uptime_seconds(request),
            "system": {
                "python_version": sys.version.split()[0],
                "platform": platform.platform(),
            },
            "database": database,
        },
    }


@router.get("/database", response_model=HealthResponse)
def database_health(session: Session = Depends(get_session)):
    database = _database_status(session)
    connected = database["status"] == "connected"
    return {
        "status_code": 200,
        "message": "Database connection is healthy" if connected else "Database connection failed",
        "data": {**database, "timestamp": datetime.now(timezone.utc).isoformat()},
    }


@router.get("/blog", response_model=HealthResponse)
def blog_health(blog_service: BlogService = Depends(get_blog_service)):
    stats = blog_service.statistics()
    return {
        "status_code": 200,
        "message": "Blog service is healthy",
        "data": {
            "status": "healthy",
            "total_posts": stats["total"],
            "published_posts": stats["published"],
            "draft_posts": stats["drafts"],
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    }
