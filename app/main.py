from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.gzip import GZipMiddleware
from contextlib import asynccontextmanager
from dotenv import load_dotenv
from datetime import datetime, timezone
import logging

# Load environment variables as early as possible
load_dotenv()

from .config import settings
from .database import create_db_and_tables
from .exceptions import http_exception_handler
from .middleware import RateLimitMiddleware, SecurityMiddleware, LoggingMiddleware, ErrorHandlingMiddleware, RequestSizeLimitMiddleware
from .routers import auth_router, admin_router, blog_router, health_router

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format=settings.LOG_FORMAT
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}...")
    app.state.started_at = datetime.now(timezone.utc)
    app.state.db_init_ok = True
    app.state.db_init_error = None
    try:
        create_db_and_tables()
        logger.info("Database initialized successfully")
    except Exception as e:
        # Keep serving; the health endpoints report the failure
        app.state.db_init_ok = False
        app.state.db_init_error = str(e)
        logger.exception("Database initialization failed")
    yield
    logger.info(f"Shutting down {settings.APP_NAME}...")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
    docs_url=("/docs" if settings.DOCS_ENABLED else None),
    redoc_url=("/redoc" if settings.DOCS_ENABLED else None),
    openapi_url=("/openapi.json" if settings.DOCS_ENABLED else None)
)

app.add_exception_handler(HTTPException, http_exception_handler)

app.add_middleware(ErrorHandlingMiddleware)
app.add_middleware(LoggingMiddleware)
app.add_middleware(SecurityMiddleware)
app.add_middleware(RequestSizeLimitMiddleware)
app.add_middleware(RateLimitMiddleware)

app.add_middleware(GZipMiddleware, minimum_size=settings.GZIP_MIN_SIZE)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=settings.allowed_methods_list,
    allow_headers=settings.allowed_headers_list,
)

app.include_router(auth_router.router)
app.include_router(admin_router.router)
app.include_router(blog_router.router)
app.include_router(health_router.router)


@app.get("/health")
def health_check():
    started_at = getattr(app.state, "started_at", None)
    return {
        "status": "healthy" if getattr(app.state, "db_init_ok", True) else "degraded",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime_seconds": round((datetime.now(timezone.utc) - started_at).total_seconds(), 3) if started_at else 0.0,
        "database": {
            "ok": getattr(app.state, "db_init_ok", True),
            "error": getattr(app.state, "db_init_error", None)
        },
    }


@app.get("/")
def root():
    return {"message": f"{settings.APP_NAME} is running", "version": settings.APP_VERSION}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)
