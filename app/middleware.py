import time
import logging
from collections import defaultdict
from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from .config import settings
from .exceptions import create_error_response

logger = logging.getLogger(__name__)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Sliding one-minute window per client IP. A limit of 0 disables it."""

    window_seconds = 60

    def __init__(self, app: ASGIApp, rate_limit: int = None):
        super().__init__(app)
        self.requests = defaultdict(list)
        self.rate_limit = settings.RATE_LIMIT_PER_MINUTE if rate_limit is None else rate_limit
        self._last_sweep = time.time()

    def _sweep(self, current_time: float) -> None:
        # Forget clients with no request left inside the window
        idle = [ip for ip, times in self.requests.items() if not times or current_time - times[-1] >= self.window_seconds]
        for ip in idle:
            del self.requests[ip]
        self._last_sweep = current_time

    async def dispatch(self, request: Request, call_next):
        if self.rate_limit <= 0:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"

        current_time = time.time()
        if current_time - self._last_sweep >= self.window_seconds:
            self._sweep(current_time)
        recent = [t for t in self.requests[client_ip] if current_time - t < self.window_seconds]
        if len(recent) >= self.rate_limit:
            self.requests[client_ip] = recent
            logger.warning(f"Rate limit exceeded for IP: {client_ip}")
            return JSONResponse(
                status_code=429,
                content=create_error_response("Rate limit exceeded. Please try again later.", 429),
                headers={"Retry-After": "60"},
            )

        recent.append(current_time)
        self.requests[client_ip] = recent
        return await call_next(request)


class SecurityMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-XSS-Protection"] = "1; mode=block"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if not settings.DEBUG:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

        return response


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()

        client_host = request.client.host if request.client else "unknown"
        logger.info(f"Request: {request.method} {request.url.path} from {client_host}")

        response = await call_next(request)

        duration = time.time() - start_time
        logger.info(f"Response: {request.method} {request.url.path} {response.status_code} in {duration:.3f}s")

        return response


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as e:
            logger.error(f"Unhandled error on {request.method} {request.url.path}: {e}", exc_info=True)
            message = f"Internal server error: {e}" if settings.DEBUG else "Internal server error"
            return JSONResponse(status_code=500, content=create_error_response(message, 500))


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Rejects requests whose declared Content-Length exceeds MAX_REQUEST_SIZE."""

    async def dispatch(self, request: Request, call_next):
        content_length = request.headers.get("content-length")
        if content_length is not None:
            try:
                size = int(content_length)
            except ValueError:
                # Malformed header, downstream size checks still apply
                size = 0
            if size > settings.MAX_REQUEST_SIZE:
                logger.warning(f"Rejected {request.method} {request.url.path}: {size} bytes")
                return JSONResponse(
                    status_code=413,
                    content=create_error_response("Request entity too large", 413),
                )
        return await call_next(request)
