import asyncio
import time

from fastapi import FastAPI, Request, Response
from fastapi.testclient import TestClient

from app.config import settings
from app.middleware import RateLimitMiddleware, RequestSizeLimitMiddleware, SecurityMiddleware, ErrorHandlingMiddleware


def make_app(*middleware):
    app = FastAPI()
    for cls, kwargs in middleware:
        app.add_middleware(cls, **kwargs)

    @app.get("/ping")
    def ping():
        return {"ok": True}

    @app.post("/echo")
    def echo():
        return {"ok": True}

    @app.get("/boom")
    def boom():
        raise RuntimeError("kaboom")

    return app


def test_rate_limit_blocks_after_limit():
    client = TestClient(make_app((RateLimitMiddleware, {"rate_limit": 2})))
    assert client.get("/ping").status_code == 200
    assert client.get("/ping").status_code == 200
    response = client.get("/ping")
    assert response.status_code == 429
    assert response.json()["success"] is False


def test_rate_limit_disabled_with_zero():
    client = TestClient(make_app((RateLimitMiddleware, {"rate_limit": 0})))
    assert all(client.get("/ping").status_code == 200 for _ in range(5))


def test_rate_limit_forgets_idle_clients():
    limiter = RateLimitMiddleware(FastAPI(), rate_limit=5)
    now = time.time()
    limiter.requests["10.0.0.1"] = [now - 120]
    limiter.requests["10.0.0.2"] = [now - 5]
    limiter._last_sweep = now - 61

    async def call_next(request):
        return Response("ok")

    request = Request({"type": "http", "method": "GET", "path": "/", "headers": [], "client": ("10.0.0.3", 1234)})
    response = asyncio.run(limiter.dispatch(request, call_next))

    assert response.status_code == 200
    assert "10.0.0.1" not in limiter.requests
    assert set(limiter.requests) == {"10.0.0.2", "10.0.0.3"}


def test_rate_limit_sweep_drops_empty_windows():
    limiter = RateLimitMiddleware(FastAPI(), rate_limit=5)
    now = time.time()
    limiter.requests["10.0.0.1"] = []
    limiter.requests["10.0.0.2"] = [now - 61, now - 60]
    limiter.requests["10.0.0.3"] = [now - 90, now - 1]

    limiter._sweep(now)

    assert list(limiter.requests) == ["10.0.0.3"]
    assert limiter._last_sweep == now


def test_request_size_limit():
    client = TestClient(make_app((RequestSizeLimitMiddleware, {})))
    response = client.post("/echo", content=b"x" * (settings.MAX_REQUEST_SIZE + 1))
    assert response.status_code == 413
    assert client.post("/echo", content=b"small").status_code == 200


def test_security_headers():
    client = TestClient(make_app((SecurityMiddleware, {})))
    response = client.get("/ping")
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"


def test_unhandled_errors_become_500():
    client = TestClient(make_app((ErrorHandlingMiddleware, {})), raise_server_exceptions=False)
    response = client.get("/boom")
    assert response.status_code == 500
    assert response.json()["error"].startswith("Internal server error")
