import base64
import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from app.main import app
from app.database import get_session
from app.application.services.admin_service import AdministratorService
from app.infrastructure.persistence.sqlalchemy.repositories.admin_repository_sql import SqlAdministratorRepository
from app.db import models  # noqa: F401
from conftest import make_image_bytes

EMAIL = "editor@example.com"
PASSWORD = "password123"


@pytest.fixture
def engine():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    SQLModel.metadata.create_all(engine)
    return engine


@pytest.fixture
def client(engine):
    def override_get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def admin(engine):
    with Session(engine) as session:
        service = AdministratorService(admin_repo=SqlAdministratorRepository(session))
        return service.create(EMAIL, PASSWORD, "Ada", "Lovelace")


@pytest.fixture
def tokens(client, admin):
    response = client.post("/api/auth/login", json={"email": EMAIL, "password": PASSWORD})
    assert response.status_code == 200
    return response.json()["data"]


@pytest.fixture
def auth_headers(tokens):
    return {"Authorization": f"Bearer {tokens['access_token']}"}


def create_post(client, auth_headers, **payload):
    body = {"title": "Launch day", "content": "We are live with the new site."}
    body.update(payload)
    response = client.post("/api/blog", json=body, headers=auth_headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def test_root_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["uptime_seconds"] >= 0


def test_api_health_endpoints(client):
    response = client.get("/api/health")
    assert response.json()["data"]["database"]["status"] == "connected"
    assert client.get("/api/health/database").json()["data"]["status"] == "connected"
    assert client.get("/api/health/blog").json()["data"]["total_posts"] == 0


def test_login_and_profile(client, tokens, auth_headers):
    assert tokens["administrator"]["email"] == EMAIL
    assert "password_hash" not in tokens["administrator"]

    profile = client.get("/api/auth/profile", headers=auth_headers)
    assert profile.status_code == 200
    assert profile.json()["data"]["first_name"] == "Ada"

    verify = client.get("/api/auth/verify", headers=auth_headers)
    assert verify.json()["data"]["is_valid"] is True


def test_login_rejects_bad_credentials(client, admin):
    response = client.post("/api/auth/login", json={"email": EMAIL, "password": "wrong"})
    assert response.status_code == 401
    assert response.json() == {"success": False, "data": None, "error": "Invalid credentials"}


def test_login_validates_email(client):
    response = client.post("/api/auth/login", json={"email": "not-an-email", "password": "x"})
    assert response.status_code == 422


def test_refresh(client, tokens):
    response = client.post("/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert response.status_code == 200
    assert response.json()["data"]["access_token"]

    rejected = client.post("/api/auth/refresh", json={"refresh_token": tokens["access_token"]})
    assert rejected.status_code == 401


def test_protected_routes_require_token(client):
    assert client.get("/api/admin").status_code == 401
    assert client.get("/api/blog").status_code == 401
    response = client.get("/api/auth/profile", headers={"Authorization": "Bearer garbage"})
    assert response.status_code == 401
    assert response.json()["error"] == "Invalid or expired token"


def test_admin_crud(client, auth_headers, admin):
    created = client.post(
        "/api/admin",
        json={"email": "New@Example.com", "password": "password123", "first_name": "Grace", "last_name": "Hopper"},
        headers=auth_headers,
    )
    assert created.status_code == 201
    new_admin = created.json()["data"]
    assert new_admin["email"] == "new@example.com"
    assert "password_hash" not in new_admin

    duplicate = client.post(
        "/api/admin",
        json={"email": "new@example.com", "password": "password123", "first_name": "G", "last_name": "H"},
        headers=auth_headers,
    )
    assert duplicate.status_code == 409

    listing = client.get("/api/admin", headers=auth_headers).json()
    assert listing["count"] == 2

    profile = client.get(f"/api/admin/profile/{new_admin['id']}", headers=auth_headers)
    assert profile.json()["data"]["first_name"] == "Grace"

    patched = client.patch(f"/api/admin/{new_admin['id']}", json={"last_name": "Murray"}, headers=auth_headers)
    assert patched.json()["data"]["last_name"] == "Murray"

    deleted = client.delete(f"/api/admin/{new_admin['id']}", headers=auth_headers)
    assert deleted.json()["message"] == "Administrator deleted successfully"
    assert client.get(f"/api/admin/{new_admin['id']}", headers=auth_headers).status_code == 404


def test_deactivated_admin_token_is_rejected(client, auth_headers, admin):
    client.delete(f"/api/admin/{admin.id}", headers=auth_headers)
    assert client.get("/api/auth/profile", headers=auth_headers).status_code == 401


def test_blog_lifecycle(client, auth_headers, admin):
    post = create_post(client, auth_headers, categories=["achievements", "achievements"])
    assert post["slug"] == "launch-day"
    assert post["categories"] == ["achievements"]
    assert post["author"]["id"] == admin.id
    assert post["is_published"] is False

    # Drafts are hidden from the public endpoints
    assert client.get("/api/blog/slug/launch-day").status_code == 404
    assert client.get("/api/blog/published").json()["count"] == 0

    published = client.patch(f"/api/blog/{post['id']}", json={"is_published": True}, headers=auth_headers)
    assert published.status_code == 200
    assert published.json()["data"]["published_at"] is not None

    by_slug = client.get("/api/blog/slug/launch-day")
    assert by_slug.status_code == 200
    assert by_slug.json()["data"]["author"]["email"] == EMAIL

    view = client.post("/api/blog/slug/launch-day/view")
    assert view.json()["view_count"] == 1

    assert client.get("/api/blog/category/achievements").json()["count"] == 1
    assert client.get("/api/blog/category/newsroom").json()["count"] == 0
    assert client.get("/api/blog/category/sports").status_code == 400
    assert client.get("/api/blog/search", params={"q": "LIVE"}).json()["count"] == 1
    assert client.get("/api/blog/recent").json()["count"] == 1

    stats = client.get("/api/blog/statistics", headers=auth_headers).json()["data"]
    assert stats["published"] == 1
    assert stats["total_views"] == 1
    assert stats["by_category"]["achievements"] == 1

    deleted = client.delete(f"/api/blog/{post['id']}", headers=auth_headers)
    assert deleted.json()["message"] == "Blog post deleted successfully"
    assert client.get(f"/api/blog/{post['id']}").status_code == 404


def test_blog_search_treats_wildcards_literally(client, auth_headers, admin):
    create_post(client, auth_headers, title="Revenue up 100% this year", is_published=True)
    create_post(client, auth_headers, title="Revenue up 1000 dollars", is_published=True)
    create_post(client, auth_headers, title="Naming in snake_case", is_published=True)
    create_post(client, auth_headers, title="Naming in snakeXcase", is_published=True)

    percent = client.get("/api/blog/search", params={"q": "100%"}).json()
    assert [p["title"] for p in percent["data"]] == ["Revenue up 100% this year"]

    underscore = client.get("/api/blog/search", params={"q": "snake_case"}).json()
    assert [p["title"] for p in underscore["data"]] == ["Naming in snake_case"]

    listing = client.get("/api/blog", params={"search": "e_c"}, headers=auth_headers).json()
    assert [p["title"] for p in listing["data"]] == ["Naming in snake_case"]


def test_blog_slugs_are_unique(client, auth_headers, admin):
    first = create_post(client, auth_headers)
    second = create_post(client, auth_headers)
    assert first["slug"] == "launch-day"
    assert second["slug"] == "launch-day-1"


def test_blog_listing_filters(client, auth_headers, admin):
    create_post(client, auth_headers, title="Award night", is_published=True, categories=["awards-recognition"])
    create_post(client, auth_headers, title="Draft thoughts", categories=["thought-pieces"])

    everything = client.get("/api/blog", headers=auth_headers).json()
    assert everything["count"] == 2

    drafts = client.get("/api/blog", params={"is_published": "false"}, headers=auth_headers).json()
    assert [p["title"] for p in drafts["data"]] == ["Draft thoughts"]

    awards = client.get("/api/blog", params={"categories": "awards-recognition"}, headers=auth_headers).json()
    assert [p["title"] for p in awards["data"]] == ["Award night"]


def test_blog_validation(client, auth_headers, admin):
    short = client.post("/api/blog", json={"title": "Hi", "content": "Too short"}, headers=auth_headers)
    assert short.status_code == 422

    unknown_field = client.post(
        "/api/blog", json={"title": "Valid title", "content": "Valid content here", "views": 5}, headers=auth_headers
    )
    assert unknown_field.status_code == 422

    assert client.get("/api/blog/not-a-uuid").status_code == 400
    assert client.get(f"/api/blog/{uuid.uuid4()}").status_code == 404


def test_cannot_feature_draft(client, auth_headers, admin):
    post = create_post(client, auth_headers)
    response = client.patch(f"/api/blog/{post['id']}", json={"is_featured": True}, headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["error"] == "Cannot feature an unpublished post"


def test_image_upload(client, auth_headers, admin):
    png = make_image_bytes(40, 30)
    response = client.post(
        "/api/blog/images",
        files={"file": ("pixel.png", png, "image/png")},
        headers=auth_headers,
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["compressed"] is False
    assert base64.b64decode(data["base64"].split(",", 1)[1]) == png

    post = create_post(
        client,
        auth_headers,
        uploaded_image=data["base64"],
        uploaded_image_filename=data["filename"],
        uploaded_image_content_type=data["content_type"],
    )
    assert post["uploaded_image"] == data["base64"]


def test_image_upload_rejects_wrong_type(client, auth_headers, admin):
    response = client.post(
        "/api/blog/images",
        files={"file": ("notes.txt", b"hello", "text/plain")},
        headers=auth_headers,
    )
    assert response.status_code == 415


def test_image_upload_requires_auth(client):
    response = client.post("/api/blog/images", files={"file": ("a.png", make_image_bytes(4, 4), "image/png")})
    assert response.status_code == 401
