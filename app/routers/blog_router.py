import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, File, Query, UploadFile

from ..auth import get_current_admin
from ..dependencies import get_blog_service, get_image_upload_service
from ..application.services.blog_service import BlogService
from ..application.services.image_service import ImageUploadService
from ..media_utils import SourceImage
from ..schemas import (
    AuthenticatedAdministrator, CreateBlogPostRequest, UpdateBlogPostRequest,
    BlogPostListResponse, BlogPostSingleResponse, BlogStatisticsResponse,
    ViewCountResponse, MessageResponse, UploadedImageResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/blog", tags=["Blog"])


def _list_response(message: str, posts: list, count: Optional[int] = None) -> dict:
    return {
        "status_code": 200,
        "message": message,
        "data": posts,
        "count": len(posts) if count is None else count,
    }


@router.post("/images", response_model=UploadedImageResponse)
async def upload_image(
    file: UploadFile = File(...),
    current_admin: AuthenticatedAdministrator = Depends(get_current_admin),
    image_service: ImageUploadService = Depends(get_image_upload_service),
):
    source = await SourceImage.from_upload(file)
    logger.info(f"Image upload {source.filename} ({source.size} bytes) by administrator {current_admin.id}")
    data = await image_service.prepare(source)
    return {"status_code": 200, "message": "Image processed successfully", "data": data}


@router.post("", status_code=201, response_model=BlogPostSingleResponse)
def create_post(
    body: CreateBlogPostRequest,
    current_admin: AuthenticatedAdministrator = Depends(get_current_admin),
    blog_service: BlogService = Depends(get_blog_service),
):
    post = blog_service.create(body.model_dump(), author_id=current_admin.id)
    return {"status_code": 201, "message": "Blog post created successfully", "data": post}


@router.get("", response_model=BlogPostListResponse, dependencies=[Depends(get_current_admin)])
def list_posts(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    search: Optional[str] = None,
    is_published: Optional[bool] = None,
    is_featured: Optional[bool] = None,
    categories: Optional[List[str]] = Query(None),
    author_id: Optional[str] = None,
    blog_service: BlogService = Depends(get_blog_service),
):
    result = blog_service.find_all(
        page=page,
        limit=limit,
        search=search,
        is_published=is_published,
        is_featured=is_featured,
        categories=categories,
        author_id=author_id,
    )
    return _list_response("Blog posts retrieved successfully", result["data"], count=result["total"])


@router.get("/published", response_model=BlogPostListResponse)
def list_published(blog_service: BlogService = Depends(get_blog_service)):
    return _list_response("Published blog posts retrieved successfully", blog_service.find_published())


@router.get("/featured", response_model=BlogPostListResponse)
def list_featured(limit: int = 3, blog_service: BlogService = Depends(get_blog_service)):
    return _list_response("Featured blog posts retrieved successfully", blog_service.find_featured(limit))


@router.get("/recent", response_model=BlogPostListResponse)
def list_recent(limit: int = 5, blog_service: BlogService = Depends(get_blog_service)):
    return _list_response("Recent blog posts retrieved successfully", blog_service.find_recent(limit))


@router.get("/category/{category}", response_model=BlogPostListResponse)
def list_by_category(category: str, blog_service: BlogService = Depends(get_blog_service)):
    posts = blog_service.find_by_category(category)
    return _list_response(f"Blog posts in category {category} retrieved successfully", posts)


@router.get("/search", response_model=BlogPostListResponse)
def search_posts(
    q: Optional[str] = None,
    published: bool = True,
    blog_service: BlogService = Depends(get_blog_service),
):
    return _list_response("Search completed successfully", blog_service.search(q, only_published=published))


@router.get("/statistics", response_model=BlogStatisticsResponse, dependencies=[Depends(get_current_admin)])
def get_statistics(blog_service: BlogService = Depends(get_blog_service)):
    return {"status_code": 200, "message": "Blog statistics retrieved successfully", "data": blog_service.statistics()}


@router.get("/slug/{slug}", response_model=BlogPostSingleResponse)
def get_post_by_slug(slug: str, blog_service: BlogService = Depends(get_blog_service)):
    return {"status_code": 200, "message": "Blog post retrieved successfully", "data": blog_service.find_by_slug(slug)}


@router.post("/slug/{slug}/view", response_model=ViewCountResponse)
def register_view(slug: str, blog_service: BlogService = Depends(get_blog_service)):
    view_count = blog_service.increment_view_by_slug(slug)
    return {"status_code": 200, "message": "View count incremented successfully", "view_count": view_count}


@router.get("/{post_id}", response_model=BlogPostSingleResponse)
def get_post(post_id: str, blog_service: BlogService = Depends(get_blog_service)):
    return {"status_code": 200, "message": "Blog post retrieved successfully", "data": blog_service.find_one(post_id)}


@router.patch("/{post_id}", response_model=BlogPostSingleResponse, dependencies=[Depends(get_current_admin)])
def update_post(post_id: str, body: UpdateBlogPostRequest, blog_service: BlogService = Depends(get_blog_service)):
    post = blog_service.update(post_id, body.model_dump(exclude_unset=True))
    return {"status_code": 200, "message": "Blog post updated successfully", "data": post}


@router.delete("/{post_id}", response_model=MessageResponse, dependencies=[Depends(get_current_admin)])
def delete_post(post_id: str, blog_service: BlogService = Depends(get_blog_service)):
    result = blog_service.remove(post_id)
    return {"status_code": 200, "message": result["message"]}
