"""
HTTP routes for the blog API.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import PlainTextResponse

from blog_backend.dependencies import get_blog_service
from blog_backend.schemas import (
    BlogListResponse,
    BlogPostOut,
    BlogResponse,
    BlogWriteResponse,
    ErrorResponse,
    MessageResponse,
)
from blog_backend.service import BlogService

logger = logging.getLogger(__name__)

router = APIRouter()

_ERRORS = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


async def _read_upload(upload: Optional[UploadFile]) -> tuple[Optional[bytes], Optional[str]]:
    if upload is None:
        return None, None
    data = await upload.read()
    return (data or None), upload.filename


@router.get("/", response_class=PlainTextResponse)
def index():
    return "Hello World!"


@router.post(
    "/AddBlog",
    response_model=BlogWriteResponse,
    status_code=201,
    responses=_ERRORS,
)
async def add_blog(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    service: BlogService = Depends(get_blog_service),
):
    data, filename = await _read_upload(image)
    post = await run_in_threadpool(service.create, title, description, data, filename)
    return BlogWriteResponse(
        message="Blog added successfully", blog=BlogPostOut(**post.as_dict())
    )


@router.get("/GetBlogs", response_model=BlogListResponse, responses=_ERRORS)
def get_blogs(service: BlogService = Depends(get_blog_service)):
    posts = service.list_all()
    return BlogListResponse(blogs=[BlogPostOut(**post.as_dict()) for post in posts])


@router.get("/GetBlog/{blog_id}", response_model=BlogResponse)
def get_blog(blog_id: str, service: BlogService = Depends(get_blog_service)):
    """
    Missing ids answer 200 with a null blog, unlike update/delete which 404.
    Clients depend on this, so it is kept as is.
    """
    post = service.get(blog_id)
    return BlogResponse(blog=BlogPostOut(**post.as_dict()) if post else None)


@router.put("/UpdateBlog/{blog_id}", response_model=BlogWriteResponse, responses=_ERRORS)
async def update_blog(
    blog_id: str,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    service: BlogService = Depends(get_blog_service),
):
    data, filename = await _read_upload(image)
    post = await run_in_threadpool(
        service.update, blog_id, title, description, data, filename
    )
    return BlogWriteResponse(
        message="Blog updated successfully", blog=BlogPostOut(**post.as_dict())
    )


@router.delete("/DeleteBlog/{blog_id}", response_model=MessageResponse, responses=_ERRORS)
def delete_blog(blog_id: str, service: BlogService = Depends(get_blog_service)):
    service.delete(blog_id)
    return MessageResponse(message="Blog deleted successfully")
