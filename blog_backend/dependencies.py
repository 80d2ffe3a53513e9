"""
Dependency wiring for the FastAPI app.

Stores are built once per application by ``build_blog_service`` and kept on
``app.state``; route handlers receive the service through ``get_blog_service``.
"""

from __future__ import annotations

import logging

from fastapi import Request

from blog_backend.config import Settings, get_settings
from blog_backend.db import BlogStore, InMemoryBlogStore, SqlBlogStore
from blog_backend.media import (
    CloudinaryMediaStore,
    InMemoryMediaStore,
    MediaStore,
    S3MediaStore,
)
from blog_backend.service import BlogService

logger = logging.getLogger(__name__)


def build_blog_store(settings: Settings) -> BlogStore:
    if settings.use_in_memory_backends or not settings.database_url:
        logger.info("Using in-memory blog store")
        return InMemoryBlogStore()
    store = SqlBlogStore(settings.database_url)
    logger.info("Database connected successfully")
    return store


def build_media_store(settings: Settings) -> MediaStore:
    backend = settings.resolved_media_backend()
    if backend == "cloudinary":
        return CloudinaryMediaStore(
            cloud_name=settings.cloudinary_cloud_name or "",
            api_key=settings.cloudinary_api_key or "",
            api_secret=settings.cloudinary_api_secret or "",
            folder=settings.media_folder,
        )
    if backend == "s3":
        if not settings.s3_bucket:
            raise ValueError("S3_BUCKET is required for the s3 media backend")
        return S3MediaStore(
            bucket=settings.s3_bucket,
            region=settings.s3_region or "",
            endpoint=settings.s3_endpoint or "",
            access_key_id=settings.aws_access_key_id or "",
            secret_access_key=settings.aws_secret_access_key or "",
            public_base_url=settings.s3_public_base_url or "",
            folder=settings.media_folder,
        )
    if backend == "memory":
        logger.info("Using in-memory media store")
        return InMemoryMediaStore(folder=settings.media_folder)
    raise ValueError(f"Unknown media backend: {backend}")


def build_blog_service(settings: Settings | None = None) -> BlogService:
    settings = settings or get_settings()
    return BlogService(
        build_blog_store(settings),
        build_media_store(settings),
        cleanup_failed_uploads=settings.cleanup_failed_uploads,
    )


def get_blog_service(request: Request) -> BlogService:
    return request.app.state.blog_service
