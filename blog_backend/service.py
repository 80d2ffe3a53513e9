"""
Blog service: orchestrates the media store and the document store.

Writes upload the image first and persist the record second. The two steps
are not transactional; with ``cleanup_failed_uploads`` enabled the uploaded
asset is deleted again when the record cannot be saved.
"""

from __future__ import annotations

import logging
from typing import Optional

from blog_backend.db import BlogPost, BlogStore
from blog_backend.errors import (
    NotFoundError,
    PersistenceError,
    UploadError,
    ValidationError,
)
from blog_backend.media import MediaStore, UploadedAsset

logger = logging.getLogger(__name__)


class BlogService:
    def __init__(
        self,
        store: BlogStore,
        media: MediaStore,
        *,
        cleanup_failed_uploads: bool = False,
    ):
        self.store = store
        self.media = media
        self.cleanup_failed_uploads = cleanup_failed_uploads

    def _upload(self, image: bytes, filename: Optional[str]) -> UploadedAsset:
        try:
            asset = self.media.upload_image(image, filename)
        except UploadError:
            raise
        except Exception as exc:
            logger.error("Image upload failed: %s", exc)
            raise UploadError(str(exc)) from exc
        logger.info("Image uploaded: %s", asset.url)
        return asset

    def _discard(self, asset: UploadedAsset) -> None:
        if not self.cleanup_failed_uploads:
            logger.warning("Leaving orphaned asset %s after failed save", asset.asset_id)
            return
        try:
            self.media.delete_asset(asset.asset_id)
            logger.info("Removed orphaned asset %s", asset.asset_id)
        except Exception:
            logger.exception("Failed to remove orphaned asset %s", asset.asset_id)

    def create(
        self,
        title: Optional[str],
        description: Optional[str],
        image: Optional[bytes],
        filename: Optional[str] = None,
    ) -> BlogPost:
        if not image:
            raise ValidationError("Image is required")
        if not title or not title.strip():
            raise ValidationError("Title is required")
        if not description or not description.strip():
            raise ValidationError("Description is required")

        asset = self._upload(image, filename)
        try:
            post = self.store.insert(title=title, image=asset.url, description=description)
        except Exception as exc:
            logger.error("Blog adding error: %s", exc)
            self._discard(asset)
            if isinstance(exc, PersistenceError):
                raise
            raise PersistenceError(str(exc)) from exc
        logger.info("Blog %s created", post.id)
        return post

    def list_all(self) -> list[BlogPost]:
        return self.store.find_all()

    def get(self, blog_id: str) -> Optional[BlogPost]:
        """Return the post, or None when no record matches."""
        return self.store.find_by_id(blog_id)

    def update(
        self,
        blog_id: str,
        title: Optional[str] = None,
        description: Optional[str] = None,
        image: Optional[bytes] = None,
        filename: Optional[str] = None,
    ) -> BlogPost:
        if self.store.find_by_id(blog_id) is None:
            raise NotFoundError(blog_id)

        asset = self._upload(image, filename) if image else None
        try:
            post = self.store.update_by_id(
                blog_id,
                title=title,
                description=description,
                image=asset.url if asset else None,
            )
        except Exception as exc:
            logger.error("Blog update error for %s: %s", blog_id, exc)
            if asset:
                self._discard(asset)
            if isinstance(exc, PersistenceError):
                raise
            raise PersistenceError(str(exc)) from exc

        # Deleted between the existence check and the update.
        if post is None:
            if asset:
                self._discard(asset)
            raise NotFoundError(blog_id)
        logger.info("Blog %s updated", blog_id)
        return post

    def delete(self, blog_id: str) -> None:
        deleted = self.store.delete_by_id(blog_id)
        if deleted is None:
            raise NotFoundError(blog_id)
        logger.info("Blog %s deleted", blog_id)
