"""
Reconcile the media store against the document store.

Posts are deleted without touching their image, and a failed save after a
successful upload leaves the upload behind. ``sweep`` removes every asset in
the media folder that no stored post references. Running it twice is harmless.

Assets younger than ``min_age`` are skipped: a request may have uploaded the
image and not yet inserted the post that points at it.
"""

from __future__ import annotations

import argparse
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from blog_backend.config import get_settings
from blog_backend.db import BlogStore, SqlBlogStore
from blog_backend.dependencies import build_blog_store, build_media_store
from blog_backend.media import MediaStore, UploadedAsset

logger = logging.getLogger(__name__)

DEFAULT_MIN_AGE_MINUTES = 60


def _old_enough(asset: UploadedAsset, cutoff: Optional[datetime]) -> bool:
    if cutoff is None:
        return True
    # Unknown age cannot be proven safe to delete.
    if asset.created_at is None:
        return False
    return asset.created_at <= cutoff


def find_orphans(
    store: BlogStore,
    media: MediaStore,
    *,
    min_age: timedelta = timedelta(0),
    now: Optional[datetime] = None,
) -> list[UploadedAsset]:
    cutoff = None
    if min_age > timedelta(0):
        cutoff = (now or datetime.now(timezone.utc)) - min_age
    # List assets before posts so an image saved in between counts as referenced.
    assets = media.list_assets()
    referenced = {post.image for post in store.find_all()}
    return [
        asset
        for asset in assets
        if asset.url not in referenced and _old_enough(asset, cutoff)
    ]


def sweep(
    store: BlogStore,
    media: MediaStore,
    *,
    dry_run: bool = False,
    min_age: timedelta = timedelta(0),
) -> int:
    orphans = find_orphans(store, media, min_age=min_age)
    for asset in orphans:
        if dry_run:
            logger.info("Would delete %s", asset.url)
            continue
        media.delete_asset(asset.asset_id)
        logger.info("Deleted %s", asset.url)
    return len(orphans)


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Delete uploaded images that no blog post references any more."
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report orphaned assets without deleting them",
    )
    parser.add_argument(
        "--min-age-minutes",
        type=int,
        default=DEFAULT_MIN_AGE_MINUTES,
        help="Skip assets uploaded more recently than this",
    )
    args = parser.parse_args(argv)

    settings = get_settings()
    if settings.use_in_memory_backends or not settings.database_url:
        logger.error(
            "Refusing to sweep: DATABASE_URL is not set, so no stored posts can be checked"
        )
        return 1
    store = build_blog_store(settings)
    if not isinstance(store, SqlBlogStore):
        logger.error("Refusing to sweep: unsupported store %s", type(store).__name__)
        return 1
    media = build_media_store(settings)

    count = sweep(
        store,
        media,
        dry_run=args.dry_run,
        min_age=timedelta(minutes=args.min_age_minutes),
    )
    logger.info("%s %d orphaned assets", "Found" if args.dry_run else "Deleted", count)
    return 0
