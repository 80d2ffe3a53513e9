import unittest
from unittest.mock import MagicMock

from blog_backend.db import BlogPost, InMemoryBlogStore
from blog_backend.errors import (
    NotFoundError,
    PersistenceError,
    UploadError,
    ValidationError,
)
from blog_backend.media import InMemoryMediaStore
from blog_backend.service import BlogService


class FailingStore(InMemoryBlogStore):
    def insert(self, title, image, description):
        raise RuntimeError("insert failed")

    def update_by_id(self, blog_id, *, title=None, description=None, image=None):
        raise PersistenceError("update failed")


class BlogServiceTests(unittest.TestCase):
    def setUp(self):
        self.store = InMemoryBlogStore()
        self.media = InMemoryMediaStore()
        self.service = BlogService(self.store, self.media)

    def test_create_persists_uploaded_url(self):
        post = self.service.create("Title", "Body", b"img", "photo.png")
        (asset,) = self.media.list_assets()
        self.assertEqual(post.image, asset.url)
        self.assertEqual(self.service.get(post.id), post)

    def test_create_requires_image_before_upload(self):
        for image in (None, b""):
            with self.assertRaises(ValidationError):
                self.service.create("Title", "Body", image)
        self.assertEqual(self.media.stored_objects, {})

    def test_create_requires_title_and_description(self):
        with self.assertRaises(ValidationError):
            self.service.create("  ", "Body", b"img")
        with self.assertRaises(ValidationError):
            self.service.create("Title", None, b"img")
        self.assertEqual(self.media.stored_objects, {})
        self.assertEqual(self.store.posts, {})

    def test_create_wraps_unexpected_upload_errors(self):
        media = MagicMock()
        media.upload_image.side_effect = ConnectionError("timed out")
        service = BlogService(self.store, media)
        with self.assertRaises(UploadError) as ctx:
            service.create("Title", "Body", b"img")
        self.assertIn("timed out", str(ctx.exception))
        self.assertEqual(self.store.posts, {})

    def test_failed_insert_leaves_asset_by_default(self):
        service = BlogService(FailingStore(), self.media)
        with self.assertRaises(PersistenceError):
            service.create("Title", "Body", b"img")
        self.assertEqual(len(self.media.stored_objects), 1)

    def test_failed_insert_removes_asset_when_cleanup_enabled(self):
        service = BlogService(FailingStore(), self.media, cleanup_failed_uploads=True)
        with self.assertRaises(PersistenceError):
            service.create("Title", "Body", b"img")
        self.assertEqual(self.media.stored_objects, {})

    def test_cleanup_failure_keeps_original_error(self):
        media = MagicMock(wraps=self.media)
        media.delete_asset.side_effect = UploadError("delete refused")
        service = BlogService(FailingStore(), media, cleanup_failed_uploads=True)
        with self.assertRaises(PersistenceError) as ctx:
            service.create("Title", "Body", b"img")
        self.assertEqual(str(ctx.exception), "insert failed")

    def test_list_all_empty(self):
        self.assertEqual(self.service.list_all(), [])

    def test_get_missing_returns_none(self):
        self.assertIsNone(self.service.get("missing"))

    def test_update_keeps_image_and_unsupplied_fields(self):
        post = self.service.create("Title", "Body", b"img")
        updated = self.service.update(post.id, title="New title")
        self.assertEqual(updated.title, "New title")
        self.assertEqual(updated.description, "Body")
        self.assertEqual(updated.image, post.image)

    def test_update_replaces_image(self):
        post = self.service.create("Title", "Body", b"img")
        updated = self.service.update(post.id, "T2", "D2", b"new", "new.jpg")
        self.assertNotEqual(updated.image, post.image)
        self.assertEqual(self.service.get(post.id).image, updated.image)

    def test_update_missing_does_not_upload(self):
        with self.assertRaises(NotFoundError):
            self.service.update("missing", "T", "D", b"img")
        self.assertEqual(self.media.stored_objects, {})

    def test_failed_update_cleans_up_new_asset(self):
        store = FailingStore()
        store.posts["abc"] = BlogPost(
            id="abc", title="T", image="https://old", description="D"
        )
        service = BlogService(store, self.media, cleanup_failed_uploads=True)
        with self.assertRaises(PersistenceError):
            service.update("abc", "T2", "D2", b"img")
        self.assertEqual(self.media.stored_objects, {})

    def test_delete(self):
        post = self.service.create("Title", "Body", b"img")
        self.service.delete(post.id)
        self.assertEqual(self.service.list_all(), [])
        # The image stays at the media host.
        self.assertEqual(len(self.media.stored_objects), 1)
        with self.assertRaises(NotFoundError):
            self.service.delete(post.id)


if __name__ == "__main__":
    unittest.main()
