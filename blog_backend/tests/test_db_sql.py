import unittest

from blog_backend.db import SqlBlogStore


class SqlBlogStoreTests(unittest.TestCase):
    """
    Uses SQLite via SQLAlchemy URL for fast/local testing of the SQL store.
    """

    def setUp(self):
        self.db = SqlBlogStore("sqlite+pysqlite:///:memory:")

    def tearDown(self):
        self.db.engine.dispose()

    def test_insert_and_find(self):
        post = self.db.insert("Title", "https://img/1.png", "Body")
        self.assertTrue(post.id)
        fetched = self.db.find_by_id(post.id)
        self.assertEqual(fetched, post)

    def test_find_missing(self):
        self.assertIsNone(self.db.find_by_id("missing"))

    def test_find_all(self):
        self.assertEqual(self.db.find_all(), [])
        ids = {self.db.insert(f"T{i}", f"https://img/{i}", "B").id for i in range(3)}
        self.assertEqual({post.id for post in self.db.find_all()}, ids)

    def test_update_keeps_image_when_not_given(self):
        post = self.db.insert("Title", "https://img/1.png", "Body")
        updated = self.db.update_by_id(post.id, title="New", description="Desc")
        self.assertEqual(updated.title, "New")
        self.assertEqual(updated.description, "Desc")
        self.assertEqual(updated.image, "https://img/1.png")

        updated = self.db.update_by_id(post.id, image="https://img/2.png")
        self.assertEqual(updated.image, "https://img/2.png")
        self.assertEqual(self.db.find_by_id(post.id).title, "New")

    def test_update_missing(self):
        self.assertIsNone(self.db.update_by_id("missing", title="x"))

    def test_delete(self):
        post = self.db.insert("Title", "https://img/1.png", "Body")
        deleted = self.db.delete_by_id(post.id)
        self.assertEqual(deleted.id, post.id)
        self.assertIsNone(self.db.find_by_id(post.id))
        self.assertIsNone(self.db.delete_by_id(post.id))

    def test_requires_url(self):
        with self.assertRaises(ValueError):
            SqlBlogStore("")


if __name__ == "__main__":
    unittest.main()
