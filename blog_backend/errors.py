"""
Error taxonomy shared by the stores, the service and the HTTP layer.
"""

from __future__ import annotations


class BlogServiceError(Exception):
    """Base class for errors raised while handling a blog request."""

    status_code = 500


class ValidationError(BlogServiceError):
    """A required input was missing or empty."""

    status_code = 400


class NotFoundError(BlogServiceError):
    """No blog post exists for the requested id."""

    status_code = 404

    def __init__(self, blog_id: str, message: str = "Blog not found"):
        super().__init__(message)
        self.blog_id = blog_id


class UploadError(BlogServiceError):
    """The media store rejected or failed to receive an image."""


class PersistenceError(BlogServiceError):
    """The document store failed to read or write a record."""
