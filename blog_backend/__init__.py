"""
Blog backend package.

This package provides a FastAPI application for creating, listing, updating
and deleting blog posts, with document-store and media-store abstractions so
the same service runs against SQL/Cloudinary/S3 in production and in-memory
backends in tests.
"""
