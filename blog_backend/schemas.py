"""
Pydantic schemas for the blog API responses.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class BlogPostOut(BaseModel):
    id: str
    title: str
    image: str
    description: str


class BlogWriteResponse(BaseModel):
    message: str
    blog: BlogPostOut


class BlogListResponse(BaseModel):
    blogs: list[BlogPostOut]


class BlogResponse(BaseModel):
    blog: Optional[BlogPostOut] = None


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    message: str
    error: Optional[str] = None
