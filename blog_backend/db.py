"""
Document store abstraction for blog posts: SQLAlchemy-backed and in-memory.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Dict, Optional, Protocol

from sqlalchemy import Column, String, Text, create_engine, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from blog_backend.errors import PersistenceError


@dataclass
class BlogPost:
    id: str
    title: str
    image: str
    description: str

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "image": self.image,
            "description": self.description,
        }


class BlogStore(Protocol):
    """Interface for blog post persistence."""

    def insert(self, title: str, image: str, description: str) -> BlogPost:
        ...

    def find_all(self) -> list[BlogPost]:
        ...

    def find_by_id(self, blog_id: str) -> Optional[BlogPost]:
        ...

    def update_by_id(
        self,
        blog_id: str,
        *,
        title: Optional[str] = None,
        description: Optional[str] = None,
        image: Optional[str] = None,
    ) -> Optional[BlogPost]:
        ...

    def delete_by_id(self, blog_id: str) -> Optional[BlogPost]:
        ...


def _new_id() -> str:
    return uuid.uuid4().hex


class InMemoryBlogStore:
    """Simple in-memory store for development and tests."""

    def __init__(self):
        self.posts: Dict[str, BlogPost] = {}

    def insert(self, title: str, image: str, description: str) -> BlogPost:
        post = BlogPost(id=_new_id(), title=title, image=image, description=description)
        self.posts[post.id] = post
        return BlogPost(**post.as_dict())

    def find_all(self) -> list[BlogPost]:
        return [BlogPost(**post.as_dict()) for post in self.posts.values()]

    def find_by_id(self, blog_id: str) -> Optional[BlogPost]:
        post = self.posts.get(blog_id)
        return BlogPost(**post.as_dict()) if post else None

    def update_by_id(
        self,
        blog_id: str,
        *,
        title: Optional[str] = None,
        description: Optional[str] = None,
        image: Optional[str] = None,
    ) -> Optional[BlogPost]:
        post = self.posts.get(blog_id)
        if not post:
            return None
        if title is not None:
            post.title = title
        if description is not None:
            post.description = description
        if image:
            post.image = image
        return BlogPost(**post.as_dict())

    def delete_by_id(self, blog_id: str) -> Optional[BlogPost]:
        return self.posts.pop(blog_id, None)

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        self.posts.clear()


class SqlBlogStore:
    """
    SQLAlchemy-backed implementation. Accepts any SQLAlchemy URL (e.g., Postgres or SQLite for tests).
    """

    def __init__(self, database_url: str):
        if not database_url:
            raise ValueError("DATABASE_URL is required for SqlBlogStore")
        self.engine = create_engine(
            database_url,
            future=True,
            pool_pre_ping=True,
            pool_recycle=1800,
        )
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )
        # Connects eagerly so a bad URL fails at startup, not on first request.
        Base.metadata.create_all(self.engine)

    @staticmethod
    def _to_post(row: "BlogRow") -> BlogPost:
        return BlogPost(
            id=row.id,
            title=row.title,
            image=row.image,
            description=row.description,
        )

    def insert(self, title: str, image: str, description: str) -> BlogPost:
        try:
            with self.Session() as session:
                row = BlogRow(
                    id=_new_id(), title=title, image=image, description=description
                )
                session.add(row)
                session.commit()
                return self._to_post(row)
        except SQLAlchemyError as exc:
            raise PersistenceError(str(exc)) from exc

    def find_all(self) -> list[BlogPost]:
        try:
            with self.Session() as session:
                rows = session.execute(select(BlogRow)).scalars().all()
                return [self._to_post(row) for row in rows]
        except SQLAlchemyError as exc:
            raise PersistenceError(str(exc)) from exc

    def find_by_id(self, blog_id: str) -> Optional[BlogPost]:
        try:
            with self.Session() as session:
                row = session.get(BlogRow, blog_id)
                return self._to_post(row) if row else None
        except SQLAlchemyError as exc:
            raise PersistenceError(str(exc)) from exc

    def update_by_id(
        self,
        blog_id: str,
        *,
        title: Optional[str] = None,
        description: Optional[str] = None,
        image: Optional[str] = None,
    ) -> Optional[BlogPost]:
        try:
            with self.Session() as session:
                row = session.get(BlogRow, blog_id)
                if not row:
                    return None
                if title is not None:
                    row.title = title
                if description is not None:
                    row.description = description
                if image:
                    row.image = image
                session.commit()
                return self._to_post(row)
        except SQLAlchemyError as exc:
            raise PersistenceError(str(exc)) from exc

    def delete_by_id(self, blog_id: str) -> Optional[BlogPost]:
        try:
            with self.Session() as session:
                row = session.get(BlogRow, blog_id)
                if not row:
                    return None
                post = self._to_post(row)
                session.delete(row)
                session.commit()
                return post
        except SQLAlchemyError as exc:
            raise PersistenceError(str(exc)) from exc


Base = declarative_base()


class BlogRow(Base):
    __tablename__ = "blogs"

    id = Column(String, primary_key=True)
    title = Column(String, nullable=False)
    image = Column(String, nullable=False)
    description = Column(Text, nullable=False)
