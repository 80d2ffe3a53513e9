"""
Configuration and settings for the blog backend.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5000)
    # Comma-separated, e.g. "https://a.example,https://b.example"
    cors_origins: str = Field(default="*")

    # Document store (any SQLAlchemy URL)
    database_url: Optional[str] = Field(default=None)

    # Media store: "cloudinary", "s3" or "memory". Unset picks from credentials.
    media_backend: Optional[str] = Field(default=None)
    media_folder: str = Field(default="user_profiles")

    cloudinary_cloud_name: Optional[str] = Field(default=None)
    cloudinary_api_key: Optional[str] = Field(default=None)
    cloudinary_api_secret: Optional[str] = Field(default=None)

    # S3-compatible storage
    s3_bucket: Optional[str] = Field(default=None)
    s3_region: Optional[str] = Field(default=None)
    s3_endpoint: Optional[str] = Field(default=None)
    s3_public_base_url: Optional[str] = Field(default=None)
    aws_access_key_id: Optional[str] = Field(default=None)
    aws_secret_access_key: Optional[str] = Field(default=None)

    # Delete the uploaded asset again when the record cannot be saved.
    cleanup_failed_uploads: bool = Field(default=False)

    # Development toggles
    use_in_memory_backends: bool = Field(
        default=False, validation_alias="BLOG_USE_IN_MEMORY_BACKENDS"
    )

    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    def resolved_media_backend(self) -> str:
        if self.use_in_memory_backends:
            return "memory"
        if self.media_backend:
            return self.media_backend.lower()
        if self.cloudinary_cloud_name:
            return "cloudinary"
        if self.s3_bucket:
            return "s3"
        return "memory"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
