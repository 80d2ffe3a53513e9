"""
Media store abstraction for Cloudinary, S3-compatible buckets and in-memory testing.
"""

from __future__ import annotations

import logging
import mimetypes
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Protocol

import boto3
import cloudinary
import cloudinary.api
import cloudinary.uploader
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from blog_backend.errors import UploadError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadedAsset:
    """Result of a successful upload."""

    url: str
    asset_id: str
    created_at: Optional[datetime] = None


class MediaStore(Protocol):
    """Defines the operations the service needs from the media host."""

    def upload_image(
        self, data: bytes, filename: Optional[str] = None
    ) -> UploadedAsset:
        ...

    def delete_asset(self, asset_id: str) -> None:
        ...

    def list_assets(self) -> list[UploadedAsset]:
        ...


def _object_name(folder: str, filename: Optional[str]) -> str:
    ext = ""
    if filename and "." in filename:
        ext = "." + filename.rsplit(".", 1)[1].lower()
    return f"{folder}/{uuid.uuid4().hex}{ext}"


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    # Cloudinary reports UTC as "2024-05-01T10:00:00Z".
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


@dataclass
class InMemoryMediaStore:
    """Test double for media uploads."""

    base_url: str = "https://media.example.test"
    folder: str = "user_profiles"
    stored_objects: dict[str, bytes] = field(default_factory=dict)
    uploaded_at: dict[str, datetime] = field(default_factory=dict)
    fail_uploads: bool = False

    def upload_image(
        self, data: bytes, filename: Optional[str] = None
    ) -> UploadedAsset:
        if self.fail_uploads:
            raise UploadError("Upload rejected by in-memory media store")
        key = _object_name(self.folder, filename)
        self.stored_objects[key] = data
        self.uploaded_at[key] = datetime.now(timezone.utc)
        return UploadedAsset(
            url=f"{self.base_url}/{key}", asset_id=key, created_at=self.uploaded_at[key]
        )

    def delete_asset(self, asset_id: str) -> None:
        self.stored_objects.pop(asset_id, None)
        self.uploaded_at.pop(asset_id, None)

    def list_assets(self) -> list[UploadedAsset]:
        return [
            UploadedAsset(
                url=f"{self.base_url}/{key}",
                asset_id=key,
                created_at=self.uploaded_at.get(key),
            )
            for key in self.stored_objects
        ]


class CloudinaryMediaStore:
    """
    Uploads images to Cloudinary and returns the secure delivery URL.
    """

    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        folder: str = "user_profiles",
    ):
        if not cloud_name:
            raise ValueError("CLOUDINARY_CLOUD_NAME is required for CloudinaryMediaStore")
        self.folder = folder
        cloudinary.config(
            cloud_name=cloud_name,
            api_key=api_key,
            api_secret=api_secret,
            secure=True,
        )

    def upload_image(
        self, data: bytes, filename: Optional[str] = None
    ) -> UploadedAsset:
        try:
            result = cloudinary.uploader.upload(
                data, folder=self.folder, resource_type="image"
            )
        except Exception as exc:
            logger.error("Cloudinary upload error: %s", exc)
            raise UploadError(str(exc)) from exc
        return UploadedAsset(url=result["secure_url"], asset_id=result["public_id"])

    def delete_asset(self, asset_id: str) -> None:
        try:
            cloudinary.uploader.destroy(asset_id, resource_type="image")
        except Exception as exc:
            raise UploadError(str(exc)) from exc

    def list_assets(self) -> list[UploadedAsset]:
        assets: list[UploadedAsset] = []
        cursor = None
        while True:
            params = {
                "type": "upload",
                "resource_type": "image",
                "prefix": f"{self.folder}/",
                "max_results": 500,
            }
            if cursor:
                params["next_cursor"] = cursor
            try:
                response = cloudinary.api.resources(**params)
            except Exception as exc:
                raise UploadError(str(exc)) from exc
            for resource in response.get("resources", []):
                assets.append(
                    UploadedAsset(
                        url=resource["secure_url"],
                        asset_id=resource["public_id"],
                        created_at=_parse_timestamp(resource.get("created_at")),
                    )
                )
            cursor = response.get("next_cursor")
            if not cursor:
                return assets


@dataclass
class S3MediaStore:
    """
    S3-compatible media store. Objects are addressed through ``public_base_url``,
    which must be publicly readable (a CDN or a bucket policy allowing GetObject).
    """

    bucket: str
    region: str
    endpoint: str
    access_key_id: str
    secret_access_key: str
    public_base_url: str = ""
    folder: str = "user_profiles"

    def __post_init__(self):
        # Virtual-hosted style addressing works for AWS and most S3 clones.
        config = Config(
            s3={"addressing_style": "virtual"},
            signature_version="s3v4",
        )
        self._client = boto3.client(
            "s3",
            endpoint_url=self.endpoint or None,
            region_name=self.region or None,
            aws_access_key_id=self.access_key_id or None,
            aws_secret_access_key=self.secret_access_key or None,
            config=config,
        )
        if not self.public_base_url:
            region = self.region or "us-east-1"
            self.public_base_url = f"https://{self.bucket}.s3.{region}.amazonaws.com"

    def _url_for(self, key: str) -> str:
        return f"{self.public_base_url.rstrip('/')}/{key}"

    def upload_image(
        self, data: bytes, filename: Optional[str] = None
    ) -> UploadedAsset:
        key = _object_name(self.folder, filename)
        content_type = (
            mimetypes.guess_type(filename)[0] if filename else None
        ) or "application/octet-stream"
        try:
            self._client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error("S3 upload error for %s: %s", key, exc)
            raise UploadError(str(exc)) from exc
        return UploadedAsset(url=self._url_for(key), asset_id=key)

    def delete_asset(self, asset_id: str) -> None:
        try:
            self._client.delete_object(Bucket=self.bucket, Key=asset_id)
        except (BotoCoreError, ClientError) as exc:
            raise UploadError(str(exc)) from exc

    def list_assets(self) -> list[UploadedAsset]:
        paginator = self._client.get_paginator("list_objects_v2")
        assets: list[UploadedAsset] = []
        try:
            for page in paginator.paginate(Bucket=self.bucket, Prefix=f"{self.folder}/"):
                for obj in page.get("Contents", []):
                    assets.append(
                        UploadedAsset(
                            url=self._url_for(obj["Key"]),
                            asset_id=obj["Key"],
                            created_at=obj.get("LastModified"),
                        )
                    )
        except (BotoCoreError, ClientError) as exc:
            raise UploadError(str(exc)) from exc
        return assets
