"""
Asset Store — S3-backed storage for uploaded images (profile photos, payment proofs, QR codes).

The rest of the service only ever sees the returned URL and key; image bytes
are never inspected beyond their declared content type and size.
"""
import logging
import uuid
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional
from urllib.parse import urlparse

import boto3
from botocore.exceptions import ClientError, NoCredentialsError
from fastapi import UploadFile

from bureau.config import get_settings
from bureau.errors import AssetStoreError, ValidationError

logger = logging.getLogger(__name__)
settings = get_settings()


@dataclass
class StoredAsset:
    url: str
    key: str


class S3AssetStore:
    """Uploads files to an S3 bucket and returns their public URL."""

    def __init__(self, bucket_name: str, region: str, access_key: str = "", secret_key: str = ""):
        self.bucket_name = bucket_name
        self.region = region
        self.s3_client = boto3.client(
            "s3",
            aws_access_key_id=access_key or None,
            aws_secret_access_key=secret_key or None,
            region_name=region,
        )

    def upload(self, file: UploadFile, folder: str) -> StoredAsset:
        """Upload ``file`` under ``folder`` with a collision-free name."""
        extension = ""
        if file.filename and "." in file.filename:
            extension = "." + file.filename.rsplit(".", 1)[1].lower()
        key = f"{folder}/{uuid.uuid4().hex}{extension}"

        try:
            file.file.seek(0)
            self.s3_client.upload_fileobj(
                file.file, self.bucket_name, key,
                ExtraArgs={"ContentType": file.content_type},
            )
        except NoCredentialsError:
            logger.error("AWS credentials not found.")
            raise AssetStoreError("Asset store credentials are not configured")
        except ClientError as e:
            logger.error("Failed to upload %s: %s", key, e)
            raise AssetStoreError(f"Failed to upload {file.filename}")

        url = f"https://{self.bucket_name}.s3.{self.region}.amazonaws.com/{key}"
        logger.info("File uploaded successfully: %s", url)
        return StoredAsset(url=url, key=key)

    def delete(self, key_or_url: str) -> None:
        key = urlparse(key_or_url).path.lstrip("/") if key_or_url.startswith("http") else key_or_url
        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=key)
            logger.info("Deleted %s from %s", key, self.bucket_name)
        except ClientError as e:
            logger.error("Failed to delete %s: %s", key, e)
            raise AssetStoreError("Failed to delete file", code="asset_delete_failed")


def validate_upload(file: UploadFile) -> None:
    """Reject non-image content types and files over the configured size."""
    if file.content_type not in settings.UPLOAD_ALLOWED_TYPES:
        raise ValidationError(
            "Invalid file type. Only JPEG, PNG, WEBP, and GIF are allowed.", code="invalid_upload",
        )
    file.file.seek(0, 2)
    size = file.file.tell()
    file.file.seek(0)
    if size > settings.UPLOAD_MAX_BYTES:
        raise ValidationError(
            f"File too large. Maximum size is {settings.UPLOAD_MAX_BYTES // (1024 * 1024)} MB.",
            code="invalid_upload",
        )


@lru_cache()
def _default_store() -> S3AssetStore:
    return S3AssetStore(
        bucket_name=settings.AWS_S3_BUCKET,
        region=settings.AWS_REGION,
        access_key=settings.AWS_ACCESS_KEY_ID,
        secret_key=settings.AWS_SECRET_ACCESS_KEY,
    )


def get_asset_store() -> Optional[S3AssetStore]:
    """FastAPI dependency: the configured asset store, or None when no bucket is set."""
    if not settings.AWS_S3_BUCKET:
        return None
    return _default_store()


def store_upload(store: Optional[S3AssetStore], file: Optional[UploadFile], folder: str) -> Optional[StoredAsset]:
    """Upload ``file`` when one was sent. Returns None when there is nothing to store."""
    if file is None or not file.filename:
        return None
    if store is None:
        raise AssetStoreError("Image uploads are not configured", code="asset_store_unconfigured")
    validate_upload(file)
    return store.upload(file, folder)
