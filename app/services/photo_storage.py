"""Profile photo storage on an S3 compatible bucket."""

from __future__ import annotations

import logging
import mimetypes
import uuid
from pathlib import PurePosixPath
from typing import BinaryIO, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from app.config import settings
from app.models.entities.user import Photo

from .exceptions import PhotoStorageError, UnsupportedPhotoTypeError

LOG = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}


class PhotoStorage:
    """Uploads and deletes user photos, addressed by their object key."""

    def __init__(self, s3_client=None):
        self.bucket_name = settings.S3_BUCKET_NAME
        self.key_prefix = settings.S3_KEY_PREFIX.strip("/")

        if s3_client is None:
            session_kwargs = {"region_name": settings.S3_REGION}
            if settings.S3_ACCESS_KEY_ID and settings.S3_SECRET_ACCESS_KEY:
                session_kwargs["aws_access_key_id"] = settings.S3_ACCESS_KEY_ID
                session_kwargs["aws_secret_access_key"] = settings.S3_SECRET_ACCESS_KEY

            client_kwargs = {}
            if settings.S3_ENDPOINT_URL:
                client_kwargs["endpoint_url"] = settings.S3_ENDPOINT_URL

            s3_client = boto3.Session(**session_kwargs).client("s3", **client_kwargs)
        self.s3_client = s3_client

    def upload(
        self,
        fileobj: BinaryIO,
        filename: str,
        folder: str,
        content_type: Optional[str] = None,
    ) -> Photo:
        """
        Upload a photo under `<prefix>/<folder>/` and return its reference.

        Raises PhotoStorageError for unsupported files and S3 failures.
        """
        extension = PurePosixPath(filename or "").suffix.lower()
        if extension not in ALLOWED_EXTENSIONS:
            raise UnsupportedPhotoTypeError(f"Unsupported photo type: {extension or 'none'}")

        parts = (self.key_prefix, folder.strip("/"), f"{uuid.uuid4().hex}{extension}")
        key = "/".join(part for part in parts if part)
        content_type = content_type or mimetypes.guess_type(filename)[0]
        extra_args = {"ContentType": content_type} if content_type else {}

        try:
            self.s3_client.upload_fileobj(
                fileobj, self.bucket_name, key, ExtraArgs=extra_args
            )
        except (BotoCoreError, ClientError) as e:
            LOG.error("Failed to upload photo to s3://%s/%s: %s", self.bucket_name, key, e)
            raise PhotoStorageError(str(e)) from e

        LOG.info("Uploaded photo to s3://%s/%s", self.bucket_name, key)
        return Photo(public_id=key, secure_url=self.public_url(key))

    def destroy(self, public_id: str) -> None:
        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=public_id)
        except (BotoCoreError, ClientError) as e:
            LOG.error("Failed to delete photo s3://%s/%s: %s", self.bucket_name, public_id, e)
            raise PhotoStorageError(str(e)) from e

    def public_url(self, key: str) -> str:
        if settings.S3_PUBLIC_BASE_URL:
            return f"{settings.S3_PUBLIC_BASE_URL.rstrip('/')}/{key}"
        return f"https://{self.bucket_name}.s3.{settings.S3_REGION}.amazonaws.com/{key}"


def get_photo_storage() -> PhotoStorage:
    return PhotoStorage()
