"""
Photo storage supporting both local filesystem and AWS S3.

Backends take the uploaded bytes and return the URL the board should show.
Only that URL is stored on the job; the bytes never touch the database.
"""

import logging
import os
import uuid
from typing import BinaryIO
import boto3
from botocore.exceptions import ClientError
from app.core.config import settings

logger = logging.getLogger(__name__)

CONTENT_TYPES = {
    'jpg': 'image/jpeg',
    'jpeg': 'image/jpeg',
    'png': 'image/png',
    'gif': 'image/gif',
    'webp': 'image/webp',
}


def file_extension(filename: str) -> str:
    return os.path.splitext(filename or "")[1].lower().lstrip(".")


class StorageError(Exception):
    """Raised when a backend fails to persist a file."""


class StorageBackend:
    """Abstract base class for storage backends"""

    def upload_file(self, file: BinaryIO, filename: str) -> str:
        """Store file and return its public URL"""
        raise NotImplementedError


class LocalStorage(StorageBackend):
    """Local filesystem storage, served by the app under UPLOAD_URL_PREFIX"""

    def __init__(self, base_dir: str = "uploads", url_prefix: str = "/uploads"):
        self.base_dir = base_dir
        self.url_prefix = url_prefix.rstrip("/")
        os.makedirs(self.base_dir, exist_ok=True)

    def upload_file(self, file: BinaryIO, filename: str) -> str:
        # Never trust the client filename beyond its extension
        unique_filename = f"{uuid.uuid4().hex}.{file_extension(filename)}"
        file_path = os.path.join(self.base_dir, unique_filename)

        try:
            with open(file_path, "wb") as buffer:
                buffer.write(file.read())
        except OSError as e:
            raise StorageError(f"Failed to write {file_path}: {e}") from e

        return f"{self.url_prefix}/{unique_filename}"


class S3Storage(StorageBackend):
    """AWS S3 storage backend"""

    def __init__(self):
        self.bucket_name = settings.S3_BUCKET_NAME
        self.region = settings.AWS_REGION

        # If AWS_ACCESS_KEY_ID is not set, boto3 will use IAM roles (for EC2/ECS)
        if settings.AWS_ACCESS_KEY_ID and settings.AWS_SECRET_ACCESS_KEY:
            self.s3_client = boto3.client(
                's3',
                aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
                aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
                region_name=self.region
            )
        else:
            self.s3_client = boto3.client('s3', region_name=self.region)

    def upload_file(self, file: BinaryIO, filename: str) -> str:
        extension = file_extension(filename)
        s3_key = f"photos/{uuid.uuid4().hex}.{extension}"

        try:
            self.s3_client.upload_fileobj(
                file,
                self.bucket_name,
                s3_key,
                ExtraArgs={
                    'ContentType': CONTENT_TYPES.get(extension, 'application/octet-stream'),
                    'ServerSideEncryption': 'AES256'
                }
            )
        except ClientError as e:
            logger.error(f"Error uploading to S3: {e}")
            raise StorageError(f"Failed to upload file to S3: {e}") from e

        return f"https://{self.bucket_name}.s3.{self.region}.amazonaws.com/{s3_key}"


def create_storage() -> StorageBackend:
    """Build the storage backend selected by the USE_S3 setting"""
    if settings.USE_S3:
        if not settings.S3_BUCKET_NAME:
            raise ValueError("S3_BUCKET_NAME must be set when USE_S3=True")
        return S3Storage()
    return LocalStorage(settings.UPLOAD_DIR, settings.UPLOAD_URL_PREFIX)


# Singleton instance
storage = create_storage()


def get_storage() -> StorageBackend:
    """Dependency returning the shared storage backend"""
    return storage
