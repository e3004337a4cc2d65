"""Cloudflare R2 (S3-compatible) storage for wallpaper images."""

import logging
import time
from dataclasses import dataclass
from typing import Optional, Tuple

import boto3
from botocore.exceptions import BotoCoreError, ClientError

import config
from utils.slug import SlugOptions, generate_slug

logger = logging.getLogger(__name__)

KEY_PREFIX = "wallpapers"
MAX_IMAGE_SIZE = 50 * 1024 * 1024  # 50MB

CONTENT_TYPE_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}


@dataclass
class UploadResult:
    success: bool
    url: Optional[str] = None
    key: Optional[str] = None
    error: Optional[str] = None


class R2Storage:
    """Uploads and deletes image blobs in an R2 bucket."""

    def __init__(self, client, bucket: str, public_url: str):
        self.client = client
        self.bucket = bucket
        self.public_base = public_url.rstrip("/")

    @classmethod
    def from_env(cls) -> Optional["R2Storage"]:
        """Build from R2_* settings; None when storage is not configured."""
        if not all([
            config.R2_ACCOUNT_ID,
            config.R2_ACCESS_KEY_ID,
            config.R2_SECRET_ACCESS_KEY,
            config.R2_BUCKET_NAME,
        ]):
            logger.warning("R2 credentials not set, image uploads disabled")
            return None

        client = boto3.client(
            "s3",
            endpoint_url=f"https://{config.R2_ACCOUNT_ID}.r2.cloudflarestorage.com",
            aws_access_key_id=config.R2_ACCESS_KEY_ID,
            aws_secret_access_key=config.R2_SECRET_ACCESS_KEY,
            region_name="auto",
        )
        logger.info(f"R2 storage configured for bucket {config.R2_BUCKET_NAME}")
        return cls(client, config.R2_BUCKET_NAME, config.R2_PUBLIC_URL)

    def upload_file(self, data: bytes, key: str, content_type: str) -> UploadResult:
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
                ContentDisposition="inline",
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Error uploading {key} to R2: {e}")
            return UploadResult(success=False, error=str(e) or "Upload failed")

        logger.info(f"Uploaded {key} ({len(data)} bytes)")
        return UploadResult(success=True, url=self.public_url(key), key=key)

    def delete_file(self, key: str) -> bool:
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Error deleting {key} from R2: {e}")
            return False
        logger.info(f"Deleted {key} from R2")
        return True

    @staticmethod
    def generate_key(title: str, extension: str, timestamp: Optional[int] = None) -> str:
        """
        Object key for a new upload.

        Example:
            ("Neon City", "jpg") -> "wallpapers/neon-city-1718000000000.jpg"
        """
        timestamp = timestamp if timestamp is not None else int(time.time() * 1000)
        name = generate_slug(title, SlugOptions(remove_stop_words=False))
        return f"{KEY_PREFIX}/{name}-{timestamp}.{extension}"

    def public_url(self, key: str) -> str:
        return f"{self.public_base}/{key}"

    def extract_key_from_url(self, url: str) -> Optional[str]:
        """Object key for a URL served from this bucket, else None."""
        if self.public_base and url.startswith(self.public_base + "/"):
            return url[len(self.public_base) + 1:] or None
        return None

    @staticmethod
    def validate_image(content_type: str, size: int) -> Tuple[bool, Optional[str]]:
        if content_type not in CONTENT_TYPE_EXTENSIONS:
            return False, "Invalid file type. Only JPEG, PNG, and WebP are allowed."
        if size > MAX_IMAGE_SIZE:
            return False, "File too large. Maximum size is 50MB."
        return True, None

    @staticmethod
    def extension_for(content_type: str) -> str:
        return CONTENT_TYPE_EXTENSIONS.get(content_type, "jpg")
