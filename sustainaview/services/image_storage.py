"""Image blob store: compress, upload, sign and delete room photos."""

import asyncio
import base64
import binascii
import io
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Optional, Tuple

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from PIL import Image, UnidentifiedImageError

from sustainaview.config import StorageSettings, settings
from sustainaview.utils.errors import InvalidRequestError, StorageError

logger = logging.getLogger(__name__)


@dataclass
class StoredImage:
    key: str
    url: str
    expires_at: datetime


def strip_data_uri(data: str) -> str:
    """Drop a ``data:image/...;base64,`` prefix if present."""
    if data.startswith("data:image/") and "," in data:
        return data.split(",", 1)[1]
    return data


def process_image_data(data: str, max_dimension: int = 1024, quality: int = 85) -> bytes:
    """Decode a base64 image and re-encode it as a compressed JPEG.

    The image is converted to RGB and scaled down to fit inside
    ``max_dimension`` x ``max_dimension``; smaller images are not enlarged.

    Raises:
        InvalidRequestError: If the payload is not a decodable image
    """
    try:
        raw = base64.b64decode(strip_data_uri(data), validate=True)
        image = Image.open(io.BytesIO(raw))
        image.load()
    except (binascii.Error, ValueError, UnidentifiedImageError, OSError) as e:
        raise InvalidRequestError("Invalid image data") from e

    if image.mode != "RGB":
        image = image.convert("RGB")
    # thumbnail keeps the aspect ratio and never enlarges
    image.thumbnail((max_dimension, max_dimension), Image.Resampling.LANCZOS)

    out = io.BytesIO()
    image.save(out, format="JPEG", quality=quality, progressive=True, optimize=True)
    return out.getvalue()


class ImageStorage:
    """S3-compatible blob store for greenovation images."""

    def __init__(self, config: Optional[StorageSettings] = None, client: Any = None):
        self.config = config or settings.storage
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = boto3.client(
                "s3",
                region_name=self.config.region,
                endpoint_url=self.config.endpoint_url,
                aws_access_key_id=self.config.access_key_id.get_secret_value() or None,
                aws_secret_access_key=self.config.secret_access_key.get_secret_value() or None,
            )
        return self._client

    def generate_key(self) -> str:
        return f"{self.config.key_prefix}/{uuid.uuid4()}.jpg"

    def _presign(self, key: str) -> Tuple[str, datetime]:
        url = self.client.generate_presigned_url(
            "get_object",
            Params={"Bucket": self.config.bucket_name, "Key": key},
            ExpiresIn=self.config.signed_url_ttl,
        )
        return url, datetime.utcnow() + timedelta(seconds=self.config.signed_url_ttl)

    def _upload(self, key: str, body: bytes) -> None:
        self.client.put_object(
            Bucket=self.config.bucket_name,
            Key=key,
            Body=body,
            ContentType="image/jpeg",
        )

    async def save_image(self, data: str) -> StoredImage:
        """Compress and upload a base64 image, returning its key and a signed URL.

        Raises:
            InvalidRequestError: If the payload is not an image
            StorageError: If the upload or signing fails
        """
        body = await asyncio.to_thread(
            process_image_data, data, self.config.max_dimension, self.config.jpeg_quality
        )
        key = self.generate_key()
        try:
            await asyncio.to_thread(self._upload, key, body)
            url, expires_at = await asyncio.to_thread(self._presign, key)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to store image {key}: {e}")
            raise StorageError("Failed to upload image", details={"key": key}) from e

        logger.info(f"Stored image {key} ({len(body)} bytes)")
        return StoredImage(key=key, url=url, expires_at=expires_at)

    async def save_pair(self, original: str, generated: str) -> Tuple[StoredImage, StoredImage]:
        """Upload a before/after pair; the first upload is removed if the second fails."""
        first = await self.save_image(original)
        try:
            second = await self.save_image(generated)
        except Exception:
            await self.delete_image(first.key)
            raise
        return first, second

    async def sign(self, key: str) -> Tuple[str, datetime]:
        """Mint a fresh signed URL for ``key``.

        Raises:
            StorageError: If signing fails
        """
        try:
            return await asyncio.to_thread(self._presign, key)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to sign image {key}: {e}")
            raise StorageError("Failed to sign image URL", details={"key": key}) from e

    async def delete_image(self, key: str) -> bool:
        """Delete a stored image. Failures are logged, not raised."""
        try:
            await asyncio.to_thread(self.client.delete_object, Bucket=self.config.bucket_name, Key=key)
            logger.info(f"Deleted image {key}")
            return True
        except (BotoCoreError, ClientError) as e:
            logger.warning(f"Failed to delete image {key}: {e}")
            return False

    async def check_connection(self) -> bool:
        try:
            await asyncio.to_thread(self.client.head_bucket, Bucket=self.config.bucket_name)
            return True
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Blob store connection check failed: {e}")
            return False
