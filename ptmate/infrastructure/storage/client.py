"""
Object storage client for progress photos.

Supports Cloudflare R2 (S3-compatible) with mock mode for local development.
Same S3 API means we could swap to actual S3 or MinIO if needed.

Mock mode stores photos in memory, enabling API testing without
provisioning actual object storage.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Protocol
from urllib.parse import urlparse

from ...core.training.photos import build_object_key

logger = logging.getLogger(__name__)

MOCK_URL_PREFIX = "mock://storage/"


class StorageError(Exception):
    """Raised when storage operations fail."""
    pass


@dataclass
class StorageConfig:
    """
    Configuration for R2/S3-compatible storage.

    public_url is the bucket's public base (custom domain or r2.dev);
    when empty, URLs point at the S3 endpoint instead.
    """
    access_key_id: str
    secret_access_key: str
    bucket_name: str
    endpoint_url: str
    public_url: str = ""
    region: str = "auto"  # R2 uses 'auto' for region


class StorageClient(Protocol):
    """
    Protocol for object storage operations.

    Matches core.training.photos.ObjectStorage; tests can provide mocks and
    we can swap storage backends without changing dependent code.
    """

    async def put_object(
        self,
        data: bytes,
        filename: str,
        content_type: str,
        size: int,
    ) -> str:
        """Upload bytes and return their URL."""
        ...

    async def delete_object(self, url: str) -> None:
        """Delete the object behind a URL."""
        ...


class R2StorageClient:
    """
    Cloudflare R2 object storage client.

    Uses boto3 because R2 is S3-compatible.

    All methods are async to match the Protocol even though boto3 is
    synchronous.
    """

    def __init__(self, config: StorageConfig) -> None:
        """
        Initialize R2 client with boto3.

        boto3 is imported here (not at module level) because mock mode
        doesn't need it.
        """
        import boto3
        from botocore.config import Config

        self._config = config

        # R2 requires v4 signatures
        boto_config = Config(
            signature_version='s3v4',
            s3={'addressing_style': 'path'},
        )

        self._s3_client = boto3.client(
            's3',
            endpoint_url=config.endpoint_url,
            aws_access_key_id=config.access_key_id,
            aws_secret_access_key=config.secret_access_key,
            region_name=config.region,
            config=boto_config,
        )

        logger.info(
            "Initialized R2 storage client",
            extra={
                "bucket": config.bucket_name,
                "endpoint": config.endpoint_url,
            }
        )

    async def put_object(
        self,
        data: bytes,
        filename: str,
        content_type: str,
        size: int,
    ) -> str:
        """
        Upload a photo to R2 storage.

        The key comes from build_object_key, never from the client's file
        name; the original name is kept only as object metadata.
        """
        key = build_object_key(filename)

        try:
            self._s3_client.put_object(
                Bucket=self._config.bucket_name,
                Key=key,
                Body=data,
                ContentType=content_type or 'application/octet-stream',
                ContentLength=size,
                Metadata={
                    'original-filename': filename.encode('ascii', 'ignore').decode() or 'photo',
                }
            )

            logger.debug(
                "Uploaded photo",
                extra={"key": key, "size_bytes": size}
            )

            return self.url_for(key)

        except Exception as e:
            logger.error(
                "Failed to upload photo",
                extra={"key": key, "error": str(e)}
            )
            raise StorageError(f"Upload failed: {e}")

    async def delete_object(self, url: str) -> None:
        """Delete the object a URL points at."""
        key = self.key_for(url)

        try:
            self._s3_client.delete_object(
                Bucket=self._config.bucket_name,
                Key=key,
            )

            logger.debug("Deleted photo", extra={"key": key})

        except Exception as e:
            logger.error(
                "Failed to delete photo",
                extra={"key": key, "error": str(e)}
            )
            raise StorageError(f"Delete failed: {e}")

    def url_for(self, key: str) -> str:
        """Public URL of a key."""
        if self._config.public_url:
            return f"{self._config.public_url.rstrip('/')}/{key}"
        return f"{self._config.endpoint_url.rstrip('/')}/{self._config.bucket_name}/{key}"

    def key_for(self, url: str) -> str:
        """
        Recover the object key from a URL produced by url_for.

        Falls back to the photos/ prefix plus the last path segment for
        URLs built with a different base.
        """
        for base in (
            self._config.public_url.rstrip('/') if self._config.public_url else None,
            f"{self._config.endpoint_url.rstrip('/')}/{self._config.bucket_name}",
        ):
            if base and url.startswith(base + "/"):
                return url[len(base) + 1:]

        name = urlparse(url).path.rsplit('/', 1)[-1]
        return f"photos/{name}"


# ---------------------------------------------------------------------------
# Mock Storage for Local Development
# ---------------------------------------------------------------------------

class MockStorageClient:
    """
    In-memory storage for local development.

    Photos are stored in a dictionary and "URLs" are mock URIs.

    Not suitable for production, but perfect for development and testing.
    """

    def __init__(self) -> None:
        # {key: (content_type, bytes)}
        self._objects: dict[str, tuple[str, bytes]] = {}
        logger.info("Initialized mock storage client (in-memory)")

    async def put_object(
        self,
        data: bytes,
        filename: str,
        content_type: str,
        size: int,
    ) -> str:
        """Store photo in memory."""
        key = build_object_key(filename)
        self._objects[key] = (content_type, data)

        logger.debug(
            "Stored photo in mock storage",
            extra={"key": key, "size_bytes": size}
        )

        return MOCK_URL_PREFIX + key

    async def delete_object(self, url: str) -> None:
        """Delete photo from memory."""
        if not url.startswith(MOCK_URL_PREFIX):
            raise StorageError(f"Not a mock storage URL: {url}")

        key = url[len(MOCK_URL_PREFIX):]
        if self._objects.pop(key, None) is None:
            raise StorageError(f"Object not found: {key}")

        logger.debug("Deleted photo from mock storage", extra={"key": key})

    def get(self, url: str) -> Optional[bytes]:
        """Stored bytes for a mock URL, or None."""
        entry = self._objects.get(url[len(MOCK_URL_PREFIX):])
        return entry[1] if entry else None

    def __len__(self) -> int:
        return len(self._objects)


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_storage_client(
    config: Optional[StorageConfig] = None,
    mock_mode: bool = False,
) -> Optional[StorageClient]:
    """
    Create storage client based on configuration.

    Args:
        config: Storage configuration (None when R2 is not configured)
        mock_mode: If True, return mock client for testing

    Returns:
        StorageClient implementation (R2 or Mock), or None when storage is
        neither mocked nor configured. Callers then record placeholder paths.
    """
    if mock_mode:
        return MockStorageClient()

    if config is None:
        logger.warning("Object storage not configured; photos will use placeholder paths")
        return None

    return R2StorageClient(config)
