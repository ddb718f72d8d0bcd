"""
Progress photo groups.

A trainer uploads up to five photos at once with a shared note. The bytes
go to object storage; the database only keeps the resulting URLs. Uploads
run one file at a time, and a failing file is reported back to the caller
instead of aborting the rest of the batch.
"""

import logging
import os
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol
from uuid import UUID, uuid4

from ..errors import StorageUnavailableError, ValidationError
from ..scope import TrainerScope
from .models import Photo, PhotoGroup

logger = logging.getLogger(__name__)

MAX_PHOTOS_PER_UPLOAD = 5
MAX_UPLOAD_BYTES = 50 * 1024 * 1024

PLACEHOLDER_PREFIX = "/uploads/"


def build_object_key(filename: str, now: Optional[float] = None) -> str:
    """
    Storage key for an uploaded photo.

    Keys are photos/<uuid>_<unix seconds><ext>. Only the extension of the
    user's file name is kept, so two uploads of "IMG_0001.jpg" never collide.
    """
    ext = os.path.splitext(filename or "")[1].lower()
    stamp = int(now if now is not None else time.time())
    return f"photos/{uuid4().hex}_{stamp}{ext}"


# ---------------------------------------------------------------------------
# Protocols (interfaces)
# ---------------------------------------------------------------------------

class ObjectStorage(Protocol):
    """Binary storage for photo files."""

    async def put_object(
        self,
        data: bytes,
        filename: str,
        content_type: str,
        size: int,
    ) -> str:
        """Store the bytes and return a URL for them."""
        ...

    async def delete_object(self, url: str) -> None:
        """Remove the object behind a URL returned by put_object."""
        ...


class PhotoRepository(Protocol):
    """Persistence for photo groups, scoped to the owning trainer."""

    def ensure_client(self, scope: TrainerScope, client_id: UUID) -> None:
        """Raise NotFoundError unless the client is live and owned by scope."""
        ...

    def create_group(self, scope: TrainerScope, client_id: UUID, notes: Optional[str]) -> PhotoGroup:
        ...

    def add_photos(self, photos: list[Photo]) -> None:
        ...

    def get_group(self, scope: TrainerScope, group_id: UUID) -> PhotoGroup:
        ...

    def list_groups(self, scope: TrainerScope, client_id: UUID) -> list[PhotoGroup]:
        ...

    def delete_group(self, scope: TrainerScope, group_id: UUID) -> None:
        ...


# ---------------------------------------------------------------------------
# Upload results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PhotoUpload:
    """One file from a multipart upload."""
    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


class FileStatus(Enum):
    UPLOADED = "uploaded"
    FAILED = "failed"


@dataclass(frozen=True)
class FileResult:
    """What happened to one file of a batch."""
    file: str
    status: FileStatus
    error: Optional[str] = None


@dataclass
class UploadResult:
    """The stored group (successful files only) plus a per-file report."""
    group: PhotoGroup
    results: list[FileResult]

    @property
    def failed(self) -> list[FileResult]:
        return [r for r in self.results if r.status is FileStatus.FAILED]


class PhotoService:
    """
    Upload, list and delete progress photo groups.

    storage may be None when object storage is not configured; photos are
    then recorded under a placeholder local path instead of being rejected.
    """

    def __init__(
        self,
        repository: PhotoRepository,
        storage: Optional[ObjectStorage],
        max_files: int = MAX_PHOTOS_PER_UPLOAD,
        max_total_bytes: int = MAX_UPLOAD_BYTES,
    ) -> None:
        self._repository = repository
        self._storage = storage
        self._max_files = max_files
        self._max_total_bytes = max_total_bytes

    def check_batch(self, file_count: int, total_size: int) -> None:
        """
        Reject a batch by its shape alone.

        Callers holding unread uploads run this first so an oversized
        batch is refused before any bytes are read.
        """
        if file_count == 0:
            raise ValidationError("No photos provided")
        if file_count > self._max_files:
            raise ValidationError(f"Maximum {self._max_files} photos allowed per upload")
        if total_size > self._max_total_bytes:
            limit_mb = self._max_total_bytes // (1024 * 1024)
            raise ValidationError(f"Total upload size exceeds {limit_mb}MB")

    def list_groups(self, scope: TrainerScope, client_id: UUID) -> list[PhotoGroup]:
        self._repository.ensure_client(scope, client_id)
        return self._repository.list_groups(scope, client_id)

    async def upload(
        self,
        scope: TrainerScope,
        client_id: UUID,
        files: list[PhotoUpload],
        notes: Optional[str] = None,
    ) -> UploadResult:
        """
        Store a batch of photos as one group.

        All validation happens before the group row is written, so a
        rejected batch leaves nothing behind.
        """
        self.check_batch(len(files), sum(f.size for f in files))

        self._repository.ensure_client(scope, client_id)

        group = self._repository.create_group(scope, client_id, notes)

        photos: list[Photo] = []
        results: list[FileResult] = []

        for upload in files:
            try:
                url = await self._store(upload)
            except Exception as e:
                logger.warning(
                    "Photo upload failed",
                    extra={
                        "group_id": str(group.id),
                        "file_name": upload.filename,
                        "error": str(e),
                    }
                )
                results.append(FileResult(
                    file=upload.filename,
                    status=FileStatus.FAILED,
                    error=str(e),
                ))
                continue

            photos.append(Photo(
                photo_group_id=group.id,
                url=url,
                file_name=upload.filename,
                file_size=upload.size,
                content_type=upload.content_type,
            ))
            results.append(FileResult(file=upload.filename, status=FileStatus.UPLOADED))

        if not photos:
            self._repository.delete_group(scope, group.id)
            logger.error(
                "Photo upload failed for every file",
                extra={"client_id": str(client_id), "file_count": len(files)}
            )
            raise StorageUnavailableError(f"No photos could be stored: {results[0].error}")

        self._repository.add_photos(photos)

        logger.info(
            "Photo group uploaded",
            extra={
                "group_id": str(group.id),
                "client_id": str(client_id),
                "uploaded": len(photos),
                "failed": len(files) - len(photos),
            }
        )

        return UploadResult(
            group=self._repository.get_group(scope, group.id),
            results=results,
        )

    async def delete_group(self, scope: TrainerScope, group_id: UUID) -> None:
        """
        Delete a group, its photo rows and (best effort) the stored files.

        Storage errors are logged and ignored; the rows go regardless.
        """
        group = self._repository.get_group(scope, group_id)

        if self._storage is not None:
            for photo in group.photos:
                if photo.url.startswith(PLACEHOLDER_PREFIX):
                    continue
                try:
                    await self._storage.delete_object(photo.url)
                except Exception as e:
                    logger.warning(
                        "Failed to delete stored photo",
                        extra={"photo_id": str(photo.id), "error": str(e)}
                    )

        self._repository.delete_group(scope, group_id)

        logger.info(
            "Photo group deleted",
            extra={"group_id": str(group_id), "photo_count": len(group.photos)}
        )

    async def _store(self, upload: PhotoUpload) -> str:
        if self._storage is None:
            return PLACEHOLDER_PREFIX + build_object_key(upload.filename)
        return await self._storage.put_object(
            data=upload.data,
            filename=upload.filename,
            content_type=upload.content_type,
            size=upload.size,
        )
