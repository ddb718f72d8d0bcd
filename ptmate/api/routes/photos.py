"""
Progress photo endpoints.

Photos are uploaded as multipart/form-data: up to five files in the
`photos` field plus an optional `notes` field shared by the group.
"""

import logging
from datetime import datetime
from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, File, Form, UploadFile, status
from pydantic import BaseModel, Field

from ...core.training.models import PhotoGroup
from ...core.training.photos import PhotoUpload, UploadResult
from ..dependencies import CurrentTrainer, PhotoServiceDep

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------

class PhotoResponse(BaseModel):
    id: UUID
    photo_group_id: UUID
    url: str
    file_name: str
    file_size: int
    content_type: str
    created_at: datetime


class PhotoGroupResponse(BaseModel):
    id: UUID
    client_id: UUID
    notes: Optional[str] = None
    photos: list[PhotoResponse]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, group: PhotoGroup) -> "PhotoGroupResponse":
        return cls(
            id=group.id,
            client_id=group.client_id,
            notes=group.notes,
            photos=[
                PhotoResponse(
                    id=photo.id,
                    photo_group_id=photo.photo_group_id,
                    url=photo.url,
                    file_name=photo.file_name,
                    file_size=photo.file_size,
                    content_type=photo.content_type,
                    created_at=photo.created_at,
                )
                for photo in group.photos
            ],
            created_at=group.created_at,
            updated_at=group.updated_at,
        )


class FileResultResponse(BaseModel):
    file: str
    status: str = Field(description="uploaded or failed")
    error: Optional[str] = None


class UploadResponse(PhotoGroupResponse):
    """The new group (successful files only) plus what happened to each file."""
    results: list[FileResultResponse]

    @classmethod
    def from_result(cls, result: UploadResult) -> "UploadResponse":
        group = PhotoGroupResponse.from_domain(result.group)
        return cls(
            **group.model_dump(),
            results=[
                FileResultResponse(file=r.file, status=r.status.value, error=r.error)
                for r in result.results
            ],
        )


class MessageResponse(BaseModel):
    message: str


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get(
    "/clients/{client_id}/photos",
    response_model=list[PhotoGroupResponse],
    summary="Photo groups of a client, newest first",
)
def list_photo_groups(
    client_id: UUID,
    trainer: CurrentTrainer,
    photos: PhotoServiceDep,
) -> list[PhotoGroupResponse]:
    return [PhotoGroupResponse.from_domain(g) for g in photos.list_groups(trainer, client_id)]


@router.post(
    "/clients/{client_id}/photos",
    response_model=UploadResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload progress photos",
    description="Upload 1-5 images as one group. Files that fail to store are reported in `results`.",
)
async def upload_photos(
    client_id: UUID,
    trainer: CurrentTrainer,
    service: PhotoServiceDep,
    photos: Annotated[Optional[list[UploadFile]], File(description="Images (JPEG/PNG/HEIC)")] = None,
    notes: Annotated[Optional[str], Form()] = None,
) -> UploadResponse:
    files = photos or []

    logger.info(
        "Receiving photo upload",
        extra={"client_id": str(client_id), "file_count": len(files)}
    )

    # Spooled files report their size, so the batch limits apply before any read
    service.check_batch(len(files), sum(f.size or 0 for f in files))

    uploads = [
        PhotoUpload(
            filename=f.filename or "photo",
            content_type=f.content_type or "application/octet-stream",
            data=await f.read(),
        )
        for f in files
    ]

    result = await service.upload(trainer, client_id, uploads, notes=notes or None)
    return UploadResponse.from_result(result)


@router.delete(
    "/photo-groups/{group_id}",
    response_model=MessageResponse,
    summary="Delete a photo group and its photos",
)
async def delete_photo_group(
    group_id: UUID,
    trainer: CurrentTrainer,
    service: PhotoServiceDep,
) -> MessageResponse:
    await service.delete_group(trainer, group_id)
    return MessageResponse(message="Photo group deleted successfully")
