"""
Photo groups and their photo rows.
"""

from collections import defaultdict
from typing import Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from ....core.errors import NotFoundError
from ....core.scope import TrainerScope
from ....core.training.models import Photo, PhotoGroup, as_utc, utcnow
from ..tables import PhotoGroupRow, PhotoRow
from .base import owned_client_ids, require_client

PHOTO_GROUP_NOT_FOUND = "Photo group not found"


class PhotoRepository:
    """PhotoRepository backed by the photo_groups and photos tables."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def ensure_client(self, scope: TrainerScope, client_id: UUID) -> None:
        require_client(self._session, scope, client_id)

    def create_group(self, scope: TrainerScope, client_id: UUID, notes: Optional[str]) -> PhotoGroup:
        require_client(self._session, scope, client_id)
        row = PhotoGroupRow(client_id=client_id, notes=notes)
        self._session.add(row)
        self._session.commit()
        return self._to_domain(row, [])

    def add_photos(self, photos: list[Photo]) -> None:
        self._session.add_all(
            PhotoRow(
                id=photo.id,
                photo_group_id=photo.photo_group_id,
                url=photo.url,
                file_name=photo.file_name,
                file_size=photo.file_size,
                content_type=photo.content_type,
                created_at=as_utc(photo.created_at),
            )
            for photo in photos
        )
        self._session.commit()

    def get_group(self, scope: TrainerScope, group_id: UUID) -> PhotoGroup:
        row = self._session.scalar(
            select(PhotoGroupRow).where(
                PhotoGroupRow.id == group_id,
                PhotoGroupRow.deleted_at.is_(None),
                PhotoGroupRow.client_id.in_(owned_client_ids(scope)),
            )
        )
        if row is None:
            raise NotFoundError(PHOTO_GROUP_NOT_FOUND)
        return self._to_domain(row, self._photos_for([row.id]).get(row.id, []))

    def list_groups(self, scope: TrainerScope, client_id: UUID) -> list[PhotoGroup]:
        """Newest group first, each with its photos in upload order."""
        rows = self._session.scalars(
            select(PhotoGroupRow)
            .where(
                PhotoGroupRow.client_id == client_id,
                PhotoGroupRow.deleted_at.is_(None),
                PhotoGroupRow.client_id.in_(owned_client_ids(scope)),
            )
            .order_by(PhotoGroupRow.created_at.desc())
        ).all()

        photos = self._photos_for([row.id for row in rows])
        return [self._to_domain(row, photos.get(row.id, [])) for row in rows]

    def delete_group(self, scope: TrainerScope, group_id: UUID) -> None:
        """Soft delete the group and its photos in one transaction."""
        now = utcnow()
        result = self._session.execute(
            update(PhotoGroupRow)
            .where(
                PhotoGroupRow.id == group_id,
                PhotoGroupRow.deleted_at.is_(None),
                PhotoGroupRow.client_id.in_(owned_client_ids(scope)),
            )
            .values(deleted_at=now)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self._session.rollback()
            raise NotFoundError(PHOTO_GROUP_NOT_FOUND)

        self._session.execute(
            update(PhotoRow)
            .where(PhotoRow.photo_group_id == group_id, PhotoRow.deleted_at.is_(None))
            .values(deleted_at=now)
            .execution_options(synchronize_session=False)
        )
        self._session.commit()

    def _photos_for(self, group_ids: list[UUID]) -> dict[UUID, list[Photo]]:
        if not group_ids:
            return {}
        rows = self._session.scalars(
            select(PhotoRow)
            .where(PhotoRow.photo_group_id.in_(group_ids), PhotoRow.deleted_at.is_(None))
            .order_by(PhotoRow.created_at)
        ).all()

        photos: dict[UUID, list[Photo]] = defaultdict(list)
        for row in rows:
            photos[row.photo_group_id].append(Photo(
                id=row.id,
                photo_group_id=row.photo_group_id,
                url=row.url,
                file_name=row.file_name,
                file_size=row.file_size,
                content_type=row.content_type,
                created_at=as_utc(row.created_at),
            ))
        return photos

    @staticmethod
    def _to_domain(row: PhotoGroupRow, photos: list[Photo]) -> PhotoGroup:
        return PhotoGroup(
            id=row.id,
            client_id=row.client_id,
            notes=row.notes,
            photos=photos,
            created_at=as_utc(row.created_at),
            updated_at=as_utc(row.updated_at),
        )
