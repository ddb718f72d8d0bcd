"""
Unit tests for the photo upload workflow.

The repository and storage are in-memory fakes implementing the core
protocols, so these tests cover validation order, partial failures and
cleanup without a database or object store.
"""

import asyncio
from typing import Optional
from uuid import UUID, uuid4

import pytest

from ptmate.core.errors import NotFoundError, StorageUnavailableError, ValidationError
from ptmate.core.scope import TrainerScope
from ptmate.core.training.models import Photo, PhotoGroup
from ptmate.core.training.photos import (
    FileStatus,
    PhotoService,
    PhotoUpload,
)
from ptmate.infrastructure.storage import MockStorageClient, StorageError


class FakePhotoRepository:
    """Keeps groups in a dict; knows a fixed set of owned clients."""

    def __init__(self, scope: TrainerScope, client_ids: set[UUID]) -> None:
        self._scope = scope
        self._client_ids = client_ids
        self.groups: dict[UUID, PhotoGroup] = {}
        self.deleted: set[UUID] = set()

    def ensure_client(self, scope: TrainerScope, client_id: UUID) -> None:
        if scope != self._scope or client_id not in self._client_ids:
            raise NotFoundError("Client not found")

    def create_group(self, scope, client_id, notes):
        group = PhotoGroup(client_id=client_id, notes=notes)
        self.groups[group.id] = group
        return group

    def add_photos(self, photos: list[Photo]) -> None:
        for photo in photos:
            self.groups[photo.photo_group_id].photos.append(photo)

    def get_group(self, scope, group_id):
        if group_id not in self.groups or group_id in self.deleted:
            raise NotFoundError("Photo group not found")
        return self.groups[group_id]

    def list_groups(self, scope, client_id):
        return [g for g in self.groups.values() if g.client_id == client_id and g.id not in self.deleted]

    def delete_group(self, scope, group_id):
        self.get_group(scope, group_id)
        self.deleted.add(group_id)


class FlakyStorage(MockStorageClient):
    """Mock storage that refuses files whose name contains 'bad'."""

    async def put_object(self, data, filename, content_type, size):
        if "bad" in filename:
            raise StorageError("Upload failed: connection reset")
        return await super().put_object(data, filename, content_type, size)


def image(name: str, size: int = 10) -> PhotoUpload:
    return PhotoUpload(filename=name, content_type="image/jpeg", data=b"x" * size)


@pytest.fixture
def scope() -> TrainerScope:
    return TrainerScope(trainer_id=uuid4(), email="coach@example.com")


@pytest.fixture
def client_id() -> UUID:
    return uuid4()


@pytest.fixture
def repository(scope, client_id) -> FakePhotoRepository:
    return FakePhotoRepository(scope, {client_id})


def upload(service: PhotoService, scope, client_id, files, notes: Optional[str] = None):
    return asyncio.run(service.upload(scope, client_id, files, notes=notes))


class TestUploadValidation:

    def test_empty_batch_is_rejected(self, repository, scope, client_id):
        service = PhotoService(repository, MockStorageClient())

        with pytest.raises(ValidationError, match="No photos provided"):
            upload(service, scope, client_id, [])

    def test_six_files_are_rejected_before_anything_is_written(self, repository, scope, client_id):
        storage = MockStorageClient()
        service = PhotoService(repository, storage)

        with pytest.raises(ValidationError, match="Maximum 5 photos allowed per upload"):
            upload(service, scope, client_id, [image(f"{i}.jpg") for i in range(6)])

        assert repository.groups == {}
        assert len(storage) == 0

    def test_oversized_batch_is_rejected(self, repository, scope, client_id):
        service = PhotoService(repository, MockStorageClient(), max_total_bytes=100)

        with pytest.raises(ValidationError, match="Total upload size"):
            upload(service, scope, client_id, [image("a.jpg", 60), image("b.jpg", 60)])

        assert repository.groups == {}

    def test_batch_shape_is_checked_without_file_contents(self, repository):
        service = PhotoService(repository, MockStorageClient(), max_files=5, max_total_bytes=100)

        service.check_batch(5, 100)
        with pytest.raises(ValidationError, match="Maximum 5"):
            service.check_batch(6, 0)
        with pytest.raises(ValidationError, match="Total upload size"):
            service.check_batch(1, 101)
        with pytest.raises(ValidationError, match="No photos provided"):
            service.check_batch(0, 0)

    def test_foreign_client_is_not_found(self, repository, scope):
        service = PhotoService(repository, MockStorageClient())

        with pytest.raises(NotFoundError):
            upload(service, scope, uuid4(), [image("a.jpg")])

        assert repository.groups == {}


class TestUpload:

    def test_successful_batch_creates_one_group(self, repository, scope, client_id):
        storage = MockStorageClient()
        service = PhotoService(repository, storage)

        result = upload(service, scope, client_id, [image("front.jpg"), image("side.png")], notes="Week 4")

        assert result.group.notes == "Week 4"
        assert [p.file_name for p in result.group.photos] == ["front.jpg", "side.png"]
        assert all(r.status is FileStatus.UPLOADED for r in result.results)
        assert result.failed == []
        assert len(storage) == 2

    def test_failed_file_is_reported_and_batch_continues(self, repository, scope, client_id):
        service = PhotoService(repository, FlakyStorage())

        result = upload(service, scope, client_id, [image("ok1.jpg"), image("bad.jpg"), image("ok2.jpg")])

        assert [p.file_name for p in result.group.photos] == ["ok1.jpg", "ok2.jpg"]
        assert [r.status for r in result.results] == [
            FileStatus.UPLOADED,
            FileStatus.FAILED,
            FileStatus.UPLOADED,
        ]
        assert result.failed[0].file == "bad.jpg"
        assert "connection reset" in result.failed[0].error

    def test_batch_with_no_stored_file_leaves_no_group(self, repository, scope, client_id):
        service = PhotoService(repository, FlakyStorage())

        with pytest.raises(StorageUnavailableError, match="connection reset"):
            upload(service, scope, client_id, [image("bad1.jpg"), image("bad2.jpg")])

        assert service.list_groups(scope, client_id) == []

    def test_unconfigured_storage_records_placeholder_paths(self, repository, scope, client_id):
        service = PhotoService(repository, storage=None)

        result = upload(service, scope, client_id, [image("front.jpg")])

        url = result.group.photos[0].url
        assert url.startswith("/uploads/photos/")
        assert url.endswith(".jpg")


class TestDeleteGroup:

    def test_delete_removes_stored_objects(self, repository, scope, client_id):
        storage = MockStorageClient()
        service = PhotoService(repository, storage)
        result = upload(service, scope, client_id, [image("a.jpg"), image("b.jpg")])

        asyncio.run(service.delete_group(scope, result.group.id))

        assert len(storage) == 0
        assert service.list_groups(scope, client_id) == []

    def test_storage_errors_do_not_block_deletion(self, repository, scope, client_id):
        storage = MockStorageClient()
        service = PhotoService(repository, storage)
        result = upload(service, scope, client_id, [image("a.jpg")])

        # Object disappears behind our back; delete_object will raise
        asyncio.run(storage.delete_object(result.group.photos[0].url))

        asyncio.run(service.delete_group(scope, result.group.id))
        assert result.group.id in repository.deleted

    def test_unknown_group_is_not_found(self, repository, scope):
        service = PhotoService(repository, MockStorageClient())

        with pytest.raises(NotFoundError):
            asyncio.run(service.delete_group(scope, uuid4()))
