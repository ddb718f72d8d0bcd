"""
API tests for progress photo uploads.
"""

from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import func, select
from starlette.datastructures import UploadFile as StarletteUploadFile

from ptmate.config.settings import Settings
from ptmate.infrastructure.database.tables import PhotoGroupRow
from ptmate.infrastructure.storage import MockStorageClient, StorageError
from ptmate.main import create_app

API = "/api/v1"


def jpeg(name: str, size: int = 64) -> tuple:
    return ("photos", (name, b"\xff\xd8" + b"\x00" * size, "image/jpeg"))


def app_settings(**overrides) -> Settings:
    values = {
        "environment": "development",
        "database_url": "sqlite://",
        "jwt_secret": "api-test-signing-key",
        "r2_mock_mode": True,
        **overrides,
    }
    return Settings(_env_file=None, **values)


def register_with_client(client: TestClient) -> tuple[dict, str]:
    """Register a trainer on a standalone app; return its headers and one client id."""
    token = client.post(f"{API}/auth/register", json={
        "email": "coach@example.com",
        "password": "secret123",
        "first_name": "Deniz",
        "last_name": "Kaya",
    }).json()["token"]
    headers = {"Authorization": f"Bearer {token}"}
    owner = client.post(
        f"{API}/clients",
        json={"first_name": "Ada", "last_name": "Yilmaz"},
        headers=headers,
    ).json()
    return headers, owner["id"]


class UnreachableStorage(MockStorageClient):
    async def put_object(self, data, filename, content_type, size):
        raise StorageError("Upload failed: bucket unreachable")


class TestUpload:

    def test_upload_two_photos(self, app, client, headers, make_client):
        owner = make_client(headers)

        response = client.post(
            f"{API}/clients/{owner['id']}/photos",
            files=[jpeg("front.jpg"), jpeg("side.jpg")],
            data={"notes": "Week 4"},
            headers=headers,
        )

        assert response.status_code == 201, response.text
        body = response.json()
        assert body["notes"] == "Week 4"
        assert body["client_id"] == owner["id"]
        assert sorted(p["file_name"] for p in body["photos"]) == ["front.jpg", "side.jpg"]
        assert all(p["url"].startswith("mock://storage/photos/") for p in body["photos"])
        assert all(p["file_size"] == 66 for p in body["photos"])
        assert [r["status"] for r in body["results"]] == ["uploaded", "uploaded"]

        storage = app.state.storage
        assert len(storage) == 2
        assert storage.get(body["photos"][0]["url"]).startswith(b"\xff\xd8")

    def test_no_files(self, client, headers, make_client):
        owner = make_client(headers)

        response = client.post(
            f"{API}/clients/{owner['id']}/photos",
            data={"notes": "nothing"},
            headers=headers,
        )

        assert response.status_code == 400
        assert response.json() == {"error": "No photos provided"}

    def test_too_many_files_leaves_nothing_behind(self, app, client, headers, make_client):
        owner = make_client(headers)

        response = client.post(
            f"{API}/clients/{owner['id']}/photos",
            files=[jpeg(f"{i}.jpg") for i in range(6)],
            headers=headers,
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Maximum 5 photos allowed per upload"}
        assert len(app.state.storage) == 0
        with app.state.database.session() as session:
            assert session.scalar(select(func.count()).select_from(PhotoGroupRow)) == 0

    def test_other_trainers_client(self, client, headers, other_headers, make_client):
        owner = make_client(headers)

        response = client.post(
            f"{API}/clients/{owner['id']}/photos",
            files=[jpeg("front.jpg")],
            headers=other_headers,
        )

        assert response.status_code == 404
        assert response.json() == {"error": "Client not found"}

    def test_without_storage_photos_get_local_paths(self):
        settings = app_settings(r2_mock_mode=False, r2_account_id="", r2_access_key_id="", r2_secret_access_key="")

        with TestClient(create_app(settings)) as client:
            headers, owner_id = register_with_client(client)

            response = client.post(
                f"{API}/clients/{owner_id}/photos",
                files=[jpeg("front.jpg")],
                headers=headers,
            )

        assert response.status_code == 201
        assert response.json()["photos"][0]["url"].startswith("/uploads/photos/")

    def test_every_file_failing_keeps_no_group(self, app, client, headers, make_client):
        owner = make_client(headers)
        app.state.storage = UnreachableStorage()

        response = client.post(
            f"{API}/clients/{owner['id']}/photos",
            files=[jpeg("front.jpg"), jpeg("side.jpg")],
            headers=headers,
        )

        assert response.status_code == 502
        assert "bucket unreachable" in response.json()["error"]
        assert client.get(f"{API}/clients/{owner['id']}/photos", headers=headers).json() == []


class TestBatchLimitsBeforeReading:
    """Rejected batches are refused on count and declared size alone."""

    @pytest.fixture
    def reads(self, monkeypatch) -> list:
        calls = []
        original = StarletteUploadFile.read

        async def counting_read(self, *args, **kwargs):
            calls.append(self.filename)
            return await original(self, *args, **kwargs)

        monkeypatch.setattr(StarletteUploadFile, "read", counting_read)
        return calls

    def test_six_files_are_never_read(self, client, headers, make_client, reads):
        owner = make_client(headers)

        response = client.post(
            f"{API}/clients/{owner['id']}/photos",
            files=[jpeg(f"{i}.jpg") for i in range(6)],
            headers=headers,
        )

        assert response.status_code == 400
        assert reads == []

    def test_oversized_batch_is_never_read(self, reads):
        with TestClient(create_app(app_settings(max_upload_size_mb=1))) as client:
            headers, owner_id = register_with_client(client)

            response = client.post(
                f"{API}/clients/{owner_id}/photos",
                files=[jpeg("a.jpg", 600 * 1024), jpeg("b.jpg", 600 * 1024)],
                headers=headers,
            )

        assert response.status_code == 400
        assert response.json() == {"error": "Total upload size exceeds 1MB"}
        assert reads == []

    def test_accepted_batch_is_read(self, client, headers, make_client, reads):
        owner = make_client(headers)

        response = client.post(
            f"{API}/clients/{owner['id']}/photos",
            files=[jpeg("front.jpg")],
            headers=headers,
        )

        assert response.status_code == 201
        assert reads == ["front.jpg"]


class TestGroups:

    def _upload(self, client, headers, client_id, *names, notes=None):
        response = client.post(
            f"{API}/clients/{client_id}/photos",
            files=[jpeg(name) for name in names],
            data={"notes": notes} if notes else None,
            headers=headers,
        )
        assert response.status_code == 201, response.text
        return response.json()

    def test_list_newest_first(self, client, headers, make_client):
        owner = make_client(headers)
        first = self._upload(client, headers, owner["id"], "a.jpg", notes="Start")
        second = self._upload(client, headers, owner["id"], "b.jpg", "c.jpg", notes="Month 1")

        groups = client.get(f"{API}/clients/{owner['id']}/photos", headers=headers).json()

        assert [g["id"] for g in groups] == [second["id"], first["id"]]
        assert len(groups[0]["photos"]) == 2
        assert "results" not in groups[0]

    def test_delete_group_removes_files(self, app, client, headers, make_client):
        owner = make_client(headers)
        group = self._upload(client, headers, owner["id"], "a.jpg", "b.jpg")

        response = client.delete(f"{API}/photo-groups/{group['id']}", headers=headers)

        assert response.status_code == 200
        assert response.json() == {"message": "Photo group deleted successfully"}
        assert len(app.state.storage) == 0
        assert client.get(f"{API}/clients/{owner['id']}/photos", headers=headers).json() == []
        assert client.delete(f"{API}/photo-groups/{group['id']}", headers=headers).status_code == 404

    def test_other_trainer_cannot_see_or_delete(self, client, headers, other_headers, make_client):
        owner = make_client(headers)
        group = self._upload(client, headers, owner["id"], "a.jpg")

        assert client.get(f"{API}/clients/{owner['id']}/photos", headers=other_headers).status_code == 404
        assert client.delete(f"{API}/photo-groups/{group['id']}", headers=other_headers).status_code == 404
        assert len(client.get(f"{API}/clients/{owner['id']}/photos", headers=headers).json()) == 1

    def test_unknown_group(self, client, headers):
        response = client.delete(f"{API}/photo-groups/{uuid4()}", headers=headers)

        assert response.status_code == 404
        assert response.json() == {"error": "Photo group not found"}