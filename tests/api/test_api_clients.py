"""
API tests for the client registry and package accounting.
"""

from uuid import UUID, uuid4

from sqlalchemy import select

from ptmate.infrastructure.database.tables import ClientRow

API = "/api/v1"


class TestClientCrud:

    def test_new_trainer_has_no_clients(self, client, headers):
        response = client.get(f"{API}/clients", headers=headers)

        assert response.status_code == 200
        assert response.json() == []

    def test_create_client_with_defaults(self, client, headers, make_client):
        created = make_client(headers, phone="+90 555 000 0000")

        assert created["first_name"] == "Ada"
        assert created["total_package_size"] == 0
        assert created["remaining_sessions"] == 0
        assert created["completed_sessions"] == 0
        assert created["phone"] == "+90 555 000 0000"
        assert created["email"] is None

    def test_create_requires_names(self, client, headers):
        response = client.post(f"{API}/clients", json={"first_name": "Ada"}, headers=headers)

        assert response.status_code == 400
        assert "last_name" in response.json()["error"]

    def test_negative_package_is_rejected(self, client, headers):
        response = client.post(
            f"{API}/clients",
            json={"first_name": "Ada", "last_name": "Yilmaz", "total_package_size": -1},
            headers=headers,
        )
        assert response.status_code == 400

    def test_list_is_newest_first(self, client, headers, make_client):
        first = make_client(headers, first_name="First")
        second = make_client(headers, first_name="Second")

        ids = [c["id"] for c in client.get(f"{API}/clients", headers=headers).json()]

        assert ids == [second["id"], first["id"]]

    def test_get_client(self, client, headers, make_client):
        created = make_client(headers, total_package_size=12, notes="Knee injury in 2024")

        response = client.get(f"{API}/clients/{created['id']}", headers=headers)

        assert response.status_code == 200
        assert response.json()["notes"] == "Knee injury in 2024"
        assert response.json()["remaining_sessions"] == 12

    def test_malformed_id_is_bad_request(self, client, headers):
        response = client.get(f"{API}/clients/not-a-uuid", headers=headers)

        assert response.status_code == 400
        assert "error" in response.json()

    def test_unknown_id_is_not_found(self, client, headers):
        response = client.get(f"{API}/clients/{uuid4()}", headers=headers)

        assert response.status_code == 404
        assert response.json() == {"error": "Client not found"}


class TestPartialUpdate:

    def test_updating_notes_leaves_other_fields(self, client, headers, make_client):
        created = make_client(
            headers,
            phone="555-0101",
            email="ada@example.com",
            total_package_size=10,
            package_start_date="2026-01-05",
        )

        response = client.put(f"{API}/clients/{created['id']}", json={"notes": "Prefers mornings"}, headers=headers)

        assert response.status_code == 200
        updated = response.json()
        assert updated["notes"] == "Prefers mornings"
        for field in ("first_name", "last_name", "phone", "email", "total_package_size", "package_start_date"):
            assert updated[field] == created[field]

    def test_explicit_null_clears_optional_field(self, client, headers, make_client):
        created = make_client(headers, phone="555-0101")

        response = client.put(f"{API}/clients/{created['id']}", json={"phone": None}, headers=headers)

        assert response.status_code == 200
        assert response.json()["phone"] is None

    def test_explicit_null_on_required_field_is_rejected(self, client, headers, make_client):
        created = make_client(headers)

        response = client.put(f"{API}/clients/{created['id']}", json={"first_name": None}, headers=headers)

        assert response.status_code == 400
        assert client.get(f"{API}/clients/{created['id']}", headers=headers).json()["first_name"] == "Ada"


class TestOwnership:

    def test_other_trainers_client_is_not_found(self, client, headers, other_headers, make_client):
        created = make_client(headers)
        url = f"{API}/clients/{created['id']}"

        assert client.get(url, headers=other_headers).status_code == 404
        assert client.put(url, json={"notes": "mine now"}, headers=other_headers).status_code == 404
        assert client.delete(url, headers=other_headers).status_code == 404
        assert client.get(f"{API}/clients", headers=other_headers).json() == []

        # Still intact for the owner
        assert client.get(url, headers=headers).json()["notes"] is None


class TestSoftDelete:

    def test_deleted_client_disappears_but_row_remains(self, app, client, headers, make_client):
        created = make_client(headers)
        url = f"{API}/clients/{created['id']}"

        response = client.delete(url, headers=headers)

        assert response.status_code == 200
        assert response.json() == {"message": "Client deleted successfully"}
        assert client.get(url, headers=headers).status_code == 404
        assert client.get(f"{API}/clients", headers=headers).json() == []
        assert client.delete(url, headers=headers).status_code == 404

        with app.state.database.session() as session:
            row = session.scalar(select(ClientRow).where(ClientRow.id == UUID(created["id"])))
            assert row is not None
            assert row.deleted_at is not None


class TestPackageAccounting:

    def test_remaining_sessions_follow_statuses(self, client, headers, make_client, make_session):
        """Package 10 with completed x6, no_show x1, cancelled x2, scheduled x1 leaves 3."""
        created = make_client(headers, total_package_size=10)
        statuses = ["completed"] * 6 + ["no_show"] + ["cancelled"] * 2 + ["scheduled"]

        for day, status in enumerate(statuses, start=1):
            session = make_session(headers, created["id"], f"2026-02-{day:02d}T09:00:00Z")
            if status != "scheduled":
                response = client.patch(
                    f"{API}/sessions/{session['id']}/status",
                    json={"status": status},
                    headers=headers,
                )
                assert response.status_code == 200

        body = client.get(f"{API}/clients/{created['id']}", headers=headers).json()

        assert body["completed_sessions"] == 6
        assert body["no_show_sessions"] == 1
        assert body["cancelled_sessions"] == 2
        assert body["scheduled_sessions"] == 1
        assert body["remaining_sessions"] == 3

        listed = client.get(f"{API}/clients", headers=headers).json()
        assert listed[0]["remaining_sessions"] == 3

    def test_overuse_is_negative(self, client, headers, make_client, make_session):
        created = make_client(headers, total_package_size=1)
        for day in (1, 2):
            session = make_session(headers, created["id"], f"2026-02-0{day}T09:00:00Z")
            client.patch(f"{API}/sessions/{session['id']}/status", json={"status": "completed"}, headers=headers)

        body = client.get(f"{API}/clients/{created['id']}", headers=headers).json()
        assert body["remaining_sessions"] == -1

    def test_deleted_sessions_do_not_count(self, client, headers, make_client, make_session):
        created = make_client(headers, total_package_size=5)
        session = make_session(headers, created["id"], "2026-02-01T09:00:00Z")
        client.patch(f"{API}/sessions/{session['id']}/status", json={"status": "completed"}, headers=headers)

        client.delete(f"{API}/sessions/{session['id']}", headers=headers)

        body = client.get(f"{API}/clients/{created['id']}", headers=headers).json()
        assert body["completed_sessions"] == 0
        assert body["remaining_sessions"] == 5
