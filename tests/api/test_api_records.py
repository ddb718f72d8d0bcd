"""
API tests for measurements and fitness assessments.
"""

from uuid import uuid4

API = "/api/v1"


class TestMeasurements:

    def test_record_and_read_back(self, client, headers, make_client):
        owner = make_client(headers)

        response = client.post(f"{API}/clients/{owner['id']}/measurements", json={
            "weight_kg": 72.5,
            "body_fat_percent": 21.0,
            "measured_at": "2026-02-01T08:00:00Z",
            "notes": "Fasted",
        }, headers=headers)

        assert response.status_code == 201
        body = response.json()
        assert body["weight_kg"] == 72.5
        assert body["height_cm"] is None
        assert body["client_id"] == owner["id"]

        fetched = client.get(f"{API}/measurements/{body['id']}", headers=headers).json()
        assert fetched == body

    def test_empty_measurement_defaults_to_now(self, client, headers, make_client):
        owner = make_client(headers)

        response = client.post(f"{API}/clients/{owner['id']}/measurements", json={}, headers=headers)

        assert response.status_code == 201
        assert response.json()["measured_at"]

    def test_history_is_newest_first(self, client, headers, make_client):
        owner = make_client(headers)
        url = f"{API}/clients/{owner['id']}/measurements"
        for day in ("2026-01-01", "2026-03-01", "2026-02-01"):
            client.post(url, json={"weight_kg": 70, "measured_at": f"{day}T08:00:00Z"}, headers=headers)

        history = client.get(url, headers=headers).json()

        assert [m["measured_at"][:10] for m in history] == ["2026-03-01", "2026-02-01", "2026-01-01"]

    def test_body_fat_above_hundred_is_rejected(self, client, headers, make_client):
        owner = make_client(headers)

        response = client.post(
            f"{API}/clients/{owner['id']}/measurements",
            json={"body_fat_percent": 120},
            headers=headers,
        )

        assert response.status_code == 400

    def test_delete(self, client, headers, make_client):
        owner = make_client(headers)
        created = client.post(f"{API}/clients/{owner['id']}/measurements", json={"waist_cm": 80}, headers=headers).json()

        response = client.delete(f"{API}/measurements/{created['id']}", headers=headers)

        assert response.json() == {"message": "Measurement deleted successfully"}
        assert client.get(f"{API}/measurements/{created['id']}", headers=headers).status_code == 404
        assert client.get(f"{API}/clients/{owner['id']}/measurements", headers=headers).json() == []

    def test_other_trainer_sees_nothing(self, client, headers, other_headers, make_client):
        owner = make_client(headers)
        created = client.post(f"{API}/clients/{owner['id']}/measurements", json={"hip_cm": 95}, headers=headers).json()

        assert client.get(f"{API}/clients/{owner['id']}/measurements", headers=other_headers).status_code == 404
        assert client.post(f"{API}/clients/{owner['id']}/measurements", json={}, headers=other_headers).status_code == 404
        assert client.get(f"{API}/measurements/{created['id']}", headers=other_headers).status_code == 404
        assert client.delete(f"{API}/measurements/{created['id']}", headers=other_headers).status_code == 404

    def test_unknown_client(self, client, headers):
        response = client.get(f"{API}/clients/{uuid4()}/measurements", headers=headers)
        assert response.json() == {"error": "Client not found"}


class TestAssessments:

    def _create(self, client, headers, client_id, **fields):
        response = client.post(f"{API}/clients/{client_id}/assessments", json=fields, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()

    def test_total_and_level_are_derived(self, client, headers, make_client):
        owner = make_client(headers)

        body = self._create(
            client, headers, owner["id"],
            posture_head_neck=2,
            posture_shoulders=3,
            posture_lphc=2,
            posture_knee=2,
            posture_foot=1,
            squat_knees_in=1,
        )

        assert body["total_score"] == 10
        assert body["score_level"] == "fair"
        assert body["parq_flagged"] is False
        assert body["squat_knees_in"] == 1
        assert body["pushup_form"] is None

    def test_unscored_assessment_is_poor(self, client, headers, make_client):
        owner = make_client(headers)

        body = self._create(client, headers, owner["id"])

        assert body["total_score"] == 0
        assert body["score_level"] == "poor"

    def test_any_parq_yes_flags_assessment(self, client, headers, make_client):
        owner = make_client(headers)

        body = self._create(client, headers, owner["id"], parq_medication=True)

        assert body["parq_flagged"] is True
        assert body["parq_heart_problem"] is False

    def test_score_out_of_range_is_rejected(self, client, headers, make_client):
        owner = make_client(headers)

        response = client.post(
            f"{API}/clients/{owner['id']}/assessments",
            json={"posture_knee": 4},
            headers=headers,
        )

        assert response.status_code == 400
        assert "posture_knee" in response.json()["error"]

    def test_sparse_update_keeps_other_answers(self, client, headers, make_client):
        owner = make_client(headers)
        created = self._create(
            client, headers, owner["id"],
            posture_head_neck=3, posture_shoulders=3, posture_lphc=3, posture_knee=3, posture_foot=3,
            parq_bone_joint=True, notes="Baseline",
        )
        assert created["score_level"] == "good"

        response = client.put(
            f"{API}/assessments/{created['id']}",
            json={"posture_foot": 1, "notes": "Flat feet"},
            headers=headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["posture_foot"] == 1
        assert body["posture_head_neck"] == 3
        assert body["parq_bone_joint"] is True
        assert body["notes"] == "Flat feet"
        assert body["total_score"] == 13

    def test_clearing_a_score(self, client, headers, make_client):
        owner = make_client(headers)
        created = self._create(client, headers, owner["id"], posture_knee=2)

        body = client.put(f"{API}/assessments/{created['id']}", json={"posture_knee": None}, headers=headers).json()

        assert body["posture_knee"] is None
        assert body["total_score"] == 0

    def test_null_parq_answer_is_rejected(self, client, headers, make_client):
        owner = make_client(headers)
        created = self._create(client, headers, owner["id"])

        response = client.put(f"{API}/assessments/{created['id']}", json={"parq_dizziness": None}, headers=headers)

        assert response.status_code == 400

    def test_history_keeps_every_assessment(self, client, headers, make_client):
        owner = make_client(headers)
        first = self._create(client, headers, owner["id"], notes="January")
        second = self._create(client, headers, owner["id"], notes="March")

        history = client.get(f"{API}/clients/{owner['id']}/assessments", headers=headers).json()

        assert [a["id"] for a in history] == [second["id"], first["id"]]

    def test_delete(self, client, headers, make_client):
        owner = make_client(headers)
        created = self._create(client, headers, owner["id"])
        url = f"{API}/assessments/{created['id']}"

        assert client.delete(url, headers=headers).json() == {"message": "Assessment deleted successfully"}
        assert client.get(url, headers=headers).json() == {"error": "Assessment not found"}

    def test_other_trainer_cannot_reach_assessment(self, client, headers, other_headers, make_client):
        owner = make_client(headers)
        created = self._create(client, headers, owner["id"])
        url = f"{API}/assessments/{created['id']}"

        assert client.get(url, headers=other_headers).status_code == 404
        assert client.put(url, json={"notes": "x"}, headers=other_headers).status_code == 404
        assert client.delete(url, headers=other_headers).status_code == 404
