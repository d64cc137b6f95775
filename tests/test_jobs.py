"""
Test suite for position endpoints.

Tests cover:
- Job creation and the ability gate
- Job retrieval and listing (filter, pagination, public read)
- Editing policy (status and employee are not editable)
- Deletion
"""

from app.core.config import settings
from app.core.permissions import Role
from app.models.job import Job, JobStatus


def create_job(client, headers, **overrides):
    payload = {"title": "Welder", "department": "Plant A"}
    payload.update(overrides)
    response = client.post("/api/v1/jobs/", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestJobCreation:
    """Tests for job creation endpoint"""

    def test_create_job_success(self, client, operations_headers, sample_job_data):
        response = client.post("/api/v1/jobs/", json=sample_job_data, headers=operations_headers)

        assert response.status_code == 201
        data = response.json()
        assert data["title"] == "Welder"
        assert data["job_number"] == "W-1042"
        assert data["due_date"] == "2026-11-30"
        assert data["status"] == "Open"
        assert data["employee"] is None
        assert data["filled_date"] is None

    def test_create_job_admin_bypass(self, client, admin_headers):
        response = client.post("/api/v1/jobs/", json={"title": "Fitter"}, headers=admin_headers)
        assert response.status_code == 201

    def test_create_job_forbidden_without_ability(self, client, headers):
        for role in (Role.EMPLOYMENT, Role.MANAGER, Role.USER):
            response = client.post("/api/v1/jobs/", json={"title": "Fitter"}, headers=headers[role])
            assert response.status_code == 403
            assert response.json()["detail"] == {"code": "forbidden", "ability": "job_create"}

    def test_create_job_requires_token(self, client, db_session):
        response = client.post("/api/v1/jobs/", json={"title": "Fitter"})
        assert response.status_code == 401
        assert db_session.query(Job).count() == 0

    def test_create_job_missing_title(self, client, operations_headers):
        response = client.post("/api/v1/jobs/", json={"department": "Plant A"}, headers=operations_headers)
        assert response.status_code == 400

    def test_create_job_blank_title(self, client, operations_headers):
        response = client.post("/api/v1/jobs/", json={"title": "   "}, headers=operations_headers)
        assert response.status_code == 400

    def test_create_job_cannot_start_filled(self, client, operations_headers):
        for extra in ({"status": "Filled"}, {"employee": "Jane Doe"}):
            response = client.post(
                "/api/v1/jobs/",
                json={"title": "Fitter", **extra},
                headers=operations_headers,
            )
            assert response.status_code == 400

    def test_create_job_blank_due_date(self, client, operations_headers):
        data = create_job(client, operations_headers, due_date="")
        assert data["due_date"] is None


class TestJobRetrieval:
    """Tests for job retrieval endpoints"""

    def test_get_job_by_id(self, client, operations_headers):
        job = create_job(client, operations_headers)

        response = client.get(f"/api/v1/jobs/{job['id']}")

        assert response.status_code == 200
        assert response.json()["title"] == "Welder"

    def test_get_nonexistent_job(self, client):
        response = client.get("/api/v1/jobs/99999")
        assert response.status_code == 404

    def test_list_jobs_newest_first(self, client, operations_headers):
        ids = [create_job(client, operations_headers, title=f"Job {i}")["id"] for i in range(3)]

        response = client.get("/api/v1/jobs/")

        assert response.status_code == 200
        assert [j["id"] for j in response.json()] == list(reversed(ids))

    def test_list_jobs_status_filter(self, client, db_session, operations_headers):
        open_job = create_job(client, operations_headers, title="Open one")
        filled_job = create_job(client, operations_headers, title="Filled one")
        db_session.query(Job).filter(Job.id == filled_job["id"]).update(
            {"status": JobStatus.FILLED, "employee": "Jane Doe"}
        )
        db_session.commit()

        filled = client.get("/api/v1/jobs/?status=FILLED").json()
        opened = client.get("/api/v1/jobs/?status=open").json()
        everything = client.get("/api/v1/jobs/?status=all").json()

        assert [j["id"] for j in filled] == [filled_job["id"]]
        assert [j["id"] for j in opened] == [open_job["id"]]
        assert len(everything) == 2

    def test_list_jobs_invalid_status(self, client):
        response = client.get("/api/v1/jobs/?status=closed")
        assert response.status_code == 400

    def test_list_jobs_pagination(self, client, operations_headers):
        for i in range(5):
            create_job(client, operations_headers, title=f"Job {i}")

        page = client.get("/api/v1/jobs/?limit=2&offset=1").json()

        assert [j["title"] for j in page] == ["Job 3", "Job 2"]

    def test_list_jobs_limit_bounds(self, client):
        assert client.get("/api/v1/jobs/?limit=501").status_code == 400
        assert client.get("/api/v1/jobs/?limit=0").status_code == 400
        assert client.get("/api/v1/jobs/?offset=-1").status_code == 400
        assert client.get("/api/v1/jobs/?limit=500").status_code == 200

    def test_list_jobs_requires_token_when_not_public(self, client, monkeypatch, user_headers):
        monkeypatch.setattr(settings, "JOBS_PUBLIC_READ", False)

        assert client.get("/api/v1/jobs/").status_code == 401
        assert client.get("/api/v1/jobs/", headers=user_headers).status_code == 200

    def test_public_list_still_rejects_bad_token(self, client):
        response = client.get("/api/v1/jobs/", headers={"Authorization": "Bearer broken"})
        assert response.status_code == 401


class TestJobEdit:
    """Edits change details only, never status or employee"""

    def test_edit_only_sent_fields(self, client, operations_headers, sample_job_data):
        job = client.post("/api/v1/jobs/", json=sample_job_data, headers=operations_headers).json()

        response = client.patch(
            f"/api/v1/jobs/{job['id']}",
            json={"department": "Plant B"},
            headers=operations_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["department"] == "Plant B"
        assert data["title"] == sample_job_data["title"]
        assert data["job_number"] == sample_job_data["job_number"]
        assert data["status"] == "Open"

    def test_edit_clears_field_with_null(self, client, operations_headers, sample_job_data):
        job = client.post("/api/v1/jobs/", json=sample_job_data, headers=operations_headers).json()

        response = client.patch(
            f"/api/v1/jobs/{job['id']}",
            json={"due_date": None},
            headers=operations_headers,
        )

        assert response.status_code == 200
        assert response.json()["due_date"] is None

    def test_edit_status_rejected(self, client, operations_headers):
        job = create_job(client, operations_headers)
        response = client.patch(
            f"/api/v1/jobs/{job['id']}",
            json={"status": "Filled"},
            headers=operations_headers,
        )
        assert response.status_code == 400

    def test_edit_employee_rejected(self, client, operations_headers):
        job = create_job(client, operations_headers)
        response = client.patch(
            f"/api/v1/jobs/{job['id']}",
            json={"employee": "Jane Doe"},
            headers=operations_headers,
        )
        assert response.status_code == 400
        assert client.get(f"/api/v1/jobs/{job['id']}").json()["employee"] is None

    def test_edit_empty_body(self, client, operations_headers):
        job = create_job(client, operations_headers)
        response = client.patch(f"/api/v1/jobs/{job['id']}", json={}, headers=operations_headers)
        assert response.status_code == 400
        assert response.json()["code"] == "no_fields"

    def test_edit_null_title_rejected(self, client, operations_headers):
        job = create_job(client, operations_headers)
        response = client.patch(f"/api/v1/jobs/{job['id']}", json={"title": None}, headers=operations_headers)
        assert response.status_code == 400

    def test_edit_trims_title(self, client, operations_headers):
        job = create_job(client, operations_headers)
        response = client.patch(f"/api/v1/jobs/{job['id']}", json={"title": "  Fitter  "}, headers=operations_headers)
        assert response.status_code == 200
        assert response.json()["title"] == "Fitter"

    def test_edit_blank_title_rejected(self, client, operations_headers):
        job = create_job(client, operations_headers)
        response = client.patch(f"/api/v1/jobs/{job['id']}", json={"title": "   "}, headers=operations_headers)
        assert response.status_code == 400

    def test_edit_filled_date_keeps_job_open(self, client, operations_headers):
        job = create_job(client, operations_headers)
        response = client.patch(
            f"/api/v1/jobs/{job['id']}",
            json={"filled_date": "2026-10-01"},
            headers=operations_headers,
        )
        assert response.status_code == 200
        assert response.json()["filled_date"] == "2026-10-01"
        assert response.json()["status"] == "Open"

    def test_edit_nonexistent_job(self, client, operations_headers):
        response = client.patch("/api/v1/jobs/99999", json={"title": "Nope"}, headers=operations_headers)
        assert response.status_code == 404

    def test_edit_forbidden_for_employment(self, client, operations_headers, employment_headers):
        job = create_job(client, operations_headers)
        response = client.patch(f"/api/v1/jobs/{job['id']}", json={"title": "X"}, headers=employment_headers)
        assert response.status_code == 403
        assert response.json()["detail"]["ability"] == "job_edit"


class TestJobDeletion:
    """Tests for job deletion"""

    def test_delete_job(self, client, operations_headers):
        job = create_job(client, operations_headers)

        response = client.delete(f"/api/v1/jobs/{job['id']}", headers=operations_headers)

        assert response.status_code == 204
        assert client.get(f"/api/v1/jobs/{job['id']}").status_code == 404

    def test_delete_nonexistent_job(self, client, operations_headers):
        response = client.delete("/api/v1/jobs/99999", headers=operations_headers)
        assert response.status_code == 404

    def test_delete_forbidden_for_user(self, client, operations_headers, user_headers):
        job = create_job(client, operations_headers)
        response = client.delete(f"/api/v1/jobs/{job['id']}", headers=user_headers)
        assert response.status_code == 403
