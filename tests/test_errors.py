"""
Tests for the error translation registered on the app.
"""

from sqlalchemy.exc import OperationalError

from app.crud import job as job_crud


def test_store_failure_is_generic_500(client, monkeypatch):
    def broken(*args, **kwargs):
        raise OperationalError("SELECT * FROM jobs", {}, Exception("could not connect: password=hunter2"))

    monkeypatch.setattr(job_crud, "get_multi", broken)

    response = client.get("/api/v1/jobs/")

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error", "code": "server_error"}
    assert "hunter2" not in response.text
    assert "SELECT" not in response.text


def test_validation_error_is_400(client, operations_headers):
    response = client.post("/api/v1/jobs/", json={"title": 42}, headers=operations_headers)

    assert response.status_code == 400
    assert response.json()["code"] == "validation_error"


def test_app_error_carries_code(client, operations_headers):
    response = client.post("/api/v1/jobs/99999/assign", json={"candidate_id": 1}, headers=operations_headers)

    assert response.status_code == 404
    assert response.json() == {"detail": "Job not found", "code": "job_not_found"}
