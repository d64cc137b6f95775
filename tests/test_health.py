"""
Tests for health and root endpoints.
"""


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_detailed_health_reports_job_counts(client, operations_headers):
    client.post("/api/v1/jobs/", json={"title": "Welder"}, headers=operations_headers)

    response = client.get("/health/detailed")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["checks"]["database"]["status"] == "healthy"
    assert data["checks"]["jobs"] == {"open": 1, "filled": 0}
