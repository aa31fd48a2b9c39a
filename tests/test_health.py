"""
Tests for the health check endpoints.
"""


def test_root_reports_healthy(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json() == {
        "status": "healthy",
        "service": "Example Web API",
        "version": "1.0.0",
    }


def test_health_reports_pet_service(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {
        "status": "healthy",
        "pet_service": "PlaceholderPetService",
    }


def test_health_reflects_overridden_service(client, recording_service):
    response = client.get("/health")

    assert response.json()["pet_service"] == "RecordingPetService"
