from fastapi.testclient import TestClient

from restodesk.main import app


def test_health_endpoint():
    """Health check answers without touching the database."""
    client = TestClient(app)
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
