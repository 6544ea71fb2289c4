def test_liveness(client):
    response = client.get("/health/")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_database_health(client):
    assert client.get("/health/db-health").json() == {"status": "healthy", "database": "healthy"}


def test_process_time_header(client):
    assert "x-process-time" in client.get("/health/").headers
