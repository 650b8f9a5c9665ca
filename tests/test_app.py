def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert "X-Process-Time" in response.headers

def test_info_lists_resource_groups(client):
    endpoints = client.get("/api/v1/info").json()["endpoints"]
    assert endpoints["appointments"] == "/api/v1/appointments"
    assert endpoints["medical_records"] == "/api/v1/medical-records"

def test_root(client):
    assert client.get("/").json()["health"] == "/health"

def test_unknown_route_uses_failure_body(client):
    response = client.get("/api/v1/nothing-here")
    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Not Found"}

def test_validation_message_names_the_field(client):
    response = client.post("/api/v1/auth/login", json={"email": "not-an-email", "password": "x"})
    assert response.status_code == 400
    assert response.json()["message"].startswith("email:")
