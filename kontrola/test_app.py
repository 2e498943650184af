# test_app.py
def test_homepage(logged_in_client):
    response = logged_in_client.get("/")
    assert response.status_code == 200
    assert "html" in response.text
    assert "/api/analyze-property-pdf" in response.text
    assert "/api/generate-pdf" in response.text


def test_login_page(client):
    response = client.get("/login")
    assert response.status_code == 200
    assert "/api/auth/login" in response.text


def test_api_errors_use_envelope(client):
    response = client.post("/api/analyze-property-pdf", content=b"not json", headers={"Content-Type": "application/json"})
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Neplatný požadavek"}


def test_unknown_api_route(client):
    response = client.get("/api/unknown")
    assert response.status_code == 404
    assert response.json()["success"] is False

# Run with pytest kontrola/
