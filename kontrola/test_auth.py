import pytest

from kontrola.auth import password_matches
from kontrola.config import ACCESS_PASSWORD


def test_login_sets_session_cookie(client):
    response = client.post("/api/auth/login", json={"password": ACCESS_PASSWORD})

    assert response.status_code == 200
    assert response.json() == {"success": True}
    cookie = response.headers["set-cookie"]
    assert "session=authenticated" in cookie
    assert "HttpOnly" in cookie
    assert "Max-Age=86400" in cookie
    assert "Path=/" in cookie
    assert "samesite=strict" in cookie.lower()
    assert "Secure" not in cookie


@pytest.mark.parametrize(
    "password",
    ["wrong", ACCESS_PASSWORD.upper(), ACCESS_PASSWORD + " ", "", 12345, None],
)
def test_login_rejects_other_passwords(client, password):
    response = client.post("/api/auth/login", json={"password": password})

    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Nesprávné heslo"}
    assert "set-cookie" not in response.headers


def test_login_with_unparseable_body(client):
    response = client.post("/api/auth/login", content=b"{oops", headers={"Content-Type": "application/json"})
    assert response.status_code == 400


def test_password_matches_exactly():
    assert password_matches(ACCESS_PASSWORD)
    assert not password_matches(ACCESS_PASSWORD.swapcase())
    assert not password_matches(None)


def test_logout_clears_cookie(logged_in_client):
    response = logged_in_client.post("/api/auth/logout")

    assert response.status_code == 200
    assert response.json() == {"success": True}
    cookie = response.headers["set-cookie"]
    assert cookie.startswith("session=")
    assert "Max-Age=0" in cookie


def test_page_without_session_redirects_to_login(client):
    response = client.get("/", follow_redirects=False)
    assert response.status_code == 307
    assert response.headers["location"] == "/login"


def test_forged_cookie_value_is_not_a_session(client):
    client.cookies.set("session", "admin")
    response = client.get("/", follow_redirects=False)
    assert response.status_code == 307


def test_login_page_with_session_redirects_home(logged_in_client):
    response = logged_in_client.get("/login", follow_redirects=False)
    assert response.status_code == 307
    assert response.headers["location"] == "/"


def test_login_flow_opens_homepage(client):
    client.post("/api/auth/login", json={"password": ACCESS_PASSWORD})
    response = client.get("/")
    assert response.status_code == 200
    assert "Kontrola nemovitostí" in response.text


def test_api_routes_are_not_redirected(client):
    response = client.post("/api/analyze-property-pdf", json={}, follow_redirects=False)
    assert response.status_code == 400
    assert response.json()["error"] == "PDF formulář je povinný"
