import pytest
import requests

from conftest import login_as


def test_login_page_renders(client, backend):
    response = client.get("/login")
    content = response.content.decode()

    assert response.status_code == 200
    assert "TCZ Anmeldung" in content
    assert "E-Mail" in content
    assert "Passwort" in content


def test_login_redirects_to_dashboard(client, backend):
    login_as(client, backend)

    call = backend.called("POST", "/auth/login/api")[-1]
    assert call.json == {"email": "max@example.com", "password": "geheim123"}

    response = client.get("/dashboard")
    assert response.status_code == 200
    assert "Hallo, Max!" in response.content.decode()
    assert backend.called("GET", "/api/members/me")[-1].headers["Authorization"] == "Bearer token-123"


def test_invalid_credentials_show_backend_message(client, backend):
    backend.add("POST", "/auth/login/api", {"error": "Ungültige E-Mail oder Passwort"}, status=401)

    response = client.post("/login", {"email": "max@example.com", "password": "falsch"})

    assert response.status_code == 200
    assert "Ungültige E-Mail oder Passwort" in response.content.decode()


def test_login_error_without_message_uses_fallback(client, backend):
    backend.add("POST", "/auth/login/api", {"detail": "nope"}, status=401)

    content = client.post("/login", {"email": "max@example.com", "password": "falsch"}).content.decode()

    assert "Anmeldung fehlgeschlagen" in content
    assert "HTTP 401" not in content


def test_unreachable_backend_shows_login_error(client, backend):
    backend.fail("POST", "/auth/login/api", requests.exceptions.ConnectionError("refused"))

    response = client.post("/login", {"email": "max@example.com", "password": "geheim123"})

    assert response.status_code == 200
    assert "Anmeldung fehlgeschlagen" in response.content.decode()


def test_login_requires_valid_email(client, backend):
    response = client.post("/login", {"email": "kein-email", "password": "x"})

    assert response.status_code == 200
    assert not backend.called("POST", "/auth/login/api")


def test_logged_in_member_skips_login_page(member_client):
    response = member_client.get("/login")
    assert response.status_code == 302
    assert response.url == "/dashboard"


def test_logout_clears_session(member_client, backend):
    backend.add("POST", "/auth/logout/api", {"message": "ok"})

    response = member_client.post("/logout")

    assert response.status_code == 302
    assert response.url == "/login"
    assert backend.called("POST", "/auth/logout/api")
    assert member_client.get("/dashboard").url == "/login"


def test_logout_survives_backend_failure(member_client, backend):
    backend.add("POST", "/auth/logout/api", {"error": "boom"}, status=500)

    response = member_client.post("/logout")

    assert response.url == "/login"
    assert member_client.get("/dashboard").url == "/login"


def test_logout_requires_post(member_client):
    assert member_client.get("/logout").status_code == 405


@pytest.mark.parametrize("path", [
    "/dashboard",
    "/reservations",
    "/favourites",
    "/profile",
    "/statistics",
    "/bookings/conflict",
    "/admin/blocks",
])
def test_protected_pages_redirect_to_login(client, backend, path):
    response = client.get(path)
    assert response.status_code == 302
    assert response.url == "/login"


def test_root_sends_visitors_to_overview(client, backend):
    assert client.get("/").url == "/overview"


def test_root_sends_members_to_dashboard(member_client):
    assert member_client.get("/").url == "/dashboard"


def test_public_overview_is_read_only(client, backend):
    response = client.get("/overview")
    content = response.content.decode()

    assert response.status_code == 200
    assert 'data-testid="court-1"' in content
    assert 'data-testid="court-6"' in content
    assert "court=1&amp;time" not in content
    assert "Anmelden" in content


def test_rejected_token_logs_member_out(member_client, backend):
    backend.add("GET", "/api/members/me", {"error": "Token expired"}, status=401)

    response = member_client.get("/dashboard")

    assert response.status_code == 302
    assert response.url == "/login"


def test_session_expiry_during_use_redirects_to_login(member_client, backend):
    backend.add("GET", "/api/reservations/status", {"error": "Token expired"}, status=401)

    response = member_client.get("/dashboard", follow=True)
    content = response.content.decode()

    assert response.redirect_chain[-1][0] == "/login"
    assert "Deine Sitzung ist abgelaufen" in content
    assert member_client.get("/dashboard").url == "/login"


def test_navigation_shows_member_menu(member_client):
    content = member_client.get("/dashboard").content.decode()

    assert 'data-testid="user-menu-button"' in content
    assert "Profil" in content
    assert "Abmelden" in content
    assert "Platzsperrungen" not in content


def test_unverified_email_banner(client, backend):
    login_as(client, backend, email_verified=False)
    content = client.get("/dashboard").content.decode()
    assert "E-Mail-Adresse nicht bestätigt" in content