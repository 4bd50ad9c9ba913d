import pytest


@pytest.fixture
def favourites_backend(backend):
    backend.add("GET", "/api/members/me/favourites", {"favourites": [
        {"id": "m-2", "firstname": "Erika", "lastname": "Muster"},
    ]})
    backend.add("GET", "/api/members/search", {"results": [
        {"id": "m-1", "firstname": "Max", "lastname": "Mustermann"},
        {"id": "m-2", "firstname": "Erika", "lastname": "Muster"},
        {"id": "m-3", "firstname": "Erich", "lastname": "Berger"},
    ]})
    return backend


def test_lists_favourites(member_client, favourites_backend):
    content = member_client.get("/favourites").content.decode()

    assert 'data-testid="favourite-m-2"' in content
    assert "Erika Muster" in content
    assert 'data-testid="add-favourite-btn"' in content


def test_empty_favourites(member_client, backend):
    assert "Du hast noch keine Favoriten" in member_client.get("/favourites").content.decode()


def test_search_excludes_self_and_existing_favourites(member_client, favourites_backend):
    content = member_client.get("/favourites?add=1&q=Er").content.decode()

    assert 'data-testid="search-result-m-3"' in content
    assert 'data-testid="search-result-m-2"' not in content
    assert 'data-testid="search-result-m-1"' not in content


def test_short_query_does_not_search(member_client, favourites_backend):
    content = member_client.get("/favourites?add=1&q=E").content.decode()

    assert not favourites_backend.called("GET", "/api/members/search")
    assert "Mindestens 2 Zeichen eingeben" in content


def test_add_favourite(member_client, favourites_backend):
    favourites_backend.add("POST", "/api/members/me/favourites", {"message": "ok"})

    response = member_client.post("/favourites/add", {"member_id": "m-3"})

    assert response.url == "/favourites"
    assert favourites_backend.called("POST", "/api/members/me/favourites")[-1].json == {"favourite_id": "m-3"}
    assert "Favorit hinzugefügt" in member_client.get("/favourites").content.decode()


def test_add_favourite_error_is_shown(member_client, favourites_backend):
    favourites_backend.add("POST", "/api/members/me/favourites", {"error": "Bereits ein Favorit"}, status=400)

    member_client.post("/favourites/add", {"member_id": "m-2"})

    assert "Bereits ein Favorit" in member_client.get("/favourites").content.decode()


def test_remove_favourite_confirmation(member_client, favourites_backend):
    content = member_client.get("/favourites?remove=m-2").content.decode()

    assert "Favorit entfernen?" in content
    assert 'action="/favourites/m-2/remove"' in content


def test_remove_favourite(member_client, favourites_backend):
    favourites_backend.add("DELETE", "/api/members/me/favourites/m-2", {"message": "ok"})

    response = member_client.post("/favourites/m-2/remove")

    assert response.url == "/favourites"
    assert favourites_backend.called("DELETE", "/api/members/me/favourites/m-2")
    assert "Favorit entfernt" in member_client.get("/favourites").content.decode()
