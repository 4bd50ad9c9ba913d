import pytest

from conftest import future_day

DAY = future_day(3)


def reservation(reservation_id, start, **extra):
    data = {
        "id": reservation_id,
        "court_number": 2,
        "date": DAY.isoformat(),
        "start_time": start,
        "booked_for_id": "m-1",
        "booked_for": "Max Mustermann",
        "booked_by_id": "m-1",
        "booked_by": "Max Mustermann",
    }
    data.update(extra)
    return data


@pytest.fixture
def reservations_backend(backend):
    backend.add("GET", "/api/reservations/", {
        "current_time": f"{DAY.isoformat()}T12:00:00",
        "reservations": [
            reservation(7, "14:00"),
            reservation(8, "09:00"),
            reservation(9, "17:00", status="cancelled"),
            reservation(10, "16:00", booked_for_id="m-2", booked_for="Erika Muster"),
            reservation(11, "12:00", is_short_notice=True),
        ],
    })
    return backend


def test_upcoming_and_past_are_split_by_backend_time(member_client, reservations_backend):
    content = member_client.get("/reservations").content.decode()

    assert reservations_backend.called("GET", "/api/reservations/")[-1].params == {"include_past": "true"}
    assert "Kommende (3)" in content
    assert "Vergangene (1)" in content
    assert 'data-testid="reservation-7"' in content
    assert 'data-testid="reservation-8"' not in content
    assert 'data-testid="reservation-9"' not in content


def test_past_tab(member_client, reservations_backend):
    content = member_client.get("/reservations?tab=past").content.decode()

    assert 'data-testid="reservation-8"' in content
    assert 'data-testid="reservation-7"' not in content
    assert 'data-testid="cancel-btn-8"' not in content


def test_badges_and_cancel_buttons(member_client, reservations_backend):
    content = member_client.get("/reservations").content.decode()

    assert "Für Erika Muster" in content
    assert "Kurzfristig" in content
    assert 'data-testid="cancel-btn-7"' in content
    assert 'data-testid="cancel-btn-10"' in content
    assert 'data-testid="cancel-btn-11"' not in content


def test_empty_lists(member_client, backend):
    content = member_client.get("/reservations").content.decode()
    assert "Keine kommenden Buchungen" in content


def test_cancel_dialog(member_client, reservations_backend):
    content = member_client.get("/reservations?cancel=7").content.decode()

    assert "Buchung stornieren?" in content
    assert 'action="/reservations/7/cancel"' in content


def test_short_notice_reservation_has_no_cancel_dialog(member_client, reservations_backend):
    content = member_client.get("/reservations?cancel=11").content.decode()
    assert "Buchung stornieren?" not in content


def test_cancel_reservation(member_client, reservations_backend):
    reservations_backend.add("DELETE", "/api/reservations/7", {"message": "Buchung storniert"})

    response = member_client.post("/reservations/7/cancel", {"next": "/reservations", "date": DAY.isoformat()})

    assert response.url == "/reservations"
    assert reservations_backend.called("DELETE", "/api/reservations/7")
    assert "Buchung erfolgreich storniert" in member_client.get("/reservations").content.decode()


def test_cancel_reservation_failure(member_client, reservations_backend):
    reservations_backend.add("DELETE", "/api/reservations/7", {"error": "Zu spät"}, status=400)

    response = member_client.post("/reservations/7/cancel", {"next": "/reservations"})

    assert response.url == "/reservations"
    assert "Fehler beim Stornieren der Buchung" in member_client.get("/reservations").content.decode()


def test_cancel_ignores_foreign_next_url(member_client, reservations_backend):
    reservations_backend.add("DELETE", "/api/reservations/7", {"message": "ok"})

    response = member_client.post("/reservations/7/cancel", {"next": "https://evil.example.com/"})

    assert response.url == "/reservations"


def test_cancel_from_dashboard_returns_to_day(member_client, reservations_backend):
    reservations_backend.add("DELETE", "/api/reservations/7", {"message": "ok"})
    target = f"/dashboard?date={DAY.isoformat()}"

    response = member_client.post("/reservations/7/cancel", {"next": target, "date": DAY.isoformat()})

    assert response.url == target
