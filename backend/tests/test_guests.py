"""Tests for guest lookup and admin guest management."""
import pytest

from rsvp_app.config import settings
from tests.conftest import ADMIN_HEADERS, create_test_guest, submit_rsvp, list_rsvps


class TestCheckGuest:
    """POST /api/check-guest."""

    def test_found_returns_allowance(self, client):
        guest = create_test_guest(client, name="Jane Doe", plus_ones=2, kids=1)
        resp = client.post("/api/check-guest", json={"name": "Jane Doe"})
        assert resp.status_code == 200
        assert resp.json() == {
            "found": True,
            "guestId": guest["guest_id"],
            "plusOnes": 2,
            "kids": 1,
            "totalSlots": 3,
        }

    def test_name_is_trimmed(self, client):
        create_test_guest(client, name="Jane Doe")
        resp = client.post("/api/check-guest", json={"name": "  Jane Doe "})
        assert resp.json()["found"] is True

    def test_match_is_case_sensitive(self, client):
        create_test_guest(client, name="Jane Doe")
        resp = client.post("/api/check-guest", json={"name": "jane doe"})
        assert resp.status_code == 200
        assert resp.json() == {"found": False}

    def test_unknown_and_blank_names_not_found(self, client):
        assert client.post("/api/check-guest", json={"name": "Nobody"}).json() == {"found": False}
        assert client.post("/api/check-guest", json={"name": "   "}).json() == {"found": False}
        assert client.post("/api/check-guest", json={}).json() == {"found": False}

    def test_unknown_fields_rejected(self, client):
        resp = client.post("/api/check-guest", json={"name": "Jane", "isAdmin": True})
        assert resp.status_code == 400
        assert resp.json()["error"] == "Invalid request"

    def test_open_mode_everyone_found(self, client, open_mode):
        resp = client.post("/api/check-guest", json={"name": "Walk In"})
        assert resp.json() == {"found": True, "totalSlots": 10}


class TestAdminGuests:
    """Guest CRUD under /api/admin/guests."""

    def test_create_guest(self, client):
        data = create_test_guest(client, name="Alice", plus_ones=1, kids=2)
        assert data["full_name"] == "Alice"
        assert data["plus_ones_allowed"] == 1
        assert data["kids_allowed"] == 2
        assert data["total_slots"] == 3
        assert "guest_id" in data

    def test_create_guest_trims_name(self, client):
        data = create_test_guest(client, name="  Alice  ")
        assert data["full_name"] == "Alice"

    def test_duplicate_name_conflicts(self, client):
        create_test_guest(client, name="Alice")
        resp = client.post("/api/admin/guests", headers=ADMIN_HEADERS, json={"full_name": "Alice"})
        assert resp.status_code == 409
        assert "already exists" in resp.json()["error"]

    def test_negative_allowance_rejected(self, client):
        resp = client.post("/api/admin/guests", headers=ADMIN_HEADERS, json={
            "full_name": "Alice", "plus_ones_allowed": -1,
        })
        assert resp.status_code == 400

    def test_blank_name_rejected(self, client):
        resp = client.post("/api/admin/guests", headers=ADMIN_HEADERS, json={"full_name": "   "})
        assert resp.status_code == 400
        assert resp.json()["error"] == "full_name required"

    def test_list_guests_sorted(self, client):
        create_test_guest(client, name="Zoe")
        create_test_guest(client, name="Adam")
        resp = client.get("/api/admin/guests", headers=ADMIN_HEADERS)
        assert resp.status_code == 200
        names = [g["full_name"] for g in resp.json()["guests"]]
        assert names == ["Adam", "Zoe"]

    def test_update_guest_partial(self, client):
        guest = create_test_guest(client, name="Alice", plus_ones=1, kids=0)
        resp = client.patch(f"/api/admin/guests/{guest['guest_id']}", headers=ADMIN_HEADERS, json={
            "kids_allowed": 3,
        })
        assert resp.status_code == 200
        data = resp.json()
        assert data["plus_ones_allowed"] == 1
        assert data["kids_allowed"] == 3
        assert data["total_slots"] == 4

    def test_update_guest_rename_to_taken_name(self, client):
        create_test_guest(client, name="Alice")
        bob = create_test_guest(client, name="Bob")
        resp = client.patch(f"/api/admin/guests/{bob['guest_id']}", headers=ADMIN_HEADERS, json={
            "full_name": "Alice",
        })
        assert resp.status_code == 409

    @pytest.mark.parametrize("backend", ["sql", "memory"])
    @pytest.mark.parametrize("field", ["plus_ones_allowed", "kids_allowed", "full_name"])
    def test_update_guest_null_rejected(self, client, monkeypatch, backend, field):
        monkeypatch.setattr(settings, "STORAGE_BACKEND", backend)
        guest = create_test_guest(client, name="Alice", plus_ones=1, kids=1)
        resp = client.patch(f"/api/admin/guests/{guest['guest_id']}", headers=ADMIN_HEADERS, json={field: None})
        assert resp.status_code == 400
        assert resp.json()["error"] == "Invalid request"

        # Directory entry unchanged and still usable
        check = client.post("/api/check-guest", json={"name": "Alice"}).json()
        assert check["totalSlots"] == 2
        assert submit_rsvp(client, "Alice", [{"name": "Bob"}]).status_code == 200

    def test_update_missing_guest(self, client):
        resp = client.patch("/api/admin/guests/nope", headers=ADMIN_HEADERS, json={"kids_allowed": 1})
        assert resp.status_code == 404

    def test_delete_guest_removes_their_rsvp(self, client):
        guest = create_test_guest(client, name="Alice", plus_ones=1)
        assert submit_rsvp(client, "Alice", [{"name": "Bob"}]).status_code == 200
        assert len(list_rsvps(client)) == 1

        resp = client.delete(f"/api/admin/guests/{guest['guest_id']}", headers=ADMIN_HEADERS)
        assert resp.status_code == 200
        assert resp.json() == {"success": True}
        assert list_rsvps(client) == []
        assert client.post("/api/check-guest", json={"name": "Alice"}).json() == {"found": False}

    def test_delete_missing_guest(self, client):
        resp = client.delete("/api/admin/guests/nope", headers=ADMIN_HEADERS)
        assert resp.status_code == 404
