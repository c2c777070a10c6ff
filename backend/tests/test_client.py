"""Tests for the typed API client, driven through the TestClient transport."""
import pytest

from rsvp_app.client import RSVPClient, RSVPClientError
from tests.conftest import ADMIN_KEY


@pytest.fixture
def api(client):
    return RSVPClient(base_url="http://testserver", admin_key=ADMIN_KEY, http_client=client)


class TestRSVPClient:

    def test_guest_flow(self, api):
        guest = api.admin_add_guest("Jane Doe", plus_ones_allowed=2, kids_allowed=1)
        assert api.check_guest("Jane Doe")["totalSlots"] == 3

        result = api.submit_rsvp("Jane Doe", [{"name": "Bob", "age": "adult"}], guest_email="jane@example.com")
        assert result["success"] is True

        rsvps = api.admin_list_rsvps()
        assert len(rsvps) == 1
        assert rsvps[0]["guest_id"] == guest["guest_id"]
        assert rsvps[0]["guest_email"] == "jane@example.com"

    def test_server_error_message_surfaced(self, api):
        api.admin_add_guest("Sam", plus_ones_allowed=0)
        with pytest.raises(RSVPClientError) as exc_info:
            api.submit_rsvp("Sam", [{"name": "Extra"}])
        assert exc_info.value.status_code == 400
        assert exc_info.value.payload["allowed"] == 0
        assert "Too many guests" in exc_info.value.message

    def test_bad_admin_key(self, client):
        api = RSVPClient(base_url="http://testserver", admin_key="wrong", http_client=client)
        with pytest.raises(RSVPClientError) as exc_info:
            api.admin_list_guests()
        assert exc_info.value.status_code == 401
        assert str(exc_info.value) == "Unauthorized"

    def test_admin_guest_and_rsvp_crud(self, api):
        guest = api.admin_add_guest("Jane Doe", plus_ones_allowed=1)
        assert api.admin_update_guest(guest["guest_id"], kids_allowed=2)["total_slots"] == 3
        assert [g["full_name"] for g in api.admin_list_guests()] == ["Jane Doe"]

        created = api.admin_create_rsvp("Jane Doe", [{"name": "A"}])
        updated = api.admin_update_rsvp(created["rsvp_id"], attendees=[{"name": "B"}, {"name": "C"}])
        assert [a["name"] for a in updated["attendees"]] == ["B", "C"]

        assert api.admin_delete_rsvp(created["rsvp_id"]) == {"success": True}
        assert api.admin_list_rsvps() == []
        assert api.admin_delete_guest(guest["guest_id"]) == {"success": True}

    def test_health(self, api):
        assert api.health()["status"] == "ok"
