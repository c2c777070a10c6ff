"""Small typed client for the RSVP API.

Mirrors what the invite page and host dashboard call. Any non-2xx response
raises ``RSVPClientError`` carrying the server's ``error`` message.
"""
import logging
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)

ADMIN_HEADER = "x-admin-key"


class RSVPClientError(Exception):
    def __init__(self, status_code: int, message: str, payload: Optional[dict] = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.payload = payload or {}


class RSVPClient:
    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        admin_key: Optional[str] = None,
        http_client: Optional[httpx.Client] = None,
        timeout: float = 10.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.admin_key = admin_key
        self._http = http_client or httpx.Client(timeout=timeout)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "RSVPClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _request(self, method: str, path: str, json: Any = None, admin: bool = False) -> dict:
        headers = {}
        if admin:
            headers[ADMIN_HEADER] = self.admin_key or ""
        resp = self._http.request(method, f"{self.base_url}{path}", json=json, headers=headers)
        try:
            data = resp.json()
        except ValueError:
            data = {}
        if not resp.is_success:
            message = data.get("error") if isinstance(data, dict) else None
            logger.debug("%s %s -> %d", method, path, resp.status_code)
            raise RSVPClientError(resp.status_code, message or "Request failed", data if isinstance(data, dict) else None)
        return data

    # ── Guest-facing ──────────────────────────────────────────────
    def health(self) -> dict:
        return self._request("GET", "/api/health")

    def check_guest(self, name: str) -> dict:
        return self._request("POST", "/api/check-guest", json={"name": name})

    def submit_rsvp(
        self,
        primary_guest: str,
        attendees: Optional[list[dict]] = None,
        guest_email: Optional[str] = None,
    ) -> dict:
        body: dict[str, Any] = {"primaryGuest": primary_guest, "attendees": attendees or []}
        if guest_email:
            body["guestEmail"] = guest_email
        return self._request("POST", "/api/submit-rsvp", json=body)

    # ── Host dashboard ────────────────────────────────────────────
    def admin_list_guests(self) -> list[dict]:
        return self._request("GET", "/api/admin/guests", admin=True)["guests"]

    def admin_add_guest(self, full_name: str, plus_ones_allowed: int = 0, kids_allowed: int = 0) -> dict:
        return self._request("POST", "/api/admin/guests", admin=True, json={
            "full_name": full_name,
            "plus_ones_allowed": plus_ones_allowed,
            "kids_allowed": kids_allowed,
        })

    def admin_update_guest(self, guest_id: str, **changes: Any) -> dict:
        return self._request("PATCH", f"/api/admin/guests/{guest_id}", admin=True, json=changes)

    def admin_delete_guest(self, guest_id: str) -> dict:
        return self._request("DELETE", f"/api/admin/guests/{guest_id}", admin=True)

    def admin_list_rsvps(self) -> list[dict]:
        return self._request("GET", "/api/admin/rsvps", admin=True)["rsvps"]

    def admin_create_rsvp(
        self,
        primary_guest: str,
        attendees: Optional[list[dict]] = None,
        guest_email: Optional[str] = None,
    ) -> dict:
        body: dict[str, Any] = {"primaryGuest": primary_guest, "attendees": attendees or []}
        if guest_email:
            body["guestEmail"] = guest_email
        return self._request("POST", "/api/admin/rsvps", admin=True, json=body)

    def admin_update_rsvp(self, rsvp_id: str, **changes: Any) -> dict:
        """Accepts primary_guest, attendees and guest_email."""
        return self._request("PATCH", f"/api/admin/rsvps/{rsvp_id}", admin=True, json=changes)

    def admin_delete_rsvp(self, rsvp_id: str) -> dict:
        return self._request("DELETE", f"/api/admin/rsvps/{rsvp_id}", admin=True)
