"""RSVP submission workflow and host-side RSVP management.

Submission order (each step gates the next):
1. primary name trimmed, required
2. attendees sanitized (blank names dropped, capped)
3. directory mode: guest must exist and the party must fit its allowance
4. record upserted on its identity key and attendee set replaced, in one
   store transaction
The caller schedules the host notification afterwards; it is never awaited.
"""
import logging
from dataclasses import dataclass
from typing import Any, Optional

from rsvp_app.errors import GuestNotFoundError, NotFoundError, ValidationError
from rsvp_app.services.attendee_service import MAX_ATTENDEES, Attendee, sanitize_attendees
from rsvp_app.services.guest_service import find_guest, normalize_name, validate_capacity
from rsvp_app.services.notification_service import RSVPSummary, build_rsvp_summary
from rsvp_app.stores.base import RSVPStore, UNSET

logger = logging.getLogger(__name__)


@dataclass
class SubmissionResult:
    rsvp: Any
    primary_guest: str
    attendees: list[Attendee]
    guest_email: Optional[str] = None

    def summary(self) -> RSVPSummary:
        return build_rsvp_summary(self.primary_guest, self.attendees, self.guest_email)


def rsvp_key(primary_guest: str, guest: Optional[Any] = None) -> str:
    """Identity key of an RSVP record.

    Directory guests are keyed by id; free-form names case-insensitively.
    """
    if guest is not None:
        return f"guest:{guest.guest_id}"
    return primary_guest.strip().lower()


def normalize_email(email: Any) -> Optional[str]:
    email = normalize_name(email)
    return email or None


def submit_rsvp(
    store: RSVPStore,
    primary_guest: Any,
    raw_attendees: Any,
    guest_email: Any = None,
    *,
    directory_enforced: bool = True,
    enforce_capacity: bool = True,
    max_attendees: int = MAX_ATTENDEES,
) -> SubmissionResult:
    """Validate and store one RSVP; resubmission overwrites, never duplicates."""
    name = normalize_name(primary_guest)
    if not name:
        raise ValidationError("primaryGuest required")

    attendees = sanitize_attendees(raw_attendees, limit=max_attendees)

    guest = None
    if directory_enforced:
        guest = find_guest(store, name)
        if guest is None:
            raise GuestNotFoundError(f"'{name}' is not on the guest list")
        if enforce_capacity:
            validate_capacity(guest, attendees)

    email = normalize_email(guest_email)
    rsvp = store.save_rsvp(
        rsvp_key(name, guest),
        primary_guest_name=name,
        attendees=attendees,
        guest_email=email,
        guest_id=guest.guest_id if guest is not None else None,
    )
    logger.info("Stored RSVP %s for %s with %d attendee(s)", rsvp.rsvp_id, name, len(attendees))
    return SubmissionResult(rsvp=rsvp, primary_guest=name, attendees=attendees, guest_email=email)


def rsvp_overview(rsvp: Any, max_attendees: int = MAX_ATTENDEES) -> dict[str, Any]:
    """Serialize a record with its guest, attendees and host-side capacity totals."""
    guest = rsvp.guest
    allowance = guest.total_slots if guest is not None else max_attendees
    return {
        "rsvp_id": rsvp.rsvp_id,
        "guest_id": rsvp.guest_id,
        "primary_guest_name": rsvp.primary_guest_name,
        "guest_email": rsvp.guest_email,
        "created_at": rsvp.created_at,
        "updated_at": rsvp.updated_at,
        "guest": None if guest is None else {
            "guest_id": guest.guest_id,
            "full_name": guest.full_name,
            "plus_ones_allowed": guest.plus_ones_allowed,
            "kids_allowed": guest.kids_allowed,
            "total_slots": guest.total_slots,
            "created_at": guest.created_at,
        },
        "attendees": [
            {"attendee_id": a.attendee_id, "name": a.name, "age": a.age}
            for a in rsvp.attendees
        ],
        "total_allowed": allowance + 1,
        "total_attending": len(rsvp.attendees) + 1,
    }


def list_rsvps(store: RSVPStore, max_attendees: int = MAX_ATTENDEES) -> list[dict[str, Any]]:
    return [rsvp_overview(r, max_attendees) for r in store.list_rsvps()]


def admin_create_rsvp(
    store: RSVPStore,
    primary_guest: Any,
    raw_attendees: Any,
    guest_email: Any = None,
    *,
    directory_enforced: bool = True,
    max_attendees: int = MAX_ATTENDEES,
) -> Any:
    """Host-entered RSVP: same upsert, no allowance check, no notification."""
    result = submit_rsvp(
        store,
        primary_guest,
        raw_attendees,
        guest_email,
        directory_enforced=directory_enforced,
        enforce_capacity=False,
        max_attendees=max_attendees,
    )
    return result.rsvp


def admin_update_rsvp(
    store: RSVPStore,
    rsvp_id: str,
    changes: dict[str, Any],
    *,
    max_attendees: int = MAX_ATTENDEES,
) -> Any:
    """Partial update. Free-form records are re-keyed when renamed."""
    existing = store.get_rsvp(rsvp_id)
    if existing is None:
        raise NotFoundError("RSVP not found")

    update: dict[str, Any] = {}
    if "primary_guest" in changes:
        name = normalize_name(changes["primary_guest"])
        if not name:
            raise ValidationError("primaryGuest required")
        update["primary_guest_name"] = name
        if existing.guest_id is None:
            update["primary_guest_key"] = rsvp_key(name)
    if "guest_email" in changes:
        update["guest_email"] = normalize_email(changes["guest_email"])
    if "attendees" in changes:
        update["attendees"] = sanitize_attendees(changes["attendees"], limit=max_attendees)

    rsvp = store.update_rsvp(
        rsvp_id,
        primary_guest_key=update.get("primary_guest_key", UNSET),
        primary_guest_name=update.get("primary_guest_name", UNSET),
        guest_email=update.get("guest_email", UNSET),
        attendees=update.get("attendees", UNSET),
    )
    if rsvp is None:
        raise NotFoundError("RSVP not found")
    logger.info("Updated RSVP %s", rsvp_id)
    return rsvp


def admin_delete_rsvp(store: RSVPStore, rsvp_id: str) -> None:
    if not store.delete_rsvp(rsvp_id):
        raise NotFoundError("RSVP not found")
    logger.info("Deleted RSVP %s", rsvp_id)
