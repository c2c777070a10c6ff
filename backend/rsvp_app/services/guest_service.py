"""Guest directory lookup, capacity checks and host-side guest management."""
import logging
from typing import Any, Optional, Sequence

from rsvp_app.errors import CapacityExceededError, NotFoundError, ValidationError
from rsvp_app.stores.base import RSVPStore

logger = logging.getLogger(__name__)


def normalize_name(name: Any) -> str:
    """Trimmed string form of ``name``; anything but a string becomes ''."""
    return name.strip() if isinstance(name, str) else ""


def find_guest(store: RSVPStore, name: Any) -> Optional[Any]:
    """Look a guest up by exact, case-sensitive name. A miss returns None."""
    full_name = normalize_name(name)
    if not full_name:
        return None
    return store.find_guest_by_name(full_name)


def validate_capacity(guest: Any, attendees: Sequence[Any]) -> None:
    """Reject more additional attendees than the guest's plus-ones + kids."""
    allowed = guest.total_slots
    received = len(attendees)
    if received > allowed:
        logger.info("Capacity exceeded for %s: %d > %d", guest.full_name, received, allowed)
        raise CapacityExceededError(allowed=allowed, received=received)


def add_guest(store: RSVPStore, full_name: str, plus_ones_allowed: int = 0, kids_allowed: int = 0) -> Any:
    full_name = normalize_name(full_name)
    if not full_name:
        raise ValidationError("full_name required")
    guest = store.add_guest(full_name, plus_ones_allowed=plus_ones_allowed, kids_allowed=kids_allowed)
    logger.info("Created guest %s (%s)", guest.guest_id, guest.full_name)
    return guest


def update_guest(store: RSVPStore, guest_id: str, changes: dict[str, Any]) -> Any:
    if "full_name" in changes:
        changes["full_name"] = normalize_name(changes["full_name"])
        if not changes["full_name"]:
            raise ValidationError("full_name required")
    guest = store.update_guest(guest_id, **changes)
    if guest is None:
        raise NotFoundError("Guest not found")
    logger.info("Updated guest %s", guest_id)
    return guest


def delete_guest(store: RSVPStore, guest_id: str) -> None:
    if not store.delete_guest(guest_id):
        raise NotFoundError("Guest not found")
    logger.info("Deleted guest %s", guest_id)
