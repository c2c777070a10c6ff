"""Process-lifetime in-memory RSVP store.

Nothing is persisted. A single lock serialises writes so an upsert and its
attendee replacement are applied together; fine for demos and tests, not
for running several workers.
"""
import copy
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional, Sequence

from rsvp_app.errors import ConflictError
from rsvp_app.models.rsvp import AttendeeAge
from rsvp_app.stores.base import RSVPStore, UNSET


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


@dataclass
class GuestRecord:
    full_name: str
    plus_ones_allowed: int = 0
    kids_allowed: int = 0
    guest_id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=_now)

    @property
    def total_slots(self) -> int:
        return self.plus_ones_allowed + self.kids_allowed


@dataclass
class AttendeeRecord:
    rsvp_id: str
    position: int
    name: str
    age: AttendeeAge
    attendee_id: str = field(default_factory=_new_id)


@dataclass
class RSVPRecord:
    primary_guest_key: str
    primary_guest_name: str
    guest_email: Optional[str] = None
    guest_id: Optional[str] = None
    rsvp_id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)
    attendees: list[AttendeeRecord] = field(default_factory=list)
    guest: Optional[GuestRecord] = None


class InMemoryRSVPStore(RSVPStore):
    """Dict-backed store; returns copies so callers cannot mutate its state."""

    def __init__(self):
        self._lock = threading.Lock()
        self._guests: dict[str, GuestRecord] = {}
        self._rsvps: dict[str, RSVPRecord] = {}
        self._rsvp_ids_by_key: dict[str, str] = {}

    def clear(self) -> None:
        with self._lock:
            self._guests.clear()
            self._rsvps.clear()
            self._rsvp_ids_by_key.clear()

    # ── Guests ────────────────────────────────────────────────────
    def find_guest_by_name(self, full_name: str) -> Optional[GuestRecord]:
        with self._lock:
            return copy.deepcopy(self._guest_named(full_name))

    def get_guest(self, guest_id: str) -> Optional[GuestRecord]:
        with self._lock:
            return copy.deepcopy(self._guests.get(guest_id))

    def list_guests(self) -> list[GuestRecord]:
        with self._lock:
            guests = sorted(self._guests.values(), key=lambda g: g.full_name)
            return copy.deepcopy(guests)

    def add_guest(self, full_name: str, plus_ones_allowed: int = 0, kids_allowed: int = 0) -> GuestRecord:
        with self._lock:
            if self._guest_named(full_name):
                raise ConflictError(f"Guest '{full_name}' already exists")
            guest = GuestRecord(full_name=full_name, plus_ones_allowed=plus_ones_allowed, kids_allowed=kids_allowed)
            self._guests[guest.guest_id] = guest
            return copy.deepcopy(guest)

    def update_guest(self, guest_id: str, **changes: Any) -> Optional[GuestRecord]:
        with self._lock:
            guest = self._guests.get(guest_id)
            if guest is None:
                return None
            new_name = changes.get("full_name")
            if new_name and new_name != guest.full_name and self._guest_named(new_name):
                raise ConflictError(f"Guest '{new_name}' already exists")
            for name in ("full_name", "plus_ones_allowed", "kids_allowed"):
                if name in changes:
                    setattr(guest, name, changes[name])
            return copy.deepcopy(guest)

    def delete_guest(self, guest_id: str) -> bool:
        with self._lock:
            if self._guests.pop(guest_id, None) is None:
                return False
            for rsvp in [r for r in self._rsvps.values() if r.guest_id == guest_id]:
                self._drop_rsvp(rsvp.rsvp_id)
            return True

    # ── RSVPs ─────────────────────────────────────────────────────
    def save_rsvp(
        self,
        primary_guest_key: str,
        primary_guest_name: str,
        attendees: Sequence[Any],
        guest_email: Optional[str] = None,
        guest_id: Optional[str] = None,
    ) -> RSVPRecord:
        with self._lock:
            rsvp_id = self._rsvp_ids_by_key.get(primary_guest_key)
            if rsvp_id is None:
                rsvp = RSVPRecord(primary_guest_key=primary_guest_key, primary_guest_name=primary_guest_name)
                self._rsvps[rsvp.rsvp_id] = rsvp
                self._rsvp_ids_by_key[primary_guest_key] = rsvp.rsvp_id
            else:
                rsvp = self._rsvps[rsvp_id]
            rsvp.primary_guest_name = primary_guest_name
            rsvp.guest_email = guest_email
            rsvp.guest_id = guest_id
            rsvp.updated_at = _now()
            rsvp.attendees = self._attendee_rows(rsvp.rsvp_id, attendees)
            return self._snapshot(rsvp)

    def get_rsvp(self, rsvp_id: str) -> Optional[RSVPRecord]:
        with self._lock:
            rsvp = self._rsvps.get(rsvp_id)
            return self._snapshot(rsvp) if rsvp else None

    def list_rsvps(self) -> list[RSVPRecord]:
        with self._lock:
            ordered = sorted(self._rsvps.values(), key=lambda r: r.updated_at, reverse=True)
            return [self._snapshot(r) for r in ordered]

    def update_rsvp(
        self,
        rsvp_id: str,
        primary_guest_key: Any = UNSET,
        primary_guest_name: Any = UNSET,
        guest_email: Any = UNSET,
        attendees: Any = UNSET,
    ) -> Optional[RSVPRecord]:
        with self._lock:
            rsvp = self._rsvps.get(rsvp_id)
            if rsvp is None:
                return None
            if primary_guest_key is not UNSET and primary_guest_key != rsvp.primary_guest_key:
                if primary_guest_key in self._rsvp_ids_by_key:
                    raise ConflictError("Another RSVP already exists for this guest")
                del self._rsvp_ids_by_key[rsvp.primary_guest_key]
                self._rsvp_ids_by_key[primary_guest_key] = rsvp_id
                rsvp.primary_guest_key = primary_guest_key
            if primary_guest_name is not UNSET:
                rsvp.primary_guest_name = primary_guest_name
            if guest_email is not UNSET:
                rsvp.guest_email = guest_email
            if attendees is not UNSET:
                rsvp.attendees = self._attendee_rows(rsvp_id, attendees)
            rsvp.updated_at = _now()
            return self._snapshot(rsvp)

    def delete_rsvp(self, rsvp_id: str) -> bool:
        with self._lock:
            return self._drop_rsvp(rsvp_id)

    # ── Internals (caller holds the lock) ─────────────────────────
    def _guest_named(self, full_name: str) -> Optional[GuestRecord]:
        for guest in self._guests.values():
            if guest.full_name == full_name:
                return guest
        return None

    def _drop_rsvp(self, rsvp_id: str) -> bool:
        rsvp = self._rsvps.pop(rsvp_id, None)
        if rsvp is None:
            return False
        self._rsvp_ids_by_key.pop(rsvp.primary_guest_key, None)
        return True

    @staticmethod
    def _attendee_rows(rsvp_id: str, attendees: Sequence[Any]) -> list[AttendeeRecord]:
        return [
            AttendeeRecord(rsvp_id=rsvp_id, position=i, name=a.name, age=AttendeeAge(a.age))
            for i, a in enumerate(attendees)
        ]

    def _snapshot(self, rsvp: RSVPRecord) -> RSVPRecord:
        out = copy.deepcopy(rsvp)
        out.guest = copy.deepcopy(self._guests.get(rsvp.guest_id)) if rsvp.guest_id else None
        return out
