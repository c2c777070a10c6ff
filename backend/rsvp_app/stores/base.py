"""Storage interface for the guest directory and RSVP records.

The submission workflow only talks to ``RSVPStore``; ``SqlRSVPStore`` backs it
with the relational database and ``InMemoryRSVPStore`` with plain dicts.
Returned objects expose the same attribute names as the ORM models
(``guest_id``, ``full_name``, ``total_slots``, ``rsvp_id``, ``attendees`` ...).
"""
from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"


# Sentinel for "leave this field alone" in partial updates.
UNSET: Any = _Unset()


class RSVPStore(ABC):
    """Guest directory + RSVP record store."""

    # ── Guests ────────────────────────────────────────────────────
    @abstractmethod
    def find_guest_by_name(self, full_name: str) -> Optional[Any]:
        """Exact (case-sensitive) name match, or None."""

    @abstractmethod
    def get_guest(self, guest_id: str) -> Optional[Any]:
        ...

    @abstractmethod
    def list_guests(self) -> list[Any]:
        ...

    @abstractmethod
    def add_guest(self, full_name: str, plus_ones_allowed: int = 0, kids_allowed: int = 0) -> Any:
        """Create a guest. Raises ConflictError if the name is taken."""

    @abstractmethod
    def update_guest(self, guest_id: str, **changes: Any) -> Optional[Any]:
        """Apply a partial update. Returns None if the guest does not exist."""

    @abstractmethod
    def delete_guest(self, guest_id: str) -> bool:
        """Delete a guest and any RSVP linked to it."""

    # ── RSVPs ─────────────────────────────────────────────────────
    @abstractmethod
    def save_rsvp(
        self,
        primary_guest_key: str,
        primary_guest_name: str,
        attendees: Sequence[Any],
        guest_email: Optional[str] = None,
        guest_id: Optional[str] = None,
    ) -> Any:
        """Upsert the record for ``primary_guest_key`` and replace its attendees.

        Both steps commit together: readers see the previous complete
        attendee set or the new one, never an empty intermediate state.
        """

    @abstractmethod
    def get_rsvp(self, rsvp_id: str) -> Optional[Any]:
        ...

    @abstractmethod
    def list_rsvps(self) -> list[Any]:
        """All records, most recently updated first."""

    @abstractmethod
    def update_rsvp(
        self,
        rsvp_id: str,
        primary_guest_key: Any = UNSET,
        primary_guest_name: Any = UNSET,
        guest_email: Any = UNSET,
        attendees: Any = UNSET,
    ) -> Optional[Any]:
        """Partial update by id; ``attendees`` replaces the whole set when given.

        Returns None if the record does not exist. Raises ConflictError if
        the new key belongs to another record.
        """

    @abstractmethod
    def delete_rsvp(self, rsvp_id: str) -> bool:
        ...
