"""Attendee sanitization.

Turns whatever the client sent as ``attendees`` into a clean, bounded list.
Never raises: malformed entries are dropped rather than rejected.
"""
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from rsvp_app.models.rsvp import AttendeeAge

MAX_ATTENDEES = 10


@dataclass(frozen=True)
class Attendee:
    name: str
    age: AttendeeAge = AttendeeAge.adult


def _field(entry: Any, key: str) -> Any:
    if isinstance(entry, Mapping):
        return entry.get(key)
    return getattr(entry, key, None)


def sanitize_attendees(raw: Any, limit: int = MAX_ATTENDEES) -> list[Attendee]:
    """Trim names, drop blank or non-string ones, default age to adult, cap at ``limit``.

    Input order is kept; it is the display order in notifications.
    """
    if not isinstance(raw, (list, tuple)):
        return []

    cleaned: list[Attendee] = []
    for entry in raw:
        if len(cleaned) >= limit:
            break
        name = _field(entry, "name")
        if not isinstance(name, str) or not name.strip():
            continue
        age = AttendeeAge.child if _field(entry, "age") == "child" else AttendeeAge.adult
        cleaned.append(Attendee(name=name.strip(), age=age))
    return cleaned
