"""SQLAlchemy-backed RSVP store."""
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Optional, Sequence

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from rsvp_app.errors import ConflictError
from rsvp_app.models.guest import Guest
from rsvp_app.models.rsvp import RSVP, RSVPAttendee, AttendeeAge
from rsvp_app.stores.base import RSVPStore, UNSET

logger = logging.getLogger(__name__)

_UPSERT_DIALECTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}

_GUEST_FIELDS = ("full_name", "plus_ones_allowed", "kids_allowed")


class SqlRSVPStore(RSVPStore):
    """Store operating on one request-scoped Session."""

    def __init__(self, db: Session):
        self.db = db

    # ── Guests ────────────────────────────────────────────────────
    def find_guest_by_name(self, full_name: str) -> Optional[Guest]:
        return self.db.query(Guest).filter(Guest.full_name == full_name).first()

    def get_guest(self, guest_id: str) -> Optional[Guest]:
        return self.db.query(Guest).filter(Guest.guest_id == guest_id).first()

    def list_guests(self) -> list[Guest]:
        return self.db.query(Guest).order_by(Guest.full_name).all()

    def add_guest(self, full_name: str, plus_ones_allowed: int = 0, kids_allowed: int = 0) -> Guest:
        if self.find_guest_by_name(full_name):
            raise ConflictError(f"Guest '{full_name}' already exists")
        guest = Guest(full_name=full_name, plus_ones_allowed=plus_ones_allowed, kids_allowed=kids_allowed)
        self.db.add(guest)
        self._commit_or_conflict(f"Guest '{full_name}' already exists")
        self.db.refresh(guest)
        return guest

    def update_guest(self, guest_id: str, **changes: Any) -> Optional[Guest]:
        guest = self.get_guest(guest_id)
        if not guest:
            return None
        new_name = changes.get("full_name")
        if new_name and new_name != guest.full_name and self.find_guest_by_name(new_name):
            raise ConflictError(f"Guest '{new_name}' already exists")
        for field, value in changes.items():
            if field in _GUEST_FIELDS:
                setattr(guest, field, value)
        self._commit_or_conflict(f"Guest '{guest.full_name}' already exists")
        self.db.refresh(guest)
        return guest

    def delete_guest(self, guest_id: str) -> bool:
        guest = self.get_guest(guest_id)
        if not guest:
            return False
        try:
            for rsvp in self.db.query(RSVP).filter(RSVP.guest_id == guest_id).all():
                self.db.delete(rsvp)
            self.db.delete(guest)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        return True

    # ── RSVPs ─────────────────────────────────────────────────────
    def save_rsvp(
        self,
        primary_guest_key: str,
        primary_guest_name: str,
        attendees: Sequence[Any],
        guest_email: Optional[str] = None,
        guest_id: Optional[str] = None,
    ) -> RSVP:
        now = datetime.now(timezone.utc)
        values = {
            "rsvp_id": str(uuid.uuid4()),
            "guest_id": guest_id,
            "primary_guest_key": primary_guest_key,
            "primary_guest_name": primary_guest_name,
            "guest_email": guest_email,
            "created_at": now,
            "updated_at": now,
        }
        try:
            rsvp = self._upsert(values)
            self._replace_attendees(rsvp, attendees)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(rsvp)
        return rsvp

    def get_rsvp(self, rsvp_id: str) -> Optional[RSVP]:
        return self.db.query(RSVP).filter(RSVP.rsvp_id == rsvp_id).first()

    def list_rsvps(self) -> list[RSVP]:
        return self.db.query(RSVP).order_by(RSVP.updated_at.desc()).all()

    def update_rsvp(
        self,
        rsvp_id: str,
        primary_guest_key: Any = UNSET,
        primary_guest_name: Any = UNSET,
        guest_email: Any = UNSET,
        attendees: Any = UNSET,
    ) -> Optional[RSVP]:
        rsvp = self.get_rsvp(rsvp_id)
        if not rsvp:
            return None
        if primary_guest_key is not UNSET and primary_guest_key != rsvp.primary_guest_key:
            taken = self.db.query(RSVP).filter(RSVP.primary_guest_key == primary_guest_key).first()
            if taken:
                raise ConflictError("Another RSVP already exists for this guest")
            rsvp.primary_guest_key = primary_guest_key
        if primary_guest_name is not UNSET:
            rsvp.primary_guest_name = primary_guest_name
        if guest_email is not UNSET:
            rsvp.guest_email = guest_email
        rsvp.updated_at = datetime.now(timezone.utc)
        try:
            if attendees is not UNSET:
                self._replace_attendees(rsvp, attendees)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("Another RSVP already exists for this guest")
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(rsvp)
        return rsvp

    def delete_rsvp(self, rsvp_id: str) -> bool:
        rsvp = self.get_rsvp(rsvp_id)
        if not rsvp:
            return False
        try:
            self.db.delete(rsvp)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        return True

    # ── Internals ─────────────────────────────────────────────────
    def _upsert(self, values: dict[str, Any]) -> RSVP:
        """Insert, or update name/email/guest on primary_guest_key conflict."""
        dialect = self.db.get_bind().dialect.name
        insert = _UPSERT_DIALECTS.get(dialect)
        key = values["primary_guest_key"]

        if insert is None:
            # No native upsert: lock the row if the backend supports it.
            rsvp = (
                self.db.query(RSVP)
                .filter(RSVP.primary_guest_key == key)
                .with_for_update()
                .first()
            )
            if rsvp is None:
                rsvp = RSVP(**values)
                self.db.add(rsvp)
            else:
                rsvp.primary_guest_name = values["primary_guest_name"]
                rsvp.guest_email = values["guest_email"]
                rsvp.guest_id = values["guest_id"]
                rsvp.updated_at = values["updated_at"]
            self.db.flush()
            return rsvp

        stmt = insert(RSVP).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=["primary_guest_key"],
            set_={
                "primary_guest_name": stmt.excluded.primary_guest_name,
                "guest_email": stmt.excluded.guest_email,
                "guest_id": stmt.excluded.guest_id,
                "updated_at": stmt.excluded.updated_at,
            },
        )
        self.db.execute(stmt)
        return (
            self.db.query(RSVP)
            .filter(RSVP.primary_guest_key == key)
            .populate_existing()
            .one()
        )

    def _replace_attendees(self, rsvp: RSVP, attendees: Sequence[Any]) -> None:
        """Delete every attendee row of ``rsvp`` and insert ``attendees`` in order."""
        self.db.query(RSVPAttendee).filter(RSVPAttendee.rsvp_id == rsvp.rsvp_id).delete(
            synchronize_session=False
        )
        for position, attendee in enumerate(attendees):
            self.db.add(RSVPAttendee(
                rsvp_id=rsvp.rsvp_id,
                position=position,
                name=attendee.name,
                age=AttendeeAge(attendee.age),
            ))
        self.db.flush()
        self.db.expire(rsvp, ["attendees"])

    def _commit_or_conflict(self, message: str) -> None:
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning("Integrity error: %s", message)
            raise ConflictError(message)
        except SQLAlchemyError:
            self.db.rollback()
            raise
