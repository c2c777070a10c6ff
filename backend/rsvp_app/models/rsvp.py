"""RSVP and RSVPAttendee ORM models."""
import uuid
import enum
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, Enum as SAEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from rsvp_app.database import Base


class AttendeeAge(str, enum.Enum):
    adult = "adult"
    child = "child"


class RSVP(Base):
    __tablename__ = "rsvps"

    rsvp_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    guest_id = Column(String(36), ForeignKey("guests.guest_id"), nullable=True, index=True)
    # guest:<guest_id> when a directory is enforced, lower-cased name otherwise
    primary_guest_key = Column(String(255), nullable=False, unique=True)
    primary_guest_name = Column(String(200), nullable=False)
    guest_email = Column(String(320), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    guest = relationship("Guest")
    attendees = relationship(
        "RSVPAttendee",
        back_populates="rsvp",
        cascade="all, delete-orphan",
        order_by="RSVPAttendee.position",
    )


class RSVPAttendee(Base):
    __tablename__ = "rsvp_attendees"

    attendee_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    rsvp_id = Column(String(36), ForeignKey("rsvps.rsvp_id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    name = Column(String(200), nullable=False)
    age = Column(SAEnum(AttendeeAge, native_enum=False, length=10), nullable=False, default=AttendeeAge.adult)

    rsvp = relationship("RSVP", back_populates="attendees")
