"""Guest ORM model — the invitation directory."""
import uuid
from sqlalchemy import CheckConstraint, Column, String, Integer, DateTime
from sqlalchemy.sql import func
from rsvp_app.database import Base


class Guest(Base):
    __tablename__ = "guests"
    __table_args__ = (
        CheckConstraint("plus_ones_allowed >= 0", name="ck_guests_plus_ones_nonneg"),
        CheckConstraint("kids_allowed >= 0", name="ck_guests_kids_nonneg"),
    )

    guest_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    full_name = Column(String(200), nullable=False, unique=True)
    plus_ones_allowed = Column(Integer, nullable=False, default=0)
    kids_allowed = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    @property
    def total_slots(self) -> int:
        """Additional attendees this guest may bring, beyond themself."""
        return (self.plus_ones_allowed or 0) + (self.kids_allowed or 0)
