"""Pydantic schemas for RSVP submissions and records."""
from __future__ import annotations
from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel, Field

from rsvp_app.models.rsvp import AttendeeAge
from rsvp_app.schemas.guest import GuestOut


class RSVPSubmission(BaseModel):
    primary_guest: Optional[str] = Field(None, alias="primaryGuest")
    attendees: Any = None  # left raw; sanitize_attendees drops malformed entries
    guest_email: Optional[str] = Field(None, alias="guestEmail")

    model_config = {"extra": "forbid", "populate_by_name": True}


class RSVPUpdate(BaseModel):
    primary_guest: Optional[str] = Field(None, alias="primaryGuest")
    attendees: Any = None  # left raw; sanitize_attendees drops malformed entries
    guest_email: Optional[str] = Field(None, alias="guestEmail")

    model_config = {"extra": "forbid", "populate_by_name": True}


class SubmitRSVPResponse(BaseModel):
    success: bool = True
    message: str
    email_sent: bool = Field(False, alias="emailSent")

    model_config = {"populate_by_name": True}


class AttendeeOut(BaseModel):
    attendee_id: str
    name: str
    age: AttendeeAge

    model_config = {"from_attributes": True}


class RSVPOut(BaseModel):
    rsvp_id: str
    guest_id: Optional[str] = None
    primary_guest_name: str
    guest_email: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    guest: Optional[GuestOut] = None
    attendees: list[AttendeeOut] = []
    total_allowed: int
    total_attending: int


class RSVPListOut(BaseModel):
    rsvps: list[RSVPOut] = []
