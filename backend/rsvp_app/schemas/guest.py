"""Pydantic schemas for Guests."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator


class CheckGuestRequest(BaseModel):
    name: Optional[str] = None

    model_config = {"extra": "forbid"}


class CheckGuestResponse(BaseModel):
    found: bool
    guest_id: Optional[str] = Field(None, alias="guestId")
    plus_ones: Optional[int] = Field(None, alias="plusOnes")
    kids: Optional[int] = None
    total_slots: Optional[int] = Field(None, alias="totalSlots")

    model_config = {"populate_by_name": True}


class GuestCreate(BaseModel):
    full_name: str
    plus_ones_allowed: int = Field(0, ge=0)
    kids_allowed: int = Field(0, ge=0)

    model_config = {"extra": "forbid"}


class GuestUpdate(BaseModel):
    full_name: Optional[str] = None
    plus_ones_allowed: Optional[int] = Field(None, ge=0)
    kids_allowed: Optional[int] = Field(None, ge=0)

    model_config = {"extra": "forbid"}

    @field_validator("full_name", "plus_ones_allowed", "kids_allowed", mode="before")
    @classmethod
    def reject_null(cls, v):
        # Omit a field to leave it unchanged; null is not a value for any of them.
        if v is None:
            raise ValueError("may not be null")
        return v


class GuestOut(BaseModel):
    guest_id: str
    full_name: str
    plus_ones_allowed: int
    kids_allowed: int
    total_slots: int
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class GuestListOut(BaseModel):
    guests: list[GuestOut] = []
