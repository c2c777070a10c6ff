"""Guest API routes — public invitation lookup and host guest management."""
import logging
from fastapi import APIRouter, Depends, status

from rsvp_app.config import settings
from rsvp_app.dependencies import get_store, require_admin
from rsvp_app.schemas.guest import (
    CheckGuestRequest,
    CheckGuestResponse,
    GuestCreate,
    GuestListOut,
    GuestOut,
    GuestUpdate,
)
from rsvp_app.services import guest_service
from rsvp_app.stores.base import RSVPStore

logger = logging.getLogger(__name__)
router = APIRouter()
admin_router = APIRouter(dependencies=[Depends(require_admin)])


@router.post("/check-guest", response_model=CheckGuestResponse, response_model_exclude_none=True)
def check_guest(payload: CheckGuestRequest, store: RSVPStore = Depends(get_store)):
    """Tell a guest whether they are invited and how many people they may bring."""
    if not settings.directory_enforced:
        return CheckGuestResponse(found=True, total_slots=settings.MAX_ATTENDEES)

    guest = guest_service.find_guest(store, payload.name)
    if guest is None:
        logger.info("check-guest miss for %r", payload.name)
        return CheckGuestResponse(found=False)
    return CheckGuestResponse(
        found=True,
        guest_id=guest.guest_id,
        plus_ones=guest.plus_ones_allowed,
        kids=guest.kids_allowed,
        total_slots=guest.total_slots,
    )


@admin_router.get("", response_model=GuestListOut)
def list_guests(store: RSVPStore = Depends(get_store)):
    """List the whole guest directory, by name."""
    return {"guests": [GuestOut.model_validate(g) for g in store.list_guests()]}


@admin_router.post("", response_model=GuestOut, status_code=status.HTTP_201_CREATED)
def add_guest(payload: GuestCreate, store: RSVPStore = Depends(get_store)):
    return guest_service.add_guest(
        store,
        payload.full_name,
        plus_ones_allowed=payload.plus_ones_allowed,
        kids_allowed=payload.kids_allowed,
    )


@admin_router.patch("/{guest_id}", response_model=GuestOut)
def update_guest(guest_id: str, payload: GuestUpdate, store: RSVPStore = Depends(get_store)):
    """Partial update of a guest's name or allowances."""
    return guest_service.update_guest(store, guest_id, payload.model_dump(exclude_unset=True))


@admin_router.delete("/{guest_id}")
def delete_guest(guest_id: str, store: RSVPStore = Depends(get_store)):
    """Remove a guest; their RSVP goes with them."""
    guest_service.delete_guest(store, guest_id)
    return {"success": True}
