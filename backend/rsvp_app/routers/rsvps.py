"""RSVP API routes — public submission and host RSVP management."""
import logging
from fastapi import APIRouter, BackgroundTasks, Depends, status

from rsvp_app.config import settings
from rsvp_app.dependencies import get_notifier, get_store, require_admin
from rsvp_app.schemas.rsvp import RSVPListOut, RSVPOut, RSVPSubmission, RSVPUpdate, SubmitRSVPResponse
from rsvp_app.services import rsvp_service
from rsvp_app.services.notification_service import EmailNotifier, dispatch_rsvp_notification
from rsvp_app.stores.base import RSVPStore

logger = logging.getLogger(__name__)
router = APIRouter()
admin_router = APIRouter(dependencies=[Depends(require_admin)])


@router.post("/submit-rsvp", response_model=SubmitRSVPResponse)
def submit_rsvp(
    payload: RSVPSubmission,
    background_tasks: BackgroundTasks,
    store: RSVPStore = Depends(get_store),
    notifier: EmailNotifier = Depends(get_notifier),
):
    """Store a guest's RSVP, then email the host after the response is sent."""
    result = rsvp_service.submit_rsvp(
        store,
        payload.primary_guest,
        payload.attendees,
        payload.guest_email,
        directory_enforced=settings.directory_enforced,
        max_attendees=settings.MAX_ATTENDEES,
    )

    email_queued = notifier.enabled
    if email_queued:
        background_tasks.add_task(dispatch_rsvp_notification, notifier, result.summary())
    else:
        logger.info("Notification skipped for %s: notifier not configured", result.primary_guest)

    return SubmitRSVPResponse(message="RSVP submitted successfully", email_sent=email_queued)


@admin_router.get("", response_model=RSVPListOut)
def list_rsvps(store: RSVPStore = Depends(get_store)):
    """All RSVPs with guest allowance and attendance totals, newest first."""
    return {"rsvps": rsvp_service.list_rsvps(store, settings.MAX_ATTENDEES)}


@admin_router.post("", response_model=RSVPOut, status_code=status.HTTP_201_CREATED)
def create_rsvp(payload: RSVPSubmission, store: RSVPStore = Depends(get_store)):
    """Host-entered RSVP (no allowance check, no notification)."""
    rsvp = rsvp_service.admin_create_rsvp(
        store,
        payload.primary_guest,
        payload.attendees,
        payload.guest_email,
        directory_enforced=settings.directory_enforced,
        max_attendees=settings.MAX_ATTENDEES,
    )
    return rsvp_service.rsvp_overview(rsvp, settings.MAX_ATTENDEES)


@admin_router.patch("/{rsvp_id}", response_model=RSVPOut)
def update_rsvp(rsvp_id: str, payload: RSVPUpdate, store: RSVPStore = Depends(get_store)):
    rsvp = rsvp_service.admin_update_rsvp(
        store,
        rsvp_id,
        payload.model_dump(exclude_unset=True),
        max_attendees=settings.MAX_ATTENDEES,
    )
    return rsvp_service.rsvp_overview(rsvp, settings.MAX_ATTENDEES)


@admin_router.delete("/{rsvp_id}")
def delete_rsvp(rsvp_id: str, store: RSVPStore = Depends(get_store)):
    rsvp_service.admin_delete_rsvp(store, rsvp_id)
    return {"success": True}
