"""Shared FastAPI dependencies: store selection, notifier, admin gate."""
import logging
import secrets
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from rsvp_app.config import settings
from rsvp_app.database import get_db
from rsvp_app.errors import UnauthorizedError
from rsvp_app.services.notification_service import EmailNotifier
from rsvp_app.stores.base import RSVPStore
from rsvp_app.stores.memory import InMemoryRSVPStore
from rsvp_app.stores.sql import SqlRSVPStore

logger = logging.getLogger(__name__)

memory_store = InMemoryRSVPStore()


def get_store(db: Session = Depends(get_db)) -> RSVPStore:
    """Storage backend chosen by STORAGE_BACKEND."""
    if settings.STORAGE_BACKEND == "memory":
        return memory_store
    return SqlRSVPStore(db)


def get_notifier() -> EmailNotifier:
    return EmailNotifier.from_settings(settings)


def require_admin(x_admin_key: Optional[str] = Header(None)) -> None:
    """Shared-secret gate for every /api/admin route; runs before any data access."""
    expected = settings.ADMIN_KEY
    if not expected or not x_admin_key or not secrets.compare_digest(
        x_admin_key.encode(), expected.encode()
    ):
        logger.warning("Rejected admin request (%s key)", "missing" if not x_admin_key else "bad")
        raise UnauthorizedError()
