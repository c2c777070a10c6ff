"""FastAPI application entry point."""
import logging
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from rsvp_app.config import settings
from rsvp_app.database import Base, engine
from rsvp_app.errors import register_exception_handlers

# Import routers
from rsvp_app.routers import guests, rsvps

# Import all models so Base.metadata knows about them
from rsvp_app.models.guest import Guest                 # noqa: F401
from rsvp_app.models.rsvp import RSVP, RSVPAttendee     # noqa: F401

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Event RSVP",
    description="Guest lookup, RSVP submission with plus-ones, and a host admin API",
    version="0.1.0",
)

# CORS allow-list; requests without an Origin header are unaffected
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "x-admin-key"],
)

register_exception_handlers(app)

# Register routers
app.include_router(guests.router, prefix="/api", tags=["Guests"])
app.include_router(rsvps.router, prefix="/api", tags=["RSVPs"])
app.include_router(guests.admin_router, prefix="/api/admin/guests", tags=["Admin"])
app.include_router(rsvps.admin_router, prefix="/api/admin/rsvps", tags=["Admin"])


@app.on_event("startup")
def on_startup():
    """Create database tables on startup (for SQLite dev mode)."""
    if settings.STORAGE_BACKEND == "sql" and settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}
